"""Modelos del dominio (Pydantic v2).

Describen *qué* devuelve y acepta el backend de Sudojo, no *cómo* se obtiene.
Son permisivos (`extra="allow"`): el esquema es del backend y añadir una
columna allí no debe romper clientes antiguos.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict

T = TypeVar("T")


class SudojoModel(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)


class BaseResponse(SudojoModel, Generic[T]):
    """Envelope común a todos los endpoints: `{success, data, error, timestamp}`.

    Solo uno de `data` / `error` tiene sentido. Los endpoints delete son la
    excepción: `success=True` con `data=None`.
    """

    success: bool | None = Field(default=None, description="Backend success flag (if sent).")
    data: T | None = Field(default=None, description="Typed payload on success.")
    error: Any = Field(default=None, description="Backend error message or structured error.")
    timestamp: str | None = Field(default=None, description="Server timestamp (ISO 8601).")

    @property
    def is_degenerate(self) -> bool:
        return self.data is None and self.error is None and self.success is not True


class SudojoAuth(BaseModel):
    """Credencial por llamada. Opaca: al cliente solo le importa si está presente."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    access_token: str = Field(..., alias="accessToken", description="Bearer token.")

    def __repr__(self) -> str:
        return "SudojoAuth(access_token=***)"


# ---------------------------------------------------------------------------
# Reference data
# ---------------------------------------------------------------------------


class HealthCheckData(SudojoModel):
    name: str | None = None
    version: str | None = None
    status: str | None = None


class Level(SudojoModel):
    level: int = Field(..., ge=1, description="Level number (1-12).")
    title: str | None = None
    text: str | None = None
    requires_subscription: bool | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class LevelCreateRequest(SudojoModel):
    level: int = Field(..., ge=1)
    title: str = Field(..., min_length=1)
    text: str | None = None
    requires_subscription: bool | None = None


class LevelUpdateRequest(SudojoModel):
    title: str | None = None
    text: str | None = None
    requires_subscription: bool | None = None


class Technique(SudojoModel):
    technique: int = Field(..., ge=1, description="Technique number.")
    level: int | None = None
    title: str | None = None
    text: str | None = None
    path: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class TechniqueCreateRequest(SudojoModel):
    technique: int = Field(..., ge=1)
    level: int = Field(..., ge=1)
    title: str = Field(..., min_length=1)
    text: str | None = None
    path: str | None = None


class TechniqueUpdateRequest(SudojoModel):
    level: int | None = None
    title: str | None = None
    text: str | None = None
    path: str | None = None


class Learning(SudojoModel):
    uuid: str
    technique: int | None = None
    index: int | None = None
    language_code: str | None = None
    text: str | None = None
    image_url: str | None = None
    created_at: datetime | None = None


class LearningCreateRequest(SudojoModel):
    technique: int = Field(..., ge=1)
    index: int = Field(..., ge=0)
    language_code: str = Field(default="en", min_length=2, max_length=8)
    text: str = Field(..., min_length=1)
    image_url: str | None = None


class LearningUpdateRequest(SudojoModel):
    technique: int | None = None
    index: int | None = None
    language_code: str | None = None
    text: str | None = None
    image_url: str | None = None


# ---------------------------------------------------------------------------
# Puzzles: boards, dailies, challenges
# ---------------------------------------------------------------------------


class Board(SudojoModel):
    uuid: str
    level: int | None = None
    symmetrical: bool | None = None
    board: str | None = Field(default=None, description="81-char puzzle, 0 for empty cells.")
    solution: str | None = None
    techniques: int | None = Field(default=None, description="Bitfield of techniques required.")
    created_at: datetime | None = None


class BoardCreateRequest(SudojoModel):
    board: str = Field(..., min_length=81, max_length=81)
    solution: str = Field(..., min_length=81, max_length=81)
    level: int | None = None
    symmetrical: bool | None = None
    techniques: int | None = None


class BoardUpdateRequest(SudojoModel):
    board: str | None = None
    solution: str | None = None
    level: int | None = None
    symmetrical: bool | None = None
    techniques: int | None = None


class BoardCounts(SudojoModel):
    total: int | None = None
    without_techniques: int | None = None


class Daily(SudojoModel):
    uuid: str
    date: str | None = Field(default=None, description="YYYY-MM-DD")
    board_uuid: str | None = None
    level: int | None = None
    techniques: int | None = None
    board: str | None = None
    solution: str | None = None


class DailyCreateRequest(SudojoModel):
    date: str = Field(..., pattern=r"^[0-9]{4}-[0-9]{2}-[0-9]{2}$")
    board: str = Field(..., min_length=81, max_length=81)
    solution: str = Field(..., min_length=81, max_length=81)
    board_uuid: str | None = None
    level: int | None = None
    techniques: int | None = None


class DailyUpdateRequest(SudojoModel):
    date: str | None = None
    board: str | None = None
    solution: str | None = None
    board_uuid: str | None = None
    level: int | None = None
    techniques: int | None = None


class Challenge(SudojoModel):
    uuid: str
    board_uuid: str | None = None
    level: int | None = None
    difficulty: int | None = None
    board: str | None = None
    solution: str | None = None


class ChallengeCreateRequest(SudojoModel):
    board: str = Field(..., min_length=81, max_length=81)
    solution: str = Field(..., min_length=81, max_length=81)
    board_uuid: str | None = None
    level: int | None = None
    difficulty: int | None = None


class ChallengeUpdateRequest(SudojoModel):
    board: str | None = None
    solution: str | None = None
    board_uuid: str | None = None
    level: int | None = None
    difficulty: int | None = None


# ---------------------------------------------------------------------------
# Users / entitlements
# ---------------------------------------------------------------------------


class SubscriptionResult(SudojoModel):
    has_purchased_subscription: bool = Field(default=False, alias="hasPurchasedSubscription")
    entitlements: list[str] = Field(default_factory=list)
    subscription_started_at: datetime | None = Field(default=None, alias="subscriptionStartedAt")


class HintAccessUserState(SudojoModel):
    """Lo que tiene el usuario, según la respuesta del paywall."""

    entitlements: list[str] = Field(default_factory=list)
    has_subscription: bool | None = Field(default=None, alias="hasSubscription")


class HintAccessDeniedPayload(SudojoModel):
    code: str
    message: str | None = None
    hint_level: int | None = Field(default=None, alias="hintLevel")
    required_entitlement: str | None = Field(default=None, alias="requiredEntitlement")
    user_state: HintAccessUserState | None = Field(default=None, alias="userState")


# ---------------------------------------------------------------------------
# Solver
# ---------------------------------------------------------------------------


class SolverPencilmarks(SudojoModel):
    auto: bool = False
    pencilmarks: str = ""


class SolverBoard(SudojoModel):
    original: str
    user: str | None = None
    solution: str | None = None
    pencilmarks: SolverPencilmarks | None = None


class SolverHintArea(SudojoModel):
    type: str
    color: str
    index: int


class SolverCellActions(SudojoModel):
    select: str = ""
    unselect: str = ""
    add: str = ""
    remove: str = ""
    highlight: str = ""


class SolverHintCell(SudojoModel):
    row: int
    column: int
    color: str
    fill: bool = False
    actions: SolverCellActions = Field(default_factory=SolverCellActions)


class SolverHintStep(SudojoModel):
    title: str
    text: str = ""
    areas: list[SolverHintArea] = Field(default_factory=list)
    cells: list[SolverHintCell] = Field(default_factory=list)


class SolveData(SudojoModel):
    board: SolverBoard
    hints: list[SolverHintStep] | None = None


class ValidateData(SudojoModel):
    board: SolverBoard
    hints: list[SolverHintStep] | None = None

    @property
    def has_unique_solution(self) -> bool:
        return bool(self.board.solution)


class GenerateData(SudojoModel):
    board: SolverBoard
    level: int | None = None
    techniques: int | None = None
    hints: list[SolverHintStep] | None = None


class SolveOptions(BaseModel):
    """Entradas del endpoint solve (cadenas de 81 caracteres, extras opcionales)."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    original: str = Field(..., description="81-character puzzle string.")
    user: str = Field(..., description="81-character user input string.")
    auto_pencilmarks: bool | None = Field(default=None, alias="autoPencilmarks")
    pencilmarks: str | None = Field(default=None, description="Comma-separated pencilmarks.")
    filters: str | None = Field(default=None, description="Technique filters.")


class ValidateOptions(BaseModel):
    model_config = ConfigDict(frozen=True)

    original: str = Field(..., description="81-character puzzle string.")


class GenerateOptions(BaseModel):
    model_config = ConfigDict(frozen=True)

    symmetrical: bool | None = None


# ---------------------------------------------------------------------------
# Practices / examples
# ---------------------------------------------------------------------------


class TechniquePractice(SudojoModel):
    uuid: str
    technique: int | None = None
    board: str | None = None
    pencilmarks: str | None = None
    solution: str | None = None
    hint_data: Any = None
    created_at: datetime | None = None


class TechniquePracticeCountItem(SudojoModel):
    technique: int
    count: int = 0


class TechniquePracticeCreateRequest(SudojoModel):
    technique: int = Field(..., ge=1)
    board: str = Field(..., min_length=81, max_length=81)
    solution: str = Field(..., min_length=81, max_length=81)
    pencilmarks: str | None = None
    hint_data: Any = None


class DeleteAllResult(SudojoModel):
    deleted: int = 0
    message: str = ""


class TechniqueExample(SudojoModel):
    uuid: str
    board: str | None = None
    pencilmarks: str | None = None
    solution: str | None = None
    techniques_bitfield: int | None = None
    primary_technique: int | None = None
    hint_data: Any = None


class TechniqueExampleCountItem(SudojoModel):
    technique: int
    count: int = 0


class TechniqueExampleCreateRequest(SudojoModel):
    board: str = Field(..., min_length=81, max_length=81)
    solution: str = Field(..., min_length=81, max_length=81)
    pencilmarks: str | None = None
    techniques_bitfield: int | None = None
    primary_technique: int | None = None
    hint_data: Any = None


# ---------------------------------------------------------------------------
# Gamification
# ---------------------------------------------------------------------------


class GameStartRequest(SudojoModel):
    board: str = Field(..., min_length=81, max_length=81)
    game_type: str = Field(default="free", description="'free' | 'daily' | 'level'")
    level: int | None = None
    board_uuid: str | None = None


class GameStartResponse(SudojoModel):
    session_id: str | None = None
    started_at: datetime | None = None


class GameFinishRequest(SudojoModel):
    board: str = Field(..., min_length=81, max_length=81)
    time_elapsed_seconds: int = Field(..., ge=0)
    hints_used: int = Field(default=0, ge=0)
    hint_points_used: int = Field(default=0, ge=0)


class BadgeDefinition(SudojoModel):
    badge_type: str
    badge_key: str | None = None
    title: str | None = None
    description: str | None = None
    icon_url: str | None = None
    requirement_value: int | None = None


class GameFinishResponse(SudojoModel):
    points_earned: int = 0
    total_points: int | None = None
    new_level: int | None = None
    level_up: bool = False
    new_badges: list[BadgeDefinition] = Field(default_factory=list)


class GamificationStats(SudojoModel):
    total_points: int = 0
    current_level: int | None = None
    games_played: int = 0
    current_streak: int = 0
    badges: list[BadgeDefinition] = Field(default_factory=list)


class PointTransaction(SudojoModel):
    uuid: str | None = None
    points: int
    transaction_type: str | None = None
    metadata: dict[str, Any] = Field(default_factory=dict)
    created_at: datetime | None = None
