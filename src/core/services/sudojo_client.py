"""Sudojo API façade.

One async method per backend operation. Each method is a pass-through:
validate inputs -> build path -> execute -> decode `BaseResponse[T]`.
No business logic lives here; error shaping is the executor's job.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping, TypeVar
from urllib.parse import quote

from pydantic import BaseModel, ValidationError

from core.config import ClientConfig
from core.domain.errors import SudojoApiError, SudojoNoDataError, SudojoValidationError
from core.domain.models import (
    BadgeDefinition,
    BaseResponse,
    Board,
    BoardCounts,
    BoardCreateRequest,
    BoardUpdateRequest,
    Challenge,
    ChallengeCreateRequest,
    ChallengeUpdateRequest,
    Daily,
    DailyCreateRequest,
    DailyUpdateRequest,
    DeleteAllResult,
    GameFinishRequest,
    GameFinishResponse,
    GamificationStats,
    GameStartRequest,
    GameStartResponse,
    GenerateData,
    GenerateOptions,
    HealthCheckData,
    Learning,
    LearningCreateRequest,
    LearningUpdateRequest,
    Level,
    LevelCreateRequest,
    LevelUpdateRequest,
    PointTransaction,
    SolveData,
    SolveOptions,
    SubscriptionResult,
    SudojoAuth,
    Technique,
    TechniqueCreateRequest,
    TechniqueExample,
    TechniqueExampleCountItem,
    TechniqueExampleCreateRequest,
    TechniquePractice,
    TechniquePracticeCountItem,
    TechniquePracticeCreateRequest,
    TechniqueUpdateRequest,
    ValidateData,
    ValidateOptions,
)
from core.endpoints import ENDPOINTS, Endpoints
from core.interfaces.transport import HttpMethod, NetworkClient
from core.query_string import build_path
from core.services.request_executor import RequestExecutor
from core.validators import (
    validate_date,
    validate_level,
    validate_pagination,
    validate_technique,
    validate_user_id,
    validate_uuid,
)

logger = logging.getLogger(__name__)

O = TypeVar("O", bound=BaseModel)

AuthLike = SudojoAuth | Mapping[str, Any] | None
Body = BaseModel | Mapping[str, Any]


def _coerce(model: type[O], value: O | Mapping[str, Any] | None) -> O:
    if isinstance(value, model):
        return value
    return model.model_validate(value or {})


def coerce_options(model: type[O], value: O | Mapping[str, Any] | None) -> O:
    """Like `_coerce`, but caller input errors surface as `SudojoValidationError`."""

    try:
        return _coerce(model, value)
    except ValidationError as exc:
        error = exc.errors()[0]
        loc = error.get("loc") or ()
        raise SudojoValidationError(
            f"Invalid {model.__name__}: {error.get('msg', 'invalid value')}",
            reason="required" if error.get("type") == "missing" else "invalid_format",
            field=str(loc[0]) if loc else model.__name__,
            value=error.get("input"),
        ) from exc


def _resolve_token(auth: AuthLike) -> str | None:
    # A mapping without a usable token counts as no credential at all.
    if auth is None:
        return None
    if isinstance(auth, SudojoAuth):
        return auth.access_token
    token = auth.get("accessToken") or auth.get("access_token")
    return token if isinstance(token, str) and token else None


class SudojoClient:
    """Typed async client for the Sudojo backend."""

    def __init__(
        self,
        network_client: NetworkClient,
        config: ClientConfig | Mapping[str, Any],
        *,
        endpoints: Endpoints = ENDPOINTS,
    ) -> None:
        self._config = _coerce(ClientConfig, config)
        self._endpoints = endpoints
        self._executor = RequestExecutor(network_client, self._config)

    @property
    def config(self) -> ClientConfig:
        return self._config

    @property
    def endpoints(self) -> Endpoints:
        return self._endpoints

    # ------------------------------------------------------------------
    # Plumbing
    # ------------------------------------------------------------------

    def has_credential(self, auth: AuthLike = None) -> bool:
        return bool(_resolve_token(auth) or self._config.api_token)

    def _token(self, auth: AuthLike, *, required: bool = False) -> str | None:
        token = _resolve_token(auth) or self._config.api_token
        if required and not token:
            raise SudojoValidationError(
                "access_token is required", reason="required", field="access_token"
            )
        return token

    @staticmethod
    def _check_filters(level: int | None, technique: int | None) -> None:
        if level is not None:
            validate_level(level)
        if technique is not None:
            validate_technique(technique)

    async def _call(
        self,
        path: str,
        data_type: Any,
        *,
        method: HttpMethod = "GET",
        token: str | None = None,
        body: Body | None = None,
        timeout: float | None = None,
        paywall: bool = False,
    ) -> BaseResponse[Any]:
        response = await self._executor.send(
            path,
            method=method,
            body=body,
            token=token,
            timeout=timeout,
            paywall=paywall,
        )
        if response.data is None:
            raise SudojoNoDataError(
                f"Response for {path} carried no payload", status_code=response.status
            )
        try:
            result = BaseResponse[data_type].model_validate(response.data)
        except ValidationError as exc:
            logger.warning("Unexpected payload for %s %s: %s errors", method, path, exc.error_count())
            raise SudojoApiError(
                f"Unexpected response payload for {path}",
                status_code=response.status,
                status_text=response.status_text,
                detail=str(exc),
            ) from exc
        if result.is_degenerate:
            raise SudojoNoDataError(
                f"Response for {path} carried neither data nor error", status_code=response.status
            )
        return result

    # ------------------------------------------------------------------
    # Health
    # ------------------------------------------------------------------

    async def get_health(self) -> BaseResponse[HealthCheckData]:
        return await self._call(self._endpoints.health, HealthCheckData, token=self._token(None))

    # ------------------------------------------------------------------
    # Levels
    # ------------------------------------------------------------------

    async def get_levels(self) -> BaseResponse[list[Level]]:
        return await self._call(self._endpoints.levels, list[Level], token=self._token(None))

    async def get_level(self, level: int) -> BaseResponse[Level]:
        level = validate_level(level)
        return await self._call(self._endpoints.level(level), Level, token=self._token(None))

    async def create_level(self, auth: AuthLike, data: LevelCreateRequest | Mapping[str, Any]) -> BaseResponse[Level]:
        token = self._token(auth, required=True)
        return await self._call(self._endpoints.levels, Level, method="POST", token=token, body=data)

    async def update_level(
        self, auth: AuthLike, level: int, data: LevelUpdateRequest | Mapping[str, Any]
    ) -> BaseResponse[Level]:
        level = validate_level(level)
        token = self._token(auth, required=True)
        return await self._call(self._endpoints.level(level), Level, method="PUT", token=token, body=data)

    async def delete_level(self, auth: AuthLike, level: int) -> BaseResponse[Level]:
        level = validate_level(level)
        token = self._token(auth, required=True)
        return await self._call(self._endpoints.level(level), Level, method="DELETE", token=token)

    # ------------------------------------------------------------------
    # Techniques
    # ------------------------------------------------------------------

    async def get_techniques(self, *, level: int | None = None) -> BaseResponse[list[Technique]]:
        self._check_filters(level, None)
        path = build_path(self._endpoints.techniques, {"level": level})
        return await self._call(path, list[Technique], token=self._token(None))

    async def get_technique(self, technique: int) -> BaseResponse[Technique]:
        technique = validate_technique(technique)
        return await self._call(self._endpoints.technique(technique), Technique, token=self._token(None))

    async def create_technique(
        self, auth: AuthLike, data: TechniqueCreateRequest | Mapping[str, Any]
    ) -> BaseResponse[Technique]:
        token = self._token(auth, required=True)
        return await self._call(self._endpoints.techniques, Technique, method="POST", token=token, body=data)

    async def update_technique(
        self, auth: AuthLike, technique: int, data: TechniqueUpdateRequest | Mapping[str, Any]
    ) -> BaseResponse[Technique]:
        technique = validate_technique(technique)
        token = self._token(auth, required=True)
        return await self._call(
            self._endpoints.technique(technique), Technique, method="PUT", token=token, body=data
        )

    async def delete_technique(self, auth: AuthLike, technique: int) -> BaseResponse[Technique]:
        technique = validate_technique(technique)
        token = self._token(auth, required=True)
        return await self._call(self._endpoints.technique(technique), Technique, method="DELETE", token=token)

    # ------------------------------------------------------------------
    # Learning
    # ------------------------------------------------------------------

    async def get_learning(
        self, *, technique: int | None = None, language_code: str | None = None
    ) -> BaseResponse[list[Learning]]:
        self._check_filters(None, technique)
        path = build_path(self._endpoints.learning, {"technique": technique, "language_code": language_code})
        return await self._call(path, list[Learning], token=self._token(None))

    async def get_learning_item(self, uuid: str) -> BaseResponse[Learning]:
        uuid = validate_uuid(uuid, "Learning UUID")
        return await self._call(self._endpoints.learning_item(uuid), Learning, token=self._token(None))

    async def create_learning(
        self, auth: AuthLike, data: LearningCreateRequest | Mapping[str, Any]
    ) -> BaseResponse[Learning]:
        token = self._token(auth, required=True)
        return await self._call(self._endpoints.learning, Learning, method="POST", token=token, body=data)

    async def update_learning(
        self, auth: AuthLike, uuid: str, data: LearningUpdateRequest | Mapping[str, Any]
    ) -> BaseResponse[Learning]:
        uuid = validate_uuid(uuid, "Learning UUID")
        token = self._token(auth, required=True)
        return await self._call(
            self._endpoints.learning_item(uuid), Learning, method="PUT", token=token, body=data
        )

    async def delete_learning(self, auth: AuthLike, uuid: str) -> BaseResponse[Learning]:
        uuid = validate_uuid(uuid, "Learning UUID")
        token = self._token(auth, required=True)
        return await self._call(self._endpoints.learning_item(uuid), Learning, method="DELETE", token=token)

    # ------------------------------------------------------------------
    # Boards
    # ------------------------------------------------------------------

    async def get_boards(
        self, *, level: int | None = None, technique: int | None = None
    ) -> BaseResponse[list[Board]]:
        self._check_filters(level, technique)
        path = build_path(self._endpoints.boards, {"level": level, "technique": technique})
        return await self._call(path, list[Board], token=self._token(None))

    async def get_random_board(
        self, *, level: int | None = None, technique: int | None = None
    ) -> BaseResponse[Board]:
        self._check_filters(level, technique)
        path = build_path(self._endpoints.boards_random, {"level": level, "technique": technique})
        return await self._call(path, Board, token=self._token(None))

    async def get_board(self, uuid: str) -> BaseResponse[Board]:
        uuid = validate_uuid(uuid, "Board UUID")
        return await self._call(self._endpoints.board(uuid), Board, token=self._token(None))

    async def get_board_counts(self) -> BaseResponse[BoardCounts]:
        return await self._call(self._endpoints.boards_counts, BoardCounts, token=self._token(None))

    async def create_board(self, auth: AuthLike, data: BoardCreateRequest | Mapping[str, Any]) -> BaseResponse[Board]:
        token = self._token(auth, required=True)
        return await self._call(self._endpoints.boards, Board, method="POST", token=token, body=data)

    async def update_board(
        self, auth: AuthLike, uuid: str, data: BoardUpdateRequest | Mapping[str, Any]
    ) -> BaseResponse[Board]:
        uuid = validate_uuid(uuid, "Board UUID")
        token = self._token(auth, required=True)
        return await self._call(self._endpoints.board(uuid), Board, method="PUT", token=token, body=data)

    async def delete_board(self, auth: AuthLike, uuid: str) -> BaseResponse[Board]:
        uuid = validate_uuid(uuid, "Board UUID")
        token = self._token(auth, required=True)
        return await self._call(self._endpoints.board(uuid), Board, method="DELETE", token=token)

    # ------------------------------------------------------------------
    # Dailies
    # ------------------------------------------------------------------

    async def get_dailies(self) -> BaseResponse[list[Daily]]:
        return await self._call(self._endpoints.dailies, list[Daily], token=self._token(None))

    async def get_random_daily(self) -> BaseResponse[Daily]:
        return await self._call(self._endpoints.dailies_random, Daily, token=self._token(None))

    async def get_today_daily(self) -> BaseResponse[Daily]:
        return await self._call(self._endpoints.dailies_today, Daily, token=self._token(None))

    async def get_daily_by_date(self, date: str) -> BaseResponse[Daily]:
        date = validate_date(date)
        return await self._call(self._endpoints.daily_by_date(date), Daily, token=self._token(None))

    async def get_daily(self, uuid: str) -> BaseResponse[Daily]:
        uuid = validate_uuid(uuid, "Daily UUID")
        return await self._call(self._endpoints.daily(uuid), Daily, token=self._token(None))

    async def create_daily(self, auth: AuthLike, data: DailyCreateRequest | Mapping[str, Any]) -> BaseResponse[Daily]:
        token = self._token(auth, required=True)
        return await self._call(self._endpoints.dailies, Daily, method="POST", token=token, body=data)

    async def update_daily(
        self, auth: AuthLike, uuid: str, data: DailyUpdateRequest | Mapping[str, Any]
    ) -> BaseResponse[Daily]:
        uuid = validate_uuid(uuid, "Daily UUID")
        token = self._token(auth, required=True)
        return await self._call(self._endpoints.daily(uuid), Daily, method="PUT", token=token, body=data)

    async def delete_daily(self, auth: AuthLike, uuid: str) -> BaseResponse[Daily]:
        uuid = validate_uuid(uuid, "Daily UUID")
        token = self._token(auth, required=True)
        return await self._call(self._endpoints.daily(uuid), Daily, method="DELETE", token=token)

    # ------------------------------------------------------------------
    # Challenges
    # ------------------------------------------------------------------

    async def get_challenges(
        self, *, level: int | None = None, difficulty: int | None = None
    ) -> BaseResponse[list[Challenge]]:
        self._check_filters(level, None)
        path = build_path(self._endpoints.challenges, {"level": level, "difficulty": difficulty})
        return await self._call(path, list[Challenge], token=self._token(None))

    async def get_random_challenge(
        self, *, level: int | None = None, difficulty: int | None = None
    ) -> BaseResponse[Challenge]:
        self._check_filters(level, None)
        path = build_path(self._endpoints.challenges_random, {"level": level, "difficulty": difficulty})
        return await self._call(path, Challenge, token=self._token(None))

    async def get_challenge(self, uuid: str) -> BaseResponse[Challenge]:
        uuid = validate_uuid(uuid, "Challenge UUID")
        return await self._call(self._endpoints.challenge(uuid), Challenge, token=self._token(None))

    async def create_challenge(
        self, auth: AuthLike, data: ChallengeCreateRequest | Mapping[str, Any]
    ) -> BaseResponse[Challenge]:
        token = self._token(auth, required=True)
        return await self._call(self._endpoints.challenges, Challenge, method="POST", token=token, body=data)

    async def update_challenge(
        self, auth: AuthLike, uuid: str, data: ChallengeUpdateRequest | Mapping[str, Any]
    ) -> BaseResponse[Challenge]:
        uuid = validate_uuid(uuid, "Challenge UUID")
        token = self._token(auth, required=True)
        return await self._call(self._endpoints.challenge(uuid), Challenge, method="PUT", token=token, body=data)

    async def delete_challenge(self, auth: AuthLike, uuid: str) -> BaseResponse[Challenge]:
        uuid = validate_uuid(uuid, "Challenge UUID")
        token = self._token(auth, required=True)
        return await self._call(self._endpoints.challenge(uuid), Challenge, method="DELETE", token=token)

    # ------------------------------------------------------------------
    # Users
    # ------------------------------------------------------------------

    async def get_user_subscription(self, auth: AuthLike, user_id: str) -> BaseResponse[SubscriptionResult]:
        user_id = validate_user_id(user_id)
        token = self._token(auth, required=True)
        path = self._endpoints.user_subscriptions(quote(user_id, safe=""))
        return await self._call(path, SubscriptionResult, token=token)

    # ------------------------------------------------------------------
    # Solver
    # ------------------------------------------------------------------

    async def solve(
        self, options: SolveOptions | Mapping[str, Any], auth: AuthLike = None
    ) -> BaseResponse[SolveData]:
        """Step-by-step hints for the current board.

        Raises `HintAccessDeniedError` when the requested hint level is above
        the caller's entitlement (HTTP 402).
        """

        opts = coerce_options(SolveOptions, options)
        token = self._token(auth, required=True)
        path = build_path(
            self._endpoints.solver_solve,
            {
                "original": opts.original,
                "user": opts.user,
                "autopencilmarks": opts.auto_pencilmarks,
                "pencilmarks": opts.pencilmarks,
                "filters": opts.filters,
            },
        )
        return await self._call(path, SolveData, token=token, paywall=True)

    async def validate(self, options: ValidateOptions | Mapping[str, Any]) -> BaseResponse[ValidateData]:
        """Check that a puzzle has exactly one solution (slow: server-side search)."""

        opts = coerce_options(ValidateOptions, options)
        path = build_path(self._endpoints.solver_validate, {"original": opts.original})
        return await self._call(
            path,
            ValidateData,
            token=self._token(None),
            timeout=self._config.validate_timeout_seconds,
        )

    async def generate(self, options: GenerateOptions | Mapping[str, Any] | None = None) -> BaseResponse[GenerateData]:
        opts = coerce_options(GenerateOptions, options)
        path = build_path(self._endpoints.solver_generate, {"symmetrical": opts.symmetrical})
        return await self._call(path, GenerateData, token=self._token(None))

    # ------------------------------------------------------------------
    # Practices
    # ------------------------------------------------------------------

    async def get_practices(self, *, technique: int | None = None) -> BaseResponse[list[TechniquePractice]]:
        self._check_filters(None, technique)
        path = build_path(self._endpoints.practices, {"technique": technique})
        return await self._call(path, list[TechniquePractice], token=self._token(None))

    async def get_practice_counts(self, auth: AuthLike) -> BaseResponse[list[TechniquePracticeCountItem]]:
        token = self._token(auth, required=True)
        return await self._call(self._endpoints.practices_counts, list[TechniquePracticeCountItem], token=token)

    async def get_random_practice(self, auth: AuthLike, technique: int) -> BaseResponse[TechniquePractice]:
        technique = validate_technique(technique)
        token = self._token(auth, required=True)
        return await self._call(self._endpoints.practice_random(technique), TechniquePractice, token=token)

    async def create_practice(
        self, auth: AuthLike, data: TechniquePracticeCreateRequest | Mapping[str, Any]
    ) -> BaseResponse[TechniquePractice]:
        token = self._token(auth, required=True)
        return await self._call(
            self._endpoints.practices, TechniquePractice, method="POST", token=token, body=data
        )

    async def delete_all_practices(self, auth: AuthLike) -> BaseResponse[DeleteAllResult]:
        token = self._token(auth, required=True)
        path = build_path(self._endpoints.practices, {"confirm": True})
        return await self._call(path, DeleteAllResult, method="DELETE", token=token)

    # ------------------------------------------------------------------
    # Examples
    # ------------------------------------------------------------------

    async def get_examples(self, *, technique: int | None = None) -> BaseResponse[list[TechniqueExample]]:
        self._check_filters(None, technique)
        path = build_path(self._endpoints.examples, {"technique": technique})
        return await self._call(path, list[TechniqueExample], token=self._token(None))

    async def get_example_counts(self) -> BaseResponse[list[TechniqueExampleCountItem]]:
        return await self._call(
            self._endpoints.examples_counts, list[TechniqueExampleCountItem], token=self._token(None)
        )

    async def create_example(
        self, auth: AuthLike, data: TechniqueExampleCreateRequest | Mapping[str, Any]
    ) -> BaseResponse[TechniqueExample]:
        token = self._token(auth, required=True)
        return await self._call(self._endpoints.examples, TechniqueExample, method="POST", token=token, body=data)

    # ------------------------------------------------------------------
    # Gamification
    # ------------------------------------------------------------------

    async def play_start(
        self, auth: AuthLike, data: GameStartRequest | Mapping[str, Any]
    ) -> BaseResponse[GameStartResponse]:
        token = self._token(auth, required=True)
        return await self._call(self._endpoints.play_start, GameStartResponse, method="POST", token=token, body=data)

    async def play_finish(
        self, auth: AuthLike, data: GameFinishRequest | Mapping[str, Any]
    ) -> BaseResponse[GameFinishResponse]:
        token = self._token(auth, required=True)
        return await self._call(
            self._endpoints.play_finish, GameFinishResponse, method="POST", token=token, body=data
        )

    async def get_gamification_stats(self, auth: AuthLike) -> BaseResponse[GamificationStats]:
        token = self._token(auth, required=True)
        return await self._call(self._endpoints.gamification_stats, GamificationStats, token=token)

    async def get_badge_definitions(self) -> BaseResponse[list[BadgeDefinition]]:
        return await self._call(
            self._endpoints.gamification_badges, list[BadgeDefinition], token=self._token(None)
        )

    async def get_point_history(
        self, auth: AuthLike, *, limit: int | None = None, offset: int | None = None
    ) -> BaseResponse[list[PointTransaction]]:
        limit, offset = validate_pagination(limit, offset)
        token = self._token(auth, required=True)
        path = build_path(self._endpoints.gamification_history, {"limit": limit, "offset": offset})
        return await self._call(path, list[PointTransaction], token=token)


def create_sudojo_client(
    network_client: NetworkClient, config: ClientConfig | Mapping[str, Any]
) -> SudojoClient:
    return SudojoClient(network_client, config)
