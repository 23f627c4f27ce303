"""Claves de caché y frescura de las lecturas de Sudojo.

El cliente no cachea nada por sí mismo. Este módulo da a una caché externa (o
a la CLI) lo necesario para hacerlo de forma consistente:

- una clave hashable por lectura, construida a partir de la operación y sus
  parámetros;
- cuánto tiempo sigue fresco un resultado de cada clase de recurso;
- qué prefijos de clave debe invalidar una mutación.

Las claves son tuplas planas con raíz en `NAMESPACE`, así que un prefijo como
`("sudojo", "techniques")` cubre la lista y cada técnica individual. Los
mapeos de filtros se congelan en tuplas `(nombre, valor)` ordenadas, sin los
valores `None`: `techniques({"level": None})` y `techniques()` son la misma
clave, igual que dos dicts que solo difieren en el orden de inserción.
"""

from __future__ import annotations

from datetime import datetime, timedelta
from enum import Enum
from typing import Any, Mapping

NAMESPACE = "sudojo"
SOLVER = "solver"

QueryKey = tuple[Any, ...]
FrozenFilters = tuple[tuple[str, Any], ...]


class ResourceClass(str, Enum):
    HEALTH = "health"
    LEVELS = "levels"
    TECHNIQUES = "techniques"
    LEARNING = "learning"
    BOARDS = "boards"
    DAILIES = "dailies"
    CHALLENGES = "challenges"
    EXAMPLES = "examples"
    PRACTICES = "practices"
    BADGES = "badges"
    USER_SUBSCRIPTION = "user_subscription"
    GAMIFICATION_STATS = "gamification_stats"
    RANDOM = "random"
    HISTORY = "history"
    PRACTICE_COUNTS = "practice_counts"
    SOLVER_SOLVE = "solver_solve"
    SOLVER_VALIDATE = "solver_validate"
    SOLVER_GENERATE = "solver_generate"


STALE_TIMES: Mapping[ResourceClass, timedelta] = {
    ResourceClass.HEALTH: timedelta(minutes=1),
    ResourceClass.LEVELS: timedelta(minutes=10),
    ResourceClass.TECHNIQUES: timedelta(minutes=10),
    ResourceClass.LEARNING: timedelta(minutes=10),
    ResourceClass.BADGES: timedelta(minutes=10),
    ResourceClass.SOLVER_VALIDATE: timedelta(minutes=10),
    ResourceClass.BOARDS: timedelta(minutes=5),
    ResourceClass.DAILIES: timedelta(minutes=5),
    ResourceClass.CHALLENGES: timedelta(minutes=5),
    ResourceClass.EXAMPLES: timedelta(minutes=5),
    ResourceClass.PRACTICES: timedelta(minutes=5),
    ResourceClass.SOLVER_SOLVE: timedelta(minutes=5),
    ResourceClass.USER_SUBSCRIPTION: timedelta(minutes=2),
    ResourceClass.GAMIFICATION_STATS: timedelta(minutes=2),
    # Always refetch: every call is expected to return something new.
    ResourceClass.RANDOM: timedelta(0),
    ResourceClass.HISTORY: timedelta(0),
    ResourceClass.PRACTICE_COUNTS: timedelta(0),
    ResourceClass.SOLVER_GENERATE: timedelta(0),
}


def stale_time_for(resource: ResourceClass | str) -> timedelta:
    return STALE_TIMES[ResourceClass(resource)]


def is_fresh(resource: ResourceClass | str, fetched_at: datetime, now: datetime | None = None) -> bool:
    """True mientras un resultado obtenido en `fetched_at` se pueda servir sin volver a pedirlo."""

    stale_time = stale_time_for(resource)
    if stale_time <= timedelta(0):
        return False
    now = now or datetime.now(fetched_at.tzinfo)
    return now - fetched_at < stale_time


def freeze_filters(filters: Mapping[str, Any] | None) -> FrozenFilters | None:
    if not filters:
        return None
    frozen = tuple(sorted((str(k), v) for k, v in filters.items() if v is not None))
    return frozen or None


def _key(*parts: Any, filters: Mapping[str, Any] | None = None) -> QueryKey:
    frozen = freeze_filters(filters)
    if frozen is None:
        return (NAMESPACE, *parts)
    return (NAMESPACE, *parts, frozen)


def create_query_key(service: str, *parts: Any) -> QueryKey:
    """Clave para un endpoint propio; las partes de tipo mapping se congelan como los filtros."""

    return (service, *(freeze_filters(p) if isinstance(p, Mapping) else p for p in parts))


def service_keys() -> QueryKey:
    return (NAMESPACE,)


def solver_service_keys() -> QueryKey:
    return (NAMESPACE, SOLVER)


def key_matches(prefix: QueryKey, key: QueryKey) -> bool:
    return len(prefix) <= len(key) and tuple(key[: len(prefix)]) == tuple(prefix)


# ---------------------------------------------------------------------------
# Read keys
# ---------------------------------------------------------------------------


def health() -> QueryKey:
    return _key("health")


def levels() -> QueryKey:
    return _key("levels")


def level(level: int) -> QueryKey:
    return _key("levels", level)


def techniques(level: int | None = None) -> QueryKey:
    return _key("techniques", filters={"level": level})


def technique(technique: int) -> QueryKey:
    return _key("techniques", technique)


def learning(technique: int | None = None, language_code: str | None = None) -> QueryKey:
    return _key("learning", filters={"technique": technique, "language_code": language_code})


def learning_item(uuid: str) -> QueryKey:
    return _key("learning", uuid)


def boards(level: int | None = None, technique: int | None = None) -> QueryKey:
    return _key("boards", filters={"level": level, "technique": technique})


def board_random(level: int | None = None, technique: int | None = None) -> QueryKey:
    return _key("boards", "random", filters={"level": level, "technique": technique})


def board(uuid: str) -> QueryKey:
    return _key("boards", uuid)


def board_counts() -> QueryKey:
    return _key("boards", "counts")


def dailies() -> QueryKey:
    return _key("dailies")


def daily_random() -> QueryKey:
    return _key("dailies", "random")


def daily_today() -> QueryKey:
    return _key("dailies", "today")


def daily_by_date(date: str) -> QueryKey:
    return _key("dailies", "date", date)


def daily(uuid: str) -> QueryKey:
    return _key("dailies", uuid)


def challenges(level: int | None = None, difficulty: int | None = None) -> QueryKey:
    return _key("challenges", filters={"level": level, "difficulty": difficulty})


def challenge_random(level: int | None = None, difficulty: int | None = None) -> QueryKey:
    return _key("challenges", "random", filters={"level": level, "difficulty": difficulty})


def challenge(uuid: str) -> QueryKey:
    return _key("challenges", uuid)


def user_subscription(user_id: str) -> QueryKey:
    return _key("users", user_id, "subscription")


def practices(technique: int | None = None) -> QueryKey:
    return _key("practices", filters={"technique": technique})


def practice_counts() -> QueryKey:
    return _key("practices", "counts")


def practice_random(technique: int) -> QueryKey:
    return _key("practices", "random", technique)


def examples(technique: int | None = None) -> QueryKey:
    return _key("examples", filters={"technique": technique})


def example_counts() -> QueryKey:
    return _key("examples", "counts")


def gamification_stats() -> QueryKey:
    return _key("gamification", "stats")


def gamification_badges() -> QueryKey:
    return _key("gamification", "badges")


def gamification_history(limit: int | None = None, offset: int | None = None) -> QueryKey:
    return _key("gamification", "history", filters={"limit": limit, "offset": offset})


def solver_solve(
    original: str,
    user: str,
    auto_pencilmarks: bool | None = None,
    pencilmarks: str | None = None,
    filters: str | None = None,
) -> QueryKey:
    return _key(
        SOLVER,
        "solve",
        filters={
            "original": original,
            "user": user,
            "auto_pencilmarks": auto_pencilmarks,
            "pencilmarks": pencilmarks,
            "filters": filters,
        },
    )


def solver_validate(original: str) -> QueryKey:
    return _key(SOLVER, "validate", original)


def solver_generate(symmetrical: bool | None = None) -> QueryKey:
    return _key(SOLVER, "generate", filters={"symmetrical": symmetrical})


# ---------------------------------------------------------------------------
# Invalidation
# ---------------------------------------------------------------------------


def _family(resource: str, item: Any = None) -> tuple[QueryKey, ...]:
    if item is None:
        return (_key(resource),)
    return (_key(resource), _key(resource, item))


def invalidates_level(level: int | None = None) -> tuple[QueryKey, ...]:
    return _family("levels", level)


def invalidates_technique(technique: int | None = None) -> tuple[QueryKey, ...]:
    return _family("techniques", technique)


def invalidates_learning(uuid: str | None = None) -> tuple[QueryKey, ...]:
    return _family("learning", uuid)


def invalidates_board(uuid: str | None = None) -> tuple[QueryKey, ...]:
    return _family("boards", uuid)


def invalidates_daily(uuid: str | None = None) -> tuple[QueryKey, ...]:
    return _family("dailies", uuid)


def invalidates_challenge(uuid: str | None = None) -> tuple[QueryKey, ...]:
    return _family("challenges", uuid)


def invalidates_practices() -> tuple[QueryKey, ...]:
    return _family("practices")


def invalidates_examples() -> tuple[QueryKey, ...]:
    return _family("examples")


def invalidates_play() -> tuple[QueryKey, ...]:
    return (_key("gamification", "stats"), _key("gamification", "history"))


def matches_any(prefixes: tuple[QueryKey, ...], key: QueryKey) -> bool:
    return any(key_matches(prefix, key) for prefix in prefixes)
