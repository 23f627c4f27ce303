"""Query/mutation bindings over `SudojoClient`.

Pairs every read with its cache key, stale time and an `enabled` flag, and
every write with the key prefixes it invalidates. An external cache layer
consumes these descriptors; nothing here stores results.

Why descriptors instead of a cache:
- The client stays stateless; callers pick their own cache (in-memory dict,
  diskcache, an async framework's store...).
- `enabled=False` lets a caller skip a read whose inputs are not ready yet
  (no identifier, no credential) without special-casing it.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import timedelta
from typing import Any, Awaitable, Callable, Generic, Mapping, TypeVar

from core import query_keys as keys
from core.domain.models import SolveOptions
from core.query_keys import QueryKey, ResourceClass, stale_time_for
from core.services.sudojo_client import AuthLike, SudojoClient, coerce_options

T = TypeVar("T")


@dataclass(frozen=True)
class QueryOptions(Generic[T]):
    key: QueryKey
    stale_time: timedelta
    fetch: Callable[[], Awaitable[T]]
    enabled: bool = True


@dataclass(frozen=True)
class MutationOptions(Generic[T]):
    run: Callable[[], Awaitable[T]]
    invalidates: tuple[QueryKey, ...] = field(default_factory=tuple)


def _query(
    key: QueryKey,
    resource: ResourceClass,
    fetch: Callable[[], Awaitable[Any]],
    enabled: bool = True,
) -> QueryOptions[Any]:
    return QueryOptions(key=key, stale_time=stale_time_for(resource), fetch=fetch, enabled=enabled)


class SudojoQueries:
    """Read descriptors. `fetch` is a zero-argument coroutine factory."""

    def __init__(self, client: SudojoClient) -> None:
        self._client = client

    def health(self) -> QueryOptions[Any]:
        return _query(keys.health(), ResourceClass.HEALTH, self._client.get_health)

    def levels(self) -> QueryOptions[Any]:
        return _query(keys.levels(), ResourceClass.LEVELS, self._client.get_levels)

    def level(self, level: int | None) -> QueryOptions[Any]:
        return _query(
            keys.level(level),
            ResourceClass.LEVELS,
            lambda: self._client.get_level(level),
            enabled=level is not None,
        )

    def techniques(self, level: int | None = None) -> QueryOptions[Any]:
        return _query(
            keys.techniques(level),
            ResourceClass.TECHNIQUES,
            lambda: self._client.get_techniques(level=level),
        )

    def technique(self, technique: int | None) -> QueryOptions[Any]:
        return _query(
            keys.technique(technique),
            ResourceClass.TECHNIQUES,
            lambda: self._client.get_technique(technique),
            enabled=technique is not None,
        )

    def learning(self, technique: int | None = None, language_code: str | None = None) -> QueryOptions[Any]:
        return _query(
            keys.learning(technique, language_code),
            ResourceClass.LEARNING,
            lambda: self._client.get_learning(technique=technique, language_code=language_code),
        )

    def learning_item(self, uuid: str | None) -> QueryOptions[Any]:
        return _query(
            keys.learning_item(uuid),
            ResourceClass.LEARNING,
            lambda: self._client.get_learning_item(uuid),
            enabled=bool(uuid),
        )

    def boards(self, level: int | None = None, technique: int | None = None) -> QueryOptions[Any]:
        return _query(
            keys.boards(level, technique),
            ResourceClass.BOARDS,
            lambda: self._client.get_boards(level=level, technique=technique),
        )

    def board_random(self, level: int | None = None, technique: int | None = None) -> QueryOptions[Any]:
        return _query(
            keys.board_random(level, technique),
            ResourceClass.RANDOM,
            lambda: self._client.get_random_board(level=level, technique=technique),
        )

    def board(self, uuid: str | None) -> QueryOptions[Any]:
        return _query(
            keys.board(uuid),
            ResourceClass.BOARDS,
            lambda: self._client.get_board(uuid),
            enabled=bool(uuid),
        )

    def board_counts(self) -> QueryOptions[Any]:
        return _query(keys.board_counts(), ResourceClass.BOARDS, self._client.get_board_counts)

    def dailies(self) -> QueryOptions[Any]:
        return _query(keys.dailies(), ResourceClass.DAILIES, self._client.get_dailies)

    def daily_random(self) -> QueryOptions[Any]:
        return _query(keys.daily_random(), ResourceClass.RANDOM, self._client.get_random_daily)

    def daily_today(self) -> QueryOptions[Any]:
        return _query(keys.daily_today(), ResourceClass.DAILIES, self._client.get_today_daily)

    def daily_by_date(self, date: str | None) -> QueryOptions[Any]:
        return _query(
            keys.daily_by_date(date),
            ResourceClass.DAILIES,
            lambda: self._client.get_daily_by_date(date),
            enabled=bool(date),
        )

    def daily(self, uuid: str | None) -> QueryOptions[Any]:
        return _query(
            keys.daily(uuid),
            ResourceClass.DAILIES,
            lambda: self._client.get_daily(uuid),
            enabled=bool(uuid),
        )

    def challenges(self, level: int | None = None, difficulty: int | None = None) -> QueryOptions[Any]:
        return _query(
            keys.challenges(level, difficulty),
            ResourceClass.CHALLENGES,
            lambda: self._client.get_challenges(level=level, difficulty=difficulty),
        )

    def challenge_random(self, level: int | None = None, difficulty: int | None = None) -> QueryOptions[Any]:
        return _query(
            keys.challenge_random(level, difficulty),
            ResourceClass.RANDOM,
            lambda: self._client.get_random_challenge(level=level, difficulty=difficulty),
        )

    def challenge(self, uuid: str | None) -> QueryOptions[Any]:
        return _query(
            keys.challenge(uuid),
            ResourceClass.CHALLENGES,
            lambda: self._client.get_challenge(uuid),
            enabled=bool(uuid),
        )

    def user_subscription(self, auth: AuthLike, user_id: str | None) -> QueryOptions[Any]:
        return _query(
            keys.user_subscription(user_id),
            ResourceClass.USER_SUBSCRIPTION,
            lambda: self._client.get_user_subscription(auth, user_id),
            enabled=bool(user_id) and self._client.has_credential(auth),
        )

    def practices(self, technique: int | None = None) -> QueryOptions[Any]:
        return _query(
            keys.practices(technique),
            ResourceClass.PRACTICES,
            lambda: self._client.get_practices(technique=technique),
        )

    def practice_counts(self, auth: AuthLike = None) -> QueryOptions[Any]:
        return _query(
            keys.practice_counts(),
            ResourceClass.PRACTICE_COUNTS,
            lambda: self._client.get_practice_counts(auth),
            enabled=self._client.has_credential(auth),
        )

    def practice_random(self, auth: AuthLike, technique: int | None) -> QueryOptions[Any]:
        return _query(
            keys.practice_random(technique),
            ResourceClass.RANDOM,
            lambda: self._client.get_random_practice(auth, technique),
            enabled=technique is not None and self._client.has_credential(auth),
        )

    def examples(self, technique: int | None = None) -> QueryOptions[Any]:
        return _query(
            keys.examples(technique),
            ResourceClass.EXAMPLES,
            lambda: self._client.get_examples(technique=technique),
        )

    def example_counts(self) -> QueryOptions[Any]:
        return _query(keys.example_counts(), ResourceClass.EXAMPLES, self._client.get_example_counts)

    def gamification_stats(self, auth: AuthLike = None) -> QueryOptions[Any]:
        return _query(
            keys.gamification_stats(),
            ResourceClass.GAMIFICATION_STATS,
            lambda: self._client.get_gamification_stats(auth),
            enabled=self._client.has_credential(auth),
        )

    def gamification_badges(self) -> QueryOptions[Any]:
        return _query(keys.gamification_badges(), ResourceClass.BADGES, self._client.get_badge_definitions)

    def gamification_history(
        self, auth: AuthLike = None, *, limit: int | None = None, offset: int | None = None
    ) -> QueryOptions[Any]:
        return _query(
            keys.gamification_history(limit, offset),
            ResourceClass.HISTORY,
            lambda: self._client.get_point_history(auth, limit=limit, offset=offset),
            enabled=self._client.has_credential(auth),
        )

    def solver_solve(self, options: SolveOptions | Mapping[str, Any], auth: AuthLike = None) -> QueryOptions[Any]:
        opts = coerce_options(SolveOptions, options)
        original, user = opts.original, opts.user
        return _query(
            keys.solver_solve(
                original,
                user,
                auto_pencilmarks=opts.auto_pencilmarks,
                pencilmarks=opts.pencilmarks,
                filters=opts.filters,
            ),
            ResourceClass.SOLVER_SOLVE,
            lambda: self._client.solve(opts, auth),
            enabled=bool(original) and bool(user) and self._client.has_credential(auth),
        )

    def solver_validate(self, original: str | None) -> QueryOptions[Any]:
        return _query(
            keys.solver_validate(original),
            ResourceClass.SOLVER_VALIDATE,
            lambda: self._client.validate({"original": original}),
            enabled=bool(original),
        )

    def solver_generate(self, symmetrical: bool | None = None) -> QueryOptions[Any]:
        return _query(
            keys.solver_generate(symmetrical),
            ResourceClass.SOLVER_GENERATE,
            lambda: self._client.generate({"symmetrical": symmetrical}),
        )


class SudojoMutations:
    """Write descriptors: `run` performs the call, `invalidates` lists key prefixes."""

    def __init__(self, client: SudojoClient) -> None:
        self._client = client

    def create_level(self, auth: AuthLike, data: Any) -> MutationOptions[Any]:
        return MutationOptions(lambda: self._client.create_level(auth, data), keys.invalidates_level())

    def update_level(self, auth: AuthLike, level: int, data: Any) -> MutationOptions[Any]:
        return MutationOptions(lambda: self._client.update_level(auth, level, data), keys.invalidates_level(level))

    def delete_level(self, auth: AuthLike, level: int) -> MutationOptions[Any]:
        return MutationOptions(lambda: self._client.delete_level(auth, level), keys.invalidates_level(level))

    def create_technique(self, auth: AuthLike, data: Any) -> MutationOptions[Any]:
        return MutationOptions(lambda: self._client.create_technique(auth, data), keys.invalidates_technique())

    def update_technique(self, auth: AuthLike, technique: int, data: Any) -> MutationOptions[Any]:
        return MutationOptions(
            lambda: self._client.update_technique(auth, technique, data),
            keys.invalidates_technique(technique),
        )

    def delete_technique(self, auth: AuthLike, technique: int) -> MutationOptions[Any]:
        return MutationOptions(
            lambda: self._client.delete_technique(auth, technique),
            keys.invalidates_technique(technique),
        )

    def create_learning(self, auth: AuthLike, data: Any) -> MutationOptions[Any]:
        return MutationOptions(lambda: self._client.create_learning(auth, data), keys.invalidates_learning())

    def update_learning(self, auth: AuthLike, uuid: str, data: Any) -> MutationOptions[Any]:
        return MutationOptions(
            lambda: self._client.update_learning(auth, uuid, data), keys.invalidates_learning(uuid)
        )

    def delete_learning(self, auth: AuthLike, uuid: str) -> MutationOptions[Any]:
        return MutationOptions(lambda: self._client.delete_learning(auth, uuid), keys.invalidates_learning(uuid))

    def create_board(self, auth: AuthLike, data: Any) -> MutationOptions[Any]:
        return MutationOptions(lambda: self._client.create_board(auth, data), keys.invalidates_board())

    def update_board(self, auth: AuthLike, uuid: str, data: Any) -> MutationOptions[Any]:
        return MutationOptions(lambda: self._client.update_board(auth, uuid, data), keys.invalidates_board(uuid))

    def delete_board(self, auth: AuthLike, uuid: str) -> MutationOptions[Any]:
        return MutationOptions(lambda: self._client.delete_board(auth, uuid), keys.invalidates_board(uuid))

    def create_daily(self, auth: AuthLike, data: Any) -> MutationOptions[Any]:
        return MutationOptions(lambda: self._client.create_daily(auth, data), keys.invalidates_daily())

    def update_daily(self, auth: AuthLike, uuid: str, data: Any) -> MutationOptions[Any]:
        return MutationOptions(lambda: self._client.update_daily(auth, uuid, data), keys.invalidates_daily(uuid))

    def delete_daily(self, auth: AuthLike, uuid: str) -> MutationOptions[Any]:
        return MutationOptions(lambda: self._client.delete_daily(auth, uuid), keys.invalidates_daily(uuid))

    def create_challenge(self, auth: AuthLike, data: Any) -> MutationOptions[Any]:
        return MutationOptions(lambda: self._client.create_challenge(auth, data), keys.invalidates_challenge())

    def update_challenge(self, auth: AuthLike, uuid: str, data: Any) -> MutationOptions[Any]:
        return MutationOptions(
            lambda: self._client.update_challenge(auth, uuid, data), keys.invalidates_challenge(uuid)
        )

    def delete_challenge(self, auth: AuthLike, uuid: str) -> MutationOptions[Any]:
        return MutationOptions(
            lambda: self._client.delete_challenge(auth, uuid), keys.invalidates_challenge(uuid)
        )

    def create_practice(self, auth: AuthLike, data: Any) -> MutationOptions[Any]:
        return MutationOptions(lambda: self._client.create_practice(auth, data), keys.invalidates_practices())

    def delete_all_practices(self, auth: AuthLike) -> MutationOptions[Any]:
        return MutationOptions(lambda: self._client.delete_all_practices(auth), keys.invalidates_practices())

    def create_example(self, auth: AuthLike, data: Any) -> MutationOptions[Any]:
        return MutationOptions(lambda: self._client.create_example(auth, data), keys.invalidates_examples())

    def play_start(self, auth: AuthLike, data: Any) -> MutationOptions[Any]:
        return MutationOptions(lambda: self._client.play_start(auth, data), keys.invalidates_play())

    def play_finish(self, auth: AuthLike, data: Any) -> MutationOptions[Any]:
        return MutationOptions(lambda: self._client.play_finish(auth, data), keys.invalidates_play())
