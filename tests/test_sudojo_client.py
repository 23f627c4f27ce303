"""Tests for the endpoint façade against a recording fake transport."""

from urllib.parse import parse_qs, urlsplit

import pytest

from core.config import ClientConfig
from core.domain.errors import (
    HintAccessDeniedError,
    SudojoApiError,
    SudojoNoDataError,
    SudojoValidationError,
)
from core.domain.models import SolveOptions, SudojoAuth
from core.services.sudojo_client import SudojoClient, create_sudojo_client

from conftest import BASE_URL, LEVEL_UUID, PUZZLE, SOLUTION, RecordingTransport, fail, ok
from fake_backend import FakeSolverBackend

AUTH = SudojoAuth(access_token="t")

HIDDEN_SINGLE = {
    "board": {"original": PUZZLE, "user": "0" * 81, "pencilmarks": {"auto": True, "pencilmarks": ""}},
    "hints": [
        {
            "title": "Hidden Single",
            "text": "Only one cell in the box can hold 3.",
            "areas": [{"type": "box", "color": "blue", "index": 0}],
            "cells": [{"row": 0, "column": 0, "color": "green", "fill": True, "actions": {"select": "3"}}],
        }
    ],
}


def query_of(url: str) -> dict[str, str]:
    return {k: v[0] for k, v in parse_qs(urlsplit(url).query, keep_blank_values=True).items()}


class TestSolve:
    """Test the solver endpoints."""

    @pytest.mark.asyncio
    async def test_hidden_single_hint(self, client: SudojoClient, transport: RecordingTransport) -> None:
        transport.responses.append(ok(HIDDEN_SINGLE))

        result = await client.solve(
            {"original": PUZZLE, "user": "0" * 81, "autoPencilmarks": True},
            {"accessToken": "t"},
        )

        assert len(result.data.hints) == 1
        assert result.data.hints[0].title == "Hidden Single"
        assert transport.last.headers["Authorization"] == "Bearer t"
        assert transport.last.method == "GET"
        assert transport.last.body is None

    @pytest.mark.asyncio
    async def test_query_parameters_sorted_with_raw_commas(
        self, client: SudojoClient, transport: RecordingTransport
    ) -> None:
        transport.responses.append(ok(HIDDEN_SINGLE))

        await client.solve(
            SolveOptions(original=PUZZLE, user="0" * 81, auto_pencilmarks=False, pencilmarks="12,3,,9", filters="1,2"),
            AUTH,
        )

        query = urlsplit(transport.last.url).query
        keys = [pair.split("=", 1)[0] for pair in query.split("&")]
        assert keys == ["autopencilmarks", "filters", "original", "pencilmarks", "user"]
        assert "pencilmarks=12,3,,9" in query
        assert "autopencilmarks=false" in query

    @pytest.mark.asyncio
    async def test_access_denied_carries_paywall_context(
        self, client: SudojoClient, transport: RecordingTransport
    ) -> None:
        transport.responses.append(
            fail(
                402,
                {
                    "success": False,
                    "error": {
                        "code": "HINT_ACCESS_DENIED",
                        "message": "Hint level 4 requires a subscription",
                        "hintLevel": 4,
                        "requiredEntitlement": "red_belt",
                        "userState": {"entitlements": [], "hasSubscription": False},
                    },
                },
                "Payment Required",
            )
        )

        with pytest.raises(HintAccessDeniedError) as info:
            await client.solve({"original": PUZZLE, "user": "0" * 81}, AUTH)

        assert info.value.kind == "accessDenied"
        assert info.value.hint_level == 4
        assert info.value.required_entitlement == "red_belt"
        assert info.value.code == "HINT_ACCESS_DENIED"

    @pytest.mark.asyncio
    async def test_access_denied_top_level_payload(self, client: SudojoClient, transport: RecordingTransport) -> None:
        transport.responses.append(
            fail(
                402,
                {"code": "HINT_ACCESS_DENIED", "message": "Upgrade", "hintLevel": 2, "requiredEntitlement": "blue_belt"},
            )
        )

        with pytest.raises(HintAccessDeniedError) as info:
            await client.solve({"original": PUZZLE, "user": "0" * 81}, AUTH)

        assert str(info.value) == "Upgrade"
        assert info.value.hint_level == 2
        assert info.value.required_entitlement == "blue_belt"
        assert info.value.status_text == "Payment Required"

    @pytest.mark.asyncio
    async def test_access_denied_with_null_message(self, client: SudojoClient, transport: RecordingTransport) -> None:
        transport.responses.append(
            fail(
                402,
                {"error": {"code": "HINT_ACCESS_DENIED", "message": None, "hintLevel": 3, "requiredEntitlement": "red_belt"}},
            )
        )

        with pytest.raises(HintAccessDeniedError) as info:
            await client.solve({"original": PUZZLE, "user": "0" * 81}, AUTH)

        assert str(info.value) == "Hint access denied"
        assert info.value.hint_level == 3

    @pytest.mark.asyncio
    async def test_malformed_paywall_payload_is_api_error(
        self, client: SudojoClient, transport: RecordingTransport
    ) -> None:
        transport.responses.append(
            fail(402, {"error": {"code": "HINT_ACCESS_DENIED", "hintLevel": "three"}}, "Payment Required")
        )

        with pytest.raises(SudojoApiError) as info:
            await client.solve({"original": PUZZLE, "user": "0" * 81}, AUTH)

        assert not isinstance(info.value, HintAccessDeniedError)
        assert info.value.kind == "api"
        assert info.value.status_code == 402

    @pytest.mark.asyncio
    @pytest.mark.parametrize("auth", [{}, {"accessToken": None}, {"accessToken": ""}, {"accessToken": 5}])
    async def test_tokenless_auth_mapping_counts_as_missing(
        self, client: SudojoClient, transport: RecordingTransport, auth: dict
    ) -> None:
        assert not client.has_credential(auth)
        with pytest.raises(SudojoValidationError) as info:
            await client.solve({"original": PUZZLE, "user": "0" * 81}, auth)
        assert info.value.reason == "required"
        assert info.value.field == "access_token"
        assert transport.calls == []

    def test_snake_case_auth_mapping_accepted(self, client: SudojoClient) -> None:
        assert client.has_credential({"access_token": "t"})

    @pytest.mark.asyncio
    async def test_missing_option_is_validation_error(self, client: SudojoClient, transport: RecordingTransport) -> None:
        with pytest.raises(SudojoValidationError) as info:
            await client.validate({})
        assert info.value.kind == "validation"
        assert info.value.reason == "required"
        assert info.value.field == "original"

        with pytest.raises(SudojoValidationError) as info:
            await client.solve({"original": PUZZLE}, AUTH)
        assert info.value.reason == "required"
        assert info.value.field == "user"
        assert transport.calls == []

    @pytest.mark.asyncio
    async def test_mistyped_option_is_invalid_format(self, client: SudojoClient, transport: RecordingTransport) -> None:
        with pytest.raises(SudojoValidationError) as info:
            await client.generate({"symmetrical": "sometimes"})
        assert info.value.reason == "invalid_format"
        assert info.value.field == "symmetrical"
        assert transport.calls == []

    @pytest.mark.asyncio
    async def test_solve_requires_a_credential(self, client: SudojoClient, transport: RecordingTransport) -> None:
        with pytest.raises(SudojoValidationError) as info:
            await client.solve({"original": PUZZLE, "user": "0" * 81})
        assert info.value.reason == "required"
        assert info.value.field == "access_token"
        assert transport.calls == []

    @pytest.mark.asyncio
    async def test_static_token_used_when_no_auth_given(self, transport: RecordingTransport) -> None:
        client = SudojoClient(transport, ClientConfig(base_url=BASE_URL, api_token="static"))
        transport.responses.append(ok(HIDDEN_SINGLE))

        await client.solve({"original": PUZZLE, "user": "0" * 81})

        assert transport.last.headers["Authorization"] == "Bearer static"

    @pytest.mark.asyncio
    async def test_validate_normalizes_trailing_slashes(self, transport: RecordingTransport) -> None:
        client = create_sudojo_client(transport, {"base_url": "http://localhost:5000///"})
        transport.responses.append(ok({"board": {"original": PUZZLE, "solution": SOLUTION}}))

        result = await client.validate({"original": PUZZLE})

        assert transport.last.url.startswith("http://localhost:5000/api/v1/solver/validate?")
        assert query_of(transport.last.url) == {"original": PUZZLE}
        assert result.data.has_unique_solution

    @pytest.mark.asyncio
    async def test_validate_uses_long_timeout(self, client: SudojoClient, transport: RecordingTransport) -> None:
        transport.responses.append(ok({"board": {"original": PUZZLE, "solution": SOLUTION}}))
        await client.validate({"original": PUZZLE})
        assert transport.last.timeout == 120.0

        transport.responses.append(ok({"board": {"original": PUZZLE}}))
        await client.generate()
        assert transport.last.timeout is None
        assert "Authorization" not in transport.last.headers

    @pytest.mark.asyncio
    async def test_generate_then_validate_reports_unique_solution(self, transport: RecordingTransport) -> None:
        transport.handler = FakeSolverBackend()
        client = SudojoClient(transport, ClientConfig(base_url=BASE_URL))

        generated = await client.generate({"symmetrical": True})
        puzzle = generated.data.board.original
        assert len(puzzle) == 81
        assert puzzle.count("0") > 0

        validated = await client.validate({"original": puzzle})
        assert validated.success is True
        assert validated.data.has_unique_solution
        assert validated.data.board.solution == SOLUTION

    @pytest.mark.asyncio
    async def test_known_puzzle_has_its_solution(self, transport: RecordingTransport) -> None:
        transport.handler = FakeSolverBackend()
        client = SudojoClient(transport, ClientConfig(base_url=BASE_URL))

        validated = await client.validate({"original": PUZZLE})

        assert validated.data.board.solution == SOLUTION
        assert all(p in ("0", s) for p, s in zip(PUZZLE, SOLUTION))

    @pytest.mark.asyncio
    async def test_validate_reports_non_unique_puzzle(self, transport: RecordingTransport) -> None:
        transport.handler = FakeSolverBackend()
        client = SudojoClient(transport, ClientConfig(base_url=BASE_URL))

        result = await client.validate({"original": "0" * 81})

        assert result.success is False
        assert result.data is None
        assert "unique" in result.error


class TestLevelsAndTechniques:
    """Test reference-data endpoints."""

    @pytest.mark.asyncio
    async def test_get_level_out_of_range_never_reaches_transport(
        self, client: SudojoClient, transport: RecordingTransport
    ) -> None:
        with pytest.raises(SudojoValidationError) as info:
            await client.get_level(13)
        assert info.value.reason == "out_of_range"
        assert transport.calls == []

    @pytest.mark.asyncio
    async def test_get_levels_decodes_list(self, client: SudojoClient, transport: RecordingTransport) -> None:
        transport.responses.append(ok([{"level": 1, "title": "Beginner"}, {"level": 2, "title": "Easy"}]))

        result = await client.get_levels()

        assert [lv.level for lv in result.data] == [1, 2]
        assert transport.last.url == f"{BASE_URL}/api/v1/levels"
        assert "Authorization" not in transport.last.headers

    @pytest.mark.asyncio
    async def test_get_techniques_filter(self, client: SudojoClient, transport: RecordingTransport) -> None:
        transport.responses.append(ok([{"technique": 1, "level": 3, "title": "Full House"}]))
        await client.get_techniques(level=3)
        assert transport.last.url == f"{BASE_URL}/api/v1/techniques?level=3"

    @pytest.mark.asyncio
    async def test_create_level_posts_json(self, client: SudojoClient, transport: RecordingTransport) -> None:
        transport.responses.append(ok({"level": 3, "title": "Medium"}, status=201))

        result = await client.create_level(AUTH, {"level": 3, "title": "Medium"})

        assert result.data.title == "Medium"
        assert transport.last.method == "POST"
        assert transport.last.json == {"level": 3, "title": "Medium"}

    @pytest.mark.asyncio
    async def test_mutation_without_credential_is_rejected(
        self, client: SudojoClient, transport: RecordingTransport
    ) -> None:
        with pytest.raises(SudojoValidationError) as info:
            await client.delete_level(None, 3)
        assert info.value.field == "access_token"
        assert transport.calls == []

    @pytest.mark.asyncio
    async def test_delete_success_with_null_data(self, client: SudojoClient, transport: RecordingTransport) -> None:
        transport.responses.append(ok(None))

        result = await client.delete_technique(AUTH, 5)

        assert result.success is True
        assert result.data is None
        assert transport.last.method == "DELETE"
        assert transport.last.url == f"{BASE_URL}/api/v1/techniques/5"


class TestPuzzles:
    """Test boards, dailies and challenges."""

    @pytest.mark.asyncio
    async def test_invalid_uuid_rejected_locally(self, client: SudojoClient, transport: RecordingTransport) -> None:
        with pytest.raises(SudojoValidationError) as info:
            await client.get_board("invalid-uuid")
        assert info.value.reason == "invalid_format"
        with pytest.raises(SudojoValidationError) as info:
            await client.get_daily("")
        assert info.value.reason == "required"
        assert transport.calls == []

    @pytest.mark.asyncio
    async def test_daily_by_date(self, client: SudojoClient, transport: RecordingTransport) -> None:
        transport.responses.append(ok({"uuid": LEVEL_UUID, "date": "2025-01-15", "board": PUZZLE}))

        result = await client.get_daily_by_date("2025-01-15")

        assert result.data.date == "2025-01-15"
        assert transport.last.url == f"{BASE_URL}/api/v1/dailies/date/2025-01-15"

    @pytest.mark.asyncio
    async def test_bad_date_rejected(self, client: SudojoClient, transport: RecordingTransport) -> None:
        for bad in ("01-15-2025", "2025/01/15"):
            with pytest.raises(SudojoValidationError):
                await client.get_daily_by_date(bad)
        assert transport.calls == []

    @pytest.mark.asyncio
    async def test_random_board_filters(self, client: SudojoClient, transport: RecordingTransport) -> None:
        transport.responses.append(ok({"uuid": LEVEL_UUID, "board": PUZZLE}))
        await client.get_random_board(technique=4, level=2)
        assert transport.last.url == f"{BASE_URL}/api/v1/boards/random?level=2&technique=4"

    @pytest.mark.asyncio
    async def test_update_challenge(self, client: SudojoClient, transport: RecordingTransport) -> None:
        transport.responses.append(ok({"uuid": LEVEL_UUID, "difficulty": 2}))
        await client.update_challenge(AUTH, LEVEL_UUID, {"difficulty": 2})
        assert transport.last.method == "PUT"
        assert transport.last.url == f"{BASE_URL}/api/v1/challenges/{LEVEL_UUID}"
        assert transport.last.json == {"difficulty": 2}


class TestAccountEndpoints:
    """Test user, practices and gamification endpoints."""

    @pytest.mark.asyncio
    async def test_user_subscription_path(self, client: SudojoClient, transport: RecordingTransport) -> None:
        transport.responses.append(ok({"hasPurchasedSubscription": True, "entitlements": ["red_belt"]}))

        result = await client.get_user_subscription(AUTH, "user 1")

        assert result.data.has_purchased_subscription is True
        assert transport.last.url == f"{BASE_URL}/api/v1/users/user%201/subscriptions"

    @pytest.mark.asyncio
    async def test_user_id_length_checked(self, client: SudojoClient, transport: RecordingTransport) -> None:
        with pytest.raises(SudojoValidationError) as info:
            await client.get_user_subscription(AUTH, "x" * 129)
        assert info.value.reason == "invalid_length"
        assert transport.calls == []

    @pytest.mark.asyncio
    async def test_delete_all_practices_confirms(self, client: SudojoClient, transport: RecordingTransport) -> None:
        transport.responses.append(ok({"deleted": 12, "message": "ok"}))

        result = await client.delete_all_practices(AUTH)

        assert result.data.deleted == 12
        assert transport.last.url == f"{BASE_URL}/api/v1/practices?confirm=true"

    @pytest.mark.asyncio
    async def test_random_practice_path(self, client: SudojoClient, transport: RecordingTransport) -> None:
        transport.responses.append(ok({"uuid": LEVEL_UUID, "technique": 7}))
        await client.get_random_practice(AUTH, 7)
        assert transport.last.url == f"{BASE_URL}/api/v1/practices/technique/7/random"

    @pytest.mark.asyncio
    async def test_point_history_pagination(self, client: SudojoClient, transport: RecordingTransport) -> None:
        transport.responses.append(ok([{"points": 10, "transaction_type": "game"}]))

        result = await client.get_point_history(AUTH, limit=20, offset=40)

        assert result.data[0].points == 10
        assert transport.last.url == f"{BASE_URL}/api/v1/gamification/history?limit=20&offset=40"

    @pytest.mark.asyncio
    async def test_point_history_limit_checked(self, client: SudojoClient, transport: RecordingTransport) -> None:
        with pytest.raises(SudojoValidationError):
            await client.get_point_history(AUTH, limit=101)
        assert transport.calls == []

    @pytest.mark.asyncio
    async def test_play_finish(self, client: SudojoClient, transport: RecordingTransport) -> None:
        transport.responses.append(ok({"points_earned": 50, "level_up": True}))

        result = await client.play_finish(AUTH, {"board": PUZZLE, "time_elapsed_seconds": 300})

        assert result.data.points_earned == 50
        assert transport.last.json["time_elapsed_seconds"] == 300

    @pytest.mark.asyncio
    async def test_badges_are_public(self, client: SudojoClient, transport: RecordingTransport) -> None:
        transport.responses.append(ok([{"badge_type": "streak", "title": "On fire"}]))
        result = await client.get_badge_definitions()
        assert result.data[0].badge_type == "streak"
        assert "Authorization" not in transport.last.headers


class TestEnvelope:
    """Test response envelope handling."""

    @pytest.mark.asyncio
    async def test_degenerate_envelope_is_no_data(self, client: SudojoClient, transport: RecordingTransport) -> None:
        transport.responses.append(ok({}, envelope=False))
        with pytest.raises(SudojoNoDataError) as info:
            await client.get_health()
        assert info.value.status_code == 200

    @pytest.mark.asyncio
    async def test_null_body_is_no_data(self, client: SudojoClient, transport: RecordingTransport) -> None:
        transport.responses.append(ok(None, envelope=False))
        with pytest.raises(SudojoNoDataError) as info:
            await client.get_levels()
        assert info.value.status_code == 200

    @pytest.mark.asyncio
    async def test_unexpected_payload_is_api_error(self, client: SudojoClient, transport: RecordingTransport) -> None:
        transport.responses.append(ok([{"title": "no level number"}]))
        with pytest.raises(SudojoApiError) as info:
            await client.get_levels()
        assert info.value.status_code == 200
        assert info.value.detail

    @pytest.mark.asyncio
    async def test_server_error(self, client: SudojoClient, transport: RecordingTransport) -> None:
        transport.responses.append(fail(500, {"success": False, "error": "boom"}, "Internal Server Error"))
        with pytest.raises(SudojoApiError) as info:
            await client.get_dailies()
        assert info.value.kind == "api"
        assert info.value.status_code == 500

    @pytest.mark.asyncio
    async def test_health_hits_root(self, client: SudojoClient, transport: RecordingTransport) -> None:
        transport.responses.append(ok({"name": "sudojo", "version": "1.0.0", "status": "ok"}))
        result = await client.get_health()
        assert result.data.status == "ok"
        assert transport.last.url == f"{BASE_URL}/"
