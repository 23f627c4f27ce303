"""Unit tests for query-string and URL construction."""

from core.query_string import build_path, build_query, join_url


class TestBuildQuery:
    """Test deterministic query strings."""

    def test_keys_sorted_regardless_of_insertion_order(self) -> None:
        assert build_query({"user": "b", "original": "a"}) == build_query({"original": "a", "user": "b"})
        assert build_query({"user": "b", "original": "a"}) == "original=a&user=b"

    def test_none_dropped_empty_string_kept(self) -> None:
        assert build_query({"level": None, "filters": ""}) == "filters="

    def test_booleans_lowercase(self) -> None:
        assert build_query({"autopencilmarks": True, "symmetrical": False}) == (
            "autopencilmarks=true&symmetrical=false"
        )

    def test_commas_kept_other_chars_encoded(self) -> None:
        assert build_query({"pencilmarks": "12,3,,9"}) == "pencilmarks=12,3,,9"
        assert build_query({"q": "a b&c"}) == "q=a%20b%26c"

    def test_lists_joined_with_commas(self) -> None:
        assert build_query({"filters": [1, 2, 3]}) == "filters=1,2,3"


class TestBuildPath:
    """Test path + query assembly."""

    def test_no_question_mark_when_empty(self) -> None:
        assert build_path("/api/v1/boards", {"level": None}) == "/api/v1/boards"
        assert build_path("/api/v1/boards") == "/api/v1/boards"

    def test_appends_query(self) -> None:
        assert build_path("/api/v1/boards", {"level": 3}) == "/api/v1/boards?level=3"


class TestJoinUrl:
    """Test base URL joining."""

    def test_single_slash(self) -> None:
        assert join_url("http://localhost:5000///", "/api/v1/levels") == "http://localhost:5000/api/v1/levels"
        assert join_url("http://localhost:5000", "api/v1/levels") == "http://localhost:5000/api/v1/levels"
