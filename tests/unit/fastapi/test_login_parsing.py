"""Tests for login body helpers."""

import pytest

from slack_provisioning.exceptions import InvalidRequestError
from slack_provisioning.fastapi.handlers import _string_field, path_unescape


class TestPathUnescape:
    def test_decodes_percent_escapes(self) -> None:
        assert path_unescape("xoxd-abc%2Fdef%3D%3D") == "xoxd-abc/def=="

    def test_plus_is_kept(self) -> None:
        assert path_unescape("a+b%20c") == "a+b c"

    def test_plain_value_unchanged(self) -> None:
        assert path_unescape("xoxd-plain") == "xoxd-plain"

    @pytest.mark.parametrize("raw", ["bad%zz", "trailing%", "short%4", "%GG"])
    def test_malformed_escape_falls_back_to_raw(self, raw: str) -> None:
        assert path_unescape(raw) == raw

    def test_invalid_utf8_falls_back_to_raw(self) -> None:
        assert path_unescape("%ff%fe") == "%ff%fe"

    def test_decodes_utf8(self) -> None:
        assert path_unescape("caf%C3%A9") == "café"


class TestStringField:
    def test_exact_key(self) -> None:
        assert _string_field({"Token": "xoxc"}, "Token") == "xoxc"

    def test_case_insensitive_key(self) -> None:
        assert _string_field({"token": "xoxc"}, "Token") == "xoxc"
        assert _string_field({"cookieToken": "xoxd"}, "Cookietoken") == "xoxd"

    def test_exact_key_wins(self) -> None:
        assert _string_field({"token": "lower", "Token": "exact"}, "Token") == "exact"

    def test_missing_and_null_are_empty(self) -> None:
        assert _string_field({}, "Token") == ""
        assert _string_field({"Token": None}, "Token") == ""
        assert _string_field(None, "Token") == ""

    def test_value_is_not_normalized(self) -> None:
        assert _string_field({"Token": "  XoXc  "}, "Token") == "  XoXc  "

    @pytest.mark.parametrize("data", [[], "string", 5, {"Token": 5}, {"Token": ["a"]}])
    def test_wrong_types_are_invalid_json(self, data: object) -> None:
        with pytest.raises(InvalidRequestError, match="Invalid JSON"):
            _string_field(data, "Token")
