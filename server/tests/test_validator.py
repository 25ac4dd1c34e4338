# ─────────────────────────────────────────────────────────────────────────────
# Tests — Request Validator
# ─────────────────────────────────────────────────────────────────────────────

import json

import pytest

from quotegate.exceptions import ErrorKind, ErrorOutcome
from quotegate.schemas import ExtensionRequest
from quotegate.services.validator import validate


def _body(quote) -> bytes:
    return json.dumps({"quote": quote}).encode()


class TestMalformed:
    @pytest.mark.parametrize(
        "raw",
        [
            b"",
            b"not json",
            b"{\"quote\": ",
            b"\xff\xfe\x00garbage",
            b"[]",
            b"\"just a string\"",
            b"42",
            b"[" * 100_000 + b"]" * 100_000,
            b"{\"quote\": " + b"[" * 100_000 + b"]" * 100_000 + b"}",
        ],
    )
    def test_unparseable_or_non_object_body(self, raw):
        result = validate(raw)
        assert isinstance(result, ErrorOutcome)
        assert result.kind is ErrorKind.MALFORMED
        assert result.message == "Invalid request body"
        assert result.status_code == 400

    @pytest.mark.parametrize("payload", [{}, {"text": "hi"}, {"quote": None}, {"quote": 7}, {"quote": ["a"]}])
    def test_missing_or_non_string_quote(self, payload):
        result = validate(json.dumps(payload))
        assert isinstance(result, ErrorOutcome)
        assert result.kind is ErrorKind.MALFORMED
        assert "must be a string" in result.message


class TestEmpty:
    @pytest.mark.parametrize("quote", ["", " ", "   \t\n  "])
    def test_empty_or_whitespace_only(self, quote):
        result = validate(_body(quote))
        assert isinstance(result, ErrorOutcome)
        assert result.kind is ErrorKind.EMPTY
        assert result.status_code == 400


class TestLength:
    def test_exactly_500_characters_is_accepted(self):
        result = validate(_body("a" * 500))
        assert isinstance(result, ExtensionRequest)
        assert len(result.quote) == 500

    def test_501_characters_is_rejected(self):
        result = validate(_body("a" * 501))
        assert isinstance(result, ErrorOutcome)
        assert result.kind is ErrorKind.TOO_LONG
        assert "500" in result.message

    def test_single_character_is_accepted(self):
        result = validate(_body("x"))
        assert isinstance(result, ExtensionRequest)
        assert result.quote == "x"

    def test_length_counts_code_points_not_bytes(self):
        # 500 four-byte emoji are 2000 UTF-8 bytes but 500 characters.
        result = validate(_body("\U0001F600" * 500))
        assert isinstance(result, ExtensionRequest)

    def test_length_is_measured_after_trimming(self):
        result = validate(_body("   " + "a" * 500 + "   "))
        assert isinstance(result, ExtensionRequest)

    def test_custom_limit(self):
        result = validate(_body("abcdef"), max_length=5)
        assert isinstance(result, ErrorOutcome)
        assert result.kind is ErrorKind.TOO_LONG


class TestSuccess:
    def test_returns_trimmed_quote(self):
        result = validate(_body("  Ask not what your country can do for you \n"))
        assert result == ExtensionRequest(quote="Ask not what your country can do for you")

    def test_accepts_str_input(self):
        result = validate('{"quote": "hello"}')
        assert isinstance(result, ExtensionRequest)

    def test_extra_fields_are_ignored(self):
        result = validate(json.dumps({"quote": "hello", "lang": "en"}))
        assert isinstance(result, ExtensionRequest)
