# ─────────────────────────────────────────────────────────────────────────────
# Tests — Prompt Templates
# ─────────────────────────────────────────────────────────────────────────────

from quotegate.pipeline.prompt_templates import get_extension_prompt


class TestGetExtensionPrompt:
    """Tests for get_extension_prompt()."""

    def test_prompt_contains_quote_verbatim(self):
        quote = "Ask not what your country can do for you"
        assert f"'{quote}'" in get_extension_prompt(quote)

    def test_prompt_asks_to_keep_original_wording(self):
        result = get_extension_prompt("x")
        assert "without changing the original wording" in result

    def test_prompt_asks_to_invert_meaning_in_same_tone(self):
        result = get_extension_prompt("x")
        assert "invert or subvert the original meaning" in result
        assert "same tone" in result

    def test_prompt_asks_for_text_only(self):
        result = get_extension_prompt("x")
        assert "Return only the complete extended quote" in result
        assert "without any additional explanation" in result

    def test_braces_in_quote_are_preserved(self):
        result = get_extension_prompt("a {b} c")
        assert "a {b} c" in result

    def test_different_quotes_produce_different_prompts(self):
        assert get_extension_prompt("one") != get_extension_prompt("two")
