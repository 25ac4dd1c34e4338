# ─────────────────────────────────────────────────────────────────────────────
# Prompt Templates — directive sent to the text-generation provider
# ─────────────────────────────────────────────────────────────────────────────


_EXTENSION_TEMPLATE = (
    "Take the following quote and extend it without changing the original "
    "wording. The extension must invert or subvert the original meaning while "
    "keeping the same tone.\n"
    "\n"
    "Quote: '{quote}'\n"
    "\n"
    "Return only the complete extended quote (original + extension) without "
    "any additional explanation or formatting."
)


def get_extension_prompt(quote: str) -> str:
    """Build the provider directive for extending ``quote``.

    The model is told to keep the quote verbatim at the start, append a
    continuation that flips its meaning in the same voice, and reply with
    nothing but the combined text.

    Args:
        quote: The trimmed, validated quote.

    Returns:
        A complete prompt string ready for the provider.
    """
    return _EXTENSION_TEMPLATE.format(quote=quote)
