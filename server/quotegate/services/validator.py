# ─────────────────────────────────────────────────────────────────────────────
# Request Validator — shape and length checks on the raw request body
# ─────────────────────────────────────────────────────────────────────────────
# Pure: no I/O, no logging. Runs before admission control so malformed
# requests never consume a client's quota.
# ─────────────────────────────────────────────────────────────────────────────


import json

from quotegate.exceptions import ErrorOutcome
from quotegate.schemas import ExtensionRequest

DEFAULT_MAX_QUOTE_LENGTH = 500


def validate(
    raw: bytes | str, max_length: int = DEFAULT_MAX_QUOTE_LENGTH
) -> ExtensionRequest | ErrorOutcome:
    """Parse and validate a ``{"quote": string}`` JSON body.

    Length is measured in Unicode code points (``len`` on ``str``), after
    stripping leading and trailing whitespace.

    Returns:
        The trimmed quote as an ExtensionRequest, or the ErrorOutcome
        describing the first check that failed.
    """
    try:
        payload = json.loads(raw)
    except (ValueError, RecursionError):
        # JSONDecodeError, UnicodeDecodeError, or nesting past the recursion limit.
        return ErrorOutcome.malformed()

    if not isinstance(payload, dict):
        return ErrorOutcome.malformed()

    quote = payload.get("quote")
    if not isinstance(quote, str):
        return ErrorOutcome.malformed("Quote is required and must be a string")

    quote = quote.strip()
    if not quote:
        return ErrorOutcome.empty()
    if len(quote) > max_length:
        return ErrorOutcome.too_long(max_length)

    return ExtensionRequest(quote=quote)
