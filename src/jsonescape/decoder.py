from typing import Tuple

from jsonescape.error import (
    IncompleteEscapeError,
    IncompleteUnicodeEscapeError,
    InvalidEscapeCharError,
    InvalidUnicodeEscapeError,
)
from jsonescape.helpers import (
    combine_surrogates,
    first_non_hex,
    is_high_surrogate,
    is_low_surrogate,
)

ESCAPE_MAP = {
    '"': '"',
    "\\": "\\",
    "/": "/",
    "b": "\b",
    "f": "\f",
    "n": "\n",
    "r": "\r",
    "t": "\t",
}

UNICODE_ESCAPE_LENGTH = 6


def unescape(text: str) -> str:
    r"""
    Decodes the body of a JSON string literal.

    Handles the escape sequences \", \\, \/, \b, \f, \n, \r, \t and \uXXXX,
    combining a high/low surrogate pair of \u escapes into a single
    character. A lone surrogate escape decodes to the lone surrogate.

    Raises a subclass of `UnescapeError` on the first malformed escape.
    """
    parts: list[str] = []
    length = len(text)
    i = 0
    while i < length:
        backslash = text.find("\\", i)
        if backslash == -1:
            parts.append(text[i:])
            break
        parts.append(text[i:backslash])
        i = backslash

        if i + 1 >= length:
            raise IncompleteEscapeError(i)

        marker = text[i + 1]
        if marker == "u":
            code_point, consumed = _decode_unicode_escape(text, i)
            parts.append(chr(code_point))
            i += consumed
            continue

        escaped_char = ESCAPE_MAP.get(marker)
        if escaped_char is None:
            raise InvalidEscapeCharError(marker, i)
        parts.append(escaped_char)
        i += 2
    return "".join(parts)


def _decode_unicode_escape(text: str, start: int) -> Tuple[int, int]:
    digits = text[start + 2 : start + UNICODE_ESCAPE_LENGTH]
    if len(digits) < 4:
        raise IncompleteUnicodeEscapeError(start)
    invalid = first_non_hex(digits)
    if invalid is not None:
        raise InvalidUnicodeEscapeError(digits, invalid, start)

    code_unit = int(digits, 16)
    if is_high_surrogate(code_unit):
        low = _peek_low_surrogate(text, start + UNICODE_ESCAPE_LENGTH)
        if low is not None:
            return combine_surrogates(code_unit, low), 2 * UNICODE_ESCAPE_LENGTH
    return code_unit, UNICODE_ESCAPE_LENGTH


def _peek_low_surrogate(text: str, start: int) -> int | None:
    # Never raises; a malformed follow-up escape is reported when scanned.
    candidate = text[start : start + UNICODE_ESCAPE_LENGTH]
    if len(candidate) < UNICODE_ESCAPE_LENGTH or not candidate.startswith("\\u"):
        return None
    digits = candidate[2:]
    if first_non_hex(digits) is not None:
        return None
    code_unit = int(digits, 16)
    if not is_low_surrogate(code_unit):
        return None
    return code_unit
