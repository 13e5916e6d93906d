import os
import re
from typing import IO, Tuple

from jsonescape.error import InvalidUTF8Error
from jsonescape.types import UTF8Policy

HIGH_SURROGATE_MIN = 0xD800
HIGH_SURROGATE_MAX = 0xDBFF
LOW_SURROGATE_MIN = 0xDC00
LOW_SURROGATE_MAX = 0xDFFF
SUPPLEMENTARY_MIN = 0x10000

HEX_DIGITS = frozenset("0123456789abcdefABCDEF")

# Range used by the surrogateescape error handler for undecodable bytes.
ESCAPED_BYTE_MIN = 0xDC80
ESCAPED_BYTE_MAX = 0xDCFF
REPLACEMENT_BYTES = "\N{REPLACEMENT CHARACTER}".encode("utf-8")

SURROGATE_PATTERN = re.compile(f"[{chr(HIGH_SURROGATE_MIN)}-{chr(LOW_SURROGATE_MAX)}]")
ESCAPED_BYTES_PATTERN = re.compile(f"([{chr(ESCAPED_BYTE_MIN)}-{chr(ESCAPED_BYTE_MAX)}]+)")


def is_high_surrogate(code_unit: int) -> bool:
    return HIGH_SURROGATE_MIN <= code_unit <= HIGH_SURROGATE_MAX


def is_low_surrogate(code_unit: int) -> bool:
    return LOW_SURROGATE_MIN <= code_unit <= LOW_SURROGATE_MAX


def is_surrogate(code_unit: int) -> bool:
    return HIGH_SURROGATE_MIN <= code_unit <= LOW_SURROGATE_MAX


def split_surrogates(code_point: int) -> Tuple[int, int]:
    """
    Splits a code point above the BMP into its UTF-16 (high, low) pair.
    """
    if not SUPPLEMENTARY_MIN <= code_point <= 0x10FFFF:
        raise ValueError(f"Code point {code_point:#x} is not above the BMP.")
    offset = code_point - SUPPLEMENTARY_MIN
    return HIGH_SURROGATE_MIN + (offset >> 10), LOW_SURROGATE_MIN + (offset & 0x3FF)


def combine_surrogates(high: int, low: int) -> int:
    if not is_high_surrogate(high):
        raise ValueError(f"{high:#06x} is not a high surrogate.")
    if not is_low_surrogate(low):
        raise ValueError(f"{low:#06x} is not a low surrogate.")
    return (
        SUPPLEMENTARY_MIN
        + (high - HIGH_SURROGATE_MIN) * 0x400
        + (low - LOW_SURROGATE_MIN)
    )


def replace_surrogates(text: str) -> str:
    return SURROGATE_PATTERN.sub("\N{REPLACEMENT CHARACTER}", text)


def first_non_hex(digits: str) -> str | None:
    for ch in digits:
        if ch not in HEX_DIGITS:
            return ch
    return None


def decode_utf8(data: bytes, policy: UTF8Policy) -> str:
    if policy is UTF8Policy.STRICT:
        try:
            return data.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise InvalidUTF8Error() from exc
    if policy is UTF8Policy.REPLACE:
        return data.decode("utf-8", errors="replace")
    return data.decode("utf-8", errors="surrogateescape")


def encode_utf8(text: str, policy: UTF8Policy) -> bytes:
    """
    Encodes text for output.

    Lone surrogates cannot be represented in UTF-8 and are written as U+FFFD,
    except in pass-through mode where the ones produced by surrogateescape
    decoding are turned back into the original bytes.
    """
    keep_escaped_bytes = policy is UTF8Policy.PASSTHROUGH
    try:
        return text.encode(
            "utf-8", errors="surrogateescape" if keep_escaped_bytes else "strict"
        )
    except UnicodeEncodeError:
        pass

    chunks: list[bytes] = []
    for ch in text:
        code_point = ord(ch)
        if not is_surrogate(code_point):
            chunks.append(ch.encode("utf-8"))
        elif keep_escaped_bytes and ESCAPED_BYTE_MIN <= code_point <= ESCAPED_BYTE_MAX:
            chunks.append(bytes([code_point - LOW_SURROGATE_MIN]))
        else:
            chunks.append(REPLACEMENT_BYTES)
    return b"".join(chunks)


def is_terminal(stream: IO) -> bool:
    try:
        return os.isatty(stream.fileno())
    except (AttributeError, OSError, ValueError):
        return False
