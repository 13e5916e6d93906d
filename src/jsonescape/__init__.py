from jsonescape.decoder import unescape
from jsonescape.encoder import escape
from jsonescape.error import (
    IncompleteEscapeError,
    IncompleteUnicodeEscapeError,
    InvalidEscapeCharError,
    InvalidUnicodeEscapeError,
    UnescapeError,
)
from jsonescape.types import VERSION as __version__

__all__ = [
    "IncompleteEscapeError",
    "IncompleteUnicodeEscapeError",
    "InvalidEscapeCharError",
    "InvalidUnicodeEscapeError",
    "UnescapeError",
    "__version__",
    "escape",
    "unescape",
]
