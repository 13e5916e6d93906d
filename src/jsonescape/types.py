from enum import Enum, IntEnum
from typing import Protocol

NAME = "jsonescape"
VERSION = "1.0.0"


class ExitCode(IntEnum):
    SUCCESS = 0
    ERROR = 1
    USAGE_ERROR = 2


class InputMode(Enum):
    WHOLE = "whole"
    LINES = "lines"
    NULL = "null"


class UTF8Policy(Enum):
    PASSTHROUGH = "passthrough"
    STRICT = "strict"
    REPLACE = "replace"


class ICodec(Protocol):
    def __call__(self, text: str) -> str: ...
