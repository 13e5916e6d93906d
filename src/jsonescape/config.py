from __future__ import annotations

import argparse
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from jsonescape.error import ConfigError
from jsonescape.types import InputMode, UTF8Policy


class Config(BaseModel):
    """
    Validated command-line configuration.
    """

    model_config = ConfigDict(frozen=True)

    # input
    args: list[str] = Field(default_factory=list)
    input_files: list[Path] = Field(default_factory=list)
    read_stdin: bool = False
    null_delimited: bool = False
    line_mode: bool = False
    # output
    unescape: bool = False
    wrap_quotes: bool = False
    raw_output: bool = False
    output_file: Path | None = None
    # encoding
    ascii_only: bool = False
    html_safe: bool = False
    strict_utf8: bool = False
    replace_utf8: bool = False
    # meta
    verbose: bool = False

    @model_validator(mode="after")
    def check_exclusive_options(self) -> Config:
        if self.strict_utf8 and self.replace_utf8:
            raise ValueError("--strict and --replace are mutually exclusive")
        if self.null_delimited and self.line_mode:
            raise ValueError("--null and --lines are mutually exclusive")
        return self

    @property
    def input_mode(self) -> InputMode:
        if self.null_delimited:
            return InputMode.NULL
        if self.line_mode:
            return InputMode.LINES
        return InputMode.WHOLE

    @property
    def utf8_policy(self) -> UTF8Policy:
        if self.strict_utf8:
            return UTF8Policy.STRICT
        if self.replace_utf8:
            return UTF8Policy.REPLACE
        return UTF8Policy.PASSTHROUGH

    @property
    def has_explicit_input(self) -> bool:
        return bool(self.args or self.input_files or self.read_stdin)

    @classmethod
    def from_namespace(cls, namespace: argparse.Namespace) -> Config:
        try:
            return cls.model_validate(vars(namespace))
        except ValidationError as exc:
            raise ConfigError(_first_error_message(exc)) from exc


def _first_error_message(exc: ValidationError) -> str:
    error = exc.errors()[0]
    cause = error.get("ctx", {}).get("error")
    if isinstance(cause, ValueError):
        return str(cause)
    location = ".".join(str(part) for part in error["loc"])
    return f"{location}: {error['msg']}" if location else error["msg"]
