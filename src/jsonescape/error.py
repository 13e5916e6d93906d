class UnescapeError(Exception):
    def __init__(self, message: str, position: int) -> None:
        super().__init__(message)
        self.position = position


class IncompleteEscapeError(UnescapeError):
    def __init__(self, position: int) -> None:
        super().__init__("incomplete escape sequence at end of string", position)


class IncompleteUnicodeEscapeError(UnescapeError):
    def __init__(self, position: int) -> None:
        super().__init__("incomplete unicode escape sequence", position)


class InvalidUnicodeEscapeError(UnescapeError):
    def __init__(self, digits: str, character: str, position: int) -> None:
        super().__init__(
            f"invalid unicode escape \\u{digits}: invalid hex character {character!r}",
            position,
        )
        self.digits = digits
        self.character = character


class InvalidEscapeCharError(UnescapeError):
    def __init__(self, character: str, position: int) -> None:
        super().__init__(f"invalid escape sequence \\{character}", position)
        self.character = character


class ProcessingError(Exception):
    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or "Failed to process input")


class InvalidUTF8Error(ProcessingError):
    def __init__(self) -> None:
        super().__init__("input contains invalid UTF-8")


class ConfigError(Exception):
    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class UnsupportedShellError(Exception):
    def __init__(self, shell: str, supported: list[str]) -> None:
        super().__init__(
            f"unknown shell {shell!r} (supported: {', '.join(supported)})"
        )
        self.shell = shell
