import io
from dataclasses import dataclass
from typing import Callable

import pytest

from jsonescape.cli import run


@dataclass
class CliResult:
    code: int
    stdout: bytes
    stderr: str


@pytest.fixture
def output() -> io.BytesIO:
    return io.BytesIO()


@pytest.fixture
def run_cli() -> Callable[..., CliResult]:
    def _run(*argv: str, stdin: bytes = b"") -> CliResult:
        stdout = io.BytesIO()
        stderr = io.StringIO()
        code = run(list(argv), io.BytesIO(stdin), stdout, stderr)
        return CliResult(code, stdout.getvalue(), stderr.getvalue())

    return _run
