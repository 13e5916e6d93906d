import subprocess
import sys

import pytest

from jsonescape.cli import build_parser, run
from jsonescape.types import VERSION, ExitCode


# fmt: off
@pytest.mark.parametrize(
    "argv,stdin,expected",
    [
        (["hello world"], b"", b"hello world\n"),
        (['hello "world"'], b"", b'hello \\"world\\"\n'),
        (["one", "two", "three"], b"", b"one\ntwo\nthree\n"),
        (["-u", "hello\\nworld"], b"", b"hello\nworld\n"),
        (["-q", "hello"], b"", b'"hello"\n'),
        (["-r", "hello"], b"", b"hello"),
        ([], b"hello world", b"hello world\n"),
        (["-l"], b"line1\nline2\nline3", b"line1\nline2\nline3\n"),
        (["-a", "日本語"], b"", b"\\u65e5\\u672c\\u8a9e\n"),
        (["--html-safe", "<b>"], b"", b"\\u003cb\\u003e\n"),
        (["-ua", "\\u65e5"], b"", "日\n".encode("utf-8")),
        (["-uq", "a\\tb"], b"", b'"a\tb"\n'),
        (["-0"], b"a\nb\0c\0", b"a\\nb\nc\n"),
        (["--null", "--unescape"], b"x\\ty\0", b"x\ty\n"),
        (["--", "-u"], b"", b"-u\n"),
        (["a", "-q", "b"], b"", b'"a"\n"b"\n'),
        (["-u", "\\ud83d\\udc4b"], b"", "👋\n".encode("utf-8")),
        (["-a", "👋"], b"", b"\\ud83d\\udc4b\n"),
        (["-u", "\\udc80"], b"", "\N{REPLACEMENT CHARACTER}\n".encode("utf-8")),
        (["-u", "\\udcff"], b"", "\N{REPLACEMENT CHARACTER}\n".encode("utf-8")),
    ],
)
# fmt: on
def test_run__basic(run_cli, argv: list, stdin: bytes, expected: bytes):
    result = run_cli(*argv, stdin=stdin)
    assert result.code == ExitCode.SUCCESS
    assert result.stdout == expected
    assert result.stderr == ""


def test_run__stdin_is_ignored_when_arguments_are_given(run_cli):
    result = run_cli("arg", stdin=b"from stdin")
    assert result.stdout == b"arg\n"


def test_run__explicit_stdin_after_arguments(run_cli):
    result = run_cli("arg", "--stdin", stdin=b"from stdin\n")
    assert result.stdout == b"arg\nfrom stdin\n"


def test_run__files_are_processed_after_arguments(run_cli, tmp_path):
    first = tmp_path / "first.txt"
    second = tmp_path / "second.txt"
    first.write_bytes(b"a\tb\n")
    second.write_bytes(b'"c"')
    result = run_cli("-f", str(first), f"--file={second}", "arg")
    assert result.code == ExitCode.SUCCESS
    assert result.stdout == b'arg\na\\tb\n\\"c\\"\n'


def test_run__combined_short_file_option(run_cli, tmp_path):
    path = tmp_path / "input.txt"
    path.write_bytes(b"x")
    result = run_cli(f"-qf{path}")
    assert result.stdout == b'"x"\n'


def test_run__output_file(run_cli, tmp_path):
    path = tmp_path / "out.txt"
    result = run_cli("-o", str(path), 'say "hello"')
    assert result.code == ExitCode.SUCCESS
    assert result.stdout == b""
    assert path.read_bytes() == b'say \\"hello\\"\n'


# fmt: off
@pytest.mark.parametrize(
    "argv,expected",
    [
        (["-o", "--", "x"], b"x\n"),
        (["-qo", "--", "x"], b'"x"\n'),
        (["--output", "--", "x"], b"x\n"),
        (["x", "-o", "--", "--", "-v"], b"x\n-v\n"),
    ],
)
# fmt: on
def test_run__output_file_named_double_dash(
    run_cli, tmp_path, monkeypatch, argv: list, expected: bytes
):
    monkeypatch.chdir(tmp_path)
    result = run_cli(*argv)
    assert result.code == ExitCode.SUCCESS
    assert result.stdout == b""
    assert (tmp_path / "--").read_bytes() == expected


def test_run__input_file_named_double_dash(run_cli, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    (tmp_path / "--").write_bytes(b"a\tb")
    result = run_cli("-f", "--", "x", "--", "-u")
    assert result.code == ExitCode.SUCCESS
    assert result.stdout == b"x\n-u\na\\tb\n"


def test_run__option_value_starting_with_dash(run_cli, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    result = run_cli("-o", "-out.txt", "x")
    assert result.code == ExitCode.SUCCESS
    assert (tmp_path / "-out.txt").read_bytes() == b"x\n"


def test_run__output_file_cannot_be_created(run_cli, tmp_path):
    result = run_cli("-o", str(tmp_path / "missing" / "out.txt"), "x")
    assert result.code == ExitCode.ERROR
    assert result.stderr.startswith("Error: cannot create output file:")


def test_run__missing_input_file(run_cli, tmp_path):
    result = run_cli("-f", str(tmp_path / "missing.txt"))
    assert result.code == ExitCode.ERROR
    assert "Error: cannot open file" in result.stderr


@pytest.mark.parametrize(
    "value,message",
    [
        ("hello\\", "Error: unescaping: incomplete escape sequence at end of string\n"),
        ("hello\\x", "Error: unescaping: invalid escape sequence \\x\n"),
        ("hello\\u00", "Error: unescaping: incomplete unicode escape sequence\n"),
        ("hello\\uXXXX", "Error: unescaping: invalid unicode escape \\uXXXX: invalid hex character 'X'\n"),
    ],
)
def test_run__unescape_errors(run_cli, value: str, message: str):
    result = run_cli("-u", value)
    assert result.code == ExitCode.ERROR
    assert result.stderr == message


def test_run__first_failing_item_aborts(run_cli):
    result = run_cli("-u", "ok", "bad\\", "never")
    assert result.code == ExitCode.ERROR
    assert result.stdout == b"ok\n"


def test_run__strict_utf8(run_cli):
    result = run_cli("--strict", "--stdin", stdin=b"abc\xff")
    assert result.code == ExitCode.ERROR
    assert result.stderr == "Error: input contains invalid UTF-8\n"


def test_run__replace_utf8(run_cli):
    result = run_cli("--replace", stdin=b"abc\xff")
    assert result.code == ExitCode.SUCCESS
    assert result.stdout == "abc\N{REPLACEMENT CHARACTER}\n".encode("utf-8")


@pytest.mark.parametrize(
    "argv,message",
    [
        (["--strict", "--replace", "x"], "--strict and --replace are mutually exclusive"),
        (["-s", "--replace", "x"], "--strict and --replace are mutually exclusive"),
        (["--null", "--lines", "x"], "--null and --lines are mutually exclusive"),
        (["-0l", "x"], "--null and --lines are mutually exclusive"),
    ],
)
def test_run__conflicting_options(run_cli, argv: list, message: str):
    result = run_cli(*argv)
    assert result.code == ExitCode.USAGE_ERROR
    assert result.stderr == (
        f"Error: {message}\nTry 'jsonescape --help' for more information.\n"
    )


@pytest.mark.parametrize(
    "argv",
    [
        ["--bogus"],
        ["-x"],
        ["-f"],
        ["--output"],
        ["--completion"],
    ],
)
def test_run__argument_errors(argv: list, capsys):
    assert run(argv) == ExitCode.USAGE_ERROR
    assert "error:" in capsys.readouterr().err


def test_run__help(run_cli):
    result = run_cli("--help")
    assert result.code == ExitCode.SUCCESS
    out = result.stdout.decode("utf-8")
    assert "usage: jsonescape" in out
    assert "--unescape" in out
    assert "exit codes:" in out


def test_run__version(run_cli):
    result = run_cli("-V")
    assert result.code == ExitCode.SUCCESS
    assert result.stdout.startswith(f"jsonescape version {VERSION} (".encode("utf-8"))
    assert result.stdout.endswith(b")\n")


@pytest.mark.parametrize(
    "argv,message",
    [
        (["--strict", "--replace", "--completion", "bash"], "--strict and --replace are mutually exclusive"),
        (["--strict", "--replace", "-V"], "--strict and --replace are mutually exclusive"),
        (["-0l", "--help"], "--null and --lines are mutually exclusive"),
    ],
)
def test_run__conflicting_options_checked_before_early_exit(run_cli, argv: list, message: str):
    result = run_cli(*argv)
    assert result.code == ExitCode.USAGE_ERROR
    assert result.stdout == b""
    assert result.stderr.startswith(f"Error: {message}\n")


@pytest.mark.parametrize("shell", ["bash", "zsh", "fish", "BASH"])
def test_run__completion(run_cli, shell: str):
    result = run_cli("--completion", shell)
    assert result.code == ExitCode.SUCCESS
    assert b"jsonescape" in result.stdout


def test_run__completion_unknown_shell(run_cli):
    result = run_cli("--completion=tcsh")
    assert result.code == ExitCode.USAGE_ERROR
    assert result.stderr == "Error: unknown shell 'tcsh' (supported: bash, zsh, fish)\n"


def test_run__no_input_on_terminal(run_cli, monkeypatch):
    monkeypatch.setattr("jsonescape.cli.is_terminal", lambda stream: True)
    result = run_cli()
    assert result.code == ExitCode.USAGE_ERROR
    assert result.stdout == b""
    assert result.stderr == (
        "Error: no input provided\nTry 'jsonescape --help' for more information.\n"
    )


def test_run__terminal_stdin_is_not_read_when_arguments_are_given(run_cli, monkeypatch):
    monkeypatch.setattr("jsonescape.cli.is_terminal", lambda stream: True)
    result = run_cli("x", stdin=b"ignored")
    assert result.code == ExitCode.SUCCESS
    assert result.stdout == b"x\n"


def test_run__verbose_logs_to_stderr(run_cli):
    result = run_cli("-v", "a", "b")
    assert result.code == ExitCode.SUCCESS
    assert "jsonescape.cli: DEBUG: Processed 2 item(s)" in result.stderr


def test_build_parser__defaults():
    namespace = build_parser().parse_intermixed_args([])
    assert namespace.args == []
    assert namespace.input_files == []
    assert namespace.output_file is None
    assert namespace.completion is None


def test_cli_help():
    result = subprocess.run(
        [sys.executable, "-m", "jsonescape.cli", "--help"],
        capture_output=True,
        text=True,
    )
    assert result.returncode == 0
    assert "jsonescape" in result.stdout
    assert "--html-safe" in result.stdout


def test_cli_escape_argument():
    result = subprocess.run(
        [sys.executable, "-m", "jsonescape.cli", 'say "hello"'],
        capture_output=True,
    )
    assert result.returncode == 0
    assert result.stdout == b'say \\"hello\\"\n'


def test_cli_unescape_stdin():
    result = subprocess.run(
        [sys.executable, "-m", "jsonescape.cli", "-u"],
        input=b"\\ud83d\\udc4b\n",
        capture_output=True,
    )
    assert result.returncode == 0
    assert result.stdout == "👋\n".encode("utf-8")


def test_cli_unescape_error_exit_code():
    result = subprocess.run(
        [sys.executable, "-m", "jsonescape.cli", "-u", "bad\\q"],
        capture_output=True,
        text=True,
    )
    assert result.returncode == 1
    assert "invalid escape sequence" in result.stderr


def test_cli_empty_stdin_is_one_empty_item():
    # /dev/null is not a terminal, so it is read as empty input.
    result = subprocess.run(
        [sys.executable, "-m", "jsonescape.cli"],
        stdin=subprocess.DEVNULL,
        capture_output=True,
    )
    assert result.returncode == 0
    assert result.stdout == b"\n"
