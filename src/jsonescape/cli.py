from __future__ import annotations

import argparse
import contextlib
import logging
import platform
import sys
from typing import BinaryIO, Sequence, TextIO

from jsonescape.completion import get_completion_script
from jsonescape.config import Config
from jsonescape.error import ConfigError, ProcessingError, UnsupportedShellError
from jsonescape.helpers import is_terminal
from jsonescape.processor import Processor
from jsonescape.types import NAME, VERSION, ExitCode

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(name)s: %(levelname)s: %(message)s"

EPILOG = f"""\
examples:
  # Escape a string from argument
  {NAME} 'Hello "World"'

  # Escape piped input
  echo 'Line 1\\nLine 2' | {NAME}

  # Process multiple lines
  cat file.txt | {NAME} --lines

  # Unescape a JSON string
  {NAME} -u 'Hello\\nWorld'

  # Escape for HTML embedding
  {NAME} --html-safe '<script>alert("XSS")</script>'

  # ASCII-only output (useful for legacy systems)
  {NAME} --ascii '日本語'

  # Process null-delimited input (handles strings with newlines)
  find . -print0 | {NAME} -0

exit codes:
  0    Success
  1    Error during processing
  2    Invalid usage
"""


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog=NAME,
        description="A robust CLI tool for escaping and unescaping JSON strings.",
        epilog=EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
        add_help=False,
    )
    parser.add_argument(
        "args",
        nargs="*",
        metavar="STRING",
        help="Strings to process (if not reading from stdin/file)",
    )

    input_group = parser.add_argument_group("input options")
    input_group.add_argument(
        "-f",
        "--file",
        dest="input_files",
        action="append",
        default=[],
        metavar="PATH",
        help="Read input from file (can be used multiple times)",
    )
    input_group.add_argument(
        "--stdin",
        dest="read_stdin",
        action="store_true",
        help="Explicitly read from stdin",
    )
    input_group.add_argument(
        "-l",
        "--lines",
        dest="line_mode",
        action="store_true",
        help="Process each line as a separate string",
    )
    input_group.add_argument(
        "-0",
        "--null",
        dest="null_delimited",
        action="store_true",
        help="Input is null-delimited (like xargs -0)",
    )

    output_group = parser.add_argument_group("output options")
    output_group.add_argument(
        "-u",
        "--unescape",
        action="store_true",
        help="Unescape JSON string instead of escaping",
    )
    output_group.add_argument(
        "-q",
        "--quote",
        dest="wrap_quotes",
        action="store_true",
        help="Wrap output in double quotes",
    )
    output_group.add_argument(
        "-r",
        "--raw",
        dest="raw_output",
        action="store_true",
        help="Don't add trailing newline to output",
    )
    output_group.add_argument(
        "-o",
        "--output",
        dest="output_file",
        metavar="PATH",
        help="Write output to file instead of stdout",
    )

    encoding_group = parser.add_argument_group("encoding options")
    encoding_group.add_argument(
        "-a",
        "--ascii",
        dest="ascii_only",
        action="store_true",
        help="Escape all non-ASCII characters as \\uXXXX",
    )
    encoding_group.add_argument(
        "--html-safe",
        action="store_true",
        help="Also escape <, >, & for HTML embedding",
    )
    encoding_group.add_argument(
        "-s",
        "--strict",
        dest="strict_utf8",
        action="store_true",
        help="Reject invalid UTF-8 input",
    )
    encoding_group.add_argument(
        "--replace",
        dest="replace_utf8",
        action="store_true",
        help="Replace invalid UTF-8 with replacement character",
    )

    other_group = parser.add_argument_group("other options")
    other_group.add_argument(
        "-h",
        "--help",
        dest="show_help",
        action="store_true",
        help="Show this help message and exit",
    )
    other_group.add_argument(
        "-V",
        "--version",
        dest="show_version",
        action="store_true",
        help="Show version information and exit",
    )
    other_group.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log debug information to stderr",
    )
    other_group.add_argument(
        "--completion",
        metavar="SHELL",
        help="Generate shell completion (bash, zsh, fish)",
    )
    return parser


VALUE_OPTIONS = {"--file", "--output", "--completion"}
SHORT_VALUE_FLAGS = "fo"
# argv entries cannot contain NUL. Older argparse releases drop a literal "--"
# from option values, so it is carried through parsing under this name.
DOUBLE_DASH_VALUE = "\0--"


def _platform_tag() -> str:
    return f"{platform.system().lower()}/{platform.machine().lower()}"


def version_text() -> str:
    return f"{NAME} version {VERSION} ({_platform_tag()})\n"


def _takes_next_value(token: str) -> bool:
    if token in VALUE_OPTIONS:
        return True
    if token.startswith("--") or not token.startswith("-") or len(token) < 2:
        return False
    for index, flag in enumerate(token[1:], start=1):
        if flag in SHORT_VALUE_FLAGS:
            return index == len(token) - 1
    return False


def parse_arguments(
    parser: argparse.ArgumentParser, argv: Sequence[str] | None = None
) -> argparse.Namespace:
    """
    Parses options and strings in any order. Everything after a bare `--`
    is taken as a string.

    The value of -f, -o and --completion is always the next argument, even
    when it is `--` or starts with a dash.
    """
    arguments = list(sys.argv[1:] if argv is None else argv)
    attached: list[str] = []
    trailing: list[str] = []
    i = 0
    while i < len(arguments):
        token = arguments[i]
        if token == "--":
            trailing = arguments[i + 1 :]
            break
        if _takes_next_value(token) and i + 1 < len(arguments):
            value = arguments[i + 1]
            if value == "--":
                value = DOUBLE_DASH_VALUE
            attached.append(f"{token}={value}" if token.startswith("--") else token + value)
            i += 2
            continue
        attached.append(token)
        i += 1

    namespace = parser.parse_intermixed_args(attached)
    namespace.args.extend(trailing)
    namespace.input_files = [_restore_double_dash(path) for path in namespace.input_files]
    namespace.output_file = _restore_double_dash(namespace.output_file)
    namespace.completion = _restore_double_dash(namespace.completion)
    return namespace


def _restore_double_dash(value: str | None) -> str | None:
    return "--" if value == DOUBLE_DASH_VALUE else value


def run(
    argv: Sequence[str] | None = None,
    stdin: BinaryIO | None = None,
    stdout: BinaryIO | None = None,
    stderr: TextIO | None = None,
) -> int:
    parser = build_parser()
    try:
        namespace = parse_arguments(parser, argv)
    except SystemExit as exc:
        # argparse usage errors
        return exc.code if isinstance(exc.code, int) else ExitCode.USAGE_ERROR

    stdin = stdin if stdin is not None else sys.stdin.buffer
    stdout = stdout if stdout is not None else sys.stdout.buffer
    stderr = stderr if stderr is not None else sys.stderr

    handler = configure_logging(namespace.verbose, stderr)
    try:
        return dispatch(parser, namespace, stdin, stdout, stderr)
    finally:
        logging.getLogger("jsonescape").removeHandler(handler)


def dispatch(
    parser: argparse.ArgumentParser,
    namespace: argparse.Namespace,
    stdin: BinaryIO,
    stdout: BinaryIO,
    stderr: TextIO,
) -> int:
    # Conflicting options are rejected even when only help is requested.
    try:
        config = Config.from_namespace(namespace)
    except ConfigError as exc:
        _report_usage_error(exc.message, stderr)
        return ExitCode.USAGE_ERROR

    if namespace.show_help:
        return _write(parser.format_help(), stdout)
    if namespace.show_version:
        return _write(version_text(), stdout)
    if namespace.completion is not None:
        return completion_command(namespace.completion, stdout, stderr)

    with contextlib.ExitStack() as stack:
        output = stdout
        if config.output_file is not None:
            try:
                output = stack.enter_context(open(config.output_file, "wb"))
            except OSError as exc:
                print(f"Error: cannot create output file: {exc}", file=stderr)
                return ExitCode.ERROR
        return process_command(config, stdin, output, stderr)


def _write(text: str, stdout: BinaryIO) -> int:
    stdout.write(text.encode("utf-8"))
    stdout.flush()
    return ExitCode.SUCCESS


def completion_command(shell: str, stdout: BinaryIO, stderr: TextIO) -> int:
    try:
        script = get_completion_script(shell)
    except UnsupportedShellError as exc:
        print(f"Error: {exc}", file=stderr)
        return ExitCode.USAGE_ERROR
    stdout.write(script.encode("utf-8"))
    stdout.flush()
    return ExitCode.SUCCESS


def process_command(
    config: Config, stdin: BinaryIO, output: BinaryIO, stderr: TextIO
) -> int:
    read_stdin = config.read_stdin or not (config.args or config.input_files)
    if not config.has_explicit_input and is_terminal(stdin):
        _report_usage_error("no input provided", stderr)
        return ExitCode.USAGE_ERROR

    processor = Processor(config, output)
    try:
        for value in config.args:
            processor.process_string(value)
        for path in config.input_files:
            processor.process_file(path)
        if read_stdin:
            logger.debug("Reading standard input")
            processor.process_reader(stdin)
    except ProcessingError as exc:
        print(f"Error: {exc}", file=stderr)
        return ExitCode.ERROR
    finally:
        output.flush()

    logger.debug("Processed %d item(s)", processor.count)
    return ExitCode.SUCCESS


def configure_logging(verbose: bool, stream: TextIO) -> logging.Handler:
    handler = logging.StreamHandler(stream)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    package_logger = logging.getLogger("jsonescape")
    package_logger.addHandler(handler)
    package_logger.setLevel(logging.DEBUG if verbose else logging.WARNING)
    return handler


def _report_usage_error(message: str, stderr: TextIO) -> None:
    print(f"Error: {message}", file=stderr)
    print(f"Try '{NAME} --help' for more information.", file=stderr)


def main() -> None:
    sys.exit(run())


if __name__ == "__main__":
    main()
