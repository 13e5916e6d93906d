from __future__ import annotations

import logging
from functools import partial
from pathlib import Path
from typing import BinaryIO, List

from jsonescape.config import Config
from jsonescape.decoder import unescape
from jsonescape.encoder import escape
from jsonescape.error import ProcessingError, UnescapeError
from jsonescape.helpers import (
    ESCAPED_BYTES_PATTERN,
    decode_utf8,
    encode_utf8,
    replace_surrogates,
)
from jsonescape.types import ICodec, InputMode

logger = logging.getLogger(__name__)


class Processor:
    """
    Feeds input items through the configured codec and writes the results.

    Every positional string is one item. Streams are split into items
    according to the input mode: the whole stream, one item per line, or one
    item per NUL-delimited record.
    """

    def __init__(self, config: Config, output: BinaryIO) -> None:
        self.config = config
        self.output = output
        self.count = 0
        self._codec = self._select_codec(config)

    @staticmethod
    def _select_codec(config: Config) -> ICodec:
        if config.unescape:
            return unescape_keeping_bytes
        return partial(escape, ascii_only=config.ascii_only, html_safe=config.html_safe)

    def process_string(self, value: str) -> None:
        # Arguments arrive decoded with surrogateescape; restore the raw bytes
        # so the UTF-8 policy sees the same input a stream would.
        self.process_item(value.encode("utf-8", errors="surrogateescape"))

    def process_file(self, path: Path) -> None:
        logger.debug("Reading input file %s", path)
        try:
            stream = open(path, "rb")
        except OSError as exc:
            raise ProcessingError(
                f"cannot open file {str(path)!r}: {exc.strerror or exc}"
            ) from exc
        with stream:
            self.process_reader(stream)

    def process_reader(self, stream: BinaryIO) -> None:
        try:
            data = stream.read()
        except OSError as exc:
            raise ProcessingError(f"reading input: {exc}") from exc

        mode = self.config.input_mode
        if mode is InputMode.NULL:
            records = split_records(data, b"\0")
        elif mode is InputMode.LINES:
            records = [line.removesuffix(b"\r") for line in split_records(data, b"\n")]
        else:
            records = [data.removesuffix(b"\n").removesuffix(b"\r")]

        logger.debug("Read %d item(s) in %s mode", len(records), mode.value)
        for record in records:
            self.process_item(record)

    def process_item(self, data: bytes) -> None:
        policy = self.config.utf8_policy
        text = decode_utf8(data, policy)

        try:
            result = self._codec(text)
        except UnescapeError as exc:
            logger.debug("Unescape failed at position %d", exc.position)
            raise ProcessingError(f"unescaping: {exc}") from exc

        if self.config.wrap_quotes:
            result = f'"{result}"'
        if not self.config.raw_output:
            result += "\n"

        self.output.write(encode_utf8(result, policy))
        self.count += 1


def split_records(data: bytes, delimiter: bytes) -> List[bytes]:
    """
    Splits on `delimiter`, dropping the empty record after a trailing
    delimiter. Empty records between two delimiters are kept.
    """
    records = data.split(delimiter)
    if records[-1] == b"":
        records.pop()
    return records


def unescape_keeping_bytes(text: str) -> str:
    """
    Unescapes text that may carry undecodable input bytes as surrogateescape
    code points.

    Those code points are kept so the original bytes can be written back out.
    Lone surrogates decoded from escape sequences have no UTF-8 form and
    become U+FFFD.
    """
    result = unescape(text)
    if not ESCAPED_BYTES_PATTERN.search(text):
        return replace_surrogates(result)

    # An escape sequence can never span an undecodable byte without failing
    # above, so each run of plain text unescapes on its own.
    segments = ESCAPED_BYTES_PATTERN.split(text)
    return "".join(
        segment if index % 2 else replace_surrogates(unescape(segment))
        for index, segment in enumerate(segments)
    )
