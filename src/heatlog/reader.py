"""Reading input lines from files or standard input"""

import logging
import sys
from collections.abc import Sequence
from typing import BinaryIO

from heatlog.errors import InputDecodeError


logger = logging.getLogger(__name__)

STDIN_NAME = '<stdin>'


def read_lines(stream: BinaryIO, source: str = STDIN_NAME) -> list[str]:
    """Read a whole binary stream into decoded lines.

    Lines are split on '\\n' with one trailing '\\r' removed, and a final
    newline does not produce an empty last line. Every line must be valid
    UTF-8; nothing is replaced or dropped.

    Args:
        stream: Binary stream to read until EOF
        source: Name used in error messages

    Returns:
        Lines without terminators, in input order

    Raises:
        InputDecodeError: On the first line that is not valid UTF-8
    """
    data = stream.read()
    raw_lines = data.split(b'\n')
    if raw_lines and raw_lines[-1] == b'':
        raw_lines.pop()

    lines = []
    for line_number, raw in enumerate(raw_lines, 1):
        if raw.endswith(b'\r'):
            raw = raw[:-1]
        try:
            lines.append(raw.decode('utf-8'))
        except UnicodeDecodeError as e:
            raise InputDecodeError(source, line_number, e.reason) from e

    logger.debug(f'Read {len(lines)} lines ({len(data)} bytes) from {source}')
    return lines


def read_sources(paths: Sequence[str]) -> list[str]:
    """Read and concatenate lines from each path in order.

    An empty ``paths`` or a '-' entry reads standard input.
    """
    if not paths:
        paths = ['-']

    lines: list[str] = []
    for path in paths:
        if path == '-':
            lines.extend(read_lines(sys.stdin.buffer, STDIN_NAME))
        else:
            with open(path, 'rb') as f:
                lines.extend(read_lines(f, path))
    return lines
