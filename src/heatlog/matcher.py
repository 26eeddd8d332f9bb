"""Pattern compilation and per-line value extraction"""

import logging
import re

from heatlog.classified import ClassifiedLine, Matched, Unmatched
from heatlog.errors import ConfigurationError


logger = logging.getLogger(__name__)

U64_MAX = 2**64 - 1

# Only ASCII digits: int() would also accept signs, whitespace, underscores and non-ASCII digits
_DIGITS = re.compile(r'[0-9]+')


def compile_pattern(expr: str) -> re.Pattern:
    """Compile the user supplied regex.

    Args:
        expr: Regular expression; its first capturing group locates the value

    Returns:
        Compiled pattern

    Raises:
        ConfigurationError: If the expression does not compile
    """
    try:
        pattern = re.compile(expr)
    except re.error as e:
        raise ConfigurationError(f'Invalid regex pattern {expr!r}: {e}') from e

    if pattern.groups == 0:
        logger.warning(f'Pattern {expr!r} has no capturing group, no line will match')
    return pattern


def parse_u64(text: str) -> int | None:
    """Parse text as a base-10 unsigned 64-bit integer, or return None."""
    if not _DIGITS.fullmatch(text):
        return None
    value = int(text)
    if value > U64_MAX:
        return None
    return value


def classify(pattern: re.Pattern, line: str) -> ClassifiedLine:
    """Classify one line against the pattern.

    A captured group that does not parse as an unsigned integer is treated
    exactly like no match at all.
    """
    if pattern.groups == 0:
        return Unmatched(line)

    match = pattern.search(line)
    if match is None:
        return Unmatched(line)

    start, end = match.span(1)
    if start == -1:
        return Unmatched(line)

    value = parse_u64(line[start:end])
    if value is None:
        return Unmatched(line)
    return Matched(line, (start, end), value)
