"""Filtering and value ordering of classified lines"""

from collections.abc import Sequence
from enum import Enum
from functools import cmp_to_key

from heatlog.classified import ClassifiedLine, Matched


class SortOrder(str, Enum):
    """Output order of the annotated lines"""

    ORIGINAL = 'original'
    ASCENDING = 'asc'
    DESCENDING = 'desc'


def compare_matched(a: Matched, b: Matched) -> int:
    """Three-way comparison of two matched lines by value.

    Only defined for matched lines: callers filter out unmatched ones first.
    """
    if not isinstance(a, Matched) or not isinstance(b, Matched):
        raise TypeError('Only matched lines can be compared by value')
    return (a.value > b.value) - (a.value < b.value)


def apply(
    lines: Sequence[ClassifiedLine],
    matching_only: bool = False,
    order: SortOrder = SortOrder.ORIGINAL,
) -> list[ClassifiedLine]:
    """Select and order classified lines for output.

    Args:
        lines: Classified lines in input order
        matching_only: Drop unmatched lines
        order: ORIGINAL keeps input order; ASCENDING/DESCENDING sort by value
            and always drop unmatched lines, since those carry no value

    Returns:
        A new list; the input sequence is left untouched
    """
    if order is SortOrder.ORIGINAL:
        if not matching_only:
            return list(lines)
        return [line for line in lines if isinstance(line, Matched)]

    matched = [line for line in lines if isinstance(line, Matched)]
    # sorted() is stable: equal values keep their input order
    result = sorted(matched, key=cmp_to_key(compare_matched))
    if order is SortOrder.DESCENDING:
        # Reversal mirrors the ascending tie order as well
        result.reverse()
    return result
