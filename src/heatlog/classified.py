"""Result of matching a pattern against one line.

A classified line is one of two variants:

- Unmatched: the pattern did not yield a usable number; the line is kept verbatim.
- Matched: the first capturing group matched a base-10 unsigned integer.

Both variants are frozen dataclasses with structural equality and no ordering.
Ordering of matched lines lives in ``heatlog.filter_sort.compare_matched``.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class Unmatched:
    """A line for which no value was extracted."""

    text: str


@dataclass(frozen=True)
class Matched:
    """A line whose first capturing group parsed as an unsigned integer.

    Attributes:
        text: The original line
        span: Half-open (start, end) code-point offsets of the parsed substring
            within ``text``; use ``byte_span`` to slice the UTF-8 encoded line
        value: The integer parsed from ``text[start:end]``
    """

    text: str
    span: tuple[int, int]
    value: int

    def __post_init__(self):
        start, end = self.span
        if not 0 <= start <= end <= len(self.text):
            raise ValueError(f'Span {self.span} is out of bounds for a line of length {len(self.text)}')

    @property
    def start(self) -> int:
        return self.span[0]

    @property
    def end(self) -> int:
        return self.span[1]

    @property
    def matched_text(self) -> str:
        return self.text[self.start : self.end]

    @property
    def byte_span(self) -> tuple[int, int]:
        """The span as UTF-8 byte offsets into the encoded line."""
        start = len(self.text[: self.start].encode('utf-8'))
        return (start, start + len(self.matched_text.encode('utf-8')))


ClassifiedLine = Matched | Unmatched
