"""Percentile rank buckets and their display styles"""

from dataclasses import dataclass
from enum import Enum

from heatlog.digest import PercentileDigest
from heatlog.errors import EmptyDigestError


class RankBucket(Enum):
    """Qualitative rank of a value, most extreme first"""

    TOP1 = 'top1'
    TOP10 = 'top10'
    TOP50 = 'top50'
    OTHER = 'other'


@dataclass(frozen=True)
class RankThresholds:
    """Cut points taken once from a frozen digest"""

    p50: int
    p90: int
    p99: int

    def __post_init__(self):
        if not self.p50 <= self.p90 <= self.p99:
            raise ValueError(f'Thresholds must be non-decreasing, got p50={self.p50} p90={self.p90} p99={self.p99}')

    @classmethod
    def from_digest(cls, digest: PercentileDigest) -> 'RankThresholds':
        return cls(p50=digest.quantile(0.50), p90=digest.quantile(0.90), p99=digest.quantile(0.99))


class RankBucketer:
    """Maps values to rank buckets.

    Thresholds are fixed at construction, so every line of a run is judged
    against the same distribution.
    """

    def __init__(self, thresholds: RankThresholds):
        self.thresholds = thresholds

    @classmethod
    def from_digest(cls, digest: PercentileDigest) -> 'RankBucketer':
        """Build a bucketer from a digest that has absorbed the whole input.

        Raises:
            ValueError: If the digest has not been frozen yet
            EmptyDigestError: If the digest holds no observations
        """
        if not digest.frozen:
            raise ValueError('Digest must be frozen before rank thresholds are taken')
        if digest.total == 0:
            raise EmptyDigestError('Cannot rank values against an empty digest')
        return cls(RankThresholds.from_digest(digest))

    def bucket_of(self, value: int) -> RankBucket:
        # Ties go to the more extreme bucket
        if value >= self.thresholds.p99:
            return RankBucket.TOP1
        if value >= self.thresholds.p90:
            return RankBucket.TOP10
        if value >= self.thresholds.p50:
            return RankBucket.TOP50
        return RankBucket.OTHER


@dataclass(frozen=True)
class Style:
    """Display style for an annotated span, independent of any terminal library.

    Attributes:
        fg: Foreground color name as understood by click.style, or None
        bold: Whether the span is emphasized
    """

    fg: str | None = None
    bold: bool = False

    def with_bold(self, bold: bool) -> 'Style':
        return Style(fg=self.fg, bold=self.bold or bold)

    @property
    def is_plain(self) -> bool:
        return self.fg is None and not self.bold


PLAIN_STYLE = Style()
HIGHLIGHT_STYLE = Style(fg='yellow')

_BUCKET_STYLES = {
    RankBucket.TOP1: Style(fg='red'),
    RankBucket.TOP10: Style(fg='yellow'),
    RankBucket.TOP50: Style(fg='green'),
    RankBucket.OTHER: PLAIN_STYLE,
}


def style_for_bucket(bucket: RankBucket) -> Style:
    """Style used to annotate a value that fell into ``bucket``."""
    return _BUCKET_STYLES[bucket]
