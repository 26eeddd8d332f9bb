"""Bounded-memory percentile digest.

The digest is a log-linear bucket histogram in the HdrHistogram layout:

- values below ``sub_bucket_count`` get one exact bucket each;
- every larger power-of-two range [2^k, 2^(k+1)) is split into
  ``sub_bucket_count / 2`` equal-width buckets.

With 2 significant decimal digits ``sub_bucket_count`` is 256, so each bucket
is at most 1/128 of its lowest value wide and the whole unsigned 64-bit range
needs 7424 buckets. Counts are kept in a sparse dict, so memory depends on the
spread of the values, never on how many were absorbed.

Absorbing is commutative and merging is plain bucket-wise addition, so digests
built by independent workers over disjoint chunks merge into exactly the
digest a single pass would have produced.
"""

import logging
import math
from collections.abc import Iterable, Iterator

from heatlog.errors import DigestFrozenError, EmptyDigestError


logger = logging.getLogger(__name__)

U64_MAX = 2**64 - 1
DEFAULT_SIGNIFICANT_DIGITS = 2


class PercentileDigest:
    """Mergeable approximate-quantile histogram over unsigned 64-bit integers.

    Lifecycle: created empty, fed with ``absorb``/``merge``, then ``freeze``.
    After freezing it only answers queries.
    """

    __slots__ = ('_digits', '_sub_bucket_bits', '_sub_bucket_count', '_half_count', '_counts', '_total',
                 '_min', '_max', '_frozen')

    def __init__(self, significant_digits: int = DEFAULT_SIGNIFICANT_DIGITS):
        if not 1 <= significant_digits <= 5:
            raise ValueError(f'significant_digits must be between 1 and 5, got {significant_digits}')
        self._digits = significant_digits
        # Smallest power of two that resolves 10^digits distinct values in the top half of each range
        self._sub_bucket_bits = math.ceil(math.log2(2 * 10**significant_digits))
        self._sub_bucket_count = 1 << self._sub_bucket_bits
        self._half_count = self._sub_bucket_count >> 1
        self._counts: dict[int, int] = {}
        self._total = 0
        self._min: int | None = None
        self._max: int | None = None
        self._frozen = False

    @classmethod
    def from_values(cls, values: Iterable[int], significant_digits: int = DEFAULT_SIGNIFICANT_DIGITS):
        """Build a digest that absorbed every value in ``values``."""
        digest = cls(significant_digits)
        for value in values:
            digest.absorb(value)
        return digest

    # ------------------------------------------------------------------
    # Bucket layout
    # ------------------------------------------------------------------

    def _index_of(self, value: int) -> int:
        if value < self._sub_bucket_count:
            return value
        shift = value.bit_length() - self._sub_bucket_bits
        sub_bucket = value >> shift
        return self._sub_bucket_count + (shift - 1) * self._half_count + (sub_bucket - self._half_count)

    def _lowest_of_index(self, index: int) -> int:
        if index < self._sub_bucket_count:
            return index
        shift, offset = divmod(index - self._sub_bucket_count, self._half_count)
        return (offset + self._half_count) << (shift + 1)

    def _width_of_index(self, index: int) -> int:
        if index < self._sub_bucket_count:
            return 1
        return 1 << ((index - self._sub_bucket_count) // self._half_count + 1)

    def lowest_equivalent(self, value: int) -> int:
        """Smallest value sharing a bucket with ``value``."""
        return self._lowest_of_index(self._index_of(value))

    def highest_equivalent(self, value: int) -> int:
        """Largest value sharing a bucket with ``value``."""
        index = self._index_of(value)
        return self._lowest_of_index(index) + self._width_of_index(index) - 1

    @property
    def max_bucket_count(self) -> int:
        """Upper bound on the number of buckets for the full unsigned 64-bit range."""
        return self._sub_bucket_count + (64 - self._sub_bucket_bits) * self._half_count

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------

    def _check_mutable(self) -> None:
        if self._frozen:
            raise DigestFrozenError('Digest is frozen and cannot accept more observations')

    def absorb(self, value: int) -> None:
        """Record one observation."""
        self._check_mutable()
        if not 0 <= value <= U64_MAX:
            raise ValueError(f'Value {value} is outside the unsigned 64-bit range')
        index = self._index_of(value)
        self._counts[index] = self._counts.get(index, 0) + 1
        self._total += 1
        if self._min is None or value < self._min:
            self._min = value
        if self._max is None or value > self._max:
            self._max = value

    def merge(self, other: 'PercentileDigest') -> 'PercentileDigest':
        """Add every observation of ``other`` into this digest and return self."""
        self._check_mutable()
        if other._digits != self._digits:
            raise ValueError(
                f'Cannot merge digests with different precision ({self._digits} vs {other._digits} digits)'
            )
        for index, count in other._counts.items():
            self._counts[index] = self._counts.get(index, 0) + count
        self._total += other._total
        if other._min is not None and (self._min is None or other._min < self._min):
            self._min = other._min
        if other._max is not None and (self._max is None or other._max > self._max):
            self._max = other._max
        return self

    def freeze(self) -> 'PercentileDigest':
        """Make the digest read only and return it."""
        self._frozen = True
        return self

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @property
    def frozen(self) -> bool:
        return self._frozen

    @property
    def significant_digits(self) -> int:
        return self._digits

    @property
    def total(self) -> int:
        return self._total

    @property
    def min(self) -> int | None:
        return self._min

    @property
    def max(self) -> int | None:
        return self._max

    @property
    def bucket_count(self) -> int:
        """Number of non-empty buckets currently held."""
        return len(self._counts)

    def buckets(self) -> Iterator[tuple[int, int, int]]:
        """Yield (lowest_value, highest_value, count) for each non-empty bucket, ascending."""
        for index in sorted(self._counts):
            lowest = self._lowest_of_index(index)
            yield lowest, lowest + self._width_of_index(index) - 1, self._counts[index]

    def quantile(self, q: float) -> int:
        """Value at quantile ``q`` (0.0 to 1.0).

        Returns the lowest value of the bucket that holds the observation of
        rank ``ceil(q * total)``. That value is never above the true quantile
        and within 1% below it, and every observation sharing its bucket
        compares greater or equal to it.

        Raises:
            ValueError: If q is outside [0, 1]
            EmptyDigestError: If nothing was absorbed
        """
        if not 0.0 <= q <= 1.0:
            raise ValueError(f'Quantile must be within [0, 1], got {q}')
        if self._total == 0:
            raise EmptyDigestError('Cannot compute a quantile of an empty digest')

        rank = max(1, math.ceil(q * self._total))
        seen = 0
        for index in sorted(self._counts):
            seen += self._counts[index]
            if seen >= rank:
                return self._lowest_of_index(index)
        # Unreachable: rank <= total
        raise AssertionError('quantile rank exceeds total count')

    def __len__(self) -> int:
        return self._total

    def __eq__(self, other):
        if not isinstance(other, PercentileDigest):
            return NotImplemented
        return self._digits == other._digits and self._total == other._total and self._counts == other._counts

    __hash__ = None

    def __repr__(self) -> str:
        return (
            f'PercentileDigest(significant_digits={self._digits}, total={self._total}, '
            f'buckets={len(self._counts)}, frozen={self._frozen})'
        )
