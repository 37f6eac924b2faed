"""
cryptorand Sampler - Unbiased 64-bit integers from secure entropy.

Range reduction uses rejection sampling over the unsigned 64-bit draw:
with span = max - min + 1, draws in the top ``2**64 % span`` values are
discarded so every residue modulo span has exactly the same number of
preimages. A single draw is rejected with probability
``(2**64 % span) / 2**64``, which is always below 1/2, so the expected
number of draws is below 2 and k consecutive rejections happen with
probability below 2**-k.
"""

import operator
from fractions import Fraction
from typing import Optional

import numpy as np

from cryptorand.core.entropy import EntropySource, resolve
from cryptorand.core.errors import InvalidLength, InvalidRange
from cryptorand.core.security import secure_zero

INT64_MIN = -(1 << 63)
INT64_MAX = (1 << 63) - 1

# Width of one draw
DRAW_BYTES = 8
DRAW_SPACE = 1 << (8 * DRAW_BYTES)


def _draw(source: EntropySource, signed: bool) -> int:
    buffer = source.read(DRAW_BYTES)
    try:
        return int.from_bytes(buffer, 'big', signed=signed)
    finally:
        secure_zero(buffer)


def as_int(value) -> Optional[int]:
    """Coerce an integral value (int, numpy integer) to int; None otherwise."""
    if isinstance(value, (bool, np.bool_)):
        return None
    try:
        return operator.index(value)
    except TypeError:
        return None


def number(source: Optional[EntropySource] = None) -> int:
    """
    Return a uniformly distributed signed 64-bit integer.

    Eight bytes are read and interpreted as big-endian two's complement,
    so every value in [-2**63, 2**63 - 1] is equally likely.

    Raises:
        EntropyUnavailable: If the entropy source fails
    """
    return _draw(resolve(source), signed=True)


def numbers(count: int, source: Optional[EntropySource] = None) -> np.ndarray:
    """
    Return ``count`` independent number() values as an int64 array.

    All bytes are taken from a single provider read.

    Raises:
        InvalidLength: If count is negative
        EntropyUnavailable: If the entropy source fails
    """
    count_value = as_int(count)
    if count_value is None or count_value < 0:
        raise InvalidLength(f"Invalid count: {count!r}")
    count = count_value
    if count == 0:
        return np.array([], dtype=np.int64)

    buffer = resolve(source).read(count * DRAW_BYTES)
    try:
        return np.frombuffer(buffer, dtype='>i8').astype(np.int64)
    finally:
        secure_zero(buffer)


def rejection_probability(span: int) -> Fraction:
    """
    Exact probability that one draw is rejected for a range of ``span`` values.

    Args:
        span: Number of integers in the target range (1 to 2**64)

    Returns:
        Fraction in [0, 1/2)
    """
    if not isinstance(span, int) or not 1 <= span <= DRAW_SPACE:
        raise InvalidRange(f"Span out of bounds: {span!r}")
    return Fraction(DRAW_SPACE % span, DRAW_SPACE)


def number_in_range(
    min_value: int,
    max_value: int,
    source: Optional[EntropySource] = None
) -> int:
    """
    Return a uniformly distributed integer in [min_value, max_value].

    Args:
        min_value: Inclusive lower bound (signed 64-bit)
        max_value: Inclusive upper bound (signed 64-bit)
        source: Entropy provider (default: system CSPRNG)

    Returns:
        Integer in the closed interval

    Raises:
        InvalidRange: If min_value > max_value or a bound is not int64
        EntropyUnavailable: If the entropy source fails
    """
    low, high = as_int(min_value), as_int(max_value)
    if low is None or high is None or not (INT64_MIN <= low and high <= INT64_MAX):
        raise InvalidRange(f"Bounds must be signed 64-bit integers: {min_value!r}, {max_value!r}")
    min_value, max_value = low, high
    if min_value > max_value:
        raise InvalidRange(f"min ({min_value}) is greater than max ({max_value})")

    if min_value == max_value:
        return min_value

    source = resolve(source)
    span = max_value - min_value + 1
    limit = DRAW_SPACE - (DRAW_SPACE % span)

    while True:
        value = _draw(source, signed=False)
        if value < limit:
            return min_value + value % span
