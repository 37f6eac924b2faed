# -*- coding: utf-8 -*-
"""
cryptorand Generator - Random strings over arbitrary character sets.
"""

import string as _string
from collections import Counter
from typing import List, Literal, Optional

import numpy as np

from cryptorand.core.entropy import EntropySource, resolve
from cryptorand.core.errors import InvalidCharset, InvalidLength
from cryptorand.core.sampler import as_int, number_in_range

# Character sets
CHARSETS = {
    "alnum": _string.ascii_letters + _string.digits,
    "alpha": _string.ascii_letters,
    "digits": _string.digits,
    "hex": _string.hexdigits[:16],
    "full": _string.ascii_letters + _string.digits + "!@#$%^&*()-_=+[]{}|;:,.<>?",
    "safe": _string.ascii_letters + _string.digits + "-_!@#$%",
}

CharsetName = Literal["alnum", "alpha", "digits", "hex", "full", "safe"]

DEFAULT_LENGTH = 32
DEFAULT_CHARSET = CHARSETS["alnum"]


def _check_length(length) -> int:
    value = as_int(length)
    if value is None:
        raise InvalidLength(f"Length must be an integer, got {type(length).__name__}")
    if value < 0:
        raise InvalidLength(f"Length must not be negative: {value}")
    return value


def _check_charset(charset) -> None:
    if not isinstance(charset, str):
        raise InvalidCharset(f"Charset must be a string, got {type(charset).__name__}")
    if not charset:
        raise InvalidCharset("Charset must not be empty")


def string(source: Optional[EntropySource] = None) -> str:
    """Return DEFAULT_LENGTH random characters from DEFAULT_CHARSET."""
    return string_with_charset(DEFAULT_LENGTH, DEFAULT_CHARSET, source=source)


def string_with_length(length: int, source: Optional[EntropySource] = None) -> str:
    """Return ``length`` random characters from DEFAULT_CHARSET."""
    return string_with_charset(length, DEFAULT_CHARSET, source=source)


def string_with_charset(
    length: int,
    charset: str,
    source: Optional[EntropySource] = None
) -> str:
    """
    Generate a random string with every character drawn independently.

    Each position of ``charset`` is equally likely, so a character listed
    twice is twice as likely as one listed once.

    Args:
        length: Number of characters (0 returns "" without reading entropy)
        charset: Non-empty string of candidate characters
        source: Entropy provider (default: system CSPRNG)

    Returns:
        String of exactly ``length`` characters, all taken from ``charset``

    Raises:
        InvalidLength: If length is negative
        InvalidCharset: If charset is empty, whatever the length
        EntropyUnavailable: If the entropy source fails
    """
    length = _check_length(length)
    _check_charset(charset)

    source = resolve(source)
    top = len(charset) - 1

    chars: List[str] = []
    for _ in range(length):
        chars.append(charset[number_in_range(0, top, source=source)])

    return ''.join(chars)


def string_entropy_bits(length: int, charset: str = DEFAULT_CHARSET) -> float:
    """
    Calculate the entropy of a generated string.

    Duplicated characters are weighted by how often they appear in the
    charset, so "aab" yields less than log2(3) bits per character.

    Args:
        length: String length
        charset: Character set used

    Returns:
        Entropy in bits
    """
    length = _check_length(length)
    _check_charset(charset)

    weights = np.array(list(Counter(charset).values()), dtype=float) / len(charset)
    per_char = float(np.sum(weights * np.log2(1 / weights)))
    return length * per_char
