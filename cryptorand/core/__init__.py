"""
cryptorand Core - Entropy providers and the secure random primitives.
"""

from cryptorand.core.errors import (
    RandomnessError,
    InvalidRange,
    InvalidLength,
    InvalidCharset,
    EmptySequence,
    EntropyUnavailable,
)

from cryptorand.core.entropy import (
    EntropySource,
    SystemEntropy,
    HardwareEntropy,
    HardwareRNG,
    get_source,
)

from cryptorand.core.sampler import (
    number,
    number_in_range,
    numbers,
    rejection_probability,
)

from cryptorand.core.generator import (
    string,
    string_with_length,
    string_with_charset,
    string_entropy_bits,
    CHARSETS,
    CharsetName,
    DEFAULT_LENGTH,
    DEFAULT_CHARSET,
)

from cryptorand.core.sequence import pick, shuffle

__all__ = [
    "RandomnessError",
    "InvalidRange",
    "InvalidLength",
    "InvalidCharset",
    "EmptySequence",
    "EntropyUnavailable",
    "EntropySource",
    "SystemEntropy",
    "HardwareEntropy",
    "HardwareRNG",
    "get_source",
    "number",
    "number_in_range",
    "numbers",
    "rejection_probability",
    "string",
    "string_with_length",
    "string_with_charset",
    "string_entropy_bits",
    "CHARSETS",
    "CharsetName",
    "DEFAULT_LENGTH",
    "DEFAULT_CHARSET",
    "pick",
    "shuffle",
]
