"""
cryptorand - Cryptographically secure random numbers, strings and permutations.

Every value is drawn from a secure entropy provider (the OS CSPRNG by
default, or the CPU's RDRAND/RDSEED) with rejection sampling, so bounded
results carry no modulo bias.
"""

__version__ = "1.0.0"

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

from cryptorand.core.uniformity import run_all_checks

__all__ = [
    # Version
    "__version__",
    # Errors
    "RandomnessError",
    "InvalidRange",
    "InvalidLength",
    "InvalidCharset",
    "EmptySequence",
    "EntropyUnavailable",
    # Entropy
    "EntropySource",
    "SystemEntropy",
    "HardwareEntropy",
    "get_source",
    # Integers
    "number",
    "number_in_range",
    "numbers",
    "rejection_probability",
    # Strings
    "string",
    "string_with_length",
    "string_with_charset",
    "string_entropy_bits",
    "CHARSETS",
    "CharsetName",
    "DEFAULT_LENGTH",
    "DEFAULT_CHARSET",
    # Sequences
    "pick",
    "shuffle",
    # Checks
    "run_all_checks",
]
