"""
cryptorand Errors - Failure taxonomy shared by every primitive.
"""


class RandomnessError(Exception):
    """Base error for all cryptorand failures."""
    pass


class InvalidRange(RandomnessError, ValueError):
    """Range bounds are reversed or outside the signed 64-bit range."""
    pass


class InvalidLength(RandomnessError, ValueError):
    """Requested length or count is negative or not an integer."""
    pass


class InvalidCharset(RandomnessError, ValueError):
    """Character set is empty."""
    pass


class EmptySequence(RandomnessError, IndexError):
    """Selection from an empty sequence."""
    pass


class EntropyUnavailable(RandomnessError, OSError):
    """The secure entropy source could not supply bytes."""
    pass
