"""
cryptorand Sequence - Secure element selection and in-place permutation.
"""

from typing import MutableSequence, Optional, Sequence, TypeVar

from cryptorand.core.entropy import EntropySource, resolve
from cryptorand.core.errors import EmptySequence
from cryptorand.core.sampler import number_in_range

T = TypeVar("T")


def pick(sequence: Sequence[T], source: Optional[EntropySource] = None) -> T:
    """
    Return one element of a non-empty sequence, chosen uniformly.

    The sequence is not modified.

    Raises:
        EmptySequence: If the sequence has no elements
        EntropyUnavailable: If the entropy source fails
    """
    if len(sequence) == 0:
        raise EmptySequence("Cannot pick from an empty sequence")
    return sequence[number_in_range(0, len(sequence) - 1, source=source)]


def shuffle(sequence: MutableSequence[T], source: Optional[EntropySource] = None) -> None:
    """
    Permute a sequence in place (Fisher-Yates).

    Every one of the n! orderings is equally likely. Sequences of length
    0 or 1 are left untouched without reading entropy.

    If the entropy source fails part way, EntropyUnavailable propagates
    and the sequence holds the same elements in an unspecified order.

    Args:
        sequence: Mutable sequence, modified in place
        source: Entropy provider (default: system CSPRNG)
    """
    source = resolve(source)

    # i runs from the last index down to 1; j may equal i
    for i in range(len(sequence) - 1, 0, -1):
        j = number_in_range(0, i, source=source)
        sequence[i], sequence[j] = sequence[j], sequence[i]
