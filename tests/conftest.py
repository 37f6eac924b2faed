from typing import Iterable, List

import pytest

from cryptorand.core.entropy import EntropySource
from cryptorand.core.errors import EntropyUnavailable


class ScriptedEntropy(EntropySource):
    """Serves pre-recorded bytes, then fails."""

    name = "scripted"

    def __init__(self, data: bytes = b""):
        self.data = bytearray(data)
        self.reads: List[int] = []

    def fill(self, buffer: bytearray) -> None:
        n = len(buffer)
        self.reads.append(n)
        if n > len(self.data):
            raise EntropyUnavailable("scripted entropy exhausted")
        buffer[:] = self.data[:n]
        del self.data[:n]


def draws(values: Iterable[int]) -> bytes:
    """Encode unsigned 64-bit draws the way the sampler reads them."""
    return b"".join(v.to_bytes(8, "big") for v in values)


@pytest.fixture
def scripted():
    return ScriptedEntropy


@pytest.fixture
def exhausted():
    """Provider that fails on every read."""
    return ScriptedEntropy(b"")


@pytest.fixture(name="draws")
def draws_fixture():
    return draws
