"""
cryptorand Entropy - Secure byte providers behind every primitive.

A provider fills a caller-owned buffer with cryptographically secure random
bytes or raises EntropyUnavailable. Providers never fall back to one
another, and never to a statistical generator.
"""

import ctypes
import os
import subprocess
import tempfile
import threading
from typing import Optional

from cryptorand.core.errors import EntropyUnavailable
from cryptorand.core.log import get_logger

logger = get_logger('entropy')


# =============================================================================
# Provider interface
# =============================================================================

class EntropySource:
    """Opaque provider of uniformly random bytes."""

    name = "unknown"

    def fill(self, buffer: bytearray) -> None:
        """Fill ``buffer`` entirely with secure random bytes."""
        raise NotImplementedError

    def read(self, n: int) -> bytearray:
        """Return a new buffer of ``n`` secure random bytes."""
        buffer = bytearray(n)
        if n:
            self.fill(buffer)
        return buffer

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.name}>"


class SystemEntropy(EntropySource):
    """Operating system CSPRNG (getrandom / CryptGenRandom via os.urandom)."""

    name = "CSPRNG"

    def fill(self, buffer: bytearray) -> None:
        try:
            buffer[:] = os.urandom(len(buffer))
        except (OSError, NotImplementedError) as e:
            raise EntropyUnavailable(f"System CSPRNG failed: {e}") from e


# =============================================================================
# RDRAND Hardware RNG Support
# =============================================================================

class RDRANDError(Exception):
    """Error when using RDRAND."""
    pass


class HardwareRNG:
    """
    Interface for Intel/AMD RDRAND/RDSEED hardware random number generators.

    The helper library is compiled with gcc on first use and cached for the
    life of the process.
    """

    _lib = None
    _lib_path = None
    _cpu_flags = None
    _lock = threading.RLock()

    _C_SOURCE = '''
#include <stdint.h>
#include <immintrin.h>

typedef unsigned long long ull_t;

int rdrand_bytes(uint8_t *buffer, size_t n) {
    ull_t value;
    size_t i = 0;
    int retries;

    while (i < n) {
        retries = 10;
        while (retries-- > 0) {
            if (_rdrand64_step(&value)) {
                size_t to_copy = (n - i < 8) ? (n - i) : 8;
                for (size_t j = 0; j < to_copy; j++) {
                    buffer[i++] = (value >> (j * 8)) & 0xFF;
                }
                break;
            }
        }
        if (retries < 0) return -1;
    }
    return 0;
}

int rdseed_bytes(uint8_t *buffer, size_t n) {
    ull_t value;
    size_t i = 0;
    int retries;

    while (i < n) {
        retries = 100;
        while (retries-- > 0) {
            if (_rdseed64_step(&value)) {
                size_t to_copy = (n - i < 8) ? (n - i) : 8;
                for (size_t j = 0; j < to_copy; j++) {
                    buffer[i++] = (value >> (j * 8)) & 0xFF;
                }
                break;
            }
        }
        if (retries < 0) return -1;
    }
    return 0;
}
'''

    @classmethod
    def _compile_lib(cls) -> Optional[str]:
        """Compile the RDRAND helper if needed."""
        if cls._lib_path and os.path.exists(cls._lib_path):
            return cls._lib_path

        try:
            result = subprocess.run(
                ["gcc", "--version"],
                capture_output=True,
                timeout=5
            )
            if result.returncode != 0:
                return None
        except (FileNotFoundError, subprocess.TimeoutExpired):
            return None

        c_fd, c_path = tempfile.mkstemp(suffix='.c')
        with os.fdopen(c_fd, 'w') as f:
            f.write(cls._C_SOURCE)

        so_fd, lib_path = tempfile.mkstemp(suffix='.so')
        os.close(so_fd)

        try:
            result = subprocess.run([
                "gcc", "-O2", "-shared", "-fPIC",
                "-mrdrnd", "-mrdseed",
                c_path, "-o", lib_path
            ], capture_output=True, timeout=30)

            if result.returncode != 0:
                logger.debug("RDRAND helper build failed: %s", result.stderr)
                os.remove(lib_path)
                return None

            # Owner read/execute only before loading
            os.chmod(lib_path, 0o500)

            cls._lib_path = lib_path
            return lib_path

        except subprocess.TimeoutExpired:
            if os.path.exists(lib_path):
                os.remove(lib_path)
            return None
        finally:
            if os.path.exists(c_path):
                os.remove(c_path)

    @classmethod
    def _get_lib(cls) -> Optional[ctypes.CDLL]:
        """Load the RDRAND helper, building it on first use."""
        with cls._lock:
            if cls._lib is not None:
                return cls._lib

            lib_path = cls._compile_lib()
            if lib_path is None:
                return None

            try:
                lib = ctypes.CDLL(lib_path)
            except OSError:
                return None

            lib.rdrand_bytes.argtypes = [ctypes.POINTER(ctypes.c_uint8), ctypes.c_size_t]
            lib.rdrand_bytes.restype = ctypes.c_int
            lib.rdseed_bytes.argtypes = [ctypes.POINTER(ctypes.c_uint8), ctypes.c_size_t]
            lib.rdseed_bytes.restype = ctypes.c_int

            cls._lib = lib
            return lib

    @classmethod
    def _read_cpu_flags(cls) -> frozenset:
        """Read the CPU feature flags once per process."""
        with cls._lock:
            if cls._cpu_flags is None:
                flags = set()
                try:
                    with open('/proc/cpuinfo', 'r') as f:
                        for line in f:
                            if line.startswith('flags'):
                                flags.update(line.split(':', 1)[1].split())
                                break
                except OSError as e:
                    logger.debug("Cannot read CPU flags: %s", e)
                cls._cpu_flags = frozenset(flags)
            return cls._cpu_flags

    @classmethod
    def is_available(cls, use_rdseed: bool = False) -> bool:
        """Check if the CPU advertises the instruction and the helper loads."""
        flag = 'rdseed' if use_rdseed else 'rdrand'
        if flag not in cls._read_cpu_flags():
            return False

        return cls._get_lib() is not None

    @classmethod
    def fill(cls, buffer: bytearray, use_rdseed: bool = False) -> None:
        """Fill buffer in place via RDRAND or RDSEED."""
        # Executing an unsupported instruction kills the process with SIGILL
        if not cls.is_available(use_rdseed):
            name = "RDSEED" if use_rdseed else "RDRAND"
            raise RDRANDError(f"{name} not available on this CPU")
        lib = cls._get_lib()

        n = len(buffer)
        view = (ctypes.c_uint8 * n).from_buffer(buffer)

        if use_rdseed:
            result = lib.rdseed_bytes(view, n)
        else:
            result = lib.rdrand_bytes(view, n)

        if result != 0:
            raise RDRANDError("RDRAND/RDSEED generation failed")

    @classmethod
    def cleanup(cls):
        """Unload the helper and delete the compiled library."""
        with cls._lock:
            if cls._lib_path and os.path.exists(cls._lib_path):
                try:
                    os.remove(cls._lib_path)
                except OSError as e:
                    logger.debug("Could not remove %s: %s", cls._lib_path, e)
            cls._lib = None
            cls._lib_path = None


class HardwareEntropy(EntropySource):
    """CPU hardware RNG (RDRAND, or RDSEED for direct conditioner output)."""

    def __init__(self, use_rdseed: bool = False):
        self.use_rdseed = use_rdseed
        self.name = "RDSEED" if use_rdseed else "RDRAND"

    def fill(self, buffer: bytearray) -> None:
        try:
            HardwareRNG.fill(buffer, use_rdseed=self.use_rdseed)
        except RDRANDError as e:
            raise EntropyUnavailable(f"{self.name} failed: {e}") from e


# =============================================================================
# Provider selection
# =============================================================================

SOURCES = ("system", "rdrand", "rdseed")

DEFAULT_SOURCE = SystemEntropy()


def get_source(name: str = "system") -> EntropySource:
    """
    Build the entropy provider registered under ``name``.

    Args:
        name: One of SOURCES

    Returns:
        EntropySource instance

    Raises:
        ValueError: If the name is unknown
    """
    if name == "system":
        return DEFAULT_SOURCE
    if name == "rdrand":
        return HardwareEntropy(use_rdseed=False)
    if name == "rdseed":
        return HardwareEntropy(use_rdseed=True)
    raise ValueError(f"Unknown entropy source: {name}")


def resolve(source: Optional[EntropySource]) -> EntropySource:
    """Return ``source`` or the process-wide system provider."""
    return DEFAULT_SOURCE if source is None else source
