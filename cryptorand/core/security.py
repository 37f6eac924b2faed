"""
cryptorand Security - Best-effort erasure of entropy buffers.
"""

from typing import Union


def secure_zero(data: Union[bytearray, memoryview]) -> None:
    """
    Overwrite a buffer that held raw entropy with zeros (best-effort).

    Python's memory management gives no guarantee that copies made
    elsewhere (int objects, slices) are cleared. Read-only views cannot
    be zeroed and are ignored.

    Args:
        data: bytearray or writable memoryview.
    """
    if isinstance(data, memoryview) and data.readonly:
        return
    data[:] = bytes(len(data))
