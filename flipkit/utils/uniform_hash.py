"""Uniformly distributed string hashing.

Maps arbitrary strings onto ``[0.0, 1.0)`` for percentage bucketing. The
polynomial string hash alone clusters sequential inputs (``user1``,
``user2``, ...), so the result goes through the MurmurHash3 32-bit
finalizer before being normalized.
"""

from __future__ import annotations

_MASK_32 = 0xFFFFFFFF
_INT_MAX = 0x7FFFFFFF


def string_hash(value: str) -> int:
    """Signed 32-bit ``31 * h + c`` hash over UTF-16 code units."""
    h = 0
    data = value.encode("utf-16-be", "surrogatepass")
    for i in range(0, len(data), 2):
        unit = (data[i] << 8) | data[i + 1]
        h = (31 * h + unit) & _MASK_32
    return _to_signed(h)


def mix_bits(h: int) -> int:
    """MurmurHash3 fmix32; takes and returns a signed 32-bit integer."""
    h &= _MASK_32
    h ^= h >> 16
    h = (h * 0x85EBCA6B) & _MASK_32
    h ^= h >> 13
    h = (h * 0xC2B2AE35) & _MASK_32
    h ^= h >> 16
    return _to_signed(h)


def uniform_hash(value: str) -> float:
    """Return a deterministic value in ``[0.0, 1.0)`` for ``value``."""
    mixed = abs(mix_bits(string_hash(value)))
    # abs() of the two extreme values reaches INT_MAX or beyond
    return (mixed % _INT_MAX) / _INT_MAX


def _to_signed(h: int) -> int:
    return h - (1 << 32) if h & 0x80000000 else h


__all__ = ["string_hash", "mix_bits", "uniform_hash"]
