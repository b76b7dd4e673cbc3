"""The whitespace-stripping MurmurHash2 variant used for CurseForge fingerprints."""

from __future__ import annotations

import struct

_M = 0x5BD1E995
_R = 24
_MASK = 0xFFFFFFFF
_WHITESPACE = b"\t\n\r "


def murmur2(data: bytes, seed: int) -> int:
    """32-bit MurmurHash2 of ``data`` with the given seed."""
    length = len(data)
    h = (seed ^ length) & _MASK
    tail_start = length - length % 4
    for (k,) in struct.iter_unpack("<I", data[:tail_start]):
        k = (k * _M) & _MASK
        k ^= k >> _R
        k = (k * _M) & _MASK
        h = (h * _M) & _MASK
        h ^= k
    tail = data[tail_start:]
    if tail:
        for shift, byte in zip((0, 8, 16), tail):
            h ^= byte << shift
        h = (h * _M) & _MASK
    h ^= h >> 13
    h = (h * _M) & _MASK
    h ^= h >> 15
    return h


def normalize(data: bytes) -> bytes:
    """Remove tab, newline, carriage return and space bytes."""
    return bytes(data).translate(None, _WHITESPACE)


def fingerprint(data: bytes) -> int:
    """CurseForge fingerprint of a file's contents."""
    return murmur2(normalize(data), 1)


class Murmur2CF:
    """Hash object computing the CurseForge fingerprint.

    The hash is seeded with the input length, so data is buffered until a
    digest is requested.
    """

    name = "murmur2"
    digest_size = 4
    block_size = 4

    def __init__(self, data: bytes = b"") -> None:
        self._buffer = bytearray()
        if data:
            self.update(data)

    def update(self, data: bytes) -> None:
        self._buffer += normalize(data)

    def sum32(self) -> int:
        return murmur2(bytes(self._buffer), 1)

    def digest(self) -> bytes:
        return self.sum32().to_bytes(4, "big")

    def hexdigest(self) -> str:
        return self.digest().hex()

    def reset(self) -> None:
        self._buffer.clear()