"""C-style string and memory helpers over bytes."""

from __future__ import annotations

from typing import BinaryIO, Union

BytesLike = Union[bytes, bytearray, memoryview, str]


def _as_bytes(s: BytesLike) -> bytes:
    if isinstance(s, str):
        return s.encode("utf-8")
    return bytes(s)


def _cstr(s: BytesLike) -> bytes:
    """The part of s before its first NUL byte."""
    data = _as_bytes(s)
    end = data.find(b"\0")
    return data if end < 0 else data[:end]


def memcmp(v1: BytesLike, v2: BytesLike, n: int) -> int:
    """Compare the first n bytes; return the difference of the first unequal pair."""
    a, b = _as_bytes(v1), _as_bytes(v2)
    if n > len(a) or n > len(b):
        raise ValueError("memcmp length exceeds the data")
    for x, y in zip(a[:n], b[:n]):
        if x != y:
            return x - y
    return 0


def strcmp(p: BytesLike, q: BytesLike) -> int:
    """Compare two NUL-terminated strings."""
    for x, y in zip(_cstr(p) + b"\0", _cstr(q) + b"\0"):
        if x == 0 or x != y:
            return x - y
    return 0


def strncmp(p: BytesLike, q: BytesLike, n: int) -> int:
    """Compare at most n bytes of two NUL-terminated strings."""
    pairs = zip(_cstr(p) + b"\0", _cstr(q) + b"\0")
    for _, (x, y) in zip(range(n), pairs):
        if x == 0 or x != y:
            return x - y
    return 0


def strncpy(t: BytesLike, n: int) -> bytes:
    """Contents of an n-byte buffer after copying t into it, zero padded.

    The result is not NUL-terminated when t has n or more bytes.
    """
    if n <= 0:
        return b""
    return _cstr(t)[:n].ljust(n, b"\0")


def safestrcpy(t: BytesLike, n: int) -> bytes:
    """The string stored by copying t into an n-byte buffer with a NUL always written.

    At most n - 1 bytes survive; the terminator is not included in the result.
    """
    if n <= 0:
        return b""
    return _cstr(t)[: n - 1]


def atoi(s: BytesLike) -> int:
    """Value of the leading decimal digits of s; no sign or whitespace handling."""
    n = 0
    for byte in _as_bytes(s):
        if not 0x30 <= byte <= 0x39:
            break
        n = n * 10 + byte - 0x30
    return n


def gets(stream: BinaryIO, max: int) -> bytes:
    """Read one line of at most max - 1 bytes, keeping its '\\n' or '\\r'."""
    line = bytearray()
    while len(line) + 1 < max:
        c = stream.read(1)
        if not c:
            break
        line += c
        if c in (b"\n", b"\r"):
            break
    return bytes(line)