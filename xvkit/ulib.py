"""Helpers from the user library: number parsing, comparison, line input, stat."""

from __future__ import annotations

import os
import stat as _stat
from typing import IO, AnyStr

from .layout import FileType, Stat


def atoi(s: str) -> int:
    """Value of the leading decimal digits of ``s``; 0 if there are none."""
    n = 0
    for ch in s:
        if not "0" <= ch <= "9":
            break
        n = n * 10 + ord(ch) - ord("0")
    return n


def _as_bytes(s: str | bytes) -> bytes:
    data = s.encode("utf-8") if isinstance(s, str) else bytes(s)
    return data.split(b"\0", 1)[0]


def strcmp(p: str | bytes, q: str | bytes) -> int:
    """Compare two strings bytewise; the sign of the result orders them."""
    a, b = _as_bytes(p), _as_bytes(q)
    for x, y in zip(a, b):
        if x != y:
            return x - y
    if len(a) == len(b):
        return 0
    return a[len(b)] if len(a) > len(b) else -b[len(a)]


def gets(stream: IO[AnyStr], max_len: int) -> AnyStr:
    """Read one line of at most ``max_len - 1`` characters from ``stream``.

    Reading stops after a newline or carriage return, which is kept, or at end
    of input. An empty result means end of input.
    """
    chunks: list = []
    while len(chunks) + 1 < max_len:
        c = stream.read(1)
        if not c:
            break
        chunks.append(c)
        if c in ("\n", "\r", b"\n", b"\r"):
            break
    if chunks and isinstance(chunks[0], bytes):
        return b"".join(chunks)  # type: ignore[return-value]
    return "".join(chunks)  # type: ignore[return-value]


def stat(path: str | os.PathLike[str]) -> Stat:
    """Status of the file at ``path``; raises ``OSError`` if it cannot be opened."""
    st = os.stat(path)
    if _stat.S_ISDIR(st.st_mode):
        kind = FileType.DIR
    elif _stat.S_ISREG(st.st_mode):
        kind = FileType.FILE
    else:
        kind = FileType.DEVICE
    return Stat(dev=st.st_dev, ino=st.st_ino, type=kind, nlink=st.st_nlink, size=st.st_size)