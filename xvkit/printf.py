"""A small formatter that understands %d, %u, %x (with l/ll), %p, %s and %%."""

from __future__ import annotations

import re
import sys
from typing import Any, Iterator, TextIO

_DIGITS = "0123456789ABCDEF"
_DIRECTIVE = re.compile(r"%(ll[dux]|l[dux]|.?)", re.DOTALL)


def _format_int(value: Any, base: int, signed: bool) -> str:
    x = int(value) & 0xFFFF_FFFF
    negative = signed and bool(x & 0x8000_0000)
    if negative:
        x = (1 << 32) - x
    out = []
    while True:
        out.append(_DIGITS[x % base])
        x //= base
        if x == 0:
            break
    if negative:
        out.append("-")
    return "".join(reversed(out))


def _format_ptr(value: Any) -> str:
    x = int(value) & 0xFFFF_FFFF_FFFF_FFFF
    return "0x" + "".join(_DIGITS[(x >> shift) & 0xF] for shift in range(60, -4, -4))


def _next(args: Iterator[Any]) -> Any:
    try:
        return next(args)
    except StopIteration:
        raise TypeError("not enough arguments for format string") from None


def render(fmt: str, *args: Any) -> str:
    """Format ``args`` according to ``fmt`` and return the text.

    Integers are printed as 32-bit values; hexadecimal digits are upper case.
    An unknown directive is copied out as written, and a lone trailing ``%``
    produces nothing.
    """
    remaining = iter(args)

    def replace(m: re.Match[str]) -> str:
        spec = m.group(1)
        if spec == "":
            return ""
        conv = spec[-1]
        if spec in ("d", "ld", "lld"):
            return _format_int(_next(remaining), 10, True)
        if spec in ("u", "lu", "llu"):
            return _format_int(_next(remaining), 10, False)
        if spec in ("x", "lx", "llx"):
            return _format_int(_next(remaining), 16, False)
        if conv == "p":
            return _format_ptr(_next(remaining))
        if conv == "s":
            s = _next(remaining)
            if s is None:
                return "(null)"
            return str(s).split("\0", 1)[0]
        if conv == "%":
            return "%"
        return "%" + spec

    return _DIRECTIVE.sub(replace, fmt)


def fprintf(stream: TextIO, fmt: str, *args: Any) -> None:
    """Write formatted text to ``stream``."""
    stream.write(render(fmt, *args))


def printf(fmt: str, *args: Any) -> None:
    """Write formatted text to standard output."""
    fprintf(sys.stdout, fmt, *args)