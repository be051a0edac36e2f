"""A simple grep supporting only the ^ . * $ operators."""

from __future__ import annotations

import sys
from typing import Sequence, TextIO

# Lines longer than this, newline included, stall the reader.
_BUF = 1023


def _matchhere(re: str, ri: int, text: str, ti: int) -> bool:
    if ri == len(re):
        return True
    if ri + 1 < len(re) and re[ri + 1] == "*":
        return _matchstar(re[ri], re, ri + 2, text, ti)
    if re[ri] == "$" and ri + 1 == len(re):
        return ti == len(text)
    if ti < len(text) and (re[ri] == "." or re[ri] == text[ti]):
        return _matchhere(re, ri + 1, text, ti + 1)
    return False


def _matchstar(c: str, re: str, ri: int, text: str, ti: int) -> bool:
    while True:
        if _matchhere(re, ri, text, ti):
            return True
        if ti >= len(text):
            return False
        ch = text[ti]
        ti += 1
        if not (ch == c or c == "."):
            return False


def match(pattern: str, text: str) -> bool:
    """Whether ``pattern`` matches anywhere in ``text``."""
    if pattern.startswith("^"):
        return _matchhere(pattern, 1, text, 0)
    return any(_matchhere(pattern, 0, text, ti) for ti in range(len(text) + 1))


def grep(pattern: str, stream: TextIO, out: TextIO) -> None:
    """Write each newline-terminated line of ``stream`` that matches ``pattern``.

    A final line without a newline is not examined.
    """
    pending = ""
    while chunk := stream.read(_BUF - len(pending)):
        pending += chunk
        *lines, pending = pending.split("\n")
        for line in lines:
            if match(pattern, line):
                out.write(line + "\n")


def main(argv: Sequence[str] | None = None) -> int:
    """Run grep on the given arguments: a pattern, then files or standard input."""
    args = list(sys.argv[1:] if argv is None else argv)
    if not args:
        sys.stderr.write("usage: grep pattern [file ...]\n")
        return 1
    pattern, files = args[0], args[1:]
    if not files:
        grep(pattern, sys.stdin, sys.stdout)
        return 0
    for path in files:
        try:
            f = open(path, newline="")
        except OSError:
            sys.stdout.write(f"grep: cannot open {path}\n")
            return 1
        with f:
            grep(pattern, f, sys.stdout)
    return 0