"""Small file utilities: cat, echo, wc, ls, ln, mkdir, rm and kill."""

from __future__ import annotations

import os
import signal
import sys
from typing import IO, Any, BinaryIO, Sequence, TextIO

from .layout import FileType
from .printf import render
from .ulib import atoi, stat

DIRSIZ = 14
_CHUNK = 512
_PATH_BUF = 512
_WORD_BREAKS = b" \r\t\n\v\0"


class _CopyError(OSError):
    """A copy failed while reading or writing; the message says which."""


def _args(argv: Sequence[str] | None) -> list[str]:
    return list(sys.argv[1:] if argv is None else argv)


def _binary(stream: IO[Any]) -> BinaryIO:
    """The byte-level stream beneath a text stream, or the stream itself."""
    return getattr(stream, "buffer", stream)


def _as_bytes(chunk: str | bytes) -> bytes:
    return chunk.encode("utf-8") if isinstance(chunk, str) else bytes(chunk)


def cat(stream: BinaryIO, out: BinaryIO) -> None:
    """Copy ``stream`` to ``out`` in 512-byte chunks.

    Raises ``OSError`` whose message names a read error or a write error.
    """
    while True:
        try:
            chunk = stream.read(_CHUNK)
        except OSError as exc:
            raise _CopyError("cat: read error") from exc
        if not chunk:
            return
        try:
            written = out.write(chunk)
        except OSError as exc:
            raise _CopyError("cat: write error") from exc
        if written is not None and written != len(chunk):
            raise _CopyError("cat: write error")


def cat_main(argv: Sequence[str] | None = None) -> int:
    """Concatenate the named files, or standard input, onto standard output."""
    args = _args(argv)
    sys.stdout.flush()
    out = _binary(sys.stdout)
    try:
        if not args:
            cat(_binary(sys.stdin), out)
            return 0
        for path in args:
            try:
                f = open(path, "rb")
            except OSError:
                sys.stderr.write(f"cat: cannot open {path}\n")
                return 1
            with f:
                cat(f, out)
        return 0
    except _CopyError as exc:
        sys.stderr.write(f"{exc}\n")
        return 1
    finally:
        out.flush()


def echo_main(argv: Sequence[str] | None = None) -> int:
    """Write the arguments separated by spaces and followed by a newline."""
    args = _args(argv)
    if args:
        sys.stdout.write(" ".join(args) + "\n")
    return 0


def wc(stream: IO[Any]) -> tuple[int, int, int]:
    """Count lines, words and bytes in ``stream``.

    Words are separated by space, tab, carriage return, newline, vertical
    tab or NUL.
    """
    lines = words = chars = 0
    inword = False
    while chunk := stream.read(_CHUNK):
        data = _as_bytes(chunk)
        chars += len(data)
        lines += data.count(b"\n")
        for byte in data:
            if byte in _WORD_BREAKS:
                inword = False
            elif not inword:
                words += 1
                inword = True
    return lines, words, chars


def _wc_report(stream: IO[Any], name: str) -> bool:
    try:
        lines, words, chars = wc(stream)
    except OSError:
        sys.stdout.write("wc: read error\n")
        return False
    sys.stdout.write(render("%d %d %d %s\n", lines, words, chars, name))
    return True


def wc_main(argv: Sequence[str] | None = None) -> int:
    """Print line, word and byte counts for each named file, or standard input."""
    args = _args(argv)
    if not args:
        return 0 if _wc_report(_binary(sys.stdin), "") else 1
    for path in args:
        try:
            f = open(path, "rb")
        except OSError:
            sys.stdout.write(f"wc: cannot open {path}\n")
            return 1
        with f:
            if not _wc_report(f, path):
                return 1
    return 0


def fmtname(path: str) -> str:
    """Last component of ``path``, blank-padded to DIRSIZ characters."""
    name = path.rsplit("/", 1)[-1]
    if len(name) >= DIRSIZ:
        return name
    return name.ljust(DIRSIZ)


def _ls_line(path: str, type_: FileType, ino: int, size: int) -> str:
    return render("%s %d %d %d\n", fmtname(path), int(type_), ino, size)


def ls(path: str, out: TextIO) -> bool:
    """List ``path`` onto ``out``: the file itself, or every entry of a directory.

    Returns ``False`` if ``path`` cannot be opened.
    """
    try:
        st = stat(path)
    except OSError:
        sys.stderr.write(f"ls: cannot open {path}\n")
        return False

    if st.type != FileType.DIR:
        out.write(_ls_line(path, st.type, st.ino, st.size))
        return True

    if len(path) + 1 + DIRSIZ + 1 > _PATH_BUF:
        out.write("ls: path too long\n")
        return True
    try:
        names = sorted(os.listdir(path))
    except OSError:
        sys.stderr.write(f"ls: cannot open {path}\n")
        return False
    for name in [".", ".."] + names:
        entry = f"{path}/{name}"
        try:
            est = stat(entry)
        except OSError:
            out.write(f"ls: cannot stat {entry}\n")
            continue
        out.write(_ls_line(entry, est.type, est.ino, est.size))
    return True


def ls_main(argv: Sequence[str] | None = None) -> int:
    """List each named path, or the current directory."""
    args = _args(argv)
    for path in args or ["."]:
        ls(path, sys.stdout)
    return 0


def ln_main(argv: Sequence[str] | None = None) -> int:
    """Make a hard link: ``ln old new``."""
    args = _args(argv)
    if len(args) != 2:
        sys.stderr.write("Usage: ln old new\n")
        return 1
    old, new = args
    try:
        os.link(old, new)
    except OSError:
        sys.stderr.write(f"link {old} {new}: failed\n")
    return 0


def mkdir_main(argv: Sequence[str] | None = None) -> int:
    """Create each named directory, stopping at the first failure."""
    args = _args(argv)
    if not args:
        sys.stderr.write("Usage: mkdir files...\n")
        return 1
    for path in args:
        try:
            os.mkdir(path)
        except OSError:
            sys.stderr.write(f"mkdir: {path} failed to create\n")
            break
    return 0


def _unlink(path: str) -> None:
    if os.path.isdir(path) and not os.path.islink(path):
        os.rmdir(path)
    else:
        os.unlink(path)


def rm_main(argv: Sequence[str] | None = None) -> int:
    """Remove each named file or empty directory, stopping at the first failure."""
    args = _args(argv)
    if not args:
        sys.stderr.write("Usage: rm files...\n")
        return 1
    for path in args:
        try:
            _unlink(path)
        except OSError:
            sys.stderr.write(f"rm: {path} failed to delete\n")
            break
    return 0


_KILL_SIGNAL = getattr(signal, "SIGKILL", signal.SIGTERM)


def kill_main(argv: Sequence[str] | None = None) -> int:
    """Kill each process whose id is given; ids that are not positive are ignored."""
    args = _args(argv)
    if not args:
        sys.stderr.write("usage: kill pid...\n")
        return 1
    for arg in args:
        pid = atoi(arg)
        if pid <= 0:
            continue
        try:
            os.kill(pid, _KILL_SIGNAL)
        except OSError:
            pass
    return 0