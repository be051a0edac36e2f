"""Layout of ELF executable file headers and program headers."""

from __future__ import annotations

import enum
import struct
from dataclasses import dataclass, field
from typing import ClassVar

ELF_MAGIC = 0x464C457F  # "\x7FELF" in little endian

# Values for ProgramHeader.type
ELF_PROG_LOAD = 1


class ProgFlag(enum.IntFlag):
    """Permission bits of a program header."""

    EXEC = 1
    WRITE = 2
    READ = 4


class ElfFormatError(ValueError):
    """The bytes do not hold a valid ELF structure."""


def _pack(layout: struct.Struct, *values: object) -> bytes:
    try:
        return layout.pack(*values)
    except struct.error as exc:
        raise ValueError(str(exc)) from None


@dataclass
class ElfHeader:
    """The file header at the start of an ELF executable."""

    magic: int = ELF_MAGIC
    elf: bytes = bytes(12)
    type: int = 0
    machine: int = 0
    version: int = 0
    entry: int = 0
    phoff: int = 0
    shoff: int = 0
    flags: int = 0
    ehsize: int = 0
    phentsize: int = 0
    phnum: int = 0
    shentsize: int = 0
    shnum: int = 0
    shstrndx: int = 0

    _LAYOUT: ClassVar[struct.Struct] = struct.Struct("<I12sHHIQQQIHHHHHH")
    SIZE: ClassVar[int] = _LAYOUT.size

    def __post_init__(self) -> None:
        self.elf = bytes(self.elf)
        if len(self.elf) != 12:
            raise ValueError("elf identification must be 12 bytes")

    @classmethod
    def parse(cls, data: bytes) -> "ElfHeader":
        """Read a header from the start of ``data``; the magic must match."""
        if len(data) < cls.SIZE:
            raise ElfFormatError("truncated ELF header")
        header = cls(*cls._LAYOUT.unpack_from(bytes(data[:cls.SIZE])))
        if header.magic != ELF_MAGIC:
            raise ElfFormatError(f"bad ELF magic {header.magic:#x}")
        return header

    def pack(self) -> bytes:
        """The header as it is laid out on disk."""
        return _pack(
            self._LAYOUT,
            self.magic, self.elf, self.type, self.machine, self.version,
            self.entry, self.phoff, self.shoff, self.flags, self.ehsize,
            self.phentsize, self.phnum, self.shentsize, self.shnum, self.shstrndx,
        )


@dataclass
class ProgramHeader:
    """One program section header."""

    type: int = ELF_PROG_LOAD
    flags: ProgFlag = ProgFlag(0)
    off: int = 0
    vaddr: int = 0
    paddr: int = 0
    filesz: int = 0
    memsz: int = 0
    align: int = 0

    _LAYOUT: ClassVar[struct.Struct] = struct.Struct("<IIQQQQQQ")
    SIZE: ClassVar[int] = _LAYOUT.size

    def __post_init__(self) -> None:
        self.flags = ProgFlag(self.flags)

    @classmethod
    def parse(cls, data: bytes) -> "ProgramHeader":
        """Read a program header from the start of ``data``."""
        if len(data) < cls.SIZE:
            raise ElfFormatError("truncated program header")
        return cls(*cls._LAYOUT.unpack_from(bytes(data[:cls.SIZE])))

    def pack(self) -> bytes:
        """The program header as it is laid out on disk."""
        return _pack(
            self._LAYOUT,
            self.type, int(self.flags), self.off, self.vaddr,
            self.paddr, self.filesz, self.memsz, self.align,
        )