"""Physical and virtual memory layout, open flags and file status records."""

from __future__ import annotations

import enum
from dataclasses import dataclass

UINT8_MASK = 0xFF
UINT16_MASK = 0xFFFF
UINT32_MASK = 0xFFFF_FFFF
UINT64_MASK = 0xFFFF_FFFF_FFFF_FFFF

PGSIZE = 4096
PGSHIFT = 12
# One bit less than the Sv39 maximum, which avoids sign-extending addresses.
MAXVA = 1 << (9 + 9 + 9 + 12 - 1)

# qemu puts UART registers here in physical memory.
UART0 = 0x1000_0000
UART0_IRQ = 10

# virtio mmio interface
VIRTIO0 = 0x1000_1000
VIRTIO0_IRQ = 1

# platform-level interrupt controller
PLIC = 0x0C00_0000
PLIC_PRIORITY = PLIC + 0x0
PLIC_PENDING = PLIC + 0x1000

# RAM used by the kernel and user pages runs from KERNBASE to PHYSTOP.
KERNBASE = 0x8000_0000
PHYSTOP = KERNBASE + 128 * 1024 * 1024

# The trampoline page sits at the highest address in both address spaces.
TRAMPOLINE = MAXVA - PGSIZE
# The trapframe page sits just beneath the trampoline in user space.
TRAPFRAME = TRAMPOLINE - PGSIZE


def plic_senable(hart: int) -> int:
    """Address of the supervisor interrupt-enable register of a hart."""
    return PLIC + 0x2080 + hart * 0x100


def plic_spriority(hart: int) -> int:
    """Address of the supervisor priority-threshold register of a hart."""
    return PLIC + 0x201000 + hart * 0x2000


def plic_sclaim(hart: int) -> int:
    """Address of the supervisor claim/complete register of a hart."""
    return PLIC + 0x201004 + hart * 0x2000


def kstack(p: int) -> int:
    """Virtual address of the kernel stack of process slot ``p``.

    Each stack is one page, with an unmapped guard page below it.
    """
    return TRAMPOLINE - (p + 1) * 2 * PGSIZE


def pg_round_up(sz: int) -> int:
    """Round ``sz`` up to a page boundary."""
    return (sz + PGSIZE - 1) & ~(PGSIZE - 1)


def pg_round_down(a: int) -> int:
    """Round ``a`` down to a page boundary."""
    return a & ~(PGSIZE - 1)


class OpenFlag(enum.IntFlag):
    """Flags accepted by ``open``."""

    RDONLY = 0x000
    WRONLY = 0x001
    RDWR = 0x002
    CREATE = 0x200
    TRUNC = 0x400


class FileType(enum.IntEnum):
    """Kinds of inode."""

    DIR = 1
    FILE = 2
    DEVICE = 3


@dataclass(frozen=True)
class Stat:
    """Status of a file: device, inode number, type, link count and size."""

    dev: int
    ino: int
    type: FileType
    nlink: int
    size: int