"""Sv39 page tables kept in a simulated pool of physical pages."""

from __future__ import annotations

import errno
import struct

from .layout import KERNBASE, MAXVA, PGSIZE, pg_round_down, pg_round_up

PTE_V = 1 << 0
PTE_R = 1 << 1
PTE_W = 1 << 2
PTE_X = 1 << 3
PTE_U = 1 << 4

_PTE_BYTES = 8
_ENTRIES = PGSIZE // _PTE_BYTES
_TABLE = struct.Struct(f"<{_ENTRIES}Q")


class KernelPanic(RuntimeError):
    """A kernel invariant was violated."""


def px(level: int, va: int) -> int:
    """Index into the page-table page at ``level`` for virtual address ``va``."""
    return (va >> (12 + 9 * level)) & 0x1FF


def pa2pte(pa: int) -> int:
    """Shift a physical address into the PPN field of a PTE."""
    return (pa >> 12) << 10


def pte2pa(pte: int) -> int:
    """Physical address named by a PTE."""
    return (pte >> 10) << 12


def pte_flags(pte: int) -> int:
    """The low ten flag bits of a PTE."""
    return pte & 0x3FF


def _fault() -> OSError:
    return OSError(errno.EFAULT, "bad address")


class PhysicalMemory:
    """A contiguous range of RAM starting at KERNBASE, handed out one page at a time."""

    def __init__(self, npages: int = 256) -> None:
        if npages <= 0:
            raise ValueError("npages must be positive")
        self.base = KERNBASE
        self.npages = npages
        self._data = bytearray(npages * PGSIZE)
        self._free = [self.base + i * PGSIZE for i in reversed(range(npages))]
        self._allocated: set[int] = set()

    def kalloc(self) -> int:
        """Allocate one page and return its physical address."""
        if not self._free:
            raise MemoryError("out of physical pages")
        pa = self._free.pop()
        self._allocated.add(pa)
        return pa

    def kfree(self, pa: int) -> None:
        """Return a page obtained from :meth:`kalloc`."""
        if pa not in self._allocated:
            raise KernelPanic("kfree")
        self._allocated.remove(pa)
        self._free.append(pa)

    def _offset(self, pa: int, n: int) -> int:
        off = pa - self.base
        if n < 0 or off < 0 or off + n > len(self._data):
            raise ValueError(f"physical range {pa:#x}+{n} lies outside memory")
        return off

    def read(self, pa: int, n: int) -> bytes:
        """Read ``n`` bytes at physical address ``pa``."""
        off = self._offset(pa, n)
        return bytes(self._data[off:off + n])

    def write(self, pa: int, data: bytes) -> None:
        """Write ``data`` at physical address ``pa``."""
        off = self._offset(pa, len(data))
        self._data[off:off + len(data)] = data


class PageTable:
    """A three-level Sv39 page table whose pages live in ``memory``."""

    def __init__(self, memory: PhysicalMemory) -> None:
        self.memory = memory
        self.root = memory.kalloc()
        self._zero(self.root)

    def _zero(self, pa: int) -> None:
        self.memory.write(pa, bytes(PGSIZE))

    def _load(self, addr: int) -> int:
        return int.from_bytes(self.memory.read(addr, _PTE_BYTES), "little")

    def _store(self, addr: int, value: int) -> None:
        self.memory.write(addr, value.to_bytes(_PTE_BYTES, "little"))

    def walk(self, va: int, alloc: bool = False) -> int | None:
        """Physical address of the leaf PTE for ``va``.

        With ``alloc`` set, missing page-table pages are created; otherwise
        ``None`` is returned when one is missing.
        """
        if va >= MAXVA:
            raise KernelPanic("walk")
        table = self.root
        for level in (2, 1):
            addr = table + _PTE_BYTES * px(level, va)
            pte = self._load(addr)
            if pte & PTE_V:
                table = pte2pa(pte)
            else:
                if not alloc:
                    return None
                table = self.memory.kalloc()
                self._zero(table)
                self._store(addr, pa2pte(table) | PTE_V)
        return table + _PTE_BYTES * px(0, va)

    def walkaddr(self, va: int) -> int | None:
        """Physical address of the user page mapped at ``va``, or ``None``."""
        if va >= MAXVA:
            return None
        addr = self.walk(va)
        if addr is None:
            return None
        pte = self._load(addr)
        if not pte & PTE_V or not pte & PTE_U:
            return None
        return pte2pa(pte)

    def map_kernel(self, va: int, pa: int, sz: int, perm: int) -> None:
        """Add a boot-time mapping; running out of memory is fatal."""
        try:
            self.map_pages(va, sz, pa, perm)
        except MemoryError:
            raise KernelPanic("kvmmap") from None

    def map_pages(self, va: int, size: int, pa: int, perm: int) -> None:
        """Map ``size`` bytes at page-aligned ``va`` to physical ``pa``."""
        if va % PGSIZE:
            raise KernelPanic("mappages: va not aligned")
        if size % PGSIZE:
            raise KernelPanic("mappages: size not aligned")
        if size == 0:
            raise KernelPanic("mappages: size")
        for offset in range(0, size, PGSIZE):
            addr = self.walk(va + offset, alloc=True)
            assert addr is not None
            if self._load(addr) & PTE_V:
                raise KernelPanic("mappages: remap")
            self._store(addr, pa2pte(pa + offset) | perm | PTE_V)

    def unmap(self, va: int, npages: int, do_free: bool) -> None:
        """Remove ``npages`` existing mappings from ``va``, optionally freeing the pages."""
        if va % PGSIZE:
            raise KernelPanic("uvmunmap: not aligned")
        for a in range(va, va + npages * PGSIZE, PGSIZE):
            addr = self.walk(a)
            if addr is None:
                raise KernelPanic("uvmunmap: walk")
            pte = self._load(addr)
            if not pte & PTE_V:
                raise KernelPanic("uvmunmap: not mapped")
            if pte_flags(pte) == PTE_V:
                raise KernelPanic("uvmunmap: not a leaf")
            if do_free:
                self.memory.kfree(pte2pa(pte))
            self._store(addr, 0)

    def load_first(self, src: bytes) -> None:
        """Place ``src``, shorter than a page, at virtual address 0."""
        if len(src) >= PGSIZE:
            raise KernelPanic("uvmfirst: more than a page")
        mem = self.memory.kalloc()
        self._zero(mem)
        self.map_pages(0, PGSIZE, mem, PTE_W | PTE_R | PTE_X | PTE_U)
        self.memory.write(mem, bytes(src))

    def grow(self, oldsz: int, newsz: int, xperm: int = 0) -> int:
        """Grow user memory from ``oldsz`` to ``newsz`` and return the new size.

        On running out of memory the pages added so far are released and
        ``MemoryError`` is raised.
        """
        if newsz < oldsz:
            return oldsz
        oldsz = pg_round_up(oldsz)
        for a in range(oldsz, newsz, PGSIZE):
            try:
                mem = self.memory.kalloc()
            except MemoryError:
                self.shrink(a, oldsz)
                raise
            self._zero(mem)
            try:
                self.map_pages(a, PGSIZE, mem, PTE_R | PTE_U | xperm)
            except MemoryError:
                self.memory.kfree(mem)
                self.shrink(a, oldsz)
                raise
        return newsz

    def shrink(self, oldsz: int, newsz: int) -> int:
        """Release user pages to bring the size from ``oldsz`` down to ``newsz``."""
        if newsz >= oldsz:
            return oldsz
        if pg_round_up(newsz) < pg_round_up(oldsz):
            npages = (pg_round_up(oldsz) - pg_round_up(newsz)) // PGSIZE
            self.unmap(pg_round_up(newsz), npages, True)
        return newsz

    def _freewalk(self, table: int) -> None:
        entries = _TABLE.unpack(self.memory.read(table, PGSIZE))
        for i, pte in enumerate(entries):
            if pte & PTE_V and not pte & (PTE_R | PTE_W | PTE_X):
                self._freewalk(pte2pa(pte))
                self._store(table + i * _PTE_BYTES, 0)
            elif pte & PTE_V:
                raise KernelPanic("freewalk: leaf")
        self.memory.kfree(table)

    def free(self, sz: int) -> None:
        """Free ``sz`` bytes of user memory, then every page-table page."""
        if sz > 0:
            self.unmap(0, pg_round_up(sz) // PGSIZE, True)
        self._freewalk(self.root)

    def copy_to(self, new: "PageTable", sz: int) -> None:
        """Copy the first ``sz`` bytes of mappings and their contents into ``new``.

        On running out of memory the pages copied so far are released and
        ``MemoryError`` is raised.
        """
        for i in range(0, sz, PGSIZE):
            addr = self.walk(i)
            if addr is None:
                raise KernelPanic("uvmcopy: pte should exist")
            pte = self._load(addr)
            if not pte & PTE_V:
                raise KernelPanic("uvmcopy: page not present")
            pa = pte2pa(pte)
            flags = pte_flags(pte)
            try:
                mem = new.memory.kalloc()
            except MemoryError:
                new.unmap(0, i // PGSIZE, True)
                raise
            new.memory.write(mem, self.memory.read(pa, PGSIZE))
            try:
                new.map_pages(i, PGSIZE, mem, flags)
            except MemoryError:
                new.memory.kfree(mem)
                new.unmap(0, i // PGSIZE, True)
                raise

    def clear_user(self, va: int) -> None:
        """Make the page at ``va`` inaccessible to user mode."""
        addr = self.walk(va)
        if addr is None:
            raise KernelPanic("uvmclear")
        self._store(addr, self._load(addr) & ~PTE_U)

    def copyout(self, dstva: int, data: bytes) -> None:
        """Copy ``data`` to user virtual address ``dstva``."""
        src = bytes(data)
        pos = 0
        while pos < len(src):
            va0 = pg_round_down(dstva)
            if va0 >= MAXVA:
                raise _fault()
            addr = self.walk(va0)
            if addr is None:
                raise _fault()
            pte = self._load(addr)
            if not (pte & PTE_V and pte & PTE_U and pte & PTE_W):
                raise _fault()
            n = min(PGSIZE - (dstva - va0), len(src) - pos)
            self.memory.write(pte2pa(pte) + (dstva - va0), src[pos:pos + n])
            pos += n
            dstva = va0 + PGSIZE

    def copyin(self, srcva: int, n: int) -> bytes:
        """Copy ``n`` bytes from user virtual address ``srcva``."""
        out = bytearray()
        remaining = n
        while remaining > 0:
            va0 = pg_round_down(srcva)
            pa0 = self.walkaddr(va0)
            if pa0 is None:
                raise _fault()
            count = min(PGSIZE - (srcva - va0), remaining)
            out += self.memory.read(pa0 + (srcva - va0), count)
            remaining -= count
            srcva = va0 + PGSIZE
        return bytes(out)

    def copyinstr(self, srcva: int, max_len: int) -> bytes:
        """Copy a NUL-terminated string of at most ``max_len`` bytes, NUL included.

        The terminating NUL is not part of the result.
        """
        out = bytearray()
        while max_len > 0:
            va0 = pg_round_down(srcva)
            pa0 = self.walkaddr(va0)
            if pa0 is None:
                raise _fault()
            count = min(PGSIZE - (srcva - va0), max_len)
            chunk = self.memory.read(pa0 + (srcva - va0), count)
            nul = chunk.find(0)
            if nul >= 0:
                out += chunk[:nul]
                return bytes(out)
            out += chunk
            max_len -= count
            srcva = va0 + PGSIZE
        raise OSError(errno.ENAMETOOLONG, "string not terminated within limit")