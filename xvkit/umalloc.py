"""A first-fit free-list allocator over a simulated program break."""

from __future__ import annotations

from dataclasses import dataclass

# Each header is a pointer and a size, padded to the alignment unit.
_UNIT = 16
# The smallest number of units requested from sbrk at a time.
_MIN_CORE_UNITS = 4096
# Address of the heap's first byte; the sentinel header sits below it.
_HEAP_START = 0x4000
_BASE = 0


@dataclass
class _Header:
    ptr: int
    size: int


class Heap:
    """A heap of at most ``limit`` bytes of break, carved into header-prefixed blocks.

    Addresses handed out are plain integers; block sizes are counted in
    16-byte units, each block starting with one unit of header.
    """

    def __init__(self, limit: int) -> None:
        if limit < 0:
            raise ValueError("limit must not be negative")
        self.limit = limit
        self.start = _HEAP_START
        self._brk = self.start
        self._headers: dict[int, _Header] = {_BASE: _Header(_BASE, 0)}
        self._freep: int | None = None
        self._allocated: set[int] = set()

    def sbrk(self, n: int) -> int:
        """Move the break by ``n`` bytes and return the previous break."""
        new = self._brk + n
        if new < self.start or new > self.start + self.limit:
            raise MemoryError("break out of range")
        old, self._brk = self._brk, new
        return old

    def _release(self, bp: int) -> None:
        h = self._headers
        p = self._freep
        assert p is not None
        while not (p < bp < h[p].ptr):
            if p >= h[p].ptr and (bp > p or bp < h[p].ptr):
                break
            p = h[p].ptr
        block = h[bp]
        prev = h[p]
        if bp + block.size * _UNIT == prev.ptr:
            nxt = h.pop(prev.ptr)
            block.size += nxt.size
            block.ptr = nxt.ptr
        else:
            block.ptr = prev.ptr
        if p + prev.size * _UNIT == bp:
            prev.size += block.size
            prev.ptr = block.ptr
            del h[bp]
        else:
            prev.ptr = bp
        self._freep = p

    def _morecore(self, nunits: int) -> int | None:
        nunits = max(nunits, _MIN_CORE_UNITS)
        try:
            hp = self.sbrk(nunits * _UNIT)
        except MemoryError:
            return None
        self._headers[hp] = _Header(_BASE, nunits)
        self._release(hp)
        return self._freep

    def malloc(self, nbytes: int) -> int:
        """Allocate ``nbytes`` and return the block's address.

        Raises ``MemoryError`` when the break cannot grow far enough.
        """
        if nbytes < 0:
            raise ValueError("nbytes must not be negative")
        nunits = (nbytes + _UNIT - 1) // _UNIT + 1
        h = self._headers
        if self._freep is None:
            h[_BASE].ptr = _BASE
            h[_BASE].size = 0
            self._freep = _BASE
        prevp = self._freep
        p = h[prevp].ptr
        while True:
            block = h[p]
            if block.size >= nunits:
                if block.size == nunits:
                    h[prevp].ptr = block.ptr
                else:
                    block.size -= nunits
                    p += block.size * _UNIT
                    h[p] = _Header(_BASE, nunits)
                self._freep = prevp
                self._allocated.add(p)
                return p + _UNIT
            if p == self._freep:
                grown = self._morecore(nunits)
                if grown is None:
                    raise MemoryError(f"cannot allocate {nbytes} bytes")
                p = grown
            prevp = p
            p = h[p].ptr

    def free(self, addr: int) -> None:
        """Return a block obtained from :meth:`malloc`."""
        bp = addr - _UNIT
        if bp not in self._allocated:
            raise ValueError(f"address {addr:#x} was not allocated")
        self._allocated.remove(bp)
        self._release(bp)