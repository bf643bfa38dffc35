"""A first-fit free-list allocator over a simulated growable heap."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional, Set, Tuple

_MIN_CORE_UNITS = 4096


@dataclass
class _Header:
    ptr: int
    size: int


class Allocator:
    """Allocator keeping an address-ordered circular free list.

    Addresses are byte offsets in a heap that grows from zero through
    ``sbrk``; each block is preceded by a header of ``unit`` bytes and
    sizes are counted in units.
    """

    def __init__(self, limit: int = 1 << 24, unit: int = 8) -> None:
        if unit <= 0:
            raise ValueError("unit must be positive")
        if limit < 0:
            raise ValueError("limit must not be negative")
        self.limit = limit
        self.unit = unit
        self._brk = 0
        self._base = -unit
        self._headers: Dict[int, _Header] = {self._base: _Header(self._base, 0)}
        self._allocated: Set[int] = set()
        self._freep: Optional[int] = None

    def sbrk(self, nbytes: int) -> int:
        """Move the break by nbytes and return the old break."""
        old = self._brk
        new = old + nbytes
        if new > self.limit or new < 0:
            raise MemoryError("sbrk: cannot move break")
        self._brk = new
        return old

    def _morecore(self, nu: int) -> Optional[int]:
        nu = max(nu, _MIN_CORE_UNITS)
        try:
            p = self.sbrk(nu * self.unit)
        except MemoryError:
            return None
        self._headers[p] = _Header(0, nu)
        self._allocated.add(p)
        self.free(p + self.unit)
        return self._freep

    def malloc(self, nbytes: int) -> int:
        """Allocate nbytes and return the block's address."""
        if nbytes < 0:
            raise ValueError("size must not be negative")
        unit = self.unit
        nunits = (nbytes + unit - 1) // unit + 1
        hdr = self._headers
        if self._freep is None:
            hdr[self._base] = _Header(self._base, 0)
            self._freep = self._base
        prevp = self._freep
        p = hdr[prevp].ptr
        while True:
            block = hdr[p]
            if block.size >= nunits:
                if block.size == nunits:
                    hdr[prevp].ptr = block.ptr
                else:
                    block.size -= nunits
                    p += block.size * unit
                    hdr[p] = _Header(0, nunits)
                self._freep = prevp
                self._allocated.add(p)
                return p + unit
            if p == self._freep:
                more = self._morecore(nunits)
                if more is None:
                    raise MemoryError(f"cannot allocate {nbytes} bytes")
                p = more
            prevp, p = p, hdr[p].ptr

    def free(self, addr: int) -> None:
        """Return a block obtained from malloc to the free list."""
        bp = addr - self.unit
        if bp not in self._allocated:
            raise ValueError(f"address {addr} is not an allocated block")
        self._allocated.discard(bp)
        hdr = self._headers
        unit = self.unit
        p = self._freep
        assert p is not None
        while not (p < bp < hdr[p].ptr):
            nxt = hdr[p].ptr
            if p >= nxt and (bp > p or bp < nxt):
                break
            p = nxt
        block = hdr[bp]
        cur = hdr[p]
        nxt = cur.ptr
        if bp + block.size * unit == nxt:
            block.size += hdr[nxt].size
            block.ptr = hdr[nxt].ptr
            del hdr[nxt]
        else:
            block.ptr = nxt
        if p + cur.size * unit == bp:
            cur.size += block.size
            cur.ptr = block.ptr
            del hdr[bp]
        else:
            cur.ptr = bp
        self._freep = p

    def free_blocks(self) -> List[Tuple[int, int]]:
        """Free blocks as (header address, size in bytes), in address order."""
        if self._freep is None:
            return []
        blocks = []
        p = self._headers[self._base].ptr
        while p != self._base:
            block = self._headers[p]
            blocks.append((p, block.size * self.unit))
            p = block.ptr
        return blocks