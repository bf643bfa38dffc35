"""x86 memory-management definitions: paging helpers and descriptor encodings."""

from __future__ import annotations

from dataclasses import dataclass, fields
from typing import ClassVar, Mapping, Tuple

# Eflags register
FL_IF = 0x00000200

# Control register flags
CR0_PE = 0x00000001
CR0_WP = 0x00010000
CR0_PG = 0x80000000
CR4_PSE = 0x00000010

# Segment selectors
SEG_KCODE = 1
SEG_KDATA = 2
SEG_UCODE = 3
SEG_UDATA = 4
SEG_TSS = 5
NSEGS = 6

DPL_USER = 0x3

# Application segment type bits
STA_X = 0x8
STA_W = 0x2
STA_R = 0x2

# System segment type bits
STS_T32A = 0x9
STS_IG32 = 0xE
STS_TG32 = 0xF

# Page directory and page table constants
NPDENTRIES = 1024
NPTENTRIES = 1024
PGSIZE = 4096
PTXSHIFT = 12
PDXSHIFT = 22

# Page table/directory entry flags
PTE_P = 0x001
PTE_W = 0x002
PTE_U = 0x004
PTE_PS = 0x080

_MASK32 = 0xFFFFFFFF


def pdx(va: int) -> int:
    """Page directory index of a virtual address."""
    return ((va & _MASK32) >> PDXSHIFT) & 0x3FF


def ptx(va: int) -> int:
    """Page table index of a virtual address."""
    return ((va & _MASK32) >> PTXSHIFT) & 0x3FF


def pgaddr(d: int, t: int, o: int) -> int:
    """Build a virtual address from directory index, table index and offset."""
    return ((d << PDXSHIFT) | (t << PTXSHIFT) | o) & _MASK32


def pg_round_up(sz: int) -> int:
    """Round a size up to a page boundary (32-bit arithmetic)."""
    return (sz + PGSIZE - 1) & ~(PGSIZE - 1) & _MASK32


def pg_round_down(a: int) -> int:
    """Round an address down to a page boundary."""
    return a & ~(PGSIZE - 1) & _MASK32


def pte_addr(pte: int) -> int:
    """Physical address held in a page table entry."""
    return pte & ~0xFFF & _MASK32


def pte_flags(pte: int) -> int:
    """Flag bits of a page table entry."""
    return pte & 0xFFF


def _pack(obj: object, layout: Tuple[Tuple[str, int], ...]) -> int:
    word = 0
    shift = 0
    for name, width in layout:
        word |= getattr(obj, name) << shift
        shift += width
    return word


def _unpack(word: int, layout: Tuple[Tuple[str, int], ...]) -> Mapping[str, int]:
    values = {}
    for name, width in layout:
        values[name] = word & ((1 << width) - 1)
        word >>= width
    return values


def _check_widths(obj: object, layout: Tuple[Tuple[str, int], ...]) -> None:
    for name, width in layout:
        value = getattr(obj, name)
        if not 0 <= value < (1 << width):
            raise ValueError(f"{name}={value} does not fit in {width} bits")


@dataclass(frozen=True)
class SegmentDescriptor:
    """An 8-byte x86 segment descriptor."""

    lim_15_0: int = 0
    base_15_0: int = 0
    base_23_16: int = 0
    type: int = 0
    s: int = 0
    dpl: int = 0
    p: int = 0
    lim_19_16: int = 0
    avl: int = 0
    rsv1: int = 0
    db: int = 0
    g: int = 0
    base_31_24: int = 0

    _LAYOUT: ClassVar[Tuple[Tuple[str, int], ...]] = (
        ("lim_15_0", 16),
        ("base_15_0", 16),
        ("base_23_16", 8),
        ("type", 4),
        ("s", 1),
        ("dpl", 2),
        ("p", 1),
        ("lim_19_16", 4),
        ("avl", 1),
        ("rsv1", 1),
        ("db", 1),
        ("g", 1),
        ("base_31_24", 8),
    )

    def __post_init__(self) -> None:
        _check_widths(self, self._LAYOUT)

    @classmethod
    def seg(cls, type: int, base: int, lim: int, dpl: int) -> "SegmentDescriptor":
        """Normal 32-bit segment with 4K granularity."""
        base &= _MASK32
        lim &= _MASK32
        return cls(
            (lim >> 12) & 0xFFFF,
            base & 0xFFFF,
            (base >> 16) & 0xFF,
            type,
            1,
            dpl,
            1,
            (lim >> 28) & 0xF,
            0,
            0,
            1,
            1,
            base >> 24,
        )

    @classmethod
    def seg16(cls, type: int, base: int, lim: int, dpl: int) -> "SegmentDescriptor":
        """Segment with byte granularity, as used for the TSS."""
        base &= _MASK32
        lim &= _MASK32
        return cls(
            lim & 0xFFFF,
            base & 0xFFFF,
            (base >> 16) & 0xFF,
            type,
            1,
            dpl,
            1,
            (lim >> 16) & 0xF,
            0,
            0,
            1,
            0,
            base >> 24,
        )

    def to_bytes(self) -> bytes:
        """Encode as the 8 bytes the processor reads."""
        return _pack(self, self._LAYOUT).to_bytes(8, "little")

    @classmethod
    def from_bytes(cls, data: bytes) -> "SegmentDescriptor":
        """Decode 8 bytes into a descriptor."""
        if len(data) != 8:
            raise ValueError("segment descriptor must be 8 bytes")
        return cls(**_unpack(int.from_bytes(data, "little"), cls._LAYOUT))


@dataclass(frozen=True)
class GateDescriptor:
    """An 8-byte interrupt or trap gate descriptor."""

    off_15_0: int = 0
    cs: int = 0
    args: int = 0
    rsv1: int = 0
    type: int = 0
    s: int = 0
    dpl: int = 0
    p: int = 0
    off_31_16: int = 0

    _LAYOUT: ClassVar[Tuple[Tuple[str, int], ...]] = (
        ("off_15_0", 16),
        ("cs", 16),
        ("args", 5),
        ("rsv1", 3),
        ("type", 4),
        ("s", 1),
        ("dpl", 2),
        ("p", 1),
        ("off_31_16", 16),
    )

    def __post_init__(self) -> None:
        _check_widths(self, self._LAYOUT)

    @classmethod
    def set_gate(cls, istrap: bool, sel: int, off: int, dpl: int) -> "GateDescriptor":
        """Build a trap gate (istrap) or an interrupt gate for a handler."""
        off &= _MASK32
        return cls(
            off_15_0=off & 0xFFFF,
            cs=sel,
            args=0,
            rsv1=0,
            type=STS_TG32 if istrap else STS_IG32,
            s=0,
            dpl=dpl,
            p=1,
            off_31_16=off >> 16,
        )

    def offset(self) -> int:
        """Handler offset within the code segment."""
        return (self.off_31_16 << 16) | self.off_15_0

    def to_bytes(self) -> bytes:
        """Encode as the 8 bytes the processor reads."""
        return _pack(self, self._LAYOUT).to_bytes(8, "little")

    @classmethod
    def from_bytes(cls, data: bytes) -> "GateDescriptor":
        """Decode 8 bytes into a gate descriptor."""
        if len(data) != 8:
            raise ValueError("gate descriptor must be 8 bytes")
        return cls(**_unpack(int.from_bytes(data, "little"), cls._LAYOUT))


__all__ = [name for name in dir() if not name.startswith("_") and name not in ("annotations", "dataclass", "fields", "ClassVar", "Mapping", "Tuple")]