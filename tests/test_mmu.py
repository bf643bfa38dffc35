import pytest

from xvkit.mmu import (
    DPL_USER,
    NPDENTRIES,
    PGSIZE,
    SEG_KCODE,
    STA_R,
    STA_W,
    STA_X,
    STS_IG32,
    STS_T32A,
    STS_TG32,
    GateDescriptor,
    SegmentDescriptor,
    pdx,
    pg_round_down,
    pg_round_up,
    pgaddr,
    pte_addr,
    pte_flags,
    ptx,
)


@pytest.mark.parametrize("va", [0, 0x1234, 0x00401ABC, 0x80000000, 0xFFFFFFFF, 0x7FFFF123])
def test_address_split_round_trip(va):
    assert pgaddr(pdx(va), ptx(va), va & 0xFFF) == va


def test_index_ranges():
    assert pdx(0xFFFFFFFF) == NPDENTRIES - 1
    assert ptx(0xFFFFFFFF) == NPDENTRIES - 1
    assert pdx(0x80000000) == 512


def test_round_up_and_down():
    assert pg_round_up(0) == 0
    assert pg_round_up(1) == PGSIZE
    assert pg_round_up(PGSIZE) == PGSIZE
    assert pg_round_up(PGSIZE + 1) == 2 * PGSIZE
    assert pg_round_down(PGSIZE + 1) == PGSIZE
    assert pg_round_down(PGSIZE - 1) == 0


@pytest.mark.parametrize("pte", [0, 0x00ABC007, 0xFFFFFFFF, 0x12345001])
def test_pte_parts_recombine(pte):
    assert pte_addr(pte) | pte_flags(pte) == pte
    assert pte_addr(pte) & 0xFFF == 0


def test_flat_kernel_code_segment_bytes():
    desc = SegmentDescriptor.seg(STA_X | STA_R, 0, 0xFFFFFFFF, 0)
    assert desc.to_bytes() == bytes([0xFF, 0xFF, 0x00, 0x00, 0x00, 0x9A, 0xCF, 0x00])


def test_segment_fields_for_user_data():
    desc = SegmentDescriptor.seg(STA_W, 0, 0xFFFFFFFF, DPL_USER)
    assert desc.dpl == DPL_USER
    assert desc.type == STA_W
    assert desc.g == 1
    assert desc.p == 1


@pytest.mark.parametrize(
    "desc",
    [
        SegmentDescriptor.seg(STA_X | STA_R, 0x12345678, 0xFFFFFFFF, DPL_USER),
        SegmentDescriptor.seg16(STS_T32A, 0xC0101234, 0x67, 0),
    ],
)
def test_segment_round_trip(desc):
    assert SegmentDescriptor.from_bytes(desc.to_bytes()) == desc


def test_seg16_is_byte_granular():
    desc = SegmentDescriptor.seg16(STS_T32A, 0, 0x67, 0)
    assert desc.g == 0
    assert desc.lim_15_0 == 0x67


def test_segment_rejects_wide_field():
    with pytest.raises(ValueError):
        SegmentDescriptor(type=0x10)


def test_segment_from_bytes_wrong_length():
    with pytest.raises(ValueError):
        SegmentDescriptor.from_bytes(b"\x00" * 7)


def test_trap_and_interrupt_gates():
    trap = GateDescriptor.set_gate(True, SEG_KCODE << 3, 0x12345678, DPL_USER)
    intr = GateDescriptor.set_gate(False, SEG_KCODE << 3, 0x12345678, 0)
    assert trap.type == STS_TG32
    assert intr.type == STS_IG32
    assert trap.offset() == 0x12345678
    assert trap.cs == SEG_KCODE << 3
    assert trap.dpl == DPL_USER
    assert trap.p == 1 and trap.s == 0


def test_gate_round_trip():
    gate = GateDescriptor.set_gate(False, SEG_KCODE << 3, 0x80105ABC, 0)
    assert GateDescriptor.from_bytes(gate.to_bytes()) == gate


def test_gate_from_bytes_wrong_length():
    with pytest.raises(ValueError):
        GateDescriptor.from_bytes(b"")