import pytest

from xvkit.elf import (
    ELF_MAGIC,
    ELF_PROG_FLAG_EXEC,
    ELF_PROG_FLAG_READ,
    ELF_PROG_FLAG_WRITE,
    ELF_PROG_LOAD,
    ElfFormatError,
    ElfHeader,
    ProgramHeader,
    program_headers,
)


def _image(phdrs):
    header = ElfHeader(
        type=2,
        machine=3,
        version=1,
        entry=0x1000,
        phoff=ElfHeader.SIZE,
        ehsize=ElfHeader.SIZE,
        phentsize=ProgramHeader.SIZE,
        phnum=len(phdrs),
    )
    return header.pack() + b"".join(ph.pack() for ph in phdrs)


def test_pack_starts_with_magic_bytes():
    assert ElfHeader().pack()[:4] == b"\x7fELF"
    assert len(ElfHeader().pack()) == ElfHeader.SIZE


def test_header_round_trip():
    header = ElfHeader(entry=0x8048000, phoff=52, phnum=3, elf=b"\x01" * 12)
    parsed = ElfHeader.parse(header.pack())
    assert parsed == header
    assert parsed.magic == ELF_MAGIC


def test_bad_magic_rejected():
    data = bytearray(ElfHeader().pack())
    data[0] = 0
    with pytest.raises(ElfFormatError):
        ElfHeader.parse(bytes(data))


def test_short_header_rejected():
    with pytest.raises(ElfFormatError):
        ElfHeader.parse(ElfHeader().pack()[:-1])


def test_identification_length_checked():
    with pytest.raises(ValueError):
        ElfHeader(elf=b"short")


def test_program_header_round_trip():
    ph = ProgramHeader(
        type=ELF_PROG_LOAD,
        off=0x1000,
        vaddr=0,
        filesz=0x200,
        memsz=0x400,
        flags=ELF_PROG_FLAG_READ | ELF_PROG_FLAG_EXEC,
        align=4096,
    )
    assert ProgramHeader.parse(ph.pack()) == ph
    assert len(ph.pack()) == ProgramHeader.SIZE


def test_program_header_out_of_range():
    with pytest.raises(ElfFormatError):
        ProgramHeader.parse(bytes(ProgramHeader.SIZE), 1)


def test_is_loadable():
    assert ProgramHeader(type=ELF_PROG_LOAD).is_loadable()
    assert not ProgramHeader(type=ELF_PROG_LOAD + 1).is_loadable()


def test_program_headers_from_image():
    phdrs = [
        ProgramHeader(type=ELF_PROG_LOAD, vaddr=0, memsz=4096, flags=ELF_PROG_FLAG_EXEC),
        ProgramHeader(type=ELF_PROG_LOAD + 5, vaddr=4096, flags=ELF_PROG_FLAG_WRITE),
    ]
    assert program_headers(_image(phdrs)) == phdrs


def test_program_headers_truncated_image():
    data = _image([ProgramHeader(type=ELF_PROG_LOAD)])
    with pytest.raises(ElfFormatError):
        program_headers(data[:-4])