"""ELF executable file header and program header formats."""

from __future__ import annotations

import struct
from dataclasses import dataclass
from typing import ClassVar, List

ELF_MAGIC = 0x464C457F  # "\x7fELF" read little-endian

ELF_PROG_LOAD = 1

ELF_PROG_FLAG_EXEC = 1
ELF_PROG_FLAG_WRITE = 2
ELF_PROG_FLAG_READ = 4


class ElfFormatError(ValueError):
    """Raised when bytes do not hold a valid ELF structure."""


@dataclass
class ElfHeader:
    """The ELF file header."""

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

    _STRUCT: ClassVar[struct.Struct] = struct.Struct("<I12sHHIIIIIHHHHHH")
    SIZE: ClassVar[int] = _STRUCT.size

    def __post_init__(self) -> None:
        if len(self.elf) != 12:
            raise ValueError("elf identification must be 12 bytes")

    @classmethod
    def parse(cls, data: bytes) -> "ElfHeader":
        """Parse the header at the start of data, checking the magic."""
        if len(data) < cls.SIZE:
            raise ElfFormatError("data too short for an ELF header")
        header = cls(*cls._STRUCT.unpack_from(data, 0))
        if header.magic != ELF_MAGIC:
            raise ElfFormatError("bad ELF magic")
        return header

    def pack(self) -> bytes:
        """Encode the header as bytes."""
        return self._STRUCT.pack(
            self.magic,
            self.elf,
            self.type,
            self.machine,
            self.version,
            self.entry,
            self.phoff,
            self.shoff,
            self.flags,
            self.ehsize,
            self.phentsize,
            self.phnum,
            self.shentsize,
            self.shnum,
            self.shstrndx,
        )


@dataclass
class ProgramHeader:
    """An ELF program section header."""

    type: int = 0
    off: int = 0
    vaddr: int = 0
    paddr: int = 0
    filesz: int = 0
    memsz: int = 0
    flags: int = 0
    align: int = 0

    _STRUCT: ClassVar[struct.Struct] = struct.Struct("<8I")
    SIZE: ClassVar[int] = _STRUCT.size

    @classmethod
    def parse(cls, data: bytes, offset: int = 0) -> "ProgramHeader":
        """Parse a program header at offset in data."""
        if offset < 0 or offset + cls.SIZE > len(data):
            raise ElfFormatError("program header lies outside the data")
        return cls(*cls._STRUCT.unpack_from(data, offset))

    def pack(self) -> bytes:
        """Encode the program header as bytes."""
        return self._STRUCT.pack(
            self.type,
            self.off,
            self.vaddr,
            self.paddr,
            self.filesz,
            self.memsz,
            self.flags,
            self.align,
        )

    def is_loadable(self) -> bool:
        """True for segments that are loaded into memory."""
        return self.type == ELF_PROG_LOAD


def program_headers(data: bytes) -> List[ProgramHeader]:
    """Parse the ELF header of data and return all its program headers."""
    header = ElfHeader.parse(data)
    return [
        ProgramHeader.parse(data, header.phoff + i * ProgramHeader.SIZE)
        for i in range(header.phnum)
    ]