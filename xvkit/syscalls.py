"""System call numbers, argument fetching from user memory and dispatch."""

from __future__ import annotations

import sys
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Callable, Dict, Optional, TextIO, Union

_MASK32 = 0xFFFFFFFF


class SyscallNumber(IntEnum):
    """Numbers that user code places in %eax to name a system call."""

    FORK = 1
    EXIT = 2
    WAIT = 3
    PIPE = 4
    READ = 5
    KILL = 6
    EXEC = 7
    FSTAT = 8
    CHDIR = 9
    DUP = 10
    GETPID = 11
    SBRK = 12
    SLEEP = 13
    UPTIME = 14
    OPEN = 15
    WRITE = 16
    MKNOD = 17
    UNLINK = 18
    LINK = 19
    MKDIR = 20
    CLOSE = 21
    SEM_INIT = 22
    SEM_ACQUIRE = 23
    SEM_RELEASE = 24


class BadAddress(ValueError):
    """Raised when a user address lies outside the process's memory."""


class UserMemory:
    """A process's user address space, from address 0 up to its size."""

    def __init__(self, data: Union[bytes, bytearray]) -> None:
        self.data = bytes(data)

    @property
    def size(self) -> int:
        """Size of the process memory in bytes."""
        return len(self.data)

    def fetch_int(self, addr: int) -> int:
        """The signed 32-bit integer stored at addr."""
        sz = self.size
        if addr < 0 or addr >= sz or addr + 4 > sz:
            raise BadAddress(f"int at {addr:#x} is outside user memory")
        return int.from_bytes(self.data[addr : addr + 4], "little", signed=True)

    def fetch_str(self, addr: int) -> bytes:
        """The NUL-terminated string at addr, without its terminator."""
        if addr < 0 or addr >= self.size:
            raise BadAddress(f"string at {addr:#x} is outside user memory")
        end = self.data.find(b"\0", addr)
        if end < 0:
            raise BadAddress(f"string at {addr:#x} is not terminated")
        return self.data[addr:end]

    def arg_int(self, esp: int, n: int) -> int:
        """The nth 32-bit system call argument above the saved return address."""
        return self.fetch_int((esp + 4 + 4 * n) & _MASK32)

    def arg_ptr(self, esp: int, n: int, size: int) -> int:
        """The nth argument as the address of a block of size bytes."""
        addr = self.arg_int(esp, n) & _MASK32
        if size < 0 or addr >= self.size or addr + size > self.size:
            raise BadAddress(f"block of {size} bytes at {addr:#x} is outside user memory")
        return addr

    def arg_str(self, esp: int, n: int) -> bytes:
        """The nth argument as a pointer to a NUL-terminated string."""
        return self.fetch_str(self.arg_int(esp, n) & _MASK32)


Handler = Callable[[], int]


@dataclass
class SyscallTable:
    """Maps system call numbers to handlers and runs them."""

    handlers: Dict[int, Handler] = field(default_factory=dict)
    console: Optional[TextIO] = None

    def register(self, number: int, handler: Handler) -> None:
        """Install handler for the given system call number."""
        if number <= 0:
            raise ValueError(f"system call number must be positive, not {number}")
        self.handlers[int(number)] = handler

    def dispatch(self, number: int, pid: int, name: str) -> int:
        """Run the handler for number; report unknown calls and return -1."""
        handler = self.handlers.get(number) if number > 0 else None
        if handler is None:
            out = self.console if self.console is not None else sys.stdout
            out.write(f"{pid} {name}: unknown sys call {number}\n")
            return -1
        return handler()