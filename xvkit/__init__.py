"""Models of a small x86 teaching kernel's core data structures and user programs."""

__version__ = "0.1.0"
__all__ = [
    "mmu",
    "elf",
    "strings",
    "umalloc",
    "syscalls",
    "shell",
    "wc",
    "rm",
    "locks",
    "proc",
]