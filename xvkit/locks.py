"""Spin locks, sleep locks and the per-CPU interrupt-disable nesting they rely on."""

from __future__ import annotations

import threading
from dataclasses import dataclass
from typing import Any, Optional


class KernelPanic(RuntimeError):
    """Raised where the kernel would halt with a panic message."""


@dataclass(eq=False)
class Cpu:
    """Per-CPU state needed for locking."""

    apicid: int = 0
    ncli: int = 0
    intena: bool = False
    interrupts_enabled: bool = True
    proc: Optional[Any] = None

    def push_cli(self) -> None:
        """Disable interrupts, remembering whether they were on at the outermost level."""
        was_enabled = self.interrupts_enabled
        self.interrupts_enabled = False
        if self.ncli == 0:
            self.intena = was_enabled
        self.ncli += 1

    def pop_cli(self) -> None:
        """Undo one push_cli; interrupts come back on when the nesting ends."""
        if self.interrupts_enabled:
            raise KernelPanic("popcli - interruptible")
        self.ncli -= 1
        if self.ncli < 0:
            raise KernelPanic("popcli")
        if self.ncli == 0 and self.intena:
            self.interrupts_enabled = True


class SpinLock:
    """Mutual exclusion lock held by a CPU with interrupts disabled."""

    def __init__(self, name: str) -> None:
        self.name = name
        self.locked = False
        self.cpu: Optional[Cpu] = None
        self._mutex = threading.Lock()

    def acquire(self, cpu: Cpu) -> None:
        """Take the lock for cpu, waiting while another CPU holds it."""
        cpu.push_cli()
        if self.holding(cpu):
            raise KernelPanic("acquire")
        self._mutex.acquire()
        self.locked = True
        self.cpu = cpu

    def release(self, cpu: Cpu) -> None:
        """Give the lock up; cpu must be holding it."""
        if not self.holding(cpu):
            raise KernelPanic("release")
        self.cpu = None
        self.locked = False
        self._mutex.release()
        cpu.pop_cli()

    def holding(self, cpu: Cpu) -> bool:
        """True if cpu holds this lock."""
        cpu.push_cli()
        result = self.locked and self.cpu is cpu
        cpu.pop_cli()
        return result


class SleepLock:
    """Long-term lock owned by a process; waiters sleep instead of spinning."""

    def __init__(self, name: str) -> None:
        self.name = name
        self.locked = False
        self.pid = 0
        self._cond = threading.Condition(threading.Lock())

    def acquire(self, pid: int) -> None:
        """Take the lock for pid, sleeping until it is free."""
        with self._cond:
            while self.locked:
                self._cond.wait()
            self.locked = True
            self.pid = pid

    def try_acquire(self, pid: int) -> bool:
        """Take the lock for pid if it is free; report whether it was taken."""
        with self._cond:
            if self.locked:
                return False
            self.locked = True
            self.pid = pid
            return True

    def release(self) -> None:
        """Free the lock and wake every waiter."""
        with self._cond:
            self.locked = False
            self.pid = 0
            self._cond.notify_all()

    def holding(self, pid: int) -> bool:
        """True if the lock is held by process pid."""
        with self._cond:
            return self.locked and self.pid == pid