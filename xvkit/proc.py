"""Process table: allocation, fork, exit, wait, sleep/wakeup, kill and scheduling."""

from __future__ import annotations

import errno
import threading
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any, Iterator, List, Optional

from xvkit.locks import KernelPanic
from xvkit.mmu import PGSIZE

NPROC = 64
NOFILE = 16


class ProcState(IntEnum):
    """Life-cycle states of a process slot."""

    UNUSED = 0
    EMBRYO = 1
    SLEEPING = 2
    RUNNABLE = 3
    RUNNING = 4
    ZOMBIE = 5


_STATE_NAMES = {
    ProcState.UNUSED: "unused",
    ProcState.EMBRYO: "embryo",
    ProcState.SLEEPING: "sleep ",
    ProcState.RUNNABLE: "runble",
    ProcState.RUNNING: "run   ",
    ProcState.ZOMBIE: "zombie",
}


@dataclass(eq=False)
class Proc:
    """Per-process state."""

    pid: int = 0
    state: ProcState = ProcState.UNUSED
    parent: Optional["Proc"] = None
    chan: Any = None
    killed: bool = False
    name: str = ""
    sz: int = 0
    ofile: List[Any] = field(default_factory=lambda: [None] * NOFILE)
    cwd: Any = None


class ProcessTable:
    """A fixed-size table of process slots."""

    def __init__(self, nproc: int = NPROC) -> None:
        if nproc <= 0:
            raise ValueError("the table needs at least one slot")
        self.procs = [Proc() for _ in range(nproc)]
        self.nextpid = 1
        self.initproc: Optional[Proc] = None
        self._lock = threading.RLock()

    def allocproc(self) -> Optional[Proc]:
        """Claim an unused slot as an embryo with a fresh pid; None if the table is full."""
        with self._lock:
            for p in self.procs:
                if p.state == ProcState.UNUSED:
                    p.state = ProcState.EMBRYO
                    p.pid = self.nextpid
                    self.nextpid += 1
                    return p
        return None

    def userinit(self) -> Proc:
        """Create the first user process."""
        p = self.allocproc()
        if p is None:
            raise KernelPanic("userinit: out of memory?")
        self.initproc = p
        p.sz = PGSIZE
        p.name = "initcode"
        p.cwd = "/"
        with self._lock:
            p.state = ProcState.RUNNABLE
        return p

    def fork(self, parent: Proc) -> int:
        """Create a runnable copy of parent and return the child's pid."""
        child = self.allocproc()
        if child is None:
            raise OSError(errno.EAGAIN, "fork: no free process slot")
        child.sz = parent.sz
        child.parent = parent
        child.ofile = list(parent.ofile)
        child.cwd = parent.cwd
        child.name = parent.name
        with self._lock:
            child.state = ProcState.RUNNABLE
        return child.pid

    def _wakeup1(self, chan: Any) -> None:
        for p in self.procs:
            if p.state == ProcState.SLEEPING and p.chan == chan:
                p.state = ProcState.RUNNABLE

    def exit(self, proc: Proc) -> None:
        """Turn proc into a zombie, passing its children to init."""
        if proc is self.initproc:
            raise KernelPanic("init exiting")
        proc.ofile = [None] * NOFILE
        proc.cwd = None
        with self._lock:
            self._wakeup1(proc.parent)
            for p in self.procs:
                if p.parent is proc:
                    p.parent = self.initproc
                    if p.state == ProcState.ZOMBIE:
                        self._wakeup1(self.initproc)
            proc.state = ProcState.ZOMBIE

    def wait(self, proc: Proc) -> Optional[int]:
        """Reap an exited child and return its pid.

        If children exist but none has exited, proc is put to sleep and None
        is returned; call again once it is runnable.
        """
        with self._lock:
            havekids = False
            for p in self.procs:
                if p.parent is not proc:
                    continue
                havekids = True
                if p.state == ProcState.ZOMBIE:
                    pid = p.pid
                    p.pid = 0
                    p.parent = None
                    p.name = ""
                    p.killed = False
                    p.sz = 0
                    p.state = ProcState.UNUSED
                    return pid
            if not havekids or proc.killed:
                raise ChildProcessError("no child processes")
            self.sleep(proc, proc)
            return None

    def sleep(self, proc: Proc, chan: Any) -> None:
        """Put proc to sleep on chan."""
        if proc is None:
            raise KernelPanic("sleep")
        with self._lock:
            proc.chan = chan
            proc.state = ProcState.SLEEPING

    def wakeup(self, chan: Any) -> None:
        """Make every process sleeping on chan runnable."""
        with self._lock:
            self._wakeup1(chan)

    def kill(self, pid: int) -> None:
        """Mark the process with pid as killed, waking it if asleep."""
        with self._lock:
            for p in self.procs:
                if p.pid == pid:
                    p.killed = True
                    if p.state == ProcState.SLEEPING:
                        p.state = ProcState.RUNNABLE
                    return
        raise ProcessLookupError(f"no process with pid {pid}")

    def yield_cpu(self, proc: Proc) -> None:
        """Give up the CPU for one scheduling round."""
        with self._lock:
            proc.state = ProcState.RUNNABLE

    def schedule(self) -> Iterator[Proc]:
        """One pass over the table, running each runnable process in turn.

        Each yielded process is RUNNING; before the next one is chosen it must
        have left that state (by yielding, sleeping or exiting).
        """
        for p in self.procs:
            with self._lock:
                if p.state != ProcState.RUNNABLE:
                    continue
                p.state = ProcState.RUNNING
                p.chan = None
            yield p
            if p.state == ProcState.RUNNING:
                raise KernelPanic("sched running")

    def procdump(self) -> str:
        """A listing of every used slot: pid, state and name, one per line."""
        lines = []
        for p in self.procs:
            if p.state == ProcState.UNUSED:
                continue
            state = _STATE_NAMES.get(p.state, "???")
            lines.append(f"{p.pid} {state} {p.name}\n")
        return "".join(lines)