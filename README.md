# xvkit

Pure-Python models of the core pieces of a small x86 teaching kernel and a
few of its user programs. They are meant for studying and testing kernel
ideas in plain Python, without an emulator.

## Modules

- `xvkit.mmu`: x86 paging and segmentation definitions. Constants such as
  `PGSIZE`, `PTE_P`, `PTE_W`, `PTE_U`, `SEG_KCODE` and `DPL_USER`; index
  helpers `pdx`, `ptx` and `pgaddr`; page rounding with `pg_round_up` and
  `pg_round_down`; entry decoding with `pte_addr` and `pte_flags`.
  `SegmentDescriptor` (built with `seg` or `seg16`) and `GateDescriptor`
  (built with `set_gate`, offset read back with `offset()`) pack to and from
  their 8-byte form with `to_bytes` / `from_bytes`, and reject field values
  that do not fit their bit widths.
- `xvkit.elf`: `ElfHeader` and `ProgramHeader` for 32-bit little-endian ELF
  files, with `parse` and `pack`; `ProgramHeader.is_loadable()`;
  `program_headers(data)` lists every program header of a file. Bad magic or
  truncated data raise `ElfFormatError`.
- `xvkit.strings`: C-style helpers over bytes (or `str`, encoded as UTF-8):
  `memcmp`, `strcmp`, `strncmp`, `strncpy`, `safestrcpy`, `atoi`, and
  `gets(stream, max)` which reads one line from a binary stream, keeping its
  line ending.
- `xvkit.umalloc`: `Allocator`, a first-fit allocator with an address-ordered
  circular free list over a simulated heap that grows through `sbrk`.
  `malloc` returns an address, `free` coalesces neighbouring blocks, and
  `free_blocks()` lists the free list. Running out of room raises
  `MemoryError`; freeing an address that was not allocated raises
  `ValueError`.
- `xvkit.syscalls`: `SyscallNumber` (fork = 1 through sem_release = 24);
  `UserMemory` for bounds-checked `fetch_int`, `fetch_str`, `arg_int`,
  `arg_ptr` and `arg_str`, raising `BadAddress`; `SyscallTable`, where
  `register` installs a handler and `dispatch` runs it, or writes
  `"<pid> <name>: unknown sys call <n>"` and returns -1.
- `xvkit.shell`: the shell's command grammar. `parse_command` turns a line
  into a tree of `ExecCmd`, `RedirCmd` (with a `RedirMode`), `PipeCmd`,
  `ListCmd` and `BackCmd`, and raises `ShellSyntaxError` on bad input or more
  than nine arguments. `Tokenizer` exposes the underlying `peek` and
  `next_token`.
- `xvkit.wc`: `count(data)` and `count_stream(stream)` return a `WordCount`
  of lines, words and bytes; `WordCount.report(name)` formats it.
- `xvkit.rm`: `main(argv)` removes files and empty directories.
- `xvkit.locks`: `Cpu` with `push_cli` / `pop_cli` interrupt-disable nesting;
  `SpinLock` (`acquire`, `release`, `holding` for a given `Cpu`);
  `SleepLock` owned by a pid (`acquire`, `try_acquire`, `release`,
  `holding`). Misuse such as re-acquiring or releasing a lock not held raises
  `KernelPanic`.
- `xvkit.proc`: `ProcessTable` of `Proc` slots in `ProcState` states, with
  `allocproc`, `userinit`, `fork`, `exit`, `wait`, `sleep`, `wakeup`,
  `kill`, `yield_cpu`, `procdump`, and `schedule()`, a generator that makes
  one pass over the table and yields each runnable process as it is set
  running. A full table makes `fork` raise `OSError`; `wait` with no
  children raises `ChildProcessError` and, when children are still running,
  puts the caller to sleep and returns `None`; `kill` of an unknown pid
  raises `ProcessLookupError`.

## Example

```python
from xvkit.shell import parse_command
from xvkit.wc import count

tree = parse_command("cat < in | wc > out &")
print(tree)

print(count(b"hello world\n"))  # WordCount(lines=1, words=2, chars=12)
```

## Commands

Installing the package provides two commands:

```
xvkit-wc [file ...]     # print lines, words and bytes for each file, or for stdin
xvkit-rm file ...       # delete files or empty directories, stopping at the first failure
```

Both exit with status 1 on failure.

## What it does not do

xvkit models data structures and rules; it is not a running system. The
shell only parses command lines and never executes them. There is no file
system, no page-table memory, no context switching and no device access:
`ProcessTable` tracks states and ownership only, and `SyscallTable` comes
with no handlers of its own.

## Tests

```
pip install -e ".[test]"
pytest
```