"""Count lines, words and bytes."""

from __future__ import annotations

import sys
from dataclasses import dataclass
from typing import BinaryIO, List, Optional

_CHUNK = 512
# The NUL byte also separates words.
_SEPARATORS = frozenset(b" \r\t\n\v\0")


@dataclass(frozen=True)
class WordCount:
    """Line, word and byte totals."""

    lines: int
    words: int
    chars: int

    def report(self, name: str) -> str:
        """The output line for a file of the given name."""
        return f"{self.lines} {self.words} {self.chars} {name}"


def count_stream(stream: BinaryIO) -> WordCount:
    """Count a binary stream read in 512-byte chunks."""
    lines = words = chars = 0
    inword = False
    while True:
        chunk = stream.read(_CHUNK)
        if not chunk:
            break
        for byte in chunk:
            chars += 1
            if byte == 0x0A:
                lines += 1
            if byte in _SEPARATORS:
                inword = False
            elif not inword:
                words += 1
                inword = True
    return WordCount(lines, words, chars)


def count(data: bytes) -> WordCount:
    """Count a block of bytes."""
    lines = data.count(b"\n")
    words = 0
    inword = False
    for byte in data:
        if byte in _SEPARATORS:
            inword = False
        elif not inword:
            words += 1
            inword = True
    return WordCount(lines, words, len(data))


def main(argv: Optional[List[str]] = None) -> int:
    """Print counts for each named file, or for standard input."""
    if argv is None:
        argv = sys.argv[1:]
    out = sys.stdout
    if not argv:
        try:
            result = count_stream(sys.stdin.buffer)
        except OSError:
            out.write("wc: read error\n")
            return 1
        out.write(result.report("") + "\n")
        return 0
    for name in argv:
        try:
            stream = open(name, "rb")
        except OSError:
            out.write(f"wc: cannot open {name}\n")
            return 1
        with stream:
            try:
                result = count_stream(stream)
            except OSError:
                out.write("wc: read error\n")
                return 1
        out.write(result.report(name) + "\n")
    return 0


if __name__ == "__main__":
    sys.exit(main())