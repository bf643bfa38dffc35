"""Remove files and empty directories."""

from __future__ import annotations

import os
import sys
from typing import List, Optional


def _unlink(path: str) -> None:
    if os.path.isdir(path) and not os.path.islink(path):
        os.rmdir(path)
    else:
        os.unlink(path)


def main(argv: Optional[List[str]] = None) -> int:
    """Remove each named path, stopping at the first failure."""
    if argv is None:
        argv = sys.argv[1:]
    if not argv:
        sys.stderr.write("Usage: rm files...\n")
        return 1
    for path in argv:
        try:
            _unlink(path)
        except OSError:
            sys.stderr.write(f"rm: {path} failed to delete\n")
            return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())