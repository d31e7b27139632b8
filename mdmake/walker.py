"""Recursive directory listing."""

import os
from pathlib import Path
from typing import Iterator, List, Tuple


def is_markdown(path: Path) -> bool:
    return path.suffix.lower() == ".md"


def _scan(root: Path) -> Iterator[Tuple[bool, Path]]:
    # os.scandir raises instead of skipping unreadable subdirectories
    with os.scandir(root) as entries:
        for entry in entries:
            path = Path(entry.path)
            if entry.is_dir():
                yield True, path
                yield from _scan(path)
            else:
                yield False, path


def walk_files(root: Path) -> List[Path]:
    """Return every file below ``root``, in no particular order.

    A missing root gives an empty list. Any ``OSError`` raised while
    reading a subdirectory propagates; partial listings are never returned.
    """
    root = Path(root)
    if not root.is_dir():
        return []
    return [path for is_dir, path in _scan(root) if not is_dir]


def walk_dirs(root: Path) -> List[Path]:
    """Return every subdirectory below ``root`` (the root itself excluded)."""
    root = Path(root)
    if not root.is_dir():
        return []
    return [path for is_dir, path in _scan(root) if is_dir]
