"""Resolve the configured file patterns to local asset paths."""

from __future__ import annotations

import glob
from collections.abc import Iterable
from pathlib import Path

__all__ = ["expand_paths", "unmatched_patterns"]


def _matches(pattern: str, root: Path) -> list[Path]:
    out: list[Path] = []
    for hit in sorted(glob.glob(pattern, root_dir=root, recursive=True)):
        path = Path(hit)
        if not path.is_absolute():
            path = root / path
        if path.is_file():
            out.append(path)
    return out


def expand_paths(patterns: Iterable[str], *, root: Path) -> list[Path]:
    """Regular files matched by any pattern, de-duplicated, in pattern order."""
    seen: set[Path] = set()
    out: list[Path] = []
    for pattern in patterns:
        for path in _matches(pattern, root):
            key = path.resolve()
            if key in seen:
                continue
            seen.add(key)
            out.append(path)
    return out


def unmatched_patterns(patterns: Iterable[str], *, root: Path) -> list[str]:
    return [p for p in patterns if not _matches(p, root)]
