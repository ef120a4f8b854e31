"""
Directory traversal with ignore filtering.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, List, Optional, Tuple

from .errors import InvalidRootError
from .ignore import PathFilter, create_filter
from .log import log


@dataclass(frozen=True)
class ScanEntry:
    """One filesystem object found during a scan."""

    path: Path
    relative_path: str
    size: int
    is_directory: bool = False
    is_filtered: bool = False


@dataclass(frozen=True)
class ScanResult:
    # files, kept directories and filtered directory placeholders
    all_entries: List[ScanEntry] = field(default_factory=list)
    # files eligible for content loading
    included_entries: List[ScanEntry] = field(default_factory=list)


def name_sort_key(name: str) -> Tuple[str, str]:
    """Case-insensitive ordering with a case-sensitive tie-break."""
    return (name.casefold(), name)


def path_sort_key(rel_path: str) -> List[Tuple[str, str]]:
    return [name_sort_key(part) for part in rel_path.split("/")]


def _resolve_root(root: Path) -> Path:
    try:
        root = Path(root).resolve()
    except (OSError, RuntimeError) as e:
        raise InvalidRootError(f"Could not resolve root path '{root}': {e}")
    if not root.exists():
        raise InvalidRootError(f"Root directory '{root}' does not exist")
    if not root.is_dir():
        raise InvalidRootError(f"Root path '{root}' is not a directory")
    return root


def scan_directory(
    root: Path,
    path_filter: Optional[PathFilter] = None,
    use_gitignore: bool = True,
    on_entry: Optional[Callable[[str], None]] = None,
) -> ScanResult:
    """
    Walk *root* and collect the files that survive *path_filter*.

    Ignored directories are recorded once as filtered placeholders and never
    descended into. Unreadable directories and files whose ``stat`` fails are
    skipped without aborting the walk.
    """
    root = _resolve_root(root)
    if path_filter is None:
        path_filter = create_filter(root, use_gitignore)

    all_entries: List[ScanEntry] = []
    included: List[ScanEntry] = []
    stack: List[Tuple[Path, str]] = [(root, "")]

    while stack:
        current, rel_dir = stack.pop()
        try:
            with os.scandir(current) as it:
                dir_entries = list(it)
        except OSError as e:
            log(f"Could not read directory {current}: {e}", "debug")
            continue

        for entry in dir_entries:
            rel = f"{rel_dir}/{entry.name}" if rel_dir else entry.name
            try:
                is_dir = entry.is_dir(follow_symlinks=False)
                is_file = not is_dir and entry.is_file()
            except OSError:
                continue

            if is_dir:
                if path_filter.ignores(rel + "/"):
                    all_entries.append(
                        ScanEntry(Path(entry.path), rel, 0, is_directory=True, is_filtered=True)
                    )
                    continue
                all_entries.append(ScanEntry(Path(entry.path), rel, 0, is_directory=True))
                stack.append((Path(entry.path), rel))
            elif is_file:
                if path_filter.ignores(rel):
                    continue
                try:
                    size = entry.stat().st_size
                except OSError as e:
                    log(f"Could not stat {rel}: {e}", "debug")
                    continue
                scanned = ScanEntry(Path(entry.path), rel, size)
                all_entries.append(scanned)
                included.append(scanned)
                if on_entry is not None:
                    on_entry(rel)

    all_entries.sort(key=lambda e: path_sort_key(e.relative_path))
    included.sort(key=lambda e: path_sort_key(e.relative_path))
    return ScanResult(all_entries=all_entries, included_entries=included)
