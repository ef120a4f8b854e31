"""
Core logic for fullsend: scan -> read -> format -> count tokens.
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Callable, Optional, Tuple

from .config import Config
from .formatters import format_xml, get_formatter
from .ignore import create_filter
from .log import log
from .reader import DEFAULT_CONCURRENCY, read_files
from .scanner import scan_directory
from .tokens import count_tokens


class FileStatus(str, Enum):
    LOADED = "loaded"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclass(frozen=True)
class LightweightFile:
    """Per-file report record; carries no content."""

    path: str
    size: int
    status: FileStatus
    error: Optional[str] = None


@dataclass(frozen=True)
class BundleMetadata:
    total_tokens: int
    files_skipped: int
    duration: float  # seconds


@dataclass(frozen=True)
class BundleResult:
    files: Tuple[LightweightFile, ...]
    output: str
    metadata: BundleMetadata

    def _with_status(self, status: FileStatus) -> Tuple[LightweightFile, ...]:
        return tuple(f for f in self.files if f.status is status)

    @property
    def loaded_files(self) -> Tuple[LightweightFile, ...]:
        return self._with_status(FileStatus.LOADED)

    @property
    def skipped_files(self) -> Tuple[LightweightFile, ...]:
        return self._with_status(FileStatus.SKIPPED)

    @property
    def failed_files(self) -> Tuple[LightweightFile, ...]:
        return self._with_status(FileStatus.FAILED)

    @property
    def loaded_size(self) -> int:
        return sum(f.size for f in self.loaded_files)


def bundle(
    root: Path,
    config: Config,
    concurrency: int = DEFAULT_CONCURRENCY,
    add_instruction: bool = True,
    on_entry: Optional[Callable[[str], None]] = None,
) -> BundleResult:
    """
    Bundle the project at *root* into a single Markdown or XML string.

    Raises :class:`~fullsend.errors.InvalidRootError` if *root* is not a
    directory. Unreadable files are reported, not raised.
    """
    started = time.perf_counter()

    scan = scan_directory(root, create_filter(Path(root), config.use_gitignore), on_entry=on_entry)
    if config.verbose:
        log(f"{len(scan.included_entries)} files kept after filtering.")

    files = read_files(scan.included_entries, config.max_file_size, concurrency)
    if config.verbose:
        log(
            f"{len(files.loaded)} loaded, {len(files.skipped)} skipped, "
            f"{len(files.failed)} failed."
        )

    tree_entries = scan.all_entries if config.show_file_tree else None
    formatter = get_formatter(config.format)
    extra = {"add_instruction": add_instruction} if formatter is format_xml else {}
    output = formatter(files.loaded, config.show_file_tree, tree_entries, **extra)

    records = (
        [LightweightFile(f.relative_path, f.size, FileStatus.LOADED) for f in files.loaded]
        + [LightweightFile(s.entry.relative_path, s.entry.size, FileStatus.SKIPPED) for s in files.skipped]
        + [
            LightweightFile(f.entry.relative_path, f.entry.size, FileStatus.FAILED, str(f.error))
            for f in files.failed
        ]
    )

    return BundleResult(
        files=tuple(records),
        output=output,
        metadata=BundleMetadata(
            total_tokens=count_tokens(output),
            files_skipped=len(files.skipped),
            duration=time.perf_counter() - started,
        ),
    )
