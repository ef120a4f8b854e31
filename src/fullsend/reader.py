"""
Bounded-concurrency file loading with size and binary screening.
"""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Sequence, Union

from .scanner import ScanEntry

DEFAULT_CONCURRENCY = 20


class SkipReason(str, Enum):
    OVERSIZE = "oversize"
    BINARY = "binary"


@dataclass(frozen=True)
class LoadedFile:
    entry: ScanEntry
    content: str

    @property
    def relative_path(self) -> str:
        return self.entry.relative_path

    @property
    def size(self) -> int:
        return self.entry.size


@dataclass(frozen=True)
class SkippedFile:
    entry: ScanEntry
    reason: SkipReason


@dataclass(frozen=True)
class FailedFile:
    entry: ScanEntry
    error: OSError


@dataclass(frozen=True)
class ReadResult:
    loaded: List[LoadedFile] = field(default_factory=list)
    skipped: List[SkippedFile] = field(default_factory=list)
    failed: List[FailedFile] = field(default_factory=list)


Outcome = Union[LoadedFile, SkippedFile, FailedFile]


def _is_binary(text: str) -> bool:
    return "\0" in text


def _load(entry: ScanEntry, max_file_size: int) -> Outcome:
    if entry.size > max_file_size:
        return SkippedFile(entry, SkipReason.OVERSIZE)
    try:
        raw = entry.path.read_bytes()
    except OSError as e:
        return FailedFile(entry, e)
    text = raw.decode("utf-8", errors="replace")
    if _is_binary(text):
        return SkippedFile(entry, SkipReason.BINARY)
    return LoadedFile(entry, text)


def read_files(
    entries: Sequence[ScanEntry],
    max_file_size: int,
    concurrency: int = DEFAULT_CONCURRENCY,
) -> ReadResult:
    """
    Read *entries* with at most *concurrency* files open at once.

    Every entry ends up in exactly one of the loaded, skipped or failed
    buckets; each bucket keeps the input order. A failing file never stops
    the others from being read.
    """
    if concurrency < 1:
        raise ValueError(f"concurrency must be at least 1, got {concurrency}")

    result = ReadResult()
    if not entries:
        return result

    with ThreadPoolExecutor(max_workers=min(concurrency, len(entries))) as pool:
        outcomes = list(pool.map(lambda e: _load(e, max_file_size), entries))

    for outcome in outcomes:
        if isinstance(outcome, LoadedFile):
            result.loaded.append(outcome)
        elif isinstance(outcome, SkippedFile):
            result.skipped.append(outcome)
        else:
            result.failed.append(outcome)
    return result
