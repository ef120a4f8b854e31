"""
Terminal presentation for the fullsend CLI.

Everything here writes to stderr so that ``--stdout`` output stays clean.
"""

from __future__ import annotations

import itertools
import sys
import threading
from pathlib import Path
from typing import TYPE_CHECKING, Iterable, List, Optional, TextIO

from colorama import Fore, Style

from .log import log
from .scanner import ScanEntry
from .tree import generate_tree

if TYPE_CHECKING:
    from .core import BundleResult, LightweightFile

# Console tree preview is much stricter than the tree embedded in the bundle
CONSOLE_TREE_LIMIT = 25


def format_size(num_bytes: int) -> str:
    """Human readable byte count, e.g. ``1.5 KB``."""
    if num_bytes <= 0:
        return "0 B"
    units = ["B", "KB", "MB", "GB"]
    idx = 0
    while num_bytes >= 1024 ** (idx + 1) and idx < len(units) - 1:
        idx += 1
    value = round(num_bytes / (1024 ** idx), 1)
    if value == int(value):
        value = int(value)
    return f"{value} {units[idx]}"


def format_number(num: int) -> str:
    """Compact number formatting, e.g. ``1200 -> 1.2k``."""
    for threshold, suffix in ((1_000_000_000, "b"), (1_000_000, "m"), (1_000, "k")):
        if abs(num) >= threshold:
            value = round(num / threshold, 1)
            if value == int(value):
                value = int(value)
            return f"{value}{suffix}"
    return str(num)


class Spinner:
    """Minimal threaded spinner; a no-op when stderr is not a terminal."""

    FRAMES = "⠋⠙⠹⠸⠼⠴⠦⠧⠇⠏"

    def __init__(self, stream: Optional[TextIO] = None, interval: float = 0.08):
        self.stream = stream or sys.stderr
        self.interval = interval
        self.text = ""
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None

    @property
    def enabled(self) -> bool:
        return hasattr(self.stream, "isatty") and self.stream.isatty()

    def start(self, text: str) -> None:
        if self._thread is not None:
            return
        self.text = text
        if not self.enabled:
            return
        self._stop.clear()
        self._thread = threading.Thread(target=self._spin, daemon=True)
        self._thread.start()

    def update(self, text: str) -> None:
        self.text = text

    def _spin(self) -> None:
        for frame in itertools.cycle(self.FRAMES):
            if self._stop.is_set():
                break
            self.stream.write(f"\r{Style.DIM}{frame}{Style.RESET_ALL} {self.text}\033[K")
            self.stream.flush()
            self._stop.wait(self.interval)

    def _halt(self) -> None:
        if self._thread is None:
            return
        self._stop.set()
        self._thread.join()
        self._thread = None
        self.stream.write("\r\033[K")
        self.stream.flush()

    def stop(self) -> None:
        self._halt()

    def fail(self, text: str) -> None:
        self._halt()
        print(f"{Fore.RED}✖{Style.RESET_ALL} {text}", file=self.stream)


def render_tree(files: Iterable["LightweightFile"], stream: Optional[TextIO] = None) -> None:
    """Print a truncated file-tree preview of the bundled files."""
    stream = stream or sys.stderr
    entries = [ScanEntry(path=Path(f.path), relative_path=f.path, size=f.size) for f in files]
    tree = generate_tree(entries, limit=CONSOLE_TREE_LIMIT)

    dim, reset = Style.DIM, Style.RESET_ALL
    print("", file=stream)
    print(f"  {dim}┌{reset}  {Fore.CYAN}File Tree{reset}", file=stream)
    print(f"  {dim}│{reset}", file=stream)
    if not tree.strip():
        print(f"  {dim}│  (No files){reset}", file=stream)
    else:
        for line in tree.rstrip("\n").split("\n"):
            print(f"  {dim}│  {line}{reset}", file=stream)
    print(f"  {dim}└{reset}", file=stream)


def render_failures(result: "BundleResult", stream: Optional[TextIO] = None) -> None:
    """List every file that could not be read, with its error (verbose only)."""
    stream = stream or sys.stderr
    for f in result.failed_files:
        log(f"! Could not read {f.path}: {f.error}", "warn", stream)


def render_success(
    result: "BundleResult",
    destination: str,
    dry_run: bool = False,
    stream: Optional[TextIO] = None,
) -> None:
    """Render the end-of-run summary box."""
    stream = stream or sys.stderr
    dim, reset = Style.DIM, Style.RESET_ALL
    meta = result.metadata

    lines: List[str] = [
        "",
        f"  {dim}┌{reset}  fullsend",
        f"  {dim}│{reset}",
        f"  {dim}◇{reset}  {format_number(len(result.loaded_files))} files bundled",
        f"  {dim}│  {format_size(result.loaded_size)} processed{reset}",
    ]
    if not dry_run and meta.total_tokens > 0:
        lines.append(f"  {dim}│  {format_number(meta.total_tokens)} tokens generated{reset}")
    if meta.files_skipped > 0:
        lines.append(f"  {dim}│  {format_number(meta.files_skipped)} files skipped{reset}")
    if result.failed_files:
        lines.append(f"  {dim}│{reset}  {Fore.YELLOW}{len(result.failed_files)} files failed to read{reset}")
    lines.append(f"  {dim}│{reset}")

    if dry_run:
        lines.append(f"  {Fore.YELLOW}○{reset} Dry Run Complete")
    else:
        lines.append(f"  {Fore.GREEN}└→{reset} {destination}")
    lines.append(f"     {dim}{meta.duration:.2f}s{reset}")
    lines.append("")
    print("\n".join(lines), file=stream)


def render_empty(stream: Optional[TextIO] = None) -> None:
    """Render the message shown when nothing survived filtering."""
    stream = stream or sys.stderr
    dim, reset = Style.DIM, Style.RESET_ALL
    print(
        "\n".join(
            [
                "",
                f"  {dim}┌{reset}  fullsend",
                f"  {dim}│{reset}",
                f"  {Fore.YELLOW}○{reset}  No files found",
                f"  {dim}│  All files were filtered or directory is empty{reset}",
                f"  {dim}│{reset}",
                f"  {dim}└  Try adjusting ignore patterns or check the path{reset}",
                "",
            ]
        ),
        file=stream,
    )
