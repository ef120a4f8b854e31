"""
Ignore-pattern resolution and gitignore-style path filtering.
"""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, List, Sequence

import pathspec

from .log import log

GITIGNORE_NAME = ".gitignore"
FULLSENDIGNORE_NAME = ".fullsendignore"

# Defaults & helpers
DEFAULT_IGNORE_PATTERNS: Sequence[str] = (
    # Version control
    ".git",
    ".svn",
    ".hg",
    # Dependencies
    "node_modules",
    "vendor",
    "bower_components",
    ".venv",
    "venv",
    # Build outputs
    "dist",
    "build",
    "out",
    "bin",
    "obj",
    "target",
    "coverage",
    # Caches
    ".cache",
    ".parcel-cache",
    ".next",
    ".nuxt",
    ".turbo",
    "__pycache__",
    ".pytest_cache",
    ".mypy_cache",
    "*.pyc",
    # Logs and locks
    "*.log",
    "*.lock",
    "package-lock.json",
    "yarn.lock",
    "pnpm-lock.yaml",
    "Gemfile.lock",
    "poetry.lock",
    "composer.lock",
    # Environment and secrets
    ".env",
    ".env.*",
    # IDE and OS
    ".DS_Store",
    "Thumbs.db",
    ".idea",
    ".vscode",
    "*.swp",
    "*.swo",
    # Binaries and compiled
    "*.dll",
    "*.exe",
    "*.pdb",
    "*.so",
    "*.dylib",
    "*.class",
    "*.jar",
    "*.war",
    "*.o",
    "*.a",
    # Images
    "*.png",
    "*.jpg",
    "*.jpeg",
    "*.gif",
    "*.ico",
    "*.svg",
    "*.webp",
    "*.bmp",
    # Fonts
    "*.woff",
    "*.woff2",
    "*.ttf",
    "*.eot",
    "*.otf",
    # Archives
    "*.zip",
    "*.tar",
    "*.gz",
    "*.rar",
    "*.7z",
    # Media
    "*.mp3",
    "*.mp4",
    "*.wav",
    "*.avi",
    "*.mov",
    "*.webm",
    # Documents
    "*.pdf",
    "*.doc",
    "*.docx",
    "*.xls",
    "*.xlsx",
    # Databases
    "*.sqlite",
    "*.db",
    # Source maps and minified
    "*.map",
    "*.min.js",
    "*.min.css",
    # Tool noise
    GITIGNORE_NAME,
    FULLSENDIGNORE_NAME,
    ".fullsendrc",
)


def extract_patterns(lines: Iterable[str]) -> List[str]:
    """Strip whitespace and drop blank lines and ``#`` comments."""
    return [ln.strip() for ln in lines if ln.strip() and not ln.lstrip().startswith("#")]


def _read_ignore_file(path: Path) -> List[str]:
    try:
        with path.open("r", encoding="utf-8") as fh:
            return extract_patterns(fh)
    except (OSError, UnicodeDecodeError) as e:
        log(f"No {path.name} found or not readable ({e}).", "debug")
        return []


def load_ignore_patterns(root: Path, use_gitignore: bool = True) -> List[str]:
    """
    Collect ignore patterns for *root* in precedence order.

    Defaults come first, then ``.gitignore`` (when *use_gitignore*), then
    ``.fullsendignore``. Later patterns may re-include earlier ones via ``!``.
    """
    patterns = list(DEFAULT_IGNORE_PATTERNS)
    if use_gitignore:
        patterns.extend(_read_ignore_file(root / GITIGNORE_NAME))
    patterns.extend(_read_ignore_file(root / FULLSENDIGNORE_NAME))
    log(f"Loaded {len(patterns)} ignore patterns.", "debug")
    return patterns


class PathFilter:
    """Answers "is this relative path ignored" with gitignore semantics."""

    def __init__(self, patterns: Iterable[str]):
        self.patterns = list(patterns)
        self._spec = pathspec.GitIgnoreSpec.from_lines(self.patterns)

    def ignores(self, rel_path: str) -> bool:
        """
        Return True if *rel_path* is ignored.

        *rel_path* is relative to the scan root; a trailing ``/`` marks a
        directory so that directory-only patterns such as ``build/`` apply.
        """
        rel = rel_path.replace("\\", "/").lstrip("/")
        if not rel or rel == "/":
            return False
        return self._spec.match_file(rel)


def create_filter(root: Path, use_gitignore: bool = True) -> PathFilter:
    return PathFilter(load_ignore_patterns(root, use_gitignore))
