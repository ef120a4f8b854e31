"""Extension to fenced-code-block language lookup."""

from __future__ import annotations

import posixpath
from typing import Dict

_LANG_MAP: Dict[str, str] = {
    "js": "javascript",
    "jsx": "javascript",
    "mjs": "javascript",
    "cjs": "javascript",
    "ts": "typescript",
    "tsx": "typescript",
    "py": "python",
    "pyi": "python",
    "rb": "ruby",
    "go": "go",
    "java": "java",
    "c": "c",
    "cpp": "cpp",
    "cc": "cpp",
    "cxx": "cpp",
    "h": "c",
    "hpp": "cpp",
    "cs": "csharp",
    "php": "php",
    "swift": "swift",
    "kt": "kotlin",
    "rs": "rust",
    "sh": "bash",
    "bash": "bash",
    "zsh": "bash",
    "fish": "bash",
    "yaml": "yaml",
    "yml": "yaml",
    "toml": "toml",
    "json": "json",
    "xml": "xml",
    "html": "html",
    "htm": "html",
    "css": "css",
    "scss": "scss",
    "sass": "sass",
    "less": "less",
    "sql": "sql",
    "md": "markdown",
    "mdx": "markdown",
    "vue": "vue",
    "svelte": "svelte",
    "astro": "astro",
    "dockerfile": "dockerfile",
    "makefile": "makefile",
    "cmake": "cmake",
    "gradle": "gradle",
    "r": "r",
    "m": "matlab",
    "jl": "julia",
    "lua": "lua",
    "pl": "perl",
    "scala": "scala",
    "clj": "clojure",
    "ex": "elixir",
    "exs": "elixir",
    "erl": "erlang",
    "hrl": "erlang",
    "nim": "nim",
    "nix": "nix",
    "ml": "ocaml",
    "fs": "fsharp",
    "fsx": "fsharp",
    "graphql": "graphql",
    "gql": "graphql",
    "proto": "protobuf",
    "sol": "solidity",
    "zig": "zig",
}

# Matched on the lowercased basename, for files without a useful extension
_NAME_MAP: Dict[str, str] = {
    "makefile": "makefile",
    "gnumakefile": "makefile",
    "dockerfile": "dockerfile",
    "containerfile": "dockerfile",
    "cmakelists.txt": "cmake",
    "gemfile": "ruby",
    "rakefile": "ruby",
    "jenkinsfile": "groovy",
}


def get_language(path: str) -> str:
    """Return the fence language for *path*, or ``""`` when unknown."""
    name = posixpath.basename(path.replace("\\", "/")).lower()
    if name in _NAME_MAP:
        return _NAME_MAP[name]
    dot = name.rfind(".")
    if dot <= 0 or dot == len(name) - 1:
        return ""
    return _LANG_MAP.get(name[dot + 1:], "")
