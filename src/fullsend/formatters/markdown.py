"""Markdown bundle rendering."""

from __future__ import annotations

import time
from typing import List, Optional, Sequence

from ..reader import LoadedFile
from ..scanner import ScanEntry
from ..tree import generate_tree
from .languages import get_language

# Files rendered between cooperative yields
FORMAT_CHUNK = 200


def render_tree_for(files: Sequence[LoadedFile], tree_entries: Optional[Sequence[ScanEntry]]) -> str:
    if tree_entries is not None:
        return generate_tree(tree_entries, show_filtered=True)
    return generate_tree(f.entry for f in files)


def format_markdown(
    files: Sequence[LoadedFile],
    show_tree: bool = False,
    tree_entries: Optional[Sequence[ScanEntry]] = None,
) -> str:
    """
    Render *files* as Markdown code blocks::

        relative/path/to/file:
        ```language
        {file content}
        ```

    Triple backticks inside file content are passed through untouched.
    """
    output = ""
    if show_tree:
        output += f"## File Structure\n\n```text\n{render_tree_for(files, tree_entries)}```\n\n"
    output += "## Files\n\n"

    blocks: List[str] = []
    for idx, f in enumerate(files, 1):
        lang = get_language(f.relative_path)
        blocks.append(f"{f.relative_path}:\n```{lang}\n{f.content}\n```")
        if idx % FORMAT_CHUNK == 0:
            time.sleep(0)
    return output + "\n\n".join(blocks)
