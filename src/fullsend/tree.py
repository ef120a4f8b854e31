"""
Box-drawing file tree rendering.
"""

from __future__ import annotations

from typing import Dict, Iterable, Iterator, List, Optional, Tuple, Union

from .scanner import ScanEntry, name_sort_key


class _Filtered:
    def __repr__(self) -> str:
        return "FILTERED"


# Placeholder for an ignored directory whose contents are not shown
FILTERED = _Filtered()

Node = Dict[str, Union["Node", None, _Filtered]]


def _build(entries: Iterable[ScanEntry], show_filtered: bool) -> Node:
    tree: Node = {}
    for entry in entries:
        if entry.is_filtered and not show_filtered:
            continue
        parts = [p for p in entry.relative_path.split("/") if p]
        if not parts:
            continue
        cur = tree
        for part in parts[:-1]:
            child = cur.get(part)
            if not isinstance(child, dict):
                child = {}
                cur[part] = child
            cur = child
        leaf = parts[-1]
        if entry.is_filtered:
            cur[leaf] = FILTERED
        elif entry.is_directory:
            if not isinstance(cur.get(leaf), dict):
                cur[leaf] = {}
        elif leaf not in cur:
            cur[leaf] = None
    return tree


def _sorted_items(node: Node) -> List[Tuple[str, object]]:
    # dirs (including filtered placeholders) first
    return sorted(node.items(), key=lambda kv: (kv[1] is None, name_sort_key(kv[0])))


def _count(node: Node) -> int:
    total = 0
    for child in node.values():
        total += 1
        if isinstance(child, dict):
            total += _count(child)
    return total


def _walk(node: Node, prefix: str = "") -> Iterator[Tuple[str, str]]:
    """Yield ``(prefix, line)`` pairs in render order."""
    items = _sorted_items(node)
    for idx, (name, child) in enumerate(items):
        last = idx == len(items) - 1
        connector = "└── " if last else "├── "
        if child is FILTERED:
            label = f"{name}/..."
        elif isinstance(child, dict):
            label = f"{name}/"
        else:
            label = name
        yield prefix, f"{prefix}{connector}{label}"
        if isinstance(child, dict):
            yield from _walk(child, prefix + ("    " if last else "│   "))


def generate_tree(
    entries: Iterable[ScanEntry],
    limit: Optional[int] = None,
    show_filtered: bool = False,
) -> str:
    """
    Render *entries* as an indented tree, one ``\\n``-terminated line each.

    Directories sort before files. With *show_filtered*, ignored directories
    appear as ``name/...`` and are not expanded. *limit* caps the total number
    of rendered lines; the rest are summarised as ``... (N more items)``.
    """
    tree = _build(entries, show_filtered)
    if not tree:
        return ""

    lines: List[str] = []
    total = _count(tree) if limit is not None else 0
    for prefix, line in _walk(tree):
        if limit is not None and len(lines) >= limit:
            lines.append(f"{prefix}└── ... ({total - len(lines)} more items)")
            break
        lines.append(line)
    return "".join(f"{ln}\n" for ln in lines)
