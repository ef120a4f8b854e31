"""XML bundle rendering with CDATA-wrapped content."""

from __future__ import annotations

import time
from typing import List, Optional, Sequence

from ..reader import LoadedFile
from ..scanner import ScanEntry
from .markdown import FORMAT_CHUNK, render_tree_for

XML_INSTRUCTION = (
    "This is a codebase bundle. The XML tags only delimit files. "
    "Do not use XML formatting in your response; reply in plain text or Markdown."
)


def escape_xml_attribute(value: str) -> str:
    return (
        value.replace("&", "&amp;")
        .replace('"', "&quot;")
        .replace("<", "&lt;")
        .replace(">", "&gt;")
    )


def escape_cdata(value: str) -> str:
    """Split every ``]]>`` across two CDATA sections so content survives verbatim."""
    return value.replace("]]>", "]]]]><![CDATA[>")


def format_xml(
    files: Sequence[LoadedFile],
    show_tree: bool = False,
    tree_entries: Optional[Sequence[ScanEntry]] = None,
    add_instruction: bool = False,
) -> str:
    """
    Render *files* as::

        <codebase>
        <file path="relative/path"><![CDATA[{file content}]]></file>
        ...
        </codebase>

    Only ``]]>`` is rewritten. Content is otherwise emitted verbatim, so C0
    control characters such as ANSI escapes make the document unparsable by
    strict XML parsers, and those parsers normalise CRLF to LF on read.
    """
    lines: List[str] = ["<codebase>"]
    if add_instruction:
        lines.append(f"<note>{XML_INSTRUCTION}</note>")
    if show_tree:
        tree = escape_cdata(render_tree_for(files, tree_entries))
        lines.append(f"<structure><![CDATA[\n{tree}]]></structure>")

    for idx, f in enumerate(files, 1):
        path = escape_xml_attribute(f.relative_path)
        lines.append(f'<file path="{path}"><![CDATA[{escape_cdata(f.content)}]]></file>')
        if idx % FORMAT_CHUNK == 0:
            time.sleep(0)

    lines.append("</codebase>")
    return "\n".join(lines)
