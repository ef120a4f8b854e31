"""
Output formatters: one function per bundle format.
"""

from __future__ import annotations

from typing import Callable, Dict

from .languages import get_language
from .markdown import format_markdown
from .xml import XML_INSTRUCTION, escape_cdata, escape_xml_attribute, format_xml

Formatter = Callable[..., str]

FORMATTERS: Dict[str, Formatter] = {
    "markdown": format_markdown,
    "xml": format_xml,
}


def get_formatter(name: str) -> Formatter:
    try:
        return FORMATTERS[name]
    except KeyError:
        raise ValueError(f"Unknown format '{name}' (expected one of: {', '.join(FORMATTERS)})")


__all__ = [
    "FORMATTERS",
    "XML_INSTRUCTION",
    "escape_cdata",
    "escape_xml_attribute",
    "format_markdown",
    "format_xml",
    "get_formatter",
    "get_language",
]
