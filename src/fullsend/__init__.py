"""
Fullsend - A tool for bundling a codebase into a single document for LLMs.

This package scans a directory tree, filters files using built-in defaults,
``.gitignore`` and ``.fullsendignore`` patterns, reads the remaining text
files concurrently and renders them as Markdown or XML, annotated with an
optional file tree and a token-count estimate.
"""

__version__ = "2.0.0"
__author__ = "Fullsend Team"
