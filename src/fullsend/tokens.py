"""
Token-count estimation with a lazily loaded, process-wide tiktoken encoding.
"""

from __future__ import annotations

import threading
import time
from dataclasses import dataclass
from typing import Any, Optional, Union

import tiktoken

from .log import log

ENCODING_NAME = "cl100k_base"
CHUNK_SIZE = 500_000


@dataclass(frozen=True)
class Ready:
    encoding: Any

    def encode(self, text: str) -> int:
        return len(self.encoding.encode(text, disallowed_special=()))


@dataclass(frozen=True)
class Unavailable:
    reason: str


TokenizerState = Union[Ready, Unavailable]

_state: Optional[TokenizerState] = None
_lock = threading.Lock()


def _load() -> TokenizerState:
    try:
        return Ready(tiktoken.get_encoding(ENCODING_NAME))
    except Exception as e:  # ranks are fetched on first use and may be unreachable
        log(f"Failed to load tokenizer: {e}", "warn")
        return Unavailable(str(e))


def get_tokenizer() -> TokenizerState:
    """Return the shared tokenizer, loading it on first use."""
    global _state
    if _state is None:
        with _lock:
            if _state is None:
                _state = _load()
    return _state


def reset_tokenizer() -> None:
    """Forget the cached tokenizer (used by tests)."""
    global _state
    with _lock:
        _state = None


def count_tokens(text: str, chunk_size: int = CHUNK_SIZE) -> int:
    """
    Estimate the number of tokens in *text*.

    Large inputs are encoded in *chunk_size*-character slices and summed,
    yielding between slices; tokens straddling a slice boundary may be
    counted slightly differently. Returns 0 if no tokenizer is available.
    """
    tokenizer = get_tokenizer()
    if isinstance(tokenizer, Unavailable):
        return 0

    if len(text) < chunk_size:
        return tokenizer.encode(text)

    total = 0
    for start in range(0, len(text), chunk_size):
        total += tokenizer.encode(text[start:start + chunk_size])
        time.sleep(0)
    return total
