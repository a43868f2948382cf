"""Remove prefixes of a sentence that reappear later in it."""

from __future__ import annotations

import time
from collections.abc import Mapping
from typing import Any, Optional

DEFAULT_TIMEOUT = 30.0


def remove_repeated_prefixes(sentence: str, timeout: float = DEFAULT_TIMEOUT) -> str:
    """Strip leading text that is repeated later in the sentence.

    Repeatedly looks for the longest prefix (after what was already removed)
    that occurs again further on, and drops it. The result is used only if
    the removed pieces average at least three characters. Gives up after
    ``timeout`` seconds.
    """
    deadline = time.monotonic() + timeout
    size = len(sentence)
    skip = count = 0
    end = size
    while end > skip and time.monotonic() < deadline:
        length = end - skip
        if sentence.find(sentence[skip:end], end) >= 0:
            if count and length < min(skip // count, 4):
                break
            skip += length
            count += 1
            end = size
        end -= 1
    if count and skip // count >= 3:
        return sentence[skip:]
    return sentence


def process_sentence(sentence: str, info: Mapping[str, Any]) -> Optional[str]:
    """Extension entry point; console text (thread 0) is left alone."""
    if info["text number"] == 0:
        return None
    return remove_repeated_prefixes(sentence)