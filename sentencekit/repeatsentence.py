"""Drop sentences already seen recently on the same text thread."""

from __future__ import annotations

import re
import threading
from collections.abc import Mapping
from typing import Any, Optional

DEFAULT_CACHE_SIZE = 30
_CACHE_SIZE_NAME = re.compile(r"Remove\s*([+-]?\d+)")


def cache_size_from_filename(filename: str) -> int:
    """Read N from a file named like ``Remove N Repeated Sentences.xdll``.

    Returns the default of 30 when the name does not carry a number.
    """
    basename = re.split(r"[\\/]", filename)[-1]
    match = _CACHE_SIZE_NAME.match(basename)
    return int(match.group(1)) if match else DEFAULT_CACHE_SIZE


class RepeatedSentenceFilter:
    """Remembers the last ``cache_size`` sentences of each thread."""

    def __init__(self, cache_size: int = DEFAULT_CACHE_SIZE):
        self.cache_size = cache_size
        self._lock = threading.Lock()
        self._history: dict[int, list[str]] = {}

    def process_sentence(self, sentence: str, info: Mapping[str, Any]) -> Optional[str]:
        """Return "" for a repeated sentence, ``None`` otherwise."""
        text_number = info["text number"]
        if text_number == 0:
            return None
        with self._lock:
            previous = self._history.setdefault(text_number, [])
            previous.append(sentence)
            first = previous.index(sentence)
            repeated = first != len(previous) - 1
            if repeated:
                del previous[first]
            if len(previous) > self.cache_size:
                del previous[0]
        return "" if repeated else None