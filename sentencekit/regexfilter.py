"""Filter sentences through a user-chosen regular expression.

Every match is replaced with its first group (an empty string when the
expression has none). Filters can be saved per process and are picked up
again the next time that process sends text.
"""

from __future__ import annotations

import os
import re
import threading
from collections.abc import Callable, Mapping
from pathlib import Path
from typing import Any, Optional, Union

from sentencekit.blockmarkup import decode_markup, iter_blocks
from sentencekit.regexreplacer import RegexReplacement

SAVE_FILE = "SavedRegexFilters.txt"
REPLACEMENT = "$1"


def _process_path(process_id: int) -> Optional[str]:
    """Return the executable path of a process, where the system exposes it."""
    try:
        return os.readlink(f"/proc/{process_id}/exe")
    except (OSError, ValueError):
        return None


class RegexFilter:
    """Keeps only what the current expression's first group captures."""

    def __init__(
        self,
        save_path: Union[str, Path] = SAVE_FILE,
        process_name: Callable[[int], Optional[str]] = _process_path,
    ):
        self.save_path = Path(save_path)
        self._process_name = process_name
        self._lock = threading.Lock()
        self._replacement: Optional[RegexReplacement] = None

    @property
    def pattern(self) -> Optional[str]:
        """The active expression, or ``None`` when no filter is set."""
        with self._lock:
            return None if self._replacement is None else self._replacement.pattern.pattern

    def set_regex(self, pattern: str) -> None:
        """Use ``pattern`` from now on; an empty pattern turns filtering off.

        Raises ``ValueError`` for an invalid expression and keeps the old one.
        """
        if not pattern:
            with self._lock:
                self._replacement = None
            return
        try:
            compiled = re.compile(pattern)
        except re.error as exc:
            raise ValueError(f"invalid regular expression {pattern!r}: {exc}") from exc
        with self._lock:
            self._replacement = RegexReplacement(compiled, REPLACEMENT, True)

    def save(self, process_name: str, pattern: str) -> None:
        """Append a filter for ``process_name`` to the save file."""
        record = f"\ufeff|PROCESS|{process_name}|FILTER|{pattern}|END|\r\n"
        with self.save_path.open("ab") as stream:
            stream.write(record.encode("utf-16-le"))

    def saved_filter(self, process_name: str) -> Optional[str]:
        """Return the last filter saved for ``process_name``, if any."""
        try:
            data = self.save_path.read_bytes()
        except OSError:
            return None
        found = None
        for name, pattern in iter_blocks(decode_markup(data), ("|PROCESS|", "|FILTER|")):
            if name == process_name:
                found = pattern
        return found

    def process_sentence(self, sentence: str, info: Mapping[str, Any]) -> Optional[str]:
        if info["text number"] == 0:
            return None
        if self.pattern is None:
            name = self._process_name(info["process id"])
            if name:
                saved = self.saved_filter(name)
                if saved is not None:
                    try:
                        self.set_regex(saved)
                    except ValueError:
                        pass
        with self._lock:
            replacement = self._replacement
        if replacement is not None:
            sentence = replacement.apply(sentence)
        return sentence