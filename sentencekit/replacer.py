"""Whitespace-insensitive text replacement driven by a markup file."""

from __future__ import annotations

import threading
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Optional, Union

from sentencekit.blockmarkup import decode_markup, iter_blocks

SAVE_FILE = "SavedReplacements.txt"
WILDCARD = "^"


def _ignored(ch: str) -> bool:
    return ord(ch) <= 0x20 or ch.isspace()


class _Node:
    __slots__ = ("children", "value")

    def __init__(self) -> None:
        self.children: dict[str, _Node] = {}
        self.value: Optional[str] = None


class Trie:
    """Replacement table built from ``|ORIG|...|BECOMES|...|END|`` records.

    Whitespace is ignored in both originals and sentences, and ``^`` in an
    original matches any one character. The longest match wins.
    """

    def __init__(self, script: str = ""):
        self._root = _Node()
        for original, replacement in iter_blocks(script, ("|ORIG|", "|BECOMES|")):
            node = self._root
            for ch in original:
                if not _ignored(ch):
                    node = node.children.setdefault(ch, _Node())
            if node is not self._root:
                node.value = replacement

    def replace(self, sentence: str) -> str:
        result = []
        position = 0
        size = len(sentence)
        while position < size:
            replacement = sentence[position]
            consumed = 1
            node: Optional[_Node] = self._root
            cursor = position
            while node is not None and cursor <= size:
                if node.value is not None:
                    replacement = node.value
                    consumed = cursor - position
                if cursor < size and not _ignored(sentence[cursor]):
                    ch = sentence[cursor]
                    node = node.children.get(ch) or node.children.get(WILDCARD)
                cursor += 1
            result.append(replacement)
            position += consumed
        return "".join(result)

    def __bool__(self) -> bool:
        return bool(self._root.children)


class Replacer:
    """Applies the replacements in a file, reloading it when it changes."""

    def __init__(self, path: Union[str, Path] = SAVE_FILE):
        self.path = Path(path)
        self._lock = threading.Lock()
        self._stamp: Optional[int] = None
        self.trie = Trie()

    def update(self) -> bool:
        """Reload the file if it changed; return whether it was reloaded."""
        try:
            stamp = self.path.stat().st_mtime_ns
        except OSError:
            self._stamp = None
            return False
        with self._lock:
            if stamp == self._stamp:
                return False
            try:
                data = self.path.read_bytes()
            except OSError:
                self._stamp = None
                return False
            self._stamp = stamp
            self.trie = Trie(decode_markup(data))
        return True

    def process_sentence(self, sentence: str, info: Mapping[str, Any]) -> Optional[str]:
        self.update()
        with self._lock:
            return self.trie.replace(sentence)