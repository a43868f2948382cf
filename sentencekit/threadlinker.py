"""Copy text from one thread into others."""

from __future__ import annotations

import threading
from collections.abc import Callable, Mapping
from typing import Any, Optional

AddText = Callable[[int, str], None]


class ThreadLinker:
    """Forwards each sentence of a thread to the threads linked to it.

    A link from ``None`` applies to every thread numbered above 1.
    """

    def __init__(self, add_text: Optional[AddText] = None):
        self._add_text = add_text
        self._lock = threading.Lock()
        self._links: dict[int, set[int]] = {}
        self._universal: set[int] = set()

    def _targets(self, source: Optional[int]) -> set[int]:
        if source is None:
            return self._universal
        return self._links.setdefault(source, set())

    def link(self, source: Optional[int], target: int) -> bool:
        """Link ``source`` to ``target``; return False if already linked."""
        with self._lock:
            targets = self._targets(source)
            if target in targets:
                return False
            targets.add(target)
            return True

    def unlink(self, source: Optional[int], target: int) -> bool:
        """Remove a link; return whether it existed."""
        with self._lock:
            targets = self._targets(source)
            if target not in targets:
                return False
            targets.discard(target)
            return True

    def links(self) -> list[tuple[Optional[int], int]]:
        """All links, per source in numeric order, universal links last."""
        with self._lock:
            pairs: list[tuple[Optional[int], int]] = [
                (source, target)
                for source in sorted(self._links)
                for target in sorted(self._links[source])
            ]
            pairs.extend((None, target) for target in sorted(self._universal))
            return pairs

    def process_sentence(self, sentence: str, info: Mapping[str, Any]) -> None:
        add_text = self._add_text or info["add text"]
        text_number = info["text number"]
        with self._lock:
            targets = list(self._links.get(text_number, ()))
            if text_number > 1:
                targets.extend(self._universal)
        for target in targets:
            add_text(target, sentence)
        return None