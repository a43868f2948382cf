"""Pop-up dictionary lookups and the sentence history of the extra window.

A dictionary file holds records in block markup::

    |TERM|walk|TERM|stroll|DEFINITION|to move on foot|END|
    |ROOT|1|INFLECTS TO|(.+)ed|NAME| (past)|END|

A ``|TERM|`` record gives one or more terms sharing a definition. A
``|ROOT|`` record describes an inflection: when a term fully matches the
``|INFLECTS TO|`` expression, the root is built by replacing each digit in
``|ROOT|`` with that capture group and looked up in turn.
"""

from __future__ import annotations

import re
import threading
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

from sentencekit.blockmarkup import decode_markup, iter_blocks

SAVE_FILE = "SavedDictionary.txt"
MAX_TERM_LENGTH = 100
MAX_INFLECTION_DEPTH = 25
TRANSLATION_SEPARATOR = "\u200b \n"
DEFAULT_HISTORY_SIZE = 1000


def _html_escape(text: str) -> str:
    return text.replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;").replace('"', "&quot;")


@dataclass(frozen=True)
class _Inflection:
    root: str
    inflects_to: re.Pattern
    name: str

    def root_of(self, match: re.Match) -> str:
        parts = []
        for ch in self.root:
            if ch.isdecimal():
                group = int(ch)
                parts.append((match.group(group) or "") if group <= match.re.groups else "")
            else:
                parts.append(ch)
        return "".join(parts)


class Dictionary:
    """Terms, definitions and inflection rules read from a markup file.

    The file is read again whenever its modification time changes.
    """

    def __init__(self, path: Union[str, Path] = SAVE_FILE):
        self.path = Path(path)
        self._lock = threading.Lock()
        self._stamp: Optional[int] = None
        self._terms: dict[str, list[tuple[int, str]]] = {}
        self.inflections: list[_Inflection] = []

    def __len__(self) -> int:
        with self._lock:
            return sum(len(entries) for entries in self._terms.values())

    def update(self) -> bool:
        """Reload the file if it changed; return whether it was reloaded."""
        try:
            stamp = self.path.stat().st_mtime_ns
        except OSError:
            return False
        with self._lock:
            if stamp == self._stamp:
                return False
            try:
                data = self.path.read_bytes()
            except OSError:
                return False
            self._stamp = stamp
            text = decode_markup(data)

            entries = []
            for record, (terms, definition) in enumerate(iter_blocks(text, ("|TERM|", "|DEFINITION|"))):
                entries.extend((term, record, definition) for term in terms.split("|TERM|"))
            entries.sort(key=lambda entry: entry[0].encode("utf-8"))
            by_term: dict[str, list[tuple[int, str]]] = {}
            for term, record, definition in entries:
                by_term.setdefault(term, []).append((record, definition))
            self._terms = by_term

            inflections = []
            for root, inflects_to, name in iter_blocks(text, ("|ROOT|", "|INFLECTS TO|", "|NAME|")):
                try:
                    pattern = re.compile(inflects_to)
                except re.error:
                    continue
                inflections.append(_Inflection(root, pattern, name))
            self.inflections = inflections
        return True

    def _lookup(self, term: str, found: set[int], used: list[str], depth: int) -> list[tuple[str, str, list[str]]]:
        results = []
        for record, definition in self._terms.get(term, ()):
            if record not in found:
                found.add(record)
                results.append((term, definition, list(used)))
        if depth >= MAX_INFLECTION_DEPTH:
            return results
        for inflection in self.inflections:
            match = inflection.inflects_to.fullmatch(term)
            if match:
                results.extend(self._lookup(inflection.root_of(match), found, [inflection.name] + used, depth + 1))
        return results

    def lookup(self, term: str) -> list[tuple[str, str, list[str]]]:
        """Return ``(root term, definition, inflection names)`` for ``term``.

        Inflections are followed; each definition is reported once.
        """
        self.update()
        with self._lock:
            return self._lookup(term, set(), [], 0)

    def definitions_for(self, term: str) -> list[str]:
        """HTML definitions for ``term`` and each of its shorter prefixes.

        The term is cut to 100 characters; longer prefixes come first and a
        definition already shown for a longer prefix is not repeated.
        """
        self.update()
        found: set[int] = set()
        pieces = []
        with self._lock:
            for length in range(min(len(term), MAX_TERM_LENGTH), 0, -1):
                prefix = term[:length]
                for root, definition, used in self._lookup(prefix, found, [], 0):
                    pieces.append((prefix, root, used, definition))
        total = len(pieces)
        return [
            "<h3>{} ({}/{})</h3><small>{}{}</small>{}".format(
                _html_escape(prefix.split("<<")[0]),
                number,
                total,
                _html_escape(root.split("<<")[0]),
                "".join(used),
                definition,
            )
            for number, (prefix, root, used, definition) in enumerate(pieces, 1)
        ]


class SentenceHistory:
    """The last sentences shown, with a scroll position."""

    def __init__(self, max_size: int = DEFAULT_HISTORY_SIZE):
        self.max_size = max_size
        self.sentences: list[str] = []
        self.index = 0

    def add(self, sentence: str) -> None:
        """Store a sentence (tabs removed) and move to it."""
        self.sentences.append(sentence.replace("\t", ""))
        if len(self.sentences) > self.max_size:
            del self.sentences[0]
        self.index = len(self.sentences) - 1

    def scroll(self, delta: int) -> Optional[str]:
        """Positive ``delta`` moves to an older sentence, negative to a newer one."""
        if delta > 0 and self.index > 0:
            self.index -= 1
        if delta < 0 and self.index + 1 < len(self.sentences):
            self.index += 1
        return self.sentences[self.index] if self.sentences else None

    def display_text(self, show_original: bool = True, original_after_translation: bool = True) -> Optional[str]:
        """The current sentence arranged for display, or ``None`` if empty.

        A translated sentence is ``original + "\\u200b \\n" + translation``;
        it can be shown as the translation only, or translation first.
        """
        if not self.sentences:
            return None
        sentence = self.sentences[self.index]
        if TRANSLATION_SEPARATOR in sentence:
            parts = sentence.split(TRANSLATION_SEPARATOR)
            if not show_original:
                sentence = parts[1]
            elif original_after_translation:
                sentence = parts[1] + "\n" + parts[0]
        return sentence

    @staticmethod
    def _join(lines: Iterable[str]) -> str:
        return "\n".join(lines)