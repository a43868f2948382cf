"""Regular-expression replacements driven by a markup file."""

from __future__ import annotations

import re
import threading
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional, Union

from sentencekit.blockmarkup import decode_markup, iter_blocks

SAVE_FILE = "SavedRegexReplacements.txt"
_DIGITS = "0123456789"


def _group(match: re.Match, index: int) -> str:
    if index > match.re.groups:
        return ""
    return match.group(index) or ""


def _expand(template: str, match: re.Match, previous_end: int) -> str:
    """Expand ``$n``, ``$&``, ``$$``, ``$``` and ``$'`` in a replacement."""
    out = []
    position = 0
    size = len(template)
    while position < size:
        ch = template[position]
        if ch != "$" or position + 1 >= size:
            out.append(ch)
            position += 1
            continue
        code = template[position + 1]
        if code == "$":
            out.append("$")
        elif code == "&":
            out.append(match.group(0))
        elif code == "`":
            out.append(match.string[previous_end:match.start()])
        elif code == "'":
            out.append(match.string[match.end():])
        elif code in _DIGITS:
            two = template[position + 1:position + 3]
            if len(two) == 2 and two[1] in _DIGITS and int(two) <= match.re.groups:
                out.append(_group(match, int(two)))
                position += 3
                continue
            out.append(_group(match, int(code)))
        else:
            out.append("$")
            position += 1
            continue
        position += 2
    return "".join(out)


@dataclass(frozen=True)
class RegexReplacement:
    pattern: re.Pattern
    replacement: str
    replace_all: bool = True

    def apply(self, sentence: str) -> str:
        previous_end = 0

        def substitute(match: re.Match) -> str:
            nonlocal previous_end
            text = _expand(self.replacement, match, previous_end)
            previous_end = match.end()
            return text

        return self.pattern.sub(substitute, sentence, count=0 if self.replace_all else 1)


def parse_replacements(text: str) -> list[RegexReplacement]:
    """Read ``|REGEX|...|BECOMES|...|MODIFIER|...|END|`` records.

    Modifier ``i`` ignores case, ``g`` replaces every match instead of the
    first. Records with an invalid expression are skipped.
    """
    replacements = []
    for pattern, replacement, modifier in iter_blocks(text, ("|REGEX|", "|BECOMES|", "|MODIFIER|")):
        flags = re.IGNORECASE if "i" in modifier else 0
        try:
            compiled = re.compile(pattern, flags)
        except re.error:
            continue
        replacements.append(RegexReplacement(compiled, replacement, "g" in modifier))
    return replacements


class RegexReplacer:
    """Applies the replacements in a file, reloading it when it changes."""

    def __init__(self, path: Union[str, Path] = SAVE_FILE):
        self.path = Path(path)
        self._lock = threading.Lock()
        self._stamp: Optional[int] = None
        self.replacements: list[RegexReplacement] = []

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
            self.replacements = parse_replacements(decode_markup(data))
        return True

    def process_sentence(self, sentence: str, info: Mapping[str, Any]) -> Optional[str]:
        self.update()
        with self._lock:
            replacements = list(self.replacements)
        for replacement in replacements:
            sentence = replacement.apply(sentence)
        return sentence