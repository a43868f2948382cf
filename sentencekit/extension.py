"""Sentence extensions and the chain that runs them in order.

An extension is a callable ``process(sentence, info)`` that returns the new
sentence, or ``None`` to leave it as it was. It may call :func:`skip` to
drop the sentence altogether.
"""

from __future__ import annotations

import threading
from collections.abc import Callable, Iterable, Iterator, Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional, Union

SAVE_FILE = "SavedExtensions.txt"
DEFAULT_EXTENSIONS = (
    "Remove Repeated Characters",
    "Regex Filter",
    "Copy to Clipboard",
    "Google Translate",
    "Extra Window",
    "Extra Newlines",
)

Process = Callable[[str, "SentenceInfo"], Optional[str]]


class SentenceInfo(Mapping):
    """Read-only named properties of a sentence, in insertion order."""

    def __init__(self, items: Union[Mapping[str, Any], Iterable[tuple[str, Any]]] = ()):
        self._values = dict(items)

    def __getitem__(self, name: str) -> Any:
        try:
            return self._values[name]
        except KeyError:
            raise KeyError(f"no sentence property named {name!r}") from None

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        return f"SentenceInfo({self._values!r})"


class SkipSentence(Exception):
    """Raised by an extension to drop the current sentence."""


def skip() -> None:
    """Drop the sentence being processed."""
    raise SkipSentence()


def run_extension(process: Process, sentence: str, info: SentenceInfo) -> str:
    """Run one extension and return the resulting sentence ("" if skipped)."""
    try:
        result = process(sentence, info)
    except SkipSentence:
        return ""
    return sentence if result is None else result


@dataclass(frozen=True)
class Extension:
    """A named sentence processor."""

    name: str
    process: Process


class ExtensionChain:
    """An ordered, thread-safe list of extensions."""

    def __init__(self, extensions: Iterable[Extension] = ()):
        self._lock = threading.Lock()
        self._extensions = list(extensions)

    def add(self, extension: Extension) -> None:
        with self._lock:
            self._extensions.append(extension)

    def remove(self, index: int) -> Extension:
        with self._lock:
            if not 0 <= index < len(self._extensions):
                raise IndexError(f"no extension at position {index}")
            return self._extensions.pop(index)

    def reorder(self, names: Iterable[str]) -> None:
        """Rebuild the chain in the order of ``names``."""
        with self._lock:
            by_name: dict[str, Extension] = {}
            for extension in self._extensions:
                by_name.setdefault(extension.name, extension)
            try:
                self._extensions = [by_name[name] for name in names]
            except KeyError as exc:
                raise KeyError(f"no extension named {exc.args[0]!r}") from None

    def names(self) -> list[str]:
        with self._lock:
            return [extension.name for extension in self._extensions]

    def dispatch(self, sentence: str, info: Union[SentenceInfo, Mapping[str, Any]]) -> str:
        """Pass the sentence through every extension; "" means it was dropped."""
        if not isinstance(info, SentenceInfo):
            info = SentenceInfo(info)
        with self._lock:
            extensions = list(self._extensions)
        for extension in extensions:
            sentence = run_extension(extension.process, sentence, info)
            if not sentence:
                break
        return sentence

    def clear(self) -> None:
        with self._lock:
            self._extensions.clear()

    def save(self, path: Union[str, Path] = SAVE_FILE) -> None:
        """Write the extension names, each followed by ``>``."""
        Path(path).write_text("".join(f"{name}>" for name in self.names()), encoding="utf-8")


def saved_extension_names(path: Union[str, Path] = SAVE_FILE) -> list[str]:
    """Read saved extension names, creating the file with defaults if missing."""
    path = Path(path)
    if not path.exists():
        path.write_text(">".join(DEFAULT_EXTENSIONS), encoding="utf-8")
    return [name for name in path.read_text(encoding="utf-8-sig").split(">") if name]