"""Collapse characters that a game repeats a fixed number of times."""

from __future__ import annotations

from collections import Counter
from collections.abc import Mapping
from itertools import groupby
from typing import Any, Optional


def _run_lengths(sentence: str) -> list[int]:
    return [sum(1 for _ in run) for _, run in groupby(sentence)]


def remove_repeated_characters(sentence: str) -> str:
    """Undo uniform character repetition such as ``"aabbcc"`` -> ``"abc"``.

    The repeat count is the most common run length (the longest one on a
    tie). Runs whose length is a multiple of it are shortened by that
    factor; other characters are kept as they are.
    """
    counts = Counter(_run_lengths(sentence))
    if not counts:
        return sentence
    top = max(counts.values())
    repeat = max(length for length, count in counts.items() if count == top)
    if repeat < 2:
        return sentence

    result = []
    position = 0
    total = len(sentence)
    while position < total:
        ch = sentence[position]
        result.append(ch)
        run_end = position
        while run_end < total and sentence[run_end] == ch:
            run_end += 1
        position += repeat if (run_end - position) % repeat == 0 else 1
    return "".join(result)


def process_sentence(sentence: str, info: Mapping[str, Any]) -> Optional[str]:
    """Extension entry point; console text (thread 0) is left alone."""
    if info["text number"] == 0:
        return None
    return remove_repeated_characters(sentence)