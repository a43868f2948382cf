"""Remove phrases that a game repeats many times within one sentence."""

from __future__ import annotations

import time
from collections.abc import Mapping
from itertools import islice
from typing import Any, Optional

ERASED = "\uf246"  # private use area marker for removed characters
MIN_PHRASE_LENGTH = 7
DEFAULT_TIMEOUT = 30.0


def generate_suffix_array(text: str) -> list[int]:
    """Return the start positions of the suffixes of ``text``, largest first."""
    size = len(text)
    order = list(range(size))
    rank = [ord(ch) for ch in text]
    length = 1
    while size > 1:
        keys = [(rank[i], rank[i + length] if i + length < size else -1) for i in range(size)]
        order.sort(key=keys.__getitem__)
        new_rank = [0] * size
        for previous, current in zip(order, order[1:]):
            new_rank[current] = new_rank[previous] + (keys[current] != keys[previous])
        rank = new_rank
        if rank[order[-1]] == size - 1:
            break
        length *= 2
    order.reverse()
    return order


def _common_prefix_length(chars: list[str], first: int, second: int) -> int:
    length = 0
    for a, b in zip(islice(chars, first, None), islice(chars, second, None)):
        if a == ERASED or a != b:
            break
        length += 1
    return length


def remove_repeated_phrases(sentence: str, timeout: float = DEFAULT_TIMEOUT) -> str:
    """Erase regions made only of a repeated phrase's characters.

    Repeated substrings longer than six characters are found through the
    suffix array. Any region at least twice as long as such a substring and
    made only of its characters is erased; if that removes the substring
    entirely, it is put back at its last original location. Gives up after
    ``timeout`` seconds.
    """
    deadline = time.monotonic() + timeout
    suffixes = generate_suffix_array(sentence)
    chars = list(sentence)
    for first, second in zip(suffixes, suffixes[1:]):
        if time.monotonic() >= deadline:
            break
        length = _common_prefix_length(chars, first, second)
        if length < MIN_PHRASE_LENGTH:
            continue
        substring = chars[first:first + length]
        members = set(substring)
        region = 0
        for position, ch in enumerate(chars + [""]):
            if ch in members:
                region += 1
            elif region >= length * 2:
                chars[position - region:position] = [ERASED] * region
                region = 0
            else:
                region = 0
        if "".join(substring) not in "".join(chars):
            start = max(first, second)
            chars[start:start + length] = substring
    return "".join(chars).replace(ERASED, "")


def process_sentence(sentence: str, info: Mapping[str, Any]) -> Optional[str]:
    """Extension entry point; console text (thread 0) is left alone."""
    if info["text number"] == 0:
        return None
    return remove_repeated_phrases(sentence)