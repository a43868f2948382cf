"""Add a blank line after every sentence."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Optional


def process_sentence(sentence: str, info: Mapping[str, Any]) -> Optional[str]:
    """Append a newline to sentences that are not console output."""
    if info["text number"] == 0:
        return None
    return sentence + "\n"