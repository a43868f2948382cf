"""Reader for the block markup used by the saved-data files.

A file holds records such as ``|ORIG|text|BECOMES|other|END|``. Everything
outside a record is ignored, and an unfinished last record is dropped.
"""

from __future__ import annotations

import codecs
from collections.abc import Iterator, Sequence

END = "|END|"


def iter_blocks(text: str, delimiters: Sequence[str]) -> Iterator[tuple[str, ...]]:
    """Yield one tuple per complete record in ``text``.

    ``delimiters`` are the markers that open each field in order; the last
    field is closed by ``|END|``. Text before the first marker of a record
    is skipped.
    """
    delimiters = tuple(delimiters)
    if not delimiters:
        raise ValueError("at least one delimiter is required")
    closers = delimiters[1:] + (END,)
    position = 0
    while True:
        start = text.find(delimiters[0], position)
        if start < 0:
            return
        position = start + len(delimiters[0])
        fields = []
        for closer in closers:
            end = text.find(closer, position)
            if end < 0:
                return
            fields.append(text[position:end])
            position = end + len(closer)
        yield tuple(fields)


def decode_markup(data: bytes) -> str:
    """Decode the raw bytes of a markup file.

    Files starting with a UTF-16 byte order mark are read as UTF-16, anything
    else as UTF-8. The leading byte order mark is removed.
    """
    if data.startswith(codecs.BOM_UTF16_LE):
        return data[len(codecs.BOM_UTF16_LE):].decode("utf-16-le", errors="replace")
    if data.startswith(codecs.BOM_UTF16_BE):
        return data[len(codecs.BOM_UTF16_BE):].decode("utf-16-be", errors="replace")
    return data.decode("utf-8-sig", errors="replace")