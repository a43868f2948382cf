"""Small networking and text-escaping helpers: a lenient JSON reader,
JSON/HTML/URL escaping and a one-shot HTTP request."""

from __future__ import annotations

import http.client
import re
import string
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Optional, Union

DEFAULT_AGENT = "Mozilla/5.0"
TIMEOUT = 30.0

_NUMBER_CHARS = frozenset("0123456789+-eE.")
_FLOAT_PREFIX = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")
_STRING_ESCAPES = {"b": "\b", "f": "\f", "n": "\n", "r": "\r", "t": "\t"}
_WHITESPACE = " \n\r\t"
_LITERALS = (("null", None), ("true", True), ("false", False))


class JsonParseError(ValueError):
    """Raised when text cannot be read as JSON."""


class _Parser:
    def __init__(self, text: str, max_depth: int):
        self.text = text
        self.pos = 0
        self.max_depth = max_depth

    def _skip_whitespace(self) -> bool:
        """Skip whitespace; return True if the end of the text is reached."""
        while self.pos < len(self.text) and self.text[self.pos] in _WHITESPACE:
            self.pos += 1
        return self.pos >= len(self.text)

    def _fail(self, message: str) -> JsonParseError:
        return JsonParseError(f"{message} at position {self.pos}")

    def _string(self) -> str:
        text = self.text
        chars = []
        self.pos += 1
        while self.pos < len(text):
            ch = text[self.pos]
            if ch == '"':
                self.pos += 1
                return "".join(chars)
            if ch != "\\":
                chars.append(ch)
                self.pos += 1
                continue
            if self.pos + 1 >= len(text):
                self.pos = len(text)
                break
            escape = text[self.pos + 1]
            digits = text[self.pos + 2:self.pos + 6]
            if escape == "u" and len(digits) == 4 and all(d in string.hexdigits for d in digits):
                chars.append(chr(int(digits, 16)))
                self.pos += 6
                continue
            chars.append(_STRING_ESCAPES.get(escape, escape))
            self.pos += 2
        return "".join(chars)

    def _number(self) -> float:
        start = self.pos
        while self.pos < len(self.text) and self.text[self.pos] in _NUMBER_CHARS:
            self.pos += 1
        match = _FLOAT_PREFIX.match(self.text, start, self.pos)
        return float(match.group()) if match else 0.0

    def value(self, depth: int) -> Any:
        if depth > self.max_depth:
            raise self._fail("nesting too deep")
        if self._skip_whitespace():
            raise self._fail("unexpected end of input")
        ch = self.text[self.pos]
        for word, result in _LITERALS:
            if ch == word[0]:
                if not self.text.startswith(word, self.pos):
                    raise self._fail("invalid literal")
                self.pos += len(word)
                return result
        if ch == "-" or "0" <= ch <= "9":
            return self._number()
        if ch == '"':
            return self._string()
        if ch == "[":
            return self._array(depth)
        if ch == "{":
            return self._object(depth)
        raise self._fail(f"unexpected character {ch!r}")

    def _array(self, depth: int) -> list:
        items = []
        while True:
            self.pos += 1
            if self._skip_whitespace():
                raise self._fail("unterminated array")
            if self.text[self.pos] == "]":
                self.pos += 1
                return items
            items.append(self.value(depth + 1))
            if self._skip_whitespace():
                raise self._fail("unterminated array")
            ch = self.text[self.pos]
            if ch == "]":
                self.pos += 1
                return items
            if ch != ",":
                raise self._fail("expected ',' or ']'")

    def _object(self, depth: int) -> dict:
        result = {}
        while True:
            self.pos += 1
            if self._skip_whitespace():
                raise self._fail("unterminated object")
            ch = self.text[self.pos]
            if ch == "}":
                self.pos += 1
                return result
            if ch != '"':
                raise self._fail("expected a key")
            key = self._string()
            if self._skip_whitespace() or self.text[self.pos] != ":":
                raise self._fail("expected ':'")
            self.pos += 1
            result[key] = self.value(depth + 1)
            if self._skip_whitespace():
                raise self._fail("unterminated object")
            ch = self.text[self.pos]
            if ch == "}":
                self.pos += 1
                return result
            if ch != ",":
                raise self._fail("expected ',' or '}'")


def parse_json(text: str, max_depth: int = 25) -> Any:
    """Parse the JSON value at the start of ``text``.

    Numbers become floats. Trailing commas are accepted and text after the
    value is ignored. Raises :class:`JsonParseError` on malformed input or
    nesting deeper than ``max_depth``.
    """
    return _Parser(text, max_depth).value(0)


_JSON_ESCAPES = {"\n": "\\n", "\t": "\\t", "\r": "\\r", "\\": "\\\\", '"': '\\"'}


def json_escape(text: str) -> str:
    """Escape text for a JSON string literal, dropping other control characters."""
    escaped = "".join(_JSON_ESCAPES.get(ch, ch) for ch in text)
    return "".join(ch for ch in escaped if ord(ch) >= 0x20 and ord(ch) != 0x7F)


_HTML_ENTITIES = {
    "lt": "<",
    "gt": ">",
    "apos": "'",
    "#39": "'",
    "#x27": "'",
    "#X27": "'",
    "quot": '"',
    "amp": "&",
}
_HTML_ENTITY = re.compile("&(" + "|".join(re.escape(name) for name in _HTML_ENTITIES) + ");")


def html_unescape(text: str) -> str:
    """Replace the common HTML entities in a single left-to-right pass."""
    return _HTML_ENTITY.sub(lambda match: _HTML_ENTITIES[match.group(1)], text)


def url_escape(text: Union[str, bytes]) -> str:
    """Percent-encode every byte of the UTF-8 form of ``text``."""
    data = text.encode("utf-8") if isinstance(text, str) else bytes(text)
    return "".join(f"%{byte:02X}" for byte in data)


class HttpError(OSError):
    """Raised when an HTTP request cannot be completed."""


@dataclass(frozen=True)
class HttpResponse:
    status: int
    reason: str
    text: str
    headers: dict[str, str] = field(default_factory=dict)


def _header_dict(headers: Optional[Union[str, Mapping[str, str]]]) -> dict[str, str]:
    if headers is None:
        return {}
    if isinstance(headers, str):
        result = {}
        for line in headers.splitlines():
            name, sep, value = line.partition(":")
            if sep and name.strip():
                result[name.strip()] = value.strip()
        return result
    return dict(headers)


def http_request(
    server_name: str,
    action: str,
    object_name: str,
    body: Union[str, bytes] = "",
    headers: Optional[Union[str, Mapping[str, str]]] = None,
    port: Optional[int] = None,
    secure: bool = True,
    agent_name: str = DEFAULT_AGENT,
) -> HttpResponse:
    """Send one HTTP request and return the response, decoded as UTF-8.

    ``headers`` is a mapping or a string of ``Name: value`` lines. When
    ``port`` is None or 0 the scheme's default number is used.
    """
    connection_class = http.client.HTTPSConnection if secure else http.client.HTTPConnection
    connection = connection_class(server_name, port or None, timeout=TIMEOUT)
    request_headers = {"User-Agent": agent_name}
    request_headers.update(_header_dict(headers))
    payload = body.encode("utf-8") if isinstance(body, str) else bytes(body)
    try:
        connection.request(action, object_name, body=payload or None, headers=request_headers)
        response = connection.getresponse()
        data = response.read()
    except (OSError, http.client.HTTPException) as exc:
        raise HttpError(f"{action} {server_name}{object_name} failed: {exc}") from exc
    finally:
        connection.close()
    return HttpResponse(
        status=response.status,
        reason=response.reason,
        text=data.decode("utf-8", errors="replace"),
        headers=dict(response.getheaders()),
    )