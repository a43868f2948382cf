"""Translation extension: caching, rate limiting and output formatting
around a provider's ``translate(text, param)`` function."""

from __future__ import annotations

import heapq
import threading
import time
from collections.abc import Callable, Mapping
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Optional, Union

from sentencekit.blockmarkup import decode_markup, iter_blocks

SENTENCE_TOO_LARGE = "Sentence too large to translate"
TRANSLATION_ERROR = "Translation error"
TOO_MANY_REQUESTS = "Too many translation requests: refuse to make more"
SEPARATOR = "\u200b \n"


@dataclass
class TranslationParam:
    translate_to: str = "English"
    translate_from: str = "?"
    auth_key: str = ""


@dataclass
class TranslationSettings:
    translate_selected_only: bool = True
    use_rate_limiter: bool = True
    rate_limit_selected: bool = False
    use_cache: bool = True
    use_filter: bool = True
    token_count: int = 30
    rate_limit_timespan: int = 60000
    max_sentence_size: int = 2500


Translate = Callable[[str, TranslationParam], "tuple[bool, str]"]


def _milliseconds() -> float:
    return time.monotonic() * 1000


class RateLimiter:
    """Allows at most ``token_count`` requests in any ``timespan`` milliseconds."""

    def __init__(self, token_count: int = 30, timespan: float = 60000,
                 clock: Callable[[], float] = _milliseconds):
        self.token_count = token_count
        self.timespan = timespan
        self._clock = clock
        self._tokens: list[float] = []
        self._lock = threading.Lock()

    def request(self) -> bool:
        with self._lock:
            now = self._clock()
            while self._tokens and self._tokens[0] <= now - self.timespan:
                heapq.heappop(self._tokens)
            available = len(self._tokens) < self.token_count
            if available:
                heapq.heappush(self._tokens, now)
            return available


def _clean(text: str) -> str:
    return "".join(ch for ch in text.strip() if ch >= " " or ch == "\n")


class TranslationWrapper:
    """Appends a translation to each sentence, after a zero-width separator."""

    def __init__(self, provider_name: str, translate: Translate,
                 settings: Optional[TranslationSettings] = None,
                 directory: Union[str, Path] = "."):
        self.provider_name = provider_name
        self._translate = translate
        self.settings = settings or TranslationSettings()
        self.directory = Path(directory)
        self.param = TranslationParam()
        self.cache: dict[str, str] = {}
        self._lock = threading.Lock()
        self.rate_limiter = RateLimiter(self.settings.token_count, self.settings.rate_limit_timespan)
        self.load_cache()

    def cache_file(self) -> Path:
        return self.directory / f"{self.provider_name} Cache ({self.param.translate_to}).txt"

    def save_cache(self) -> None:
        with self._lock:
            records = "".join(
                f"|SENTENCE|{sentence}|TRANSLATION|{translation}|END|\r\n"
                for sentence, translation in self.cache.items()
            )
        self.cache_file().write_bytes(("\ufeff" + records).encode("utf-16-le"))

    def load_cache(self) -> None:
        try:
            text = decode_markup(self.cache_file().read_bytes())
        except OSError:
            text = ""
        loaded: dict[str, str] = {}
        for sentence, translation in iter_blocks(text, ("|SENTENCE|", "|TRANSLATION|")):
            loaded.setdefault(sentence, translation)
        with self._lock:
            self.cache = loaded

    def set_translate_to(self, language: str) -> None:
        self.save_cache()
        self.param.translate_to = language
        self.load_cache()

    def set_translate_from(self, language: str) -> None:
        self.param.translate_from = language

    def process_sentence(self, sentence: str, info: Mapping[str, Any]) -> Optional[str]:
        if info["text number"] == 0:
            return None
        settings = self.settings
        if settings.use_filter:
            sentence = _clean(sentence)
        if not sentence:
            return ""

        selected = bool(info["current select"])
        translation = ""
        cache = False
        if len(sentence) > settings.max_sentence_size:
            translation = SENTENCE_TOO_LARGE
        if settings.use_cache:
            with self._lock:
                translation = self.cache.get(sentence, translation)
        if not translation and (not settings.translate_selected_only or selected):
            self.rate_limiter.token_count = settings.token_count
            self.rate_limiter.timespan = settings.rate_limit_timespan
            if (self.rate_limiter.request() or not settings.use_rate_limiter
                    or (not settings.rate_limit_selected and selected)):
                cache, translation = self._translate(sentence, replace(self.param))
            else:
                translation = TOO_MANY_REQUESTS
        if cache:
            with self._lock:
                self.cache[sentence] = translation

        if settings.use_filter:
            translation = translation.strip()
        translation = translation.replace("\r\n", "\u200b\n")
        if not translation:
            translation = TRANSLATION_ERROR
        return sentence + SEPARATOR + translation