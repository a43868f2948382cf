"""Papago translation through a browser driven over the debugging protocol."""

from __future__ import annotations

import json
import threading
import time
from collections.abc import Callable

from sentencekit.devtools import DevToolsSession
from sentencekit.network import url_escape
from sentencekit.translate import TRANSLATION_ERROR, TranslationParam

PROVIDER_NAME = "DevTools Papago Translate"
ERROR_START_CHROME = "failed to start Chrome or to connect to it"

LANGUAGES_TO = (
    "Chinese (Simplified)",
    "Chinese (Traditional)",
    "English",
    "French",
    "German",
    "Hindi",
    "Indonesian",
    "Italian",
    "Japanese",
    "Korean",
    "Portuguese",
    "Russian",
    "Spanish",
    "Thai",
    "Vietnamese",
)
LANGUAGES_FROM = LANGUAGES_TO

CODES = {
    "Chinese (Simplified)": "zh-CN",
    "Chinese (Traditional)": "zt-TW",
    "English": "en",
    "French": "fr",
    "German": "de",
    "Hindi": "hi",
    "Indonesian": "id",
    "Italian": "it",
    "Japanese": "ja",
    "Korean": "ko",
    "Portuguese": "pt",
    "Russian": "ru",
    "Spanish": "es",
    "Thai": "th",
    "Vietnamese": "vi",
    "?": "auto",
}

RESULT_ATTEMPTS = 99
RETRY_DELAY = 0.1

_TRANSLATION = "document.querySelector('#txtTarget').textContent.trim() "

_lock = threading.Lock()


def translate(
    session: DevToolsSession,
    text: str,
    param: TranslationParam,
    sleep: Callable[[float], None] = time.sleep,
) -> tuple[bool, str]:
    """Translate ``text`` on the Papago page; return (cacheable, translation).

    Raises ``KeyError`` for a language Papago does not offer.
    """
    if not session.connected():
        return False, f"{TRANSLATION_ERROR}: {ERROR_START_CHROME}"
    source = CODES[param.translate_from]
    target = CODES[param.translate_to]
    with _lock:
        url = f"https://papago.naver.com/?sk={source}&tk={target}&st={url_escape(text)}"
        session.send_request("Page.navigate", json.dumps({"url": url}))
        query = json.dumps({"expression": _TRANSLATION, "returnByValue": True})
        for _ in range(RESULT_ATTEMPTS):
            result = session.send_request("Runtime.evaluate", query).get("result", {})
            translation = result.get("value") if isinstance(result, dict) else None
            if isinstance(translation, str) and translation:
                return True, translation
            sleep(RETRY_DELAY)
        return False, TRANSLATION_ERROR