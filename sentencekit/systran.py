"""Systran translation through a browser driven over the debugging protocol."""

from __future__ import annotations

import json
import threading
import time
from collections.abc import Callable

from sentencekit.devtools import DevToolsSession
from sentencekit.network import url_escape
from sentencekit.translate import TRANSLATION_ERROR, TranslationParam

PROVIDER_NAME = "DevTools Systran Translate"
ERROR_START_CHROME = "failed to start Chrome or to connect to it"

CODES = {
    "Albanian": "sq",
    "Arabic": "ar",
    "Bengali": "bn",
    "Bulgarian": "bg",
    "Burmese": "my",
    "Catalan": "ca",
    "Chinese (Simplified)": "zh",
    "Chinese (Traditional)": "zt",
    "Croatian": "hr",
    "Czech": "cs",
    "Danish": "da",
    "Dutch": "nl",
    "English": "en",
    "Estonian": "et",
    "Finnish": "fi",
    "French": "fr",
    "German": "de",
    "Greek": "el",
    "Hebrew": "he",
    "Hindi": "hi",
    "Hungarian": "hu",
    "Indonesian": "id",
    "Italian": "it",
    "Japanese": "ja",
    "Korean": "ko",
    "Latvian": "lv",
    "Lithuanian": "lt",
    "Malay": "ms",
    "Norwegian": "no",
    "Pashto": "ps",
    "Persian": "fa",
    "Polish": "pl",
    "Portuguese": "pt",
    "Romanian": "ro",
    "Russian": "ru",
    "Serbian": "sr",
    "Slovak": "sk",
    "Slovenian": "sl",
    "Somali": "so",
    "Spanish": "es",
    "Swedish": "sv",
    "Tagalog": "tl",
    "Tamil": "ta",
    "Thai": "th",
    "Turkish": "tr",
    "Ukrainian": "uk",
    "Urdu": "ur",
    "Vietnamese": "vi",
    "?": "autodetect",
}

LANGUAGES_TO = tuple(name for name in CODES if name != "?")
LANGUAGES_FROM = LANGUAGES_TO

RESULT_ATTEMPTS = 99
RETRY_DELAY = 0.1

_TRANSLATION = "document.querySelector('#outputEditor').textContent.trim() "

_lock = threading.Lock()


def translate(
    session: DevToolsSession,
    text: str,
    param: TranslationParam,
    sleep: Callable[[float], None] = time.sleep,
) -> tuple[bool, str]:
    """Translate ``text`` on the Systran page; return (cacheable, translation).

    Raises ``KeyError`` for a language Systran does not offer.
    """
    if not session.connected():
        return False, f"{TRANSLATION_ERROR}: {ERROR_START_CHROME}"
    source = CODES[param.translate_from]
    target = CODES[param.translate_to]
    with _lock:
        url = f"https://translate.systran.net/?source={source}&target={target}&input={url_escape(text)}"
        session.send_request("Page.navigate", json.dumps({"url": url}))
        query = json.dumps({"expression": _TRANSLATION, "returnByValue": True})
        for _ in range(RESULT_ATTEMPTS):
            result = session.send_request("Runtime.evaluate", query).get("result", {})
            translation = result.get("value") if isinstance(result, dict) else None
            if isinstance(translation, str) and translation:
                return True, translation
            sleep(RETRY_DELAY)
        return False, TRANSLATION_ERROR