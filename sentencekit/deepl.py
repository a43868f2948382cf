"""DeepL translation through a browser driven over the debugging protocol."""

from __future__ import annotations

import json
import threading
import time
from collections.abc import Callable
from typing import Optional

from sentencekit.devtools import DevToolsSession
from sentencekit.network import url_escape
from sentencekit.translate import TRANSLATION_ERROR, TranslationParam

PROVIDER_NAME = "DevTools DeepL Translate"
ERROR_START_CHROME = "failed to start Chrome or to connect to it"

LANGUAGES_TO = (
    "Bulgarian",
    "Chinese (Simplified)",
    "Czech",
    "Danish",
    "Dutch",
    "English (American)",
    "English (British)",
    "Estonian",
    "Finnish",
    "French",
    "German",
    "Greek",
    "Hungarian",
    "Italian",
    "Japanese",
    "Latvian",
    "Lithuanian",
    "Polish",
    "Portuguese",
    "Portuguese (Brazilian)",
    "Romanian",
    "Russian",
    "Slovak",
    "Slovenian",
    "Spanish",
    "Swedish",
)

LANGUAGES_FROM = (
    "Bulgarian",
    "Chinese",
    "Czech",
    "Danish",
    "Dutch",
    "English",
    "Estonian",
    "Finnish",
    "French",
    "German",
    "Greek",
    "Hungarian",
    "Italian",
    "Japanese",
    "Latvian",
    "Lithuanian",
    "Polish",
    "Portuguese",
    "Romanian",
    "Russian",
    "Slovak",
    "Slovenian",
    "Spanish",
    "Swedish",
)

CODES = {
    "Bulgarian": "Bulgarian",
    "Chinese": "Chinese",
    "Chinese (Simplified)": "Chinese (simplified)",
    "Czech": "Czech",
    "Danish": "Danish",
    "Dutch": "Dutch",
    "English": "English",
    "English (American)": "English (American)",
    "English (British)": "English (British)",
    "Estonian": "Estonian",
    "Finnish": "Finnish",
    "French": "French",
    "German": "German",
    "Greek": "Greek",
    "Hungarian": "Hungarian",
    "Italian": "Italian",
    "Japanese": "Japanese",
    "Latvian": "Latvian",
    "Lithuanian": "Lithuanian",
    "Polish": "Polish",
    "Portuguese": "Portuguese",
    "Portuguese (Brazilian)": "Portuguese (Brazilian)",
    "Romanian": "Romanian",
    "Russian": "Russian",
    "Slovak": "Slovak",
    "Slovenian": "Slovenian",
    "Spanish": "Spanish",
    "Swedish": "Swedish",
    "?": "Detect language",
}

READY_ATTEMPTS = 19
RESULT_ATTEMPTS = 99
RETRY_DELAY = 0.1

_READY_STATE = "document.readyState"
_TRANSLATION = "document.querySelector('#target-dummydiv').innerHTML.trim() "
_NOTIFICATION = "document.querySelector('div.lmt__system_notification').innerHTML"
_MENU = "document.querySelector('.lmt__language_select__menu')"

# Only one translation at a time: the browser page is shared.
_lock = threading.Lock()


def _select_script(source: str, target: str) -> str:
    def pick(name: str) -> str:
        return (
            f"document.evaluate(`//*[text()='{name}']`,{_MENU},null,"
            "XPathResult.FIRST_ORDERED_NODE_TYPE,null).singleNodeValue.click();"
        )

    return "\n".join((
        "document.querySelector('.lmt__language_select--source').querySelector('button').click();",
        pick(source),
        "document.querySelector('.lmt__language_select--target').querySelector('button').click();",
        pick(target),
    ))


def _evaluate(session: DevToolsSession, expression: str, by_value: bool = True) -> Optional[str]:
    params = {"expression": expression}
    if by_value:
        params["returnByValue"] = True
    value = session.send_request("Runtime.evaluate", json.dumps(params)).get("result", {})
    value = value.get("value") if isinstance(value, dict) else None
    return value if isinstance(value, str) else None


def translate(
    session: DevToolsSession,
    text: str,
    param: TranslationParam,
    sleep: Callable[[float], None] = time.sleep,
) -> tuple[bool, str]:
    """Translate ``text`` on the DeepL page; return (cacheable, translation).

    Raises ``KeyError`` for a language DeepL does not offer.
    """
    if not session.connected():
        return False, f"{TRANSLATION_ERROR}: {ERROR_START_CHROME}"
    source = CODES[param.translate_from]
    target = CODES[param.translate_to]
    with _lock:
        escaped = text.replace("/", "\\/")  # the page breaks on a plain slash
        url = f"https://www.deepl.com/en/translator#en/en/{url_escape(escaped)}"
        session.send_request("Page.navigate", json.dumps({"url": url}))
        for _ in range(READY_ATTEMPTS):
            if _evaluate(session, _READY_STATE, by_value=False) == "complete":
                break
            sleep(RETRY_DELAY)

        session.send_request("Runtime.evaluate", json.dumps({"expression": _select_script(source, target)}))

        for _ in range(RESULT_ATTEMPTS):
            translation = _evaluate(session, _TRANSLATION)
            if translation:
                return True, translation
            sleep(RETRY_DELAY)
        error = _evaluate(session, _NOTIFICATION)
        if error is not None:
            return False, f"{TRANSLATION_ERROR}: {error}"
        return False, TRANSLATION_ERROR