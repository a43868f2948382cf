import json

import pytest

from sentencekit import deepl
from sentencekit.network import url_escape
from sentencekit.translate import TRANSLATION_ERROR, TranslationParam


class FakeSession:
    def __init__(self, responder, connected=True):
        self.responder = responder
        self._connected = connected
        self.requests = []

    def connected(self):
        return self._connected

    def send_request(self, method, params="{}"):
        decoded = json.loads(params)
        self.requests.append((method, decoded))
        return self.responder(method, decoded)


def page(translation="", notification=None):
    def respond(method, params):
        if method != "Runtime.evaluate":
            return {}
        expression = params["expression"]
        if expression == "document.readyState":
            return {"result": {"type": "string", "value": "complete"}}
        if "target-dummydiv" in expression:
            return {"result": {"type": "string", "value": translation}}
        if "system_notification" in expression and notification is not None:
            return {"result": {"type": "string", "value": notification}}
        return {}
    return respond


def _select_script(session):
    scripts = [params["expression"] for _, params in session.requests if "expression" in params]
    return next(script for script in scripts if "language_select" in script)


@pytest.mark.parametrize("language", deepl.LANGUAGES_FROM)
def test_every_source_language_translates(language):
    session = FakeSession(page("Hello"))
    result = deepl.translate(session, "x", TranslationParam(deepl.LANGUAGES_TO[0], language), lambda _: None)
    assert result == (True, "Hello")
    assert f"text()='{deepl.CODES[language]}'" in _select_script(session)


@pytest.mark.parametrize("language", deepl.LANGUAGES_TO)
def test_every_target_language_translates(language):
    session = FakeSession(page("Hello"))
    result = deepl.translate(session, "x", TranslationParam(language, "?"), lambda _: None)
    assert result == (True, "Hello")
    assert f"text()='{deepl.CODES[language]}'" in _select_script(session)


def test_not_connected_reports_error_without_requests():
    session = FakeSession(page("Hello"), connected=False)
    ok, message = deepl.translate(session, "text", TranslationParam())
    assert ok is False
    assert message.startswith(TRANSLATION_ERROR + ": ")
    assert session.requests == []


def test_successful_translation():
    session = FakeSession(page("Hello"))
    sleeps = []
    result = deepl.translate(session, "a/b", TranslationParam("English", "Japanese"), sleeps.append)
    assert result == (True, "Hello")
    assert sleeps == []
    method, params = session.requests[0]
    assert method == "Page.navigate"
    assert params["url"] == "https://www.deepl.com/en/translator#en/en/" + url_escape("a\\/b")


def test_language_names_are_selected_in_page():
    session = FakeSession(page("Hello"))
    deepl.translate(session, "x", TranslationParam("Chinese (Simplified)", "?"), lambda _: None)
    select = _select_script(session)
    assert "text()='Detect language'" in select
    assert "text()='Chinese (simplified)'" in select
    assert select.index("Detect language") < select.index("Chinese (simplified)")


def test_notification_is_reported_when_no_translation():
    session = FakeSession(page("", notification="Too many requests"))
    sleeps = []
    ok, message = deepl.translate(session, "x", TranslationParam(), sleeps.append)
    assert (ok, message) == (False, TRANSLATION_ERROR + ": Too many requests")
    assert len(sleeps) == deepl.RESULT_ATTEMPTS


def test_plain_error_when_nothing_found():
    session = FakeSession(lambda method, params: {})
    sleeps = []
    result = deepl.translate(session, "x", TranslationParam(), sleeps.append)
    assert result == (False, TRANSLATION_ERROR)
    assert len(sleeps) == deepl.READY_ATTEMPTS + deepl.RESULT_ATTEMPTS


def test_unknown_language_raises():
    session = FakeSession(page("Hello"))
    with pytest.raises(KeyError):
        deepl.translate(session, "x", TranslationParam("Klingon", "?"))