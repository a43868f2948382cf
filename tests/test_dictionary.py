import os

import pytest

from sentencekit.dictionary import Dictionary, SentenceHistory

CONTENT = (
    "Instructions here are ignored\n"
    "|TERM|walk|TERM|stroll|DEFINITION|to move on foot|END|\n"
    "|TERM|run|DEFINITION|to move fast|END|\n"
    "|TERM|run|DEFINITION|to operate|END|\n"
    "|ROOT|1|INFLECTS TO|(.+)ed|NAME| (past)|END|\n"
)


def write(path, text):
    path.write_bytes(("\ufeff" + text).encode("utf-8"))


@pytest.fixture
def dictionary(tmp_path):
    path = tmp_path / "dict.txt"
    write(path, CONTENT)
    return Dictionary(path)


def test_direct_lookup(dictionary):
    assert dictionary.lookup("walk") == [("walk", "to move on foot", [])]


def test_shared_definition_between_terms(dictionary):
    assert dictionary.lookup("stroll")[0][1] == dictionary.lookup("walk")[0][1]


def test_multiple_definitions_in_file_order(dictionary):
    assert [d for _, d, _ in dictionary.lookup("run")] == ["to move fast", "to operate"]


def test_inflection_followed(dictionary):
    assert dictionary.lookup("walked") == [("walk", "to move on foot", [" (past)"])]


def test_unknown_term(dictionary):
    assert dictionary.lookup("fly") == []


def test_definitions_for_prefixes_deduplicated(dictionary):
    result = dictionary.definitions_for("walked now")
    assert result == ["<h3>walked (1/1)</h3><small>walk (past)</small>to move on foot"]


def test_definitions_numbering(dictionary):
    result = dictionary.definitions_for("run")
    assert len(result) == 2
    assert "(1/2)" in result[0] and "(2/2)" in result[1]


def test_html_escaped_term(tmp_path):
    path = tmp_path / "d.txt"
    write(path, "|TERM|<a>|DEFINITION|def|END|")
    result = Dictionary(path).definitions_for("<a>")
    assert result[0].startswith("<h3>&lt;a&gt; (1/1)</h3>")


def test_invalid_inflection_skipped(tmp_path):
    path = tmp_path / "d.txt"
    write(path, "|ROOT|1|INFLECTS TO|(|NAME|x|END||TERM|a|DEFINITION|b|END|")
    dictionary = Dictionary(path)
    assert dictionary.update() is True
    assert dictionary.inflections == []
    assert len(dictionary) == 1


def test_missing_file(tmp_path):
    dictionary = Dictionary(tmp_path / "missing.txt")
    assert dictionary.update() is False
    assert dictionary.lookup("walk") == []


def test_reload_on_change(tmp_path):
    path = tmp_path / "d.txt"
    write(path, "|TERM|a|DEFINITION|first|END|")
    dictionary = Dictionary(path)
    assert dictionary.lookup("a")[0][1] == "first"
    assert dictionary.update() is False
    write(path, "|TERM|a|DEFINITION|second|END|")
    stat = path.stat()
    os.utime(path, ns=(stat.st_atime_ns, stat.st_mtime_ns + 10_000_000_000))
    assert dictionary.lookup("a")[0][1] == "second"


def test_history_add_and_scroll():
    history = SentenceHistory()
    for text in ("one", "two", "three"):
        history.add(text)
    assert history.display_text() == "three"
    assert history.scroll(1) == "two"
    assert history.scroll(1) == "one"
    assert history.scroll(1) == "one"
    assert history.scroll(-1) == "two"


def test_history_limit_and_tabs():
    history = SentenceHistory(max_size=2)
    history.add("a\tb")
    history.add("c")
    history.add("d")
    assert history.sentences == ["c", "d"]
    history = SentenceHistory()
    history.add("a\tb")
    assert history.display_text() == "ab"


def test_history_empty():
    history = SentenceHistory()
    assert history.display_text() is None
    assert history.scroll(1) is None


def test_history_translation_layouts():
    history = SentenceHistory()
    history.add("orig\u200b \ntrans")
    assert history.display_text(show_original=False) == "trans"
    assert history.display_text(True, True) == "trans\norig"
    assert history.display_text(True, False) == "orig\u200b \ntrans"