import pytest

from sentencekit.extension import SentenceInfo
from sentencekit.repeatphrase import generate_suffix_array, process_sentence, remove_repeated_phrases

NON_CONSOLE = SentenceInfo({"text number": 1})


@pytest.mark.parametrize(
    "sentence",
    [
        "Name: '_abcdefg_abcdefg_abcdefg_abcdefg_abcdefg'",
        "Name: '__a_ab_abc_abcd_abcde_abcdef_abcdefg'",
        "Name: '_abcdefg_abcdef_abcde_abcd_abc_ab_a_'",
    ],
)
def test_repeats_removed(sentence):
    assert process_sentence(sentence, NON_CONSOLE) == "Name: '_abcdefg'"


@pytest.mark.parametrize("sentence", ["", " ", "This is a normal sentence. はい"])
def test_normal_sentences_unchanged(sentence):
    assert process_sentence(sentence, NON_CONSOLE) == sentence


def test_console_is_ignored():
    assert process_sentence("abcdefgabcdefgabcdefg", SentenceInfo({"text number": 0})) is None


def test_zero_timeout_leaves_sentence():
    sentence = "Name: '_abcdefg_abcdefg_abcdefg_abcdefg_abcdefg'"
    assert remove_repeated_phrases(sentence, timeout=0) == sentence


@pytest.mark.parametrize("text", ["banana", "mississippi", "aaaa", "This is a normal sentence. はい"])
def test_suffix_array_is_descending_permutation(text):
    suffixes = generate_suffix_array(text)
    assert sorted(suffixes) == list(range(len(text)))
    assert all(text[a:] > text[b:] for a, b in zip(suffixes, suffixes[1:]))


def test_suffix_array_of_empty_text():
    assert generate_suffix_array("") == []