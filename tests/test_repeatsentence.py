from sentencekit.extension import SentenceInfo
from sentencekit.repeatsentence import RepeatedSentenceFilter, cache_size_from_filename


def info(number):
    return SentenceInfo({"text number": number})


def test_cache_size_from_path():
    assert cache_size_from_filename("C:\\games\\Remove 30 Repeated Sentences.xdll") == 30
    assert cache_size_from_filename("Remove 5 Repeated Sentences.xdll") == 5


def test_cache_size_default():
    assert cache_size_from_filename("C:\\games\\Something Else.xdll") == 30


def test_repeat_is_dropped():
    sentence_filter = RepeatedSentenceFilter()
    assert sentence_filter.process_sentence("hello", info(1)) is None
    assert sentence_filter.process_sentence("hello", info(1)) == ""


def test_threads_are_independent():
    sentence_filter = RepeatedSentenceFilter()
    assert sentence_filter.process_sentence("hello", info(1)) is None
    assert sentence_filter.process_sentence("hello", info(2)) is None


def test_console_is_ignored():
    sentence_filter = RepeatedSentenceFilter()
    sentence_filter.process_sentence("hello", info(0))
    assert sentence_filter.process_sentence("hello", info(0)) is None


def test_old_sentences_are_forgotten():
    sentence_filter = RepeatedSentenceFilter(cache_size=2)
    for sentence in ("a", "b", "c"):
        sentence_filter.process_sentence(sentence, info(1))
    assert sentence_filter.process_sentence("a", info(1)) is None
    assert sentence_filter.process_sentence("c", info(1)) == ""


def test_repeat_moves_to_back():
    sentence_filter = RepeatedSentenceFilter(cache_size=2)
    for sentence in ("a", "b", "a", "c"):
        sentence_filter.process_sentence(sentence, info(1))
    assert sentence_filter.process_sentence("b", info(1)) is None
    assert sentence_filter.process_sentence("c", info(1)) == ""