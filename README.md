# sentencekit

Composable filters for sentences of text captured from running programs.
Each filter is a callable `process(sentence, info)` that returns the new
sentence, returns `None` to leave it unchanged, or returns `""` (or calls
`sentencekit.extension.skip()`) to drop it. `info` is a mapping of named
sentence properties such as `"text number"`, `"process id"` and
`"current select"`; thread number 0 is treated as console output and most
filters leave it alone.

## Installing

    pip install sentencekit

For running the test suite:

    pip install "sentencekit[test]"

## Filters

- `sentencekit.repeatchar` – `remove_repeated_characters` undoes uniform
  character repetition (`"aabbcc"` becomes `"abc"`); the repeat count is the
  most common run length.
- `sentencekit.repeatphrase` – `remove_repeated_phrases` erases regions made
  up of a repeated phrase (longer than six characters) found through
  `generate_suffix_array`.
- `sentencekit.repeatprefix` – `remove_repeated_prefixes` strips leading
  text that appears again later in the sentence.
- `sentencekit.repeatsentence` – `RepeatedSentenceFilter(cache_size=30)`
  drops a sentence already among the last `cache_size` sentences of the same
  thread. `cache_size_from_filename("Remove 10 Repeated Sentences.xdll")`
  reads the size from such a name.
- `sentencekit.newlines` – `process_sentence` appends a newline.
- `sentencekit.replacer` – `Trie` and `Replacer` apply literal replacements
  from `|ORIG|...|BECOMES|...|END|` records. Whitespace is ignored, `^`
  matches any one character and the longest match wins. `Replacer` reloads
  its file (default `SavedReplacements.txt`) when it changes.
- `sentencekit.regexreplacer` – `parse_replacements` and `RegexReplacer`
  apply `|REGEX|...|BECOMES|...|MODIFIER|...|END|` records; modifier `i`
  ignores case and `g` replaces every match. Replacements understand `$n`,
  `$&`, `$$`, `` $` `` and `$'`. Default file: `SavedRegexReplacements.txt`.
- `sentencekit.regexfilter` – `RegexFilter` replaces every match of the
  current expression with its first group. `set_regex` raises `ValueError`
  for an invalid expression; `save` and `saved_filter` keep one filter per
  process name in `SavedRegexFilters.txt`, and a saved filter is picked up
  when no filter is set.
- `sentencekit.threadlinker` – `ThreadLinker(add_text)` forwards each
  sentence of a thread to the threads linked to it; a link from `None`
  applies to every thread numbered above 1.

## Chaining filters

```python
from sentencekit.extension import Extension, ExtensionChain, SentenceInfo
from sentencekit import repeatchar, newlines

chain = ExtensionChain([
    Extension("Remove Repeated Characters", repeatchar.process_sentence),
    Extension("Extra Newlines", newlines.process_sentence),
])
info = SentenceInfo({"text number": 1, "current select": 1, "process id": 42})
print(chain.dispatch("HHeelllloo", info))  # "Hello\n"
```

`dispatch` runs each extension in order, stops as soon as one empties the
sentence, and returns the result. The chain also offers `add`, `remove`,
`reorder`, `names` and `clear`. `save(path)` writes the names, each followed
by `>`, to `SavedExtensions.txt` by default, and `saved_extension_names(path)`
reads them back, creating the file with a default list if it is missing.

## Translation

`sentencekit.translate.TranslationWrapper` adds a translation below each
sentence, separated by `"\u200b \n"`. It keeps a cache in
`"<provider> Cache (<language>).txt"`, limits requests with a `RateLimiter`,
and is configured through `TranslationSettings` and `TranslationParam`.

The `deepl`, `papago` and `systran` modules translate by driving a Chromium
browser page through `sentencekit.devtools.DevToolsSession`:

```python
from functools import partial
from sentencekit import deepl
from sentencekit.devtools import DevToolsSession, find_chrome
from sentencekit.translate import TranslationWrapper

session = DevToolsSession(find_chrome(), headless=True)
session.start()  # starts the browser on port 9222
wrapper = TranslationWrapper(deepl.PROVIDER_NAME, partial(deepl.translate, session))
print(wrapper.process_sentence("こんにちは", {"text number": 1, "current select": 1}))
session.close()
```

`start` raises `OSError` if the browser cannot be started and
`ConnectionError` if no page can be reached. Each provider module lists its
`LANGUAGES_TO`, `LANGUAGES_FROM` and `CODES`.

## Dictionary and history

`sentencekit.dictionary.Dictionary` reads `|TERM|...|DEFINITION|...|END|`
and `|ROOT|...|INFLECTS TO|...|NAME|...|END|` records (default file
`SavedDictionary.txt`), reloading when the file changes. `lookup(term)`
follows inflection rules; `definitions_for(term)` returns HTML definitions
for the term and its shorter prefixes. `SentenceHistory` keeps the last
sentences, scrolls through them and arranges original and translation for
display.

## Helpers

- `sentencekit.blockmarkup` – `iter_blocks(text, delimiters)` yields the
  fields of each complete record; `decode_markup(data)` decodes UTF-16 (with
  a byte order mark) or UTF-8 bytes.
- `sentencekit.network` – `parse_json` (lenient, numbers become floats,
  raises `JsonParseError`), `json_escape`, `html_unescape`, `url_escape`,
  and `http_request`, which returns an `HttpResponse` or raises `HttpError`.

## What it does not do

This is a library only: it has no command-line program and no windows. It
does not capture text from other programs, has no clipboard copy, no
floating text window and no scripting extension, and it cannot load
extensions from shared libraries; extensions are Python callables. The
translation back ends need a Chromium-based browser installed, and
`RegexFilter` finds a process's executable path only where `/proc` exposes
it, unless given a `process_name` function.