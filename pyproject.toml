[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "sentencekit"
version = "0.1.0"
description = "Sentence filters for extracted text: repetition removal, replacements, regex filters, thread linking, translation and dictionary lookup"
requires-python = ">=3.10"
keywords = ["text", "filter", "replacement", "translation", "repetition", "dictionary", "markup"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Intended Audience :: End Users/Desktop",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Text Processing :: Filters",
]
dependencies = [
    "websocket-client",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["sentencekit"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
