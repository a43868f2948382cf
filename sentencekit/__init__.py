"""Composable filters for sentences of extracted text, with translation and dictionary helpers."""

__version__ = "0.1.0"