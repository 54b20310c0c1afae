"""
Tokenization and Text Normalization

Every string that reaches the trie, the embedding table or the autocomplete
maps passes through this module, and queries are normalized by the same
functions so that training and lookup always agree.

Key Functions:
    tokenize(text): split text into tokens on whitespace and punctuation
    split_sentences(text): terminator-to-sentence segmentation
    to_plain_text(text): flatten a sentence before building n-grams
    normalize_text / normalize_word / normalize_phrase: matching forms
"""

from __future__ import annotations
import re
import unicodedata
from typing import List

# Fixed punctuation class; any other Unicode punctuation (category P*) splits too.
PUNCTUATION = frozenset('.,/#!$%?"“”^&*;:{}=_`~()')

# kept inside a token when flanked by alphanumerics: don't, well-known
_JOINERS = frozenset("'’-")

_ws_re = re.compile(r"\s+")
_non_word_re = re.compile(r"[^\w\s]")
_lower_upper_re = re.compile(r"([a-z])([A-Z])")
_newline_re = re.compile(r"[\r\n\0]")
_terminator_re = re.compile(r"[.?!]+\s*")

_PLAIN_TEXT_RES = (
    re.compile(r"\.\s+"),
    re.compile(r"\s-+\s"),
    re.compile(r"[©|]\s?"),
    re.compile(r"[!(–?$\"“”…]"),
)


def _is_separator(ch: str) -> bool:
    if ch.isspace() or ch in PUNCTUATION:
        return True
    return unicodedata.category(ch).startswith("P")


def has_alnum(token: str) -> bool:
    return any(ch.isalnum() for ch in token)


def tokenize(text: str, *, lowercase: bool = False) -> List[str]:
    """
    Split text into tokens, in original order.

    Separators are whitespace, PUNCTUATION and Unicode punctuation; runs of
    separators collapse. Apostrophes and hyphens between two alphanumerics are
    kept. Anything else (accents, symbols, emoji) stays part of the token.

    Example:
        >>> tokenize("Hello, world! Don't stop...")
        ['Hello', 'world', "Don't", 'stop']
    """
    if not text:
        return []
    tokens: List[str] = []
    buf: List[str] = []
    n = len(text)
    for i, ch in enumerate(text):
        if ch in _JOINERS and buf and buf[-1].isalnum() and i + 1 < n and text[i + 1].isalnum():
            buf.append(ch)
            continue
        if _is_separator(ch):
            if buf:
                tokens.append("".join(buf))
                buf = []
            continue
        buf.append(ch)
    if buf:
        tokens.append("".join(buf))
    if lowercase:
        return [t.casefold() for t in tokens]
    return tokens


def split_sentences(text: str) -> List[str]:
    """
    Segment text on '.', '!' or '?' when the next character is uppercase.
    Newlines are flattened first; empty spans are dropped.
    """
    flat = _newline_re.sub(" ", text)
    spans: List[str] = []
    start = 0
    for m in _terminator_re.finditer(flat):
        nxt = flat[m.end():m.end() + 1]
        if nxt and nxt.isupper():
            spans.append(flat[start:m.end()])
            start = m.end()
    spans.append(flat[start:])
    return [s.strip() for s in spans if s.strip()]


def capitalize_lead(token: str) -> str:
    return token[:1].upper() + token[1:]


def to_plain_text(text: str) -> str:
    """Capitalize the lead, split camelCase joins, drop dashes/marks, collapse spaces."""
    s = capitalize_lead(text.strip())
    s = _lower_upper_re.sub(r"\1 \2", s)
    s = _newline_re.sub(" ", s)
    for rx in _PLAIN_TEXT_RES:
        s = rx.sub(" ", s)
    return _ws_re.sub(" ", s).strip()


def normalize_text(text: str, *, lowercase: bool = True) -> str:
    s = _ws_re.sub(" ", text).strip()
    return s.lower() if lowercase else s


def normalize_word(word: str, *, lowercase: bool = True) -> str:
    s = _non_word_re.sub("", word).strip()
    return s.lower() if lowercase else s


def normalize_phrase(phrase: str, *, lowercase: bool = True) -> str:
    s = _non_word_re.sub(" ", phrase)
    s = _ws_re.sub(" ", s).strip()
    return s.lower() if lowercase else s
