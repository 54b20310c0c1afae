"""
Part-of-speech tagging capability.

The training pipeline only needs `tag(word) -> Optional[str]` returning a Penn
Treebank tag (see features.PARTS_OF_SPEECH) or None. Anything callable with
that shape can be injected; this module ships three:

    null_tagger      tags nothing (POS slots stay 0)
    lexicon_tagger   fixed word -> tag table, e.g. for tests
    nltk_tagger      NLTK's averaged perceptron tagger
"""

from __future__ import annotations
import logging
from functools import lru_cache
from typing import Callable, Mapping, Optional

log = logging.getLogger(__name__)

PosTagger = Callable[[str], Optional[str]]


def null_tagger(word: str) -> Optional[str]:
    return None


def lexicon_tagger(table: Mapping[str, str]) -> PosTagger:
    lowered = {k.lower(): v for k, v in table.items()}

    def tag(word: str) -> Optional[str]:
        return lowered.get(word.lower())

    return tag


def nltk_tagger(cache_size: int = 65_536) -> PosTagger:
    """
    Wrap nltk.pos_tag for single words. Requires the `pos` extra and the
    tagger model (`nltk.download("averaged_perceptron_tagger_eng")`).
    """
    import nltk

    log.info("Using NLTK part-of-speech tagger")

    @lru_cache(maxsize=cache_size)
    def tag(word: str) -> Optional[str]:
        if not word:
            return None
        return nltk.pos_tag([word])[0][1]

    return tag
