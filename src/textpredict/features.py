"""
Feature definitions for the (token, next_token) embeddings.

The slot layout of a FeatureVector, in order:

    I.   character histogram     one slot per ALPHABET symbol
    II.  part of speech          one-hot over PARTS_OF_SPEECH (Penn Treebank)
    III. prevalence              1 slot
    IV.  suffixes                one flag per SUFFIXES entry
    V.   next-word frequency     1 slot, normalized to [0, 1] after training
    VI.  vulgarity               1 slot, reserved (always 0)
    VII. style                   one flag per StyleMarker

With the default markers this adds up to 66 + 36 + 1 + 37 + 1 + 1 + 2 = 144.
Indices are stable for one FeatureLayout instance.
"""

from __future__ import annotations
import string
from dataclasses import dataclass
from typing import Callable, Iterable, Optional, Tuple

from .errors import DimensionMismatch

ALPHABET: str = string.ascii_lowercase + string.ascii_uppercase + string.digits + "'’-+"

PARTS_OF_SPEECH: Tuple[str, ...] = (
    "CC", "CD", "DT", "EX", "FW", "IN", "JJ", "JJR", "JJS", "LS", "MD", "NN",
    "NNS", "NNP", "NNPS", "PDT", "POS", "PRP", "PRP$", "RB", "RBR", "RBS", "RP",
    "SYM", "TO", "UH", "VB", "VBD", "VBG", "VBN", "VBP", "VBZ", "WDT", "WP",
    "WP$", "WRB",
)

SUFFIXES: Tuple[str, ...] = (
    "ing", "ed", "er", "est", "ly", "tion", "sion", "ness", "ment", "able",
    "ible", "al", "ial", "ful", "less", "ous", "ious", "ive", "ize", "ise",
    "ate", "en", "ify", "ism", "ist", "ity", "ty", "ance", "ence", "ant",
    "ent", "ic", "ical", "ship", "hood", "dom", "ward",
)

_POS_INDEX = {tag: i for i, tag in enumerate(PARTS_OF_SPEECH)}
_ALPHA_INDEX = {ch: i for i, ch in enumerate(ALPHABET)}


@dataclass(frozen=True)
class StyleMarker:
    """A boolean style indicator: vocabulary hit on either token, or a custom rule."""
    name: str
    vocabulary: frozenset
    rule: Optional[Callable[[str, str, Optional[str]], bool]] = None

    def matches(self, token: str, next_token: str, tag: Optional[str]) -> bool:
        if token.lower() in self.vocabulary or next_token.lower() in self.vocabulary:
            return True
        return bool(self.rule and self.rule(token, next_token, tag))


def _pirate_me(token: str, next_token: str, tag: Optional[str]) -> bool:
    # "me hearties", "me ship"
    return token.lower() == "me" and bool(tag) and tag.startswith("NN")


STYLE_MARKERS: Tuple[StyleMarker, ...] = (
    StyleMarker(
        "pirate",
        frozenset({"ahoy", "arrr", "matey", "blimey", "scallywag"}),
        _pirate_me,
    ),
    StyleMarker(
        "victorian",
        frozenset({
            "abeyance", "ado", "blunderbuss", "carriage", "chambre", "corset",
            "dandy", "dote", "doth", "esquire", "futile", "grand", "hath",
            "hence", "lively", "nonesuch", "thee", "thou", "thy", "vestibule",
            "wonderful",
        }),
    ),
)


def select_markers(names: Optional[Iterable[str]]) -> Tuple[StyleMarker, ...]:
    if names is None:
        return STYLE_MARKERS
    by_name = {m.name: m for m in STYLE_MARKERS}
    out = []
    for name in names:
        if name not in by_name:
            raise ValueError(f"unknown style marker {name!r}; known: {sorted(by_name)}")
        out.append(by_name[name])
    return tuple(out)


class FeatureLayout:
    """Slot offsets of one embedding scheme."""

    def __init__(self, style_markers: Tuple[StyleMarker, ...] = STYLE_MARKERS) -> None:
        self.style_markers = tuple(style_markers)
        self.histogram = 0
        self.pos = self.histogram + len(ALPHABET)
        self.prevalence = self.pos + len(PARTS_OF_SPEECH)
        self.suffixes = self.prevalence + 1
        self.next_word_frequency = self.suffixes + len(SUFFIXES)
        self.vulgarity = self.next_word_frequency + 1
        self.style = self.vulgarity + 1
        self.size = self.style + len(self.style_markers)

    def check(self, dimension: int) -> None:
        if self.size > dimension:
            raise DimensionMismatch(dimension, self.size, "feature layout does not fit")

    @staticmethod
    def alphabet_index(ch: str) -> Optional[int]:
        return _ALPHA_INDEX.get(ch)

    @staticmethod
    def pos_index(tag: Optional[str]) -> Optional[int]:
        if not tag:
            return None
        return _POS_INDEX.get(tag)
