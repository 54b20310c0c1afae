# src/textpredict/models.py
"""
Data models for the prediction engines.

- Dataset: a named training corpus.
- TrieItem / NGramObservation: what the n-gram trie stores and what the
  context builder feeds into it.
- TokenPrediction, SequencePrediction, Completions, SimilarToken: the result
  objects returned by Predictor.
- Suggestion, AutocompleteStats: the result objects of AutocompleteEngine.

These classes carry no business logic beyond trivial derived values.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Dict, List, Tuple


@dataclass(frozen=True, slots=True)
class Dataset:
    name: str
    text: str


@dataclass(slots=True)
class TrieItem:
    """
    One n-gram key stored in the trie.

    Attributes
    ----------
    sequence : str
        1..max_ngram tokens joined by single spaces, as first seen in the corpus.
    order : int
        Insertion index; search results keep this order.
    next_tokens : Dict[str, int]
        Successor token -> count.
    next_phrases : Dict[str, int]
        Successor phrase (2-3 tokens) -> count.
    """
    sequence: str
    order: int
    next_tokens: Dict[str, int] = field(default_factory=dict)
    next_phrases: Dict[str, int] = field(default_factory=dict)

    @property
    def frequency(self) -> int:
        return sum(self.next_tokens.values())

    @property
    def length(self) -> int:
        return len(self.sequence.split(" "))


@dataclass(frozen=True, slots=True)
class NGramObservation:
    sequence: str
    next_token: str
    next_phrases: Tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class TokenPrediction:
    token: str
    ranked_tokens: List[str]


@dataclass(frozen=True, slots=True)
class SequencePrediction:
    completion: str
    sequence_length: int
    token: str
    ranked_tokens: List[str]


@dataclass(frozen=True, slots=True)
class Completions:
    completion: str
    token: str
    ranked_tokens: List[str]
    completions: List[str]


@dataclass(frozen=True, slots=True)
class SimilarToken:
    token: str
    ranked_tokens: List[str]


@dataclass(frozen=True, slots=True)
class Suggestion:
    text: str
    frequency: int
    kind: str   # "word" | "phrase"


@dataclass(frozen=True, slots=True)
class AutocompleteStats:
    total_words: int
    total_phrases: int
    total_ngrams: int
    average_word_frequency: float
