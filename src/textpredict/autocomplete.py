# textpredict/autocomplete.py
"""
Lightweight word/phrase frequency model.

Independent of Predictor: no embeddings and no trie, just three maps built in
one pass over the corpus:

    word frequencies     word -> count (words shorter than min_word_length skipped)
    phrase frequencies   2-3 word continuation -> count
    n-grams              1..max_ngram word sequence -> next words / next phrases

Lower latency and memory than Predictor; used for fast-path suggestions.
"""

from __future__ import annotations
import logging
import re
from dataclasses import dataclass, field, replace
from typing import Dict, List, Optional

from .config import PHRASE_LENGTHS, AutocompleteOptions
from .errors import AlreadyTrained, InvalidCorpus, NotTrained
from .models import AutocompleteStats, Suggestion
from .normalize import normalize_phrase, normalize_text, normalize_word
from .ranking import rank_by_frequency, ranked

log = logging.getLogger(__name__)

_sentence_re = re.compile(r"[.!?]+")

# shape the trained maps; fixed until clear()
_TRAINING_OPTIONS = ("case_sensitive", "min_word_length", "enable_phrases", "max_ngram")


@dataclass(slots=True)
class _NGramData:
    next_words: Dict[str, int] = field(default_factory=dict)
    next_phrases: Dict[str, int] = field(default_factory=dict)


class AutocompleteEngine:
    def __init__(self, options: Optional[AutocompleteOptions] = None) -> None:
        self.options = options or AutocompleteOptions()
        self._word_frequencies: Dict[str, int] = {}
        self._phrase_frequencies: Dict[str, int] = {}
        self._ngrams: Dict[str, _NGramData] = {}
        self._trained = False

    # ---- Training ----
    def train(self, corpus: str) -> None:
        if not isinstance(corpus, str) or not corpus.strip():
            raise InvalidCorpus()
        if self._trained:
            raise AlreadyTrained("Autocomplete already trained. Call clear() before training again.")

        words_f: Dict[str, int] = {}
        phrases_f: Dict[str, int] = {}
        ngrams: Dict[str, _NGramData] = {}

        sentences = [s.strip() for s in _sentence_re.split(self._text(corpus)) if s.strip()]
        for sentence in sentences:
            words = [w for w in (self._word(raw) for raw in sentence.split()) if w]
            self._process_sentence(words, words_f, phrases_f, ngrams)

        self._word_frequencies = words_f
        self._phrase_frequencies = phrases_f
        self._ngrams = ngrams
        self._trained = True
        log.info("Autocomplete trained: sentences=%d words=%d phrases=%d ngrams=%d",
                 len(sentences), len(words_f), len(phrases_f), len(ngrams))

    def _process_sentence(self, words: List[str], words_f: Dict[str, int],
                          phrases_f: Dict[str, int], ngrams: Dict[str, _NGramData]) -> None:
        opts = self.options
        for w in words:
            if len(w) >= opts.min_word_length:
                words_f[w] = words_f.get(w, 0) + 1

        for i in range(len(words) - 1):
            next_word = words[i + 1]
            phrases: List[str] = []
            if opts.enable_phrases:
                phrases = [
                    " ".join(words[i + 1:i + 1 + length])
                    for length in PHRASE_LENGTHS
                    if i + length < len(words)
                ]
                for p in phrases:
                    phrases_f[p] = phrases_f.get(p, 0) + 1

            for n in range(1, min(opts.max_ngram, i + 1) + 1):
                seq = " ".join(words[i - n + 1:i + 1])
                data = ngrams.get(seq)
                if data is None:
                    data = ngrams[seq] = _NGramData()
                data.next_words[next_word] = data.next_words.get(next_word, 0) + 1
                for p in phrases:
                    data.next_phrases[p] = data.next_phrases.get(p, 0) + 1

    # ---- Query ----
    def get_completions(self, prefix: str) -> List[str]:
        """
        A single word is completed from the word-frequency map (every result
        starts with it).

        Several words are read as context. When a trailing n-gram of the input
        is known its ranked next words are returned. Otherwise, unless the input
        ends in whitespace, the last word is taken as still being typed: next
        words of the preceding context that start with it come first, then
        plain prefix completion of that word.

        Example:
            >>> eng.get_completions("to eat a pi")
            ['pizza']
        """
        self._require_trained()
        words = self._query_words(prefix)
        if not words:
            return []
        if len(words) == 1:
            return self._complete_word(words[0])

        data = self._lookup(words)
        if data is not None:
            return rank_by_frequency(data.next_words, limit=self.options.max_suggestions)
        if prefix[-1:].isspace():
            return []

        *context, partial = words
        data = self._lookup(context)
        if data is not None:
            hits = {w: f for w, f in data.next_words.items() if w.startswith(partial)}
            if hits:
                return rank_by_frequency(hits, limit=self.options.max_suggestions)
        return self._complete_word(partial)

    def get_next_word(self, sequence: str) -> List[str]:
        self._require_trained()
        data = self._lookup(self._query_words(sequence))
        if data is None:
            return []
        return rank_by_frequency(data.next_words, limit=self.options.max_suggestions)

    def get_next_phrase(self, sequence: str) -> List[str]:
        self._require_trained()
        if not self.options.enable_phrases:
            return []
        data = self._lookup(self._query_words(sequence))
        if data is None:
            return []
        return rank_by_frequency(data.next_phrases, limit=self.options.max_suggestions)

    def get_all_suggestions(self, prefix: str) -> List[Suggestion]:
        """Words and (when enabled) phrases starting with prefix, merged and ranked."""
        self._require_trained()
        if not isinstance(prefix, str):
            return []
        query = normalize_phrase(prefix, lowercase=not self.options.case_sensitive)
        if not query:
            return []
        candidates: List[Suggestion] = []
        if " " not in query:
            candidates.extend(
                Suggestion(w, f, "word") for w, f in self._word_frequencies.items() if w.startswith(query)
            )
        if self.options.enable_phrases:
            candidates.extend(
                Suggestion(p, f, "phrase") for p, f in self._phrase_frequencies.items() if p.startswith(query)
            )
        return ranked(candidates, score=lambda s: s.frequency, text=lambda s: s.text,
                      limit=self.options.max_suggestions)

    # ---- State ----
    def is_ready(self) -> bool:
        return self._trained

    def clear(self) -> None:
        self._word_frequencies = {}
        self._phrase_frequencies = {}
        self._ngrams = {}
        self._trained = False

    def stats(self) -> AutocompleteStats:
        self._require_trained()
        total_words = len(self._word_frequencies)
        freq_sum = sum(self._word_frequencies.values())
        return AutocompleteStats(
            total_words=total_words,
            total_phrases=len(self._phrase_frequencies),
            total_ngrams=len(self._ngrams),
            average_word_frequency=freq_sum / total_words if total_words else 0.0,
        )

    def update_options(self, **changes) -> None:
        """
        max_suggestions applies at once. Options that shape the trained maps
        (casing, word length, phrases, n-gram size) can only change while
        untrained; call clear() first.
        """
        if self._trained:
            locked = [k for k in _TRAINING_OPTIONS if k in changes and changes[k] != getattr(self.options, k)]
            if locked:
                raise AlreadyTrained(f"Cannot change {', '.join(locked)} after training. Call clear() first.")
        self.options = replace(self.options, **changes)

    # ---- internals ----
    def _require_trained(self) -> None:
        if not self._trained:
            raise NotTrained("Autocomplete must be trained before use")

    def _text(self, text: str) -> str:
        return normalize_text(text, lowercase=not self.options.case_sensitive)

    def _word(self, word: str) -> str:
        return normalize_word(word, lowercase=not self.options.case_sensitive)

    def _query_words(self, query: str) -> List[str]:
        if not isinstance(query, str) or not query.strip():
            return []
        return [w for w in (self._word(raw) for raw in self._text(query).split()) if w]

    def _complete_word(self, stem: str) -> List[str]:
        matches = {w: f for w, f in self._word_frequencies.items() if w.startswith(stem)}
        return rank_by_frequency(matches, limit=self.options.max_suggestions)

    def _lookup(self, words: List[str]) -> Optional[_NGramData]:
        # longest trailing n-gram first, down to the last word
        for n in range(min(self.options.max_ngram, len(words)), 0, -1):
            data = self._ngrams.get(" ".join(words[-n:]))
            if data is not None:
                return data
        return None
