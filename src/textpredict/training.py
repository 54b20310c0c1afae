"""
Two-pass training over a tokenized corpus.

    1. analyze()        build one FeatureVector per (token, next_token) pair and
                        track the largest next-word count among non-stop-words
    2. normalize()      divide every next-word count by that maximum (the
                        denominator is only known after a full scan)
    3. create_context() segment sentences, emit n-gram observations and
                        bulk-load them into an NGramTrie in bounded chunks

run() chains the three and returns a TrainedModel; nothing is shared with the
caller until every step has finished.
"""

from __future__ import annotations
import logging
import time
from collections import Counter
from dataclasses import dataclass
from typing import Iterator, List, Optional, Sequence, Tuple

from .config import PHRASE_LENGTHS, VERBOSE, PredictorConfig
from .embeddings import EmbeddingTable
from .features import SUFFIXES, FeatureLayout, select_markers
from .models import NGramObservation
from .normalize import has_alnum, split_sentences, to_plain_text, tokenize
from .tagger import PosTagger, null_tagger
from .trie import NGramTrie
from .vector import FeatureVector

log = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class TrainedModel:
    embeddings: EmbeddingTable
    trie: NGramTrie


class TrainingPipeline:
    def __init__(self, config: Optional[PredictorConfig] = None, tagger: Optional[PosTagger] = None) -> None:
        self.config = config or PredictorConfig()
        self.tagger = tagger or null_tagger
        self.layout = FeatureLayout(select_markers(self.config.style_markers))
        self.layout.check(self.config.dimension)

    def run(self, text: str) -> TrainedModel:
        start = time.perf_counter()
        log.info("Training...")
        tokens = tokenize(text)
        embeddings, max_frequency = self.analyze(tokens)
        self.normalize(embeddings, max_frequency)
        embeddings.freeze()
        log.info("Training completed in %.3f seconds: tokens=%d pairs=%d",
                 time.perf_counter() - start, len(tokens), len(embeddings))
        trie = self.create_context(text)
        return TrainedModel(embeddings=embeddings, trie=trie)

    # ---- Pass 1 ----
    def analyze(self, tokens: Sequence[str]) -> Tuple[EmbeddingTable, float]:
        cfg, layout = self.config, self.layout
        embeddings = EmbeddingTable(cfg.dimension)
        counts = Counter(tokens)
        total = len(tokens)
        max_frequency = 0.0
        tags = {}

        for index in range(total - 1):
            token = tokens[index]
            # unparsable tokens never start a pair
            if not token or not has_alnum(token):
                continue
            next_token = tokens[index + 1]
            vec = embeddings.ensure(token, next_token)

            # I. composition
            self._histogram(vec, next_token)

            # II. part of speech
            key = next_token.lower()
            if key not in tags:
                tags[key] = self.tagger(key)
            tag = tags[key]
            pos_slot = layout.pos_index(tag)
            if pos_slot is not None:
                vec[layout.pos + pos_slot] = 1.0

            # III. prevalence
            vec[layout.prevalence] = counts[next_token] / total

            # IV. suffixes
            for i, suffix in enumerate(SUFFIXES):
                vec[layout.suffixes + i] = 1.0 if key.endswith(suffix) else 0.0

            # V. next-word frequency (raw count until normalize())
            vec[layout.next_word_frequency] += 1
            frequency = vec[layout.next_word_frequency]
            if key not in cfg.stop_words and frequency > max_frequency:
                max_frequency = frequency

            # VI. vulgarity: no detector
            vec[layout.vulgarity] = 0.0

            # VII. style
            for i, marker in enumerate(layout.style_markers):
                vec[layout.style + i] = 1.0 if marker.matches(token, next_token, tag) else 0.0

            if VERBOSE and index and index % 100_000 == 0:
                log.info("analyzed %d / %d tokens", index, total)

        return embeddings, max_frequency

    def _histogram(self, vec: FeatureVector, word: str) -> None:
        n = len(word)
        for ch, c in Counter(word).items():
            i = self.layout.alphabet_index(ch)
            if i is not None:
                vec[self.layout.histogram + i] = c / n

    # ---- Pass 2 ----
    def normalize(self, embeddings: EmbeddingTable, max_frequency: float) -> None:
        slot = self.layout.next_word_frequency
        for _, _, vec in embeddings.items():
            value = vec[slot]
            if not value:
                continue
            if max_frequency > 0:
                value = value / max_frequency
            vec[slot] = min(1.0, value)

    # ---- Context ----
    def iter_observations(self, text: str) -> Iterator[NGramObservation]:
        """Every n-gram (1..max_ngram tokens) with its successor and look-ahead phrases."""
        max_n = self.config.max_ngram
        for sentence in split_sentences(text):
            words: List[str] = tokenize(to_plain_text(sentence))
            for i in range(len(words) - 1):
                next_token = words[i + 1]
                phrases = tuple(
                    " ".join(words[i + 1:i + 1 + length])
                    for length in PHRASE_LENGTHS
                    if i + length < len(words)
                )
                for n in range(1, min(max_n, i + 1) + 1):
                    yield NGramObservation(" ".join(words[i - n + 1:i + 1]), next_token, phrases)

    def create_context(self, text: str) -> NGramTrie:
        log.info("Creating context...")
        trie = NGramTrie(ignore_case=True)
        loaded = trie.bulk_load(self.iter_observations(text), self.config.chunk_size)
        trie.freeze()
        log.info("Done. keys=%d observations=%d", len(trie), loaded)
        return trie
