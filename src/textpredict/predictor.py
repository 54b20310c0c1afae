# textpredict/predictor.py
from __future__ import annotations

import logging
import random
from enum import Enum
from typing import Mapping, List, Optional, Tuple, Union

from .config import TOP_K, PredictorConfig
from .embeddings import EmbeddingTable
from .errors import AlreadyTrained, DimensionMismatch, InvalidCorpus, MissingNGram, NotTrained
from .models import (
    Completions, Dataset, SequencePrediction, SimilarToken, TokenPrediction, TrieItem,
)
from .normalize import capitalize_lead, tokenize
from .ranking import rank_by_frequency, rank_by_similarity, ranked
from .tagger import PosTagger
from .training import TrainingPipeline
from .trie import NGramTrie
from .vector import FeatureVector

log = logging.getLogger(__name__)

Corpus = Union[str, Dataset]


class State(str, Enum):
    UNTRAINED = "untrained"
    TRAINING = "training"
    TRAINED = "trained"


def _corpus_text(corpus: Corpus) -> Tuple[str, str]:
    if isinstance(corpus, Dataset):
        name, text = corpus.name, corpus.text
    else:
        name, text = "<text>", corpus
    if not isinstance(text, str) or not text.strip():
        raise InvalidCorpus()
    return name, text


class Predictor:
    """
    Next-token / next-sequence predictor over an n-gram trie, with embedding
    similarity as a diversity fallback.

    Lifecycle: UNTRAINED -> TRAINING -> TRAINED. Training happens once; use
    reset() or retrain() to start over. Every query requires TRAINED and raises
    NotTrained otherwise. After training the trie and the embedding table are
    frozen and queries keep no state (the variance sampler is seeded per call
    from config.seed and the query), so a trained Predictor can be shared
    read-only.

    Public API:
      * train(corpus) / create_context(text, embeddings) / reset() / retrain(corpus)
      * predict_next_token(token)
      * predict_sequence(text, length)
      * get_completions(text)
      * get_similar_token(prev_token, token)
      * get_autocomplete_suggestions(query, limit)
    """

    # ------------- lifecycle -------------

    def __init__(self, config: Optional[PredictorConfig] = None, tagger: Optional[PosTagger] = None) -> None:
        self.config = config or PredictorConfig()
        self._pipeline = TrainingPipeline(self.config, tagger)
        self._state = State.UNTRAINED
        self._embeddings = EmbeddingTable(self.config.dimension)
        self._trie = NGramTrie()

    @property
    def state(self) -> State:
        return self._state

    @property
    def is_trained(self) -> bool:
        return self._state is State.TRAINED

    @property
    def embeddings(self) -> EmbeddingTable:
        return self._embeddings

    @property
    def trie(self) -> NGramTrie:
        return self._trie

    # /* ~~~ Analyze the corpus, then build the n-gram context ~~~ */
    def train(self, corpus: Corpus) -> None:
        name, text = _corpus_text(corpus)
        self._begin_training()
        try:
            model = self._pipeline.run(text)
        except BaseException:
            self._state = State.UNTRAINED
            raise
        self._install(model.embeddings, model.trie)
        log.info("Predictor trained on %s: pairs=%d keys=%d", name, len(model.embeddings), len(model.trie))

    # /* ~~~ Install prebuilt embeddings and build the trie from text ~~~ */
    def create_context(self, text: str,
                       embeddings: Union[EmbeddingTable, Mapping[str, Mapping[str, list]]]) -> None:
        _, text = _corpus_text(text)
        if not isinstance(embeddings, EmbeddingTable):
            embeddings = EmbeddingTable.from_mapping(embeddings, self.config.dimension)
        elif embeddings.dimension != self.config.dimension:
            raise DimensionMismatch(self.config.dimension, embeddings.dimension, "embedding table")
        self._begin_training()
        try:
            trie = self._pipeline.create_context(text)
        except BaseException:
            self._state = State.UNTRAINED
            raise
        embeddings.freeze()
        self._install(embeddings, trie)

    def reset(self) -> None:
        self._state = State.UNTRAINED
        self._embeddings = EmbeddingTable(self.config.dimension)
        self._trie = NGramTrie()
        log.info("Predictor reset")

    def retrain(self, corpus: Corpus) -> None:
        _corpus_text(corpus)
        self.reset()
        self.train(corpus)

    # ------------- query -------------

    def predict_next_token(self, token: str) -> TokenPrediction:
        """
        Most likely successor of the trailing n-gram of `token` plus up to
        ranking_batch_size ranked candidates. Raises MissingNGram when nothing
        follows it in the corpus.
        """
        self._require_trained()
        if not token or not token.strip():
            return TokenPrediction(token="", ranked_tokens=[])

        item = self._ngram_lookup(token)
        ranked_tokens = rank_by_frequency(item.next_tokens, limit=self.config.ranking_batch_size)
        top = ranked_tokens[0]

        if self.config.variance > 0:
            similar = self._diversify(token, top)
            if similar is not None:
                return similar

        return TokenPrediction(token=top, ranked_tokens=ranked_tokens)

    def predict_sequence(self, text: str, length: int = 2) -> SequencePrediction:
        self._require_trained()
        try:
            first = self.predict_next_token(text)
        except MissingNGram:
            return SequencePrediction(completion="", sequence_length=length, token="", ranked_tokens=[])

        context = tokenize(text)
        sequence: List[str] = []
        prediction = first
        for step in range(length):
            if step:
                try:
                    prediction = self.predict_next_token(" ".join(context[-self.config.max_ngram:]))
                except MissingNGram:
                    break
            tok = prediction.token.replace("\\n", " ").strip()
            if not tok:
                break
            context.append(tok)
            sequence.append(tok)

        # remove duplicates, keep first occurrence
        completion = " ".join(dict.fromkeys(sequence)).strip()
        return SequencePrediction(
            completion=completion,
            sequence_length=length,
            token=sequence[0] if sequence else "",
            ranked_tokens=first.ranked_tokens,
        )

    def get_completions(self, text: str) -> Completions:
        self._require_trained()
        length = self.config.max_response_length
        primary = self.predict_sequence(text, length)

        completions = [primary.completion]
        for candidate in primary.ranked_tokens:
            alt = self.predict_sequence(f"{text} {candidate}", length)
            completions.append(f"{candidate} {alt.completion}".strip())

        return Completions(
            completion=primary.completion,
            token=primary.token,
            ranked_tokens=primary.ranked_tokens,
            completions=completions,
        )

    def get_similar_token(self, prev_token: str, token: str) -> SimilarToken:
        """
        Rank every embedded successor by similarity to the (prev_token, token)
        embedding. The default plain dot product is magnitude-sensitive;
        similarity="cosine" normalizes it.
        """
        self._require_trained()
        target = self._embeddings.lookup(prev_token, token)
        measure = FeatureVector.cosine if self.config.similarity == "cosine" else FeatureVector.dot
        scored = ((next_token, measure(target, vec)) for _, next_token, vec in self._embeddings.items())
        ranked_tokens = rank_by_similarity(scored, limit=self.config.ranking_batch_size)
        return SimilarToken(token=ranked_tokens[0] if ranked_tokens else "", ranked_tokens=ranked_tokens)

    def get_autocomplete_suggestions(self, query: str, limit: int = TOP_K) -> List[str]:
        """Trie keys starting with query, by frequency then shorter key first."""
        self._require_trained()
        q = query.strip() if isinstance(query, str) else ""
        if not q:
            return []
        items = ranked(self._trie.search(q), score=lambda it: it.frequency,
                       text=lambda it: it.sequence, limit=limit)
        return [it.sequence for it in items]

    # ------------- internals -------------

    def _require_trained(self) -> None:
        if self._state is not State.TRAINED:
            raise NotTrained()

    def _begin_training(self) -> None:
        if self._state is not State.UNTRAINED:
            raise AlreadyTrained()
        self._state = State.TRAINING

    def _install(self, embeddings: EmbeddingTable, trie: NGramTrie) -> None:
        self._embeddings = embeddings
        self._trie = trie
        self._state = State.TRAINED

    def _ngram_lookup(self, text: str) -> TrieItem:
        # longest trailing n-gram first, down to the last token
        tokens = tokenize(capitalize_lead(text.strip()))
        for n in range(min(self.config.max_ngram, len(tokens)), 0, -1):
            item = self._trie.get(" ".join(tokens[-n:]))
            if item is not None and item.next_tokens:
                return item
        raise MissingNGram(text)

    def _diversify(self, context: str, top: str) -> Optional[TokenPrediction]:
        result = self.get_similar_token(context, top)
        pool = [t for t in result.ranked_tokens if t != top][:self.config.variance]
        if not pool:
            return None
        if len(pool) == 1:
            return TokenPrediction(token=pool[0], ranked_tokens=result.ranked_tokens)
        # unseeded configs draw fresh entropy on every call
        rng = random.Random(f"{self.config.seed}:{context}") if self.config.seed is not None else random.Random()
        choice = rng.choice(pool)
        return TokenPrediction(token=choice, ranked_tokens=result.ranked_tokens)
