from __future__ import annotations
import os
from dataclasses import dataclass, field, replace
from typing import Mapping, Optional

def _env_int(name: str, default: int, environ: Optional[Mapping[str, str]] = None) -> int:
    env = os.environ if environ is None else environ
    raw = env.get(name, "")
    if raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None

# Progress logging (set TEXTPREDICT_VERBOSE=1 to enable)
VERBOSE = os.environ.get("TEXTPREDICT_VERBOSE") == "1"

# /* ~~~ bulk trie loading: max observations inserted per chunk ~~~ */
CHUNK_SIZE: int = _env_int("TEXTPREDICT_CHUNK_SIZE", 50_000)

# /* ~~~ max size of any returned ranked candidate list ~~~ */
RANKING_BATCH_SIZE: int = _env_int("TEXTPREDICT_RANKING_BATCH_SIZE", 50)

# /* ~~~ max tokens generated by a sequence completion ~~~ */
MAX_RESPONSE_LENGTH: int = _env_int("TEXTPREDICT_MAX_RESPONSE_LENGTH", 240)

# 0 disables the similarity-based diversity fallback
VARIANCE: int = _env_int("TEXTPREDICT_VARIANCE", 0)

# fixed length of every FeatureVector
DIMENSION: int = _env_int("TEXTPREDICT_DIMENSION", 144)

# longest token sequence used as a trie key
MAX_NGRAM: int = 4

# look-ahead phrase lengths recorded for each key
PHRASE_LENGTHS = (2, 3)

# "dot" (plain dot product) or "cosine"
SIMILARITY: str = "dot"

# trie suggestions returned by Predictor.get_autocomplete_suggestions()
TOP_K: int = 5

# Successors excluded from the max next-word frequency (normalization denominator)
STOP_WORDS = frozenset("""
i me my myself we our ours ourselves you your yours yourself yourselves he him
his himself she her hers herself it its itself they them their theirs themselves
what which who whom this that these those am is are was were be been being have
has had having do does did doing a an the and but if or because as until while
of at by for with about against between into through during before after above
below to from up down in out on off over under again further then once here
there when where why how all any both each few more most other some such no nor
not only own same so than too very s t can will just don should now
""".split())

# Autocomplete defaults
MAX_SUGGESTIONS: int = 10
MIN_WORD_LENGTH: int = 2

# Corpus files picked up by the CLI loader
INCLUDE_EXTS = [".txt", ".md"]
EXCLUDE_DIRS = {".git", ".hg", ".svn", ".idea", ".vscode", "node_modules", "__pycache__"}
ENCODING = "utf-8"

_SIMILARITIES = ("dot", "cosine")


@dataclass(frozen=True, slots=True)
class PredictorConfig:
    """
    Explicit settings for the TrainingPipeline and Predictor.

    Attributes
    ----------
    chunk_size : int
        Max observations inserted into the trie per bulk-load chunk.
    ranking_batch_size : int
        Max length of every ranked list the Predictor returns.
    max_response_length : int
        Tokens generated per completion by get_completions().
    variance : int
        0 returns the raw top candidate. N > 0 replaces it with one of the N
        tokens most similar to it (1 is deterministic).
    dimension : int
        Length of every FeatureVector.
    max_ngram : int
        Longest token sequence stored as a trie key.
    similarity : str
        "dot" (magnitude-sensitive, the default) or "cosine".
    stop_words : frozenset[str]
        Lower-case successors ignored when tracking the max next-word frequency.
    style_markers : tuple[str, ...] | None
        Names of the style flags to compute, in slot order; None means all of
        features.STYLE_MARKERS.
    seed : int | None
        Seed for the variance sampler.
    """
    chunk_size: int = CHUNK_SIZE
    ranking_batch_size: int = RANKING_BATCH_SIZE
    max_response_length: int = MAX_RESPONSE_LENGTH
    variance: int = VARIANCE
    dimension: int = DIMENSION
    max_ngram: int = MAX_NGRAM
    similarity: str = SIMILARITY
    stop_words: frozenset = field(default=STOP_WORDS)
    style_markers: Optional[tuple] = None
    seed: Optional[int] = None

    def __post_init__(self) -> None:
        if self.chunk_size < 1:
            raise ValueError("chunk_size must be >= 1")
        if self.ranking_batch_size < 1:
            raise ValueError("ranking_batch_size must be >= 1")
        if self.max_response_length < 0:
            raise ValueError("max_response_length must be >= 0")
        if self.variance < 0:
            raise ValueError("variance must be >= 0")
        if self.dimension < 1:
            raise ValueError("dimension must be >= 1")
        if self.max_ngram < 1:
            raise ValueError("max_ngram must be >= 1")
        if self.similarity not in _SIMILARITIES:
            raise ValueError(f"similarity must be one of {_SIMILARITIES}, got {self.similarity!r}")

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None, **overrides) -> "PredictorConfig":
        cfg = cls(
            chunk_size=_env_int("TEXTPREDICT_CHUNK_SIZE", 50_000, environ),
            ranking_batch_size=_env_int("TEXTPREDICT_RANKING_BATCH_SIZE", 50, environ),
            max_response_length=_env_int("TEXTPREDICT_MAX_RESPONSE_LENGTH", 240, environ),
            variance=_env_int("TEXTPREDICT_VARIANCE", 0, environ),
            dimension=_env_int("TEXTPREDICT_DIMENSION", 144, environ),
        )
        return replace(cfg, **overrides) if overrides else cfg


@dataclass(frozen=True, slots=True)
class AutocompleteOptions:
    max_suggestions: int = MAX_SUGGESTIONS
    min_word_length: int = MIN_WORD_LENGTH
    case_sensitive: bool = False
    enable_phrases: bool = True
    max_ngram: int = MAX_NGRAM

    def __post_init__(self) -> None:
        if self.max_suggestions < 1:
            raise ValueError("max_suggestions must be >= 1")
        if self.min_word_length < 0:
            raise ValueError("min_word_length must be >= 0")
        if self.max_ngram < 1:
            raise ValueError("max_ngram must be >= 1")
