"""
Predictive Text Engine

Corpus-trained next-token and next-phrase prediction. Two engines share the
same text normalization:

- Predictor: an n-gram trie over token sequences plus engineered feature
  vectors per (token, next_token) pair, used for similarity ranking.
- AutocompleteEngine: a lighter word/phrase frequency model for fast prefix
  completion.

Main Classes:
    Predictor(config, tagger): train(corpus), predict_next_token(token),
        predict_sequence(text, length), get_completions(text),
        get_similar_token(prev_token, token)
    AutocompleteEngine(options): train(corpus), get_completions(prefix),
        get_next_word(sequence), get_next_phrase(sequence),
        get_all_suggestions(prefix)

Example Usage:
    from textpredict import Predictor

    predictor = Predictor()
    predictor.train("The cat sat on the mat. The cat ran away.")

    result = predictor.predict_next_token("The cat")
    print(result.token, result.ranked_tokens)
"""

# src/textpredict/__init__.py
from .autocomplete import AutocompleteEngine
from .config import AutocompleteOptions, PredictorConfig
from .errors import (
    AlreadyTrained, DimensionMismatch, InvalidCorpus, MissingNGram, NotTrained, PredictionError,
)
from .models import Dataset
from .predictor import Predictor, State
from .vector import FeatureVector

__version__ = "1.0.0"
__all__ = [
    "AutocompleteEngine",
    "AutocompleteOptions",
    "AlreadyTrained",
    "Dataset",
    "DimensionMismatch",
    "FeatureVector",
    "InvalidCorpus",
    "MissingNGram",
    "NotTrained",
    "PredictionError",
    "Predictor",
    "PredictorConfig",
    "State",
]
