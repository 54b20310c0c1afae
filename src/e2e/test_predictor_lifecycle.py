import pytest

from textpredict import (
    AlreadyTrained, Dataset, DimensionMismatch, InvalidCorpus, NotTrained, Predictor,
    PredictorConfig, State,
)
from textpredict.embeddings import EmbeddingTable

CORPUS = "The cat sat on the mat. The cat ran to the door. The dog sat on the rug. The dog ran away."

QUERIES = [
    lambda p: p.predict_next_token("The"),
    lambda p: p.predict_sequence("The", 3),
    lambda p: p.get_completions("The"),
    lambda p: p.get_similar_token("The", "cat"),
    lambda p: p.get_autocomplete_suggestions("the"),
]


def _dump(p):
    items = [(it.sequence, dict(it.next_tokens), dict(it.next_phrases)) for it in p.trie.iter_items()]
    return p.embeddings.to_dict(), items


@pytest.mark.parametrize("query", QUERIES)
def test_untrained_predictor_rejects_queries(query):
    p = Predictor()
    assert p.state is State.UNTRAINED
    with pytest.raises(NotTrained):
        query(p)


@pytest.mark.parametrize("bad", ["", "   \n\t", None, 42, Dataset("blank", "  ")])
def test_invalid_corpus_leaves_predictor_untrained(bad):
    p = Predictor()
    with pytest.raises(InvalidCorpus):
        p.train(bad)
    assert p.state is State.UNTRAINED
    with pytest.raises(NotTrained):
        p.predict_next_token("The")


def test_error_hierarchy_matches_builtins():
    assert issubclass(NotTrained, RuntimeError)
    assert issubclass(InvalidCorpus, ValueError)


def test_train_twice_requires_reset():
    p = Predictor()
    p.train(CORPUS)
    assert p.is_trained
    with pytest.raises(AlreadyTrained):
        p.train(CORPUS)
    p.reset()
    assert p.state is State.UNTRAINED
    with pytest.raises(NotTrained):
        p.predict_next_token("The")
    p.train(CORPUS)
    assert p.predict_next_token("The cat").token == "sat"


def test_retrain_is_idempotent():
    p = Predictor()
    p.train(CORPUS)
    before = _dump(p)
    p.retrain(CORPUS)
    assert _dump(p) == before

    other = Predictor()
    other.train(Dataset("demo", CORPUS))
    assert _dump(other) == before


def test_retrain_with_bad_corpus_keeps_model():
    p = Predictor()
    p.train(CORPUS)
    with pytest.raises(InvalidCorpus):
        p.retrain("")
    assert p.is_trained


def test_failed_training_returns_to_untrained(monkeypatch):
    p = Predictor()

    def boom(text):
        raise RuntimeError("disk on fire")

    monkeypatch.setattr(p._pipeline, "run", boom)
    with pytest.raises(RuntimeError):
        p.train(CORPUS)
    assert p.state is State.UNTRAINED


def test_create_context_with_prebuilt_embeddings():
    table = EmbeddingTable()
    table.put("the", "cat", [0.0] * 144)
    p = Predictor()
    p.create_context(CORPUS, table)
    assert p.is_trained
    assert p.embeddings is table
    assert table.frozen
    assert p.predict_next_token("The dog").token == "sat"


def test_create_context_rejects_wrong_dimension():
    with pytest.raises(DimensionMismatch):
        Predictor().create_context(CORPUS, {"the": {"cat": [1.0, 2.0]}})
    with pytest.raises(DimensionMismatch):
        Predictor().create_context(CORPUS, EmbeddingTable(dimension=10))


def test_config_from_env():
    cfg = PredictorConfig.from_env({"TEXTPREDICT_CHUNK_SIZE": "10", "TEXTPREDICT_VARIANCE": "2"})
    assert cfg.chunk_size == 10
    assert cfg.variance == 2
    assert cfg.ranking_batch_size == 50
    assert PredictorConfig.from_env({}, similarity="cosine").similarity == "cosine"


@pytest.mark.parametrize("env", [{"TEXTPREDICT_CHUNK_SIZE": "ten"}, {"TEXTPREDICT_CHUNK_SIZE": "0"}])
def test_config_from_env_rejects_bad_values(env):
    with pytest.raises(ValueError):
        PredictorConfig.from_env(env)


def test_config_rejects_unknown_similarity():
    with pytest.raises(ValueError):
        PredictorConfig(similarity="euclid")
