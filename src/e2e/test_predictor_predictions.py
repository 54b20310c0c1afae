import pytest

from textpredict import MissingNGram, Predictor, PredictorConfig

CORPUS = "The cat sat on the mat. The cat ran to the door. The dog sat on the rug. The dog ran away."


def _trained(**kw):
    p = Predictor(PredictorConfig(**kw))
    p.train(CORPUS)
    return p


@pytest.fixture(scope="module")
def predictor():
    return _trained()


def test_next_token_ranks_by_frequency_then_length(predictor):
    res = predictor.predict_next_token("the")
    assert res.token == "cat"
    assert res.ranked_tokens == ["cat", "dog", "mat", "rug", "door"]


def test_ranked_tokens_follow_trie_counts(predictor):
    counts = predictor.trie.get("the").next_tokens
    ranked = predictor.predict_next_token("the").ranked_tokens
    keys = [(-counts[t], len(t)) for t in ranked]
    assert keys == sorted(keys)


def test_next_token_uses_longest_known_context(predictor):
    assert predictor.predict_next_token("The cat").ranked_tokens == ["sat", "ran"]
    assert predictor.predict_next_token("The cat ran").token == "to"
    # unknown leading words back off to the trailing n-gram
    assert predictor.predict_next_token("my cat").token == "sat"


def test_blank_token_gives_empty_prediction(predictor):
    res = predictor.predict_next_token("   ")
    assert res.token == ""
    assert res.ranked_tokens == []


@pytest.mark.parametrize("query", ["zebra", "mat", "the mat"])
def test_missing_ngram(predictor, query):
    with pytest.raises(MissingNGram) as ei:
        predictor.predict_next_token(query)
    assert ei.value.query == query
    assert isinstance(ei.value, LookupError)


def test_ranked_list_capped_by_batch_size():
    p = _trained(ranking_batch_size=2)
    assert p.predict_next_token("the").ranked_tokens == ["cat", "dog"]


def test_predictions_are_deterministic(predictor):
    assert predictor.predict_next_token("The dog") == predictor.predict_next_token("The dog")
    assert predictor.get_completions("The cat") == predictor.get_completions("The cat")


def test_sequence_follows_the_corpus(predictor):
    seq = predictor.predict_sequence("The cat", 3)
    assert seq.completion == "sat on the"
    assert seq.token == "sat"
    assert seq.sequence_length == 3
    assert seq.ranked_tokens == ["sat", "ran"]


def test_sequence_stops_when_context_runs_out(predictor):
    assert predictor.predict_sequence("The cat", 6).completion == "sat on the mat"


def test_sequence_for_unknown_text_is_empty(predictor):
    seq = predictor.predict_sequence("zebra", 4)
    assert seq.completion == ""
    assert seq.token == ""
    assert seq.ranked_tokens == []


def test_sequence_drops_repeated_tokens():
    p = Predictor()
    p.train("A b a b a b.")
    seq = p.predict_sequence("A", 4)
    assert seq.completion == "b a"
    assert seq.token == "b"


def test_completions_expand_each_ranked_candidate():
    p = _trained(max_response_length=3, ranking_batch_size=2)
    res = p.get_completions("The cat")
    assert res.completion == "sat on the"
    assert res.token == "sat"
    assert res.ranked_tokens == ["sat", "ran"]
    assert res.completions == ["sat on the", "sat on the mat", "ran to the door"]


def test_similar_tokens_ordered_by_similarity(predictor):
    res = predictor.get_similar_token("The", "cat")
    assert res.ranked_tokens
    assert res.token == res.ranked_tokens[0]
    assert len(res.ranked_tokens) == len(set(res.ranked_tokens))

    target = predictor.embeddings.lookup("The", "cat")
    best = {}
    for _, next_token, vec in predictor.embeddings.items():
        score = target.dot(vec)
        best[next_token] = max(best.get(next_token, score), score)
    scores = [best[t] for t in res.ranked_tokens]
    assert scores == sorted(scores, reverse=True)


def test_unseen_pair_ties_fall_back_to_length(predictor):
    res = predictor.get_similar_token("zzz", "qqq")
    lengths = [len(t) for t in res.ranked_tokens]
    assert lengths == sorted(lengths)


def test_cosine_similarity_puts_the_pair_itself_first():
    p = _trained(similarity="cosine")
    assert p.get_similar_token("The", "cat").token == "cat"


def test_variance_one_picks_nearest_other_token():
    p = _trained(variance=1)
    similar = p.get_similar_token("The cat", "sat").ranked_tokens
    res = p.predict_next_token("The cat")
    assert res.token != "sat"
    assert res.token == [t for t in similar if t != "sat"][0]
    assert res.ranked_tokens == similar


def test_variance_with_seed_is_reproducible():
    a = _trained(variance=3, seed=7).predict_next_token("The cat")
    b = _trained(variance=3, seed=7).predict_next_token("The cat")
    assert a == b
    pool = [t for t in a.ranked_tokens if t != "sat"][:3]
    assert a.token in pool


def test_variance_sampling_does_not_depend_on_call_history():
    p = _trained(variance=3, seed=11)
    first = p.predict_next_token("The cat")
    for query in ("The dog", "the", "The cat ran"):
        p.predict_next_token(query)
    assert p.predict_next_token("The cat") == first
    assert _trained(variance=3, seed=11).predict_next_token("The cat") == first


def test_autocomplete_suggestions_from_trie_keys(predictor):
    assert predictor.get_autocomplete_suggestions("the c") == [
        "The cat", "The cat sat", "The cat ran", "The cat sat on", "The cat ran to",
    ]
    assert predictor.get_autocomplete_suggestions("the c", limit=2) == ["The cat", "The cat sat"]
    assert predictor.get_autocomplete_suggestions("   ") == []
    assert predictor.get_autocomplete_suggestions("xyz") == []
