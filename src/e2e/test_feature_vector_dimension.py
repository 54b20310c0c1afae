import pytest

from textpredict import DimensionMismatch, FeatureVector, PredictorConfig
from textpredict.embeddings import EmbeddingTable
from textpredict.features import ALPHABET, PARTS_OF_SPEECH, SUFFIXES, FeatureLayout
from textpredict.training import TrainingPipeline


def test_zero_vector_has_configured_length():
    v = FeatureVector.zeros()
    assert len(v) == 144
    assert all(x == 0.0 for x in v)


@pytest.mark.parametrize("n", [0, 1, 143, 145, 288])
def test_wrong_length_always_fails(n):
    with pytest.raises(DimensionMismatch) as ei:
        FeatureVector([0.0] * n)
    assert ei.value.expected == 144
    assert ei.value.actual == n


def test_custom_dimension():
    assert len(FeatureVector([1, 2, 3], dimension=3)) == 3
    with pytest.raises(DimensionMismatch):
        FeatureVector([1, 2, 3], dimension=4)


def test_index_read_write_and_dot():
    a = FeatureVector([1, 2, 3], dimension=3)
    b = FeatureVector([4, 5, 6], dimension=3)
    a[0] = 2.0
    assert a[0] == 2.0
    assert a.dot(b) == pytest.approx(2 * 4 + 2 * 5 + 3 * 6)


def test_combining_mismatched_vectors_fails():
    with pytest.raises(DimensionMismatch):
        FeatureVector.zeros(3).dot(FeatureVector.zeros(4))
    with pytest.raises(DimensionMismatch):
        FeatureVector.zeros(3).cosine(FeatureVector.zeros(4))


def test_cosine_ignores_magnitude():
    a = FeatureVector([1, 0], dimension=2)
    b = FeatureVector([5, 0], dimension=2)
    assert a.cosine(b) == pytest.approx(1.0)
    assert a.dot(b) == pytest.approx(5.0)
    assert a.cosine(FeatureVector.zeros(2)) == 0.0


def test_dimension_mismatch_is_a_value_error():
    assert issubclass(DimensionMismatch, ValueError)


def test_default_layout_fills_all_144_slots():
    layout = FeatureLayout()
    assert len(ALPHABET) == 66
    assert len(PARTS_OF_SPEECH) == 36
    assert len(SUFFIXES) == 37
    assert layout.pos == 66
    assert layout.prevalence == 102
    assert layout.next_word_frequency == 140
    assert layout.vulgarity == 141
    assert layout.style == 142
    assert layout.size == 144


def test_layout_larger_than_dimension_fails():
    with pytest.raises(DimensionMismatch):
        TrainingPipeline(PredictorConfig(dimension=100))


def test_embedding_table_rejects_wrong_length():
    table = EmbeddingTable(dimension=144)
    with pytest.raises(DimensionMismatch):
        table.put("the", "cat", [1.0] * 10)
