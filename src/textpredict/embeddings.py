from __future__ import annotations
from typing import Dict, Iterable, Iterator, Mapping, Optional, Tuple

from .config import DIMENSION
from .errors import DimensionMismatch
from .normalize import tokenize
from .vector import FeatureVector


class EmbeddingTable:
    """
    token -> next_token -> FeatureVector.

    Populated by the training pipeline, then frozen; a frozen table refuses new
    pairs and overwrites. Vectors all have the table's dimension.
    """
    def __init__(self, dimension: int = DIMENSION) -> None:
        self.dimension = dimension
        self._table: Dict[str, Dict[str, FeatureVector]] = {}
        self._pairs = 0
        self._frozen = False

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Mapping[str, Iterable[float]]],
                     dimension: int = DIMENSION) -> "EmbeddingTable":
        table = cls(dimension)
        for token, successors in mapping.items():
            for next_token, values in successors.items():
                table.put(token, next_token, values)
        return table

    # -------- Build-time API --------
    def ensure(self, token: str, next_token: str) -> FeatureVector:
        """Return the pair's vector, allocating a zero vector if absent."""
        row = self._table.get(token)
        vec = row.get(next_token) if row is not None else None
        if vec is not None:
            return vec
        if self._frozen:
            raise RuntimeError("EmbeddingTable is frozen; cannot add pairs")
        if row is None:
            row = self._table[token] = {}
        vec = row[next_token] = FeatureVector.zeros(self.dimension)
        self._pairs += 1
        return vec

    def put(self, token: str, next_token: str, values: Iterable[float]) -> None:
        if self._frozen:
            raise RuntimeError("EmbeddingTable is frozen; cannot overwrite embeddings")
        vec = values if isinstance(values, FeatureVector) else FeatureVector(values, dimension=self.dimension)
        if len(vec) != self.dimension:
            raise DimensionMismatch(self.dimension, len(vec), f"embedding for {token!r} -> {next_token!r}")
        target = self.ensure(token, next_token)
        for i, v in enumerate(vec):
            target[i] = v

    def freeze(self) -> None:
        self._frozen = True

    @property
    def frozen(self) -> bool:
        return self._frozen

    # -------- Query API --------
    def get(self, token: str, next_token: str) -> Optional[FeatureVector]:
        row = self._table.get(token)
        return row.get(next_token) if row is not None else None

    def lookup(self, prev_token: str, token: str) -> FeatureVector:
        """
        Embedding of the last two tokens of "prev_token token"; a zero vector
        when the pair was never seen.
        """
        toks = tokenize(f"{prev_token} {token}")
        if len(toks) < 2:
            return FeatureVector.zeros(self.dimension)
        vec = self.get(toks[-2], toks[-1])
        return vec if vec is not None else FeatureVector.zeros(self.dimension)

    def successors(self, token: str) -> Mapping[str, FeatureVector]:
        return self._table.get(token, {})

    def items(self) -> Iterator[Tuple[str, str, FeatureVector]]:
        for token, row in self._table.items():
            for next_token, vec in row.items():
                yield token, next_token, vec

    def to_dict(self) -> Dict[str, Dict[str, list]]:
        return {t: {n: v.tolist() for n, v in row.items()} for t, row in self._table.items()}

    def __len__(self) -> int:
        return self._pairs

    def __contains__(self, pair: object) -> bool:
        if not isinstance(pair, tuple) or len(pair) != 2:
            return False
        return self.get(*pair) is not None

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, EmbeddingTable):
            return NotImplemented
        return self.dimension == other.dimension and self.to_dict() == other.to_dict()

    __hash__ = None
