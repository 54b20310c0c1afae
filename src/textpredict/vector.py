from __future__ import annotations
import math
from array import array
from typing import Iterable, Iterator, List, Optional

from .config import DIMENSION
from .errors import DimensionMismatch


class FeatureVector:
    """
    Fixed-length float vector backed by array('d').

    The length is checked at construction and on every binary operation;
    every similarity computation assumes aligned indices.
    """
    __slots__ = ("_data",)

    def __init__(self, values: Optional[Iterable[float]] = None, *, dimension: int = DIMENSION) -> None:
        if values is None:
            self._data = array("d", bytes(8 * dimension))
            return
        data = array("d", values)
        if len(data) != dimension:
            raise DimensionMismatch(dimension, len(data))
        self._data = data

    @classmethod
    def zeros(cls, dimension: int = DIMENSION) -> "FeatureVector":
        return cls(dimension=dimension)

    # -------- sequence protocol --------
    def __len__(self) -> int:
        return len(self._data)

    def __getitem__(self, i: int) -> float:
        return self._data[i]

    def __setitem__(self, i: int, value: float) -> None:
        self._data[i] = value

    def __iter__(self) -> Iterator[float]:
        return iter(self._data)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, FeatureVector):
            return NotImplemented
        return self._data == other._data

    __hash__ = None  # mutable

    def __repr__(self) -> str:
        nz = sum(1 for v in self._data if v)
        return f"FeatureVector(dimension={len(self._data)}, nonzero={nz})"

    def tolist(self) -> List[float]:
        return self._data.tolist()

    def copy(self) -> "FeatureVector":
        return FeatureVector(self._data, dimension=len(self._data))

    # -------- arithmetic --------
    def _check(self, other: "FeatureVector") -> None:
        if len(other) != len(self):
            raise DimensionMismatch(len(self), len(other), "cannot combine vectors")

    def dot(self, other: "FeatureVector") -> float:
        self._check(other)
        return math.fsum(a * b for a, b in zip(self._data, other._data))

    def norm(self) -> float:
        return math.sqrt(math.fsum(a * a for a in self._data))

    def cosine(self, other: "FeatureVector") -> float:
        """Cosine similarity; 0.0 when either vector is all zeros."""
        self._check(other)
        denom = self.norm() * other.norm()
        if denom == 0.0:
            return 0.0
        return self.dot(other) / denom
