from __future__ import annotations
from typing import Callable, Iterable, List, Mapping, Optional, Tuple, TypeVar

T = TypeVar("T")

# Ranking order used by every component:
#   1) higher frequency / score
#   2) shorter text
#   3) first seen (sorted() is stable, inputs arrive in insertion order)


def ranked(items: Iterable[T], *, score: Callable[[T], float], text: Callable[[T], str],
           limit: Optional[int] = None) -> List[T]:
    out = sorted(items, key=lambda it: (-score(it), len(text(it))))
    return out if limit is None else out[:limit]


def rank_by_frequency(freqs: Mapping[str, int], limit: Optional[int] = None) -> List[str]:
    """Keys of a frequency map, best first."""
    pairs = ranked(freqs.items(), score=lambda kv: kv[1], text=lambda kv: kv[0], limit=limit)
    return [k for k, _ in pairs]


def rank_by_similarity(scored: Iterable[Tuple[str, float]], limit: Optional[int] = None) -> List[str]:
    """Tokens by descending similarity; a token listed twice keeps its best rank."""
    seen = set()
    out: List[str] = []
    for token, _ in ranked(scored, score=lambda ts: ts[1], text=lambda ts: ts[0]):
        if token in seen:
            continue
        seen.add(token)
        out.append(token)
        if limit is not None and len(out) >= limit:
            break
    return out
