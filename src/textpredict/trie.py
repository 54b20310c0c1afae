from __future__ import annotations
import logging
from itertools import islice
from typing import Dict, Iterable, Iterator, List, Optional, TypeVar

from .models import NGramObservation, TrieItem

log = logging.getLogger(__name__)

T = TypeVar("T")


def chunked(iterable: Iterable[T], size: int) -> Iterator[List[T]]:
    """
    Lazily yield lists of at most `size` items from `iterable`.

    Only one chunk is materialized at a time. Like any generator it is
    single-pass: once consumed it yields nothing more.
    """
    if size < 1:
        raise ValueError("chunk size must be >= 1")
    it = iter(iterable)
    while True:
        chunk = list(islice(it, size))
        if not chunk:
            return
        yield chunk


class _Node:
    __slots__ = ("children", "item")

    def __init__(self) -> None:
        self.children: Dict[str, _Node] = {}
        self.item: Optional[TrieItem] = None


class NGramTrie:
    """
    Character trie keyed by n-gram sequences ("the cat").
    Build-time: insert()/bulk_load() create items and increment their counts.
    Frozen: read-only; insert() raises. Items are never removed.
    """
    def __init__(self, *, ignore_case: bool = True) -> None:
        self.ignore_case = ignore_case
        self._root = _Node()
        self._count = 0
        self._frozen = False

    def _key(self, sequence: str) -> str:
        key = " ".join(sequence.split())
        return key.casefold() if self.ignore_case else key

    def _walk(self, key: str) -> Optional[_Node]:
        node = self._root
        for ch in key:
            node = node.children.get(ch)
            if node is None:
                return None
        return node

    # -------- Build-time API --------
    def insert(self, sequence: str, next_token: str, next_phrases: Iterable[str] = ()) -> TrieItem:
        if self._frozen:
            raise RuntimeError("NGramTrie is frozen; cannot insert")
        key = self._key(sequence)
        if not key:
            raise ValueError("cannot insert an empty sequence")
        node = self._root
        for ch in key:
            child = node.children.get(ch)
            if child is None:
                child = node.children[ch] = _Node()
            node = child
        item = node.item
        if item is None:
            item = node.item = TrieItem(sequence=" ".join(sequence.split()), order=self._count)
            self._count += 1
        if next_token:
            item.next_tokens[next_token] = item.next_tokens.get(next_token, 0) + 1
        for phrase in next_phrases:
            item.next_phrases[phrase] = item.next_phrases.get(phrase, 0) + 1
        return item

    def bulk_load(self, observations: Iterable[NGramObservation], chunk_size: int) -> int:
        """Insert observations in chunks of at most chunk_size; returns how many were inserted."""
        total = 0
        for n, chunk in enumerate(chunked(observations, chunk_size), start=1):
            for obs in chunk:
                self.insert(obs.sequence, obs.next_token, obs.next_phrases)
            total += len(chunk)
            log.debug("bulk_load chunk %d: %d observations (total %d, keys %d)",
                      n, len(chunk), total, self._count)
        return total

    def freeze(self) -> None:
        self._frozen = True

    @property
    def frozen(self) -> bool:
        return self._frozen

    # -------- Query API --------
    def get(self, sequence: str) -> Optional[TrieItem]:
        key = self._key(sequence)
        if not key:
            return None
        node = self._walk(key)
        return node.item if node is not None else None

    def search(self, prefix: str) -> List[TrieItem]:
        """All items whose key starts with prefix, in insertion order."""
        key = self._key(prefix)
        if not key:
            return []
        node = self._walk(key)
        if node is None:
            return []
        found: List[TrieItem] = []
        stack = [node]
        while stack:
            n = stack.pop()
            if n.item is not None:
                found.append(n.item)
            stack.extend(n.children.values())
        found.sort(key=lambda it: it.order)
        return found

    def iter_items(self) -> Iterator[TrieItem]:
        """Yield every item in insertion order."""
        items: List[TrieItem] = []
        stack = [self._root]
        while stack:
            n = stack.pop()
            if n.item is not None:
                items.append(n.item)
            stack.extend(n.children.values())
        items.sort(key=lambda it: it.order)
        yield from items

    def __len__(self) -> int:
        return self._count

    def __contains__(self, sequence: object) -> bool:
        return isinstance(sequence, str) and self.get(sequence) is not None
