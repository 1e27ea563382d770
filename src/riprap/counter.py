"""Exact frequency counts over hashable tokens.

Used for single bases, dinucleotides and trinucleotides. A counter is built
fresh for each statistic call and discarded afterwards.
"""

from __future__ import annotations

from typing import Dict, Generic, Hashable, Iterable, Iterator, List, Optional, Tuple, TypeVar

T = TypeVar("T", bound=Hashable)


class FrequencyCounter(Generic[T]):
    """A multiset of tokens with exact counts.

    Examples
    --------
    >>> counter = FrequencyCounter("aabcde")
    >>> counter.count("a")
    2
    >>> counter.count("z")
    0
    >>> counter.total()
    6
    """

    __slots__ = ("_data",)

    def __init__(self, tokens: Optional[Iterable[T]] = None) -> None:
        self._data: Dict[T, int] = {}
        if tokens is not None:
            self.update(tokens)

    def add(self, token: T) -> None:
        """Add one occurrence of ``token``."""
        self._data[token] = self._data.get(token, 0) + 1

    def update(self, tokens: Iterable[T]) -> None:
        """Add each token from an iterable."""
        data = self._data
        for token in tokens:
            data[token] = data.get(token, 0) + 1

    def count(self, token: T) -> int:
        """Number of occurrences of ``token``; 0 if it was never added."""
        return self._data.get(token, 0)

    def count_sum(self, tokens: Iterable[T]) -> int:
        """Summed occurrences of several tokens."""
        return sum(self.count(t) for t in tokens)

    def total(self) -> int:
        """Total number of samples (sum of all counts)."""
        return sum(self._data.values())

    def prop(self, token: T) -> float:
        """Proportion of samples equal to ``token``; 0.0 on an empty counter."""
        size = self.total()
        if size == 0:
            return 0.0
        return self.count(token) / size

    def prop_sum(self, tokens: Iterable[T]) -> float:
        """Summed proportion of several tokens; 0.0 on an empty counter."""
        size = self.total()
        if size == 0:
            return 0.0
        return self.count_sum(tokens) / size

    def most_common(self, n: Optional[int] = None) -> List[Tuple[T, int]]:
        items = sorted(self._data.items(), key=lambda kv: kv[1], reverse=True)
        if n is None:
            return items
        return items[:n]

    def items(self) -> Iterator[Tuple[T, int]]:
        return iter(self._data.items())

    def __len__(self) -> int:
        # distinct tokens, not samples
        return len(self._data)

    def __iter__(self) -> Iterator[T]:
        return iter(self._data)

    def __contains__(self, token: object) -> bool:
        return token in self._data

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self._data!r})"
