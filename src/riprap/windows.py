"""Sliding windows that keep the final short window.

A strict "drop the incomplete tail" window loses statistics over the end of
every contig, so the last window here may be shorter than ``size``.
"""

from __future__ import annotations

from typing import Iterator, Sequence, TypeVar

from .models import Window

S = TypeVar("S", bound=Sequence)


def iter_windows(seq: S, size: int, step: int) -> Iterator[Window[S]]:
    """Yield windows of ``seq`` of length ``size`` starting every ``step``.

    Iteration stops once a window reaches the end of the sequence, so the
    tail is covered exactly once. A step larger than the size leaves gaps and
    stops when the next start lies beyond the sequence.

    Examples
    --------
    >>> [w.value for w in iter_windows([1, 2, 3, 4], 3, 2)]
    [[1, 2, 3], [3, 4]]
    """
    if size <= 0:
        raise ValueError(f"window size must be > 0, got {size}")
    if step <= 0:
        raise ValueError(f"window step must be > 0, got {step}")

    length = len(seq)
    start = 0
    while start < length:
        end = min(start + size, length)
        yield Window(start=start, end=end, value=seq[start:end])
        if end >= length:
            break
        start += step


def count_windows(length: int, size: int, step: int) -> int:
    """Number of windows :func:`iter_windows` yields for a sequence of ``length``."""
    if length <= 0:
        return 0
    if size >= length:
        return 1
    # full windows whose end is still short of the sequence end, plus the last one
    n_inner = (length - size - 1) // step + 1
    last_start = n_inner * step
    return n_inner + (1 if last_start < length else 0)
