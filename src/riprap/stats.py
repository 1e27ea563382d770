"""Composition statistics over DNA windows.

All functions are pure: they build a :class:`FrequencyCounter` for the
window they are given and return a float.
"""

from __future__ import annotations

from typing import Callable, Iterable, Iterator

import numpy as np

from .counter import FrequencyCounter
from .models import ScoreBlock
from .windows import iter_windows

_COMPLEMENT = str.maketrans("ACGTacgtNn", "TGCAtgcaNn")

WindowStat = Callable[[str], float]


def _ieee_div(num: float, denom: float) -> float:
    # x/0 gives inf (or nan for 0/0) instead of raising, as in C/Rust floats.
    with np.errstate(divide="ignore", invalid="ignore"):
        return float(np.float64(num) / np.float64(denom))


def kmer_counts(seq: str, k: int) -> FrequencyCounter[str]:
    """Count overlapping k-mers; a sequence of length n yields n-k+1 tokens."""
    if k <= 0:
        raise ValueError(f"k must be > 0, got {k}")
    return FrequencyCounter(seq[i : i + k] for i in range(len(seq) - k + 1))


def dinucleotide_counts(seq: str) -> FrequencyCounter[str]:
    """Count overlapping dinucleotides.

    >>> dinucleotide_counts("TACATGTN").count("TA")
    1
    """
    return kmer_counts(seq, 2)


def trinucleotide_counts(seq: str) -> FrequencyCounter[str]:
    """Count overlapping trinucleotides.

    >>> trinucleotide_counts("TACATGTN").count("TAC")
    1
    """
    return kmer_counts(seq, 3)


def base_content(seq: str, bases: Iterable[str]) -> float:
    """Fraction of ``seq`` made of any of ``bases``; 0.0 for an empty window.

    >>> base_content("ATGC", "GC")
    0.5
    """
    counter = FrequencyCounter(seq)
    return counter.prop_sum(bases)


def gc_content(seq: str) -> float:
    return base_content(seq, "GC")


def margolin1(counts: FrequencyCounter[str]) -> float:
    """TpA / ApT ratio.

    Not guarded: no ApT gives ``inf`` (or ``nan`` when there is no TpA either).
    Existing CRI tracks depend on that output, so it is kept.
    """
    return _ieee_div(counts.count("TA"), counts.count("AT"))


def margolin2(counts: FrequencyCounter[str]) -> float:
    """(CpA + TpG) / (ApC + GpT) ratio; 0.0 when the denominator is 0."""
    num = counts.count("CA") + counts.count("TG")
    denom = counts.count("AC") + counts.count("GT")
    if denom == 0:
        return 0.0
    return num / denom


def composite_rip_index(seq: str) -> float:
    """Composite RIP index (CRI) of a sequence.

    >>> composite_rip_index("TACATGT")
    0.0
    """
    counts = dinucleotide_counts(seq)
    return cri_from_counts(counts)


def cri_from_counts(counts: FrequencyCounter[str]) -> float:
    return margolin1(counts) - margolin2(counts)


def reverse_complement(seq: str) -> str:
    return seq.translate(_COMPLEMENT)[::-1]


def canonical_kmer(kmer: str) -> str:
    """The lexicographically smaller of a k-mer and its reverse complement.

    >>> canonical_kmer("TG")
    'CA'
    """
    rc = reverse_complement(kmer)
    return rc if rc < kmer else kmer


def canonical_kmer_counts(seq: str, k: int) -> FrequencyCounter[str]:
    """Count overlapping k-mers, merging each k-mer with its reverse complement."""
    if k <= 0:
        raise ValueError(f"k must be > 0, got {k}")
    return FrequencyCounter(canonical_kmer(seq[i : i + k]) for i in range(len(seq) - k + 1))


def kmer_proportion(counts: FrequencyCounter[str], kmer: str) -> float:
    return counts.prop(kmer)


def sliding_windows(
    seqid: str,
    seq: str,
    size: int,
    step: int,
    func: WindowStat,
) -> Iterator[ScoreBlock]:
    """Apply ``func`` along ``seq`` in windows, yielding bedgraph blocks.

    ``end`` is always ``start + size``, including for a short final window,
    so the coordinate columns match earlier riprap output.

    >>> [b.end for b in sliding_windows("x", "ATGC", 3, 2, gc_content)]
    [3, 5]
    """
    for i, win in enumerate(iter_windows(seq, size, step)):
        start = i * step
        yield ScoreBlock(seqid=seqid, start=start, end=start + size, score=func(win.value))
