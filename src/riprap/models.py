from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, Tuple, TypeVar

S = TypeVar("S")


@dataclass(frozen=True)
class SequenceRecord:
    """A named sequence as read from FASTA."""

    seqid: str
    seq: str


@dataclass(frozen=True)
class Window(Generic[S]):
    """A half-open view ``[start, end)`` over a source sequence.

    ``value`` holds the slice itself. Only the last window of a sequence may be
    shorter than the requested size.
    """

    start: int
    end: int
    value: S


@dataclass(frozen=True)
class ScoreBlock:
    """One bedgraph row: a score for the window starting at ``start``."""

    seqid: str
    start: int
    end: int
    score: float


@dataclass(frozen=True)
class WindowRow:
    """Several named scores for one window (``riprap window`` output)."""

    seqid: str
    start: int
    end: int
    values: Tuple[float, ...]


@dataclass(frozen=True)
class VariantSite:
    """Site-level view of a VCF record.

    Attributes
    ----------
    rid:
        Internal reference (contig) id from the VCF header.
    pos:
        0-based position of the first reference base.
    ref:
        Reference allele as written in the VCF.
    alts:
        Alternate alleles; may be empty.
    """

    rid: int
    pos: int
    ref: str
    alts: Tuple[str, ...]


@dataclass(frozen=True)
class RipCall:
    """Classification of a single-base transition against its neighbour base."""

    chrom: str
    pos: int
    strand: int  # 1, -1 or 0
    bases: Tuple[str, str]  # (reference base, neighbour base)
    is_rip: bool
