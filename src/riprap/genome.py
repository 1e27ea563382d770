from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, Iterable, Iterator, List, Optional

import pysam

from .errors import InputNotFoundError, MalformedRecordError, MissingChromosomeError
from .models import SequenceRecord
from .validation import contig_style_hint

logger = logging.getLogger(__name__)


def iter_fasta(path: str | Path) -> Iterator[SequenceRecord]:
    """Stream FASTA records in file order. ``-`` reads standard input.

    Gzip/bgzip input is handled transparently by htslib.
    """
    p = str(path)
    if p != "-" and not Path(p).is_file():
        raise InputNotFoundError(f"Couldn't find file at path: {p}", path=p)

    try:
        with pysam.FastxFile(p) as fh:
            for entry in fh:
                if entry.name is None:
                    raise MalformedRecordError(f"FASTA record without a name in {p}", path=p)
                yield SequenceRecord(seqid=entry.name, seq=entry.sequence or "")
    except (OSError, ValueError) as e:
        raise MalformedRecordError(f"Could not read FASTA {p}: {e}", path=p) from e


class GenomeIndex:
    """In-memory mapping from chromosome name to sequence.

    Built once from the whole reference and only read afterwards.
    """

    def __init__(self, sequences: Optional[Dict[str, str]] = None) -> None:
        self._seqs: Dict[str, str] = dict(sequences or {})

    @classmethod
    def from_records(cls, records: Iterable[SequenceRecord]) -> "GenomeIndex":
        """Index records by id; a later duplicate id replaces the earlier one."""
        seqs: Dict[str, str] = {}
        for rec in records:
            if rec.seqid in seqs:
                logger.warning("Duplicate sequence id %r in genome; keeping the last one.", rec.seqid)
            seqs[rec.seqid] = rec.seq
        logger.info("Indexed %d sequences", len(seqs))
        return cls(seqs)

    @classmethod
    def from_fasta(cls, path: str | Path) -> "GenomeIndex":
        return cls.from_records(iter_fasta(path))

    def lookup(self, name: str) -> Optional[str]:
        return self._seqs.get(name)

    def get(self, name: str) -> str:
        """Sequence for ``name``; raise :class:`MissingChromosomeError` if absent."""
        seq = self._seqs.get(name)
        if seq is None:
            msg = f"VCF reference chromosome {name!r} not in FASTA."
            hint = contig_style_hint(name, self._seqs)
            if hint:
                msg += " " + hint
            raise MissingChromosomeError(msg, chrom=name)
        return seq

    def names(self) -> List[str]:
        return list(self._seqs)

    def __contains__(self, name: object) -> bool:
        return name in self._seqs

    def __len__(self) -> int:
        return len(self._seqs)
