"""Classify single-base substitutions as RIP-like or not.

RIP mutates C to T preferentially where the C is followed by A (CpA). On the
other strand the same event reads as G to A preceded by T (TpG). Checking both
patterns means the strand of the input does not need to be known.
"""

from __future__ import annotations

import logging
from typing import Callable, Dict, Iterable, Iterator, Optional, Tuple

import pysam

from .errors import MalformedRecordError
from .genome import GenomeIndex
from .models import RipCall, VariantSite

logger = logging.getLogger(__name__)

ContigResolver = Callable[[int], Optional[str]]

# (ref, alt) -> neighbour offset
_TRANSITIONS: Dict[Tuple[str, str], int] = {
    ("C", "T"): 1,
    ("T", "C"): 1,
    ("A", "G"): -1,
    ("G", "A"): -1,
}


def candidate_offset(site: VariantSite) -> Optional[int]:
    """Neighbour offset for a RIP candidate site, or None if it is not one.

    Multi-base reference alleles, sites without a single-base alternate and
    sites with none of C>T, T>C, A>G, G>A are not candidates.
    """
    if len(site.ref) != 1:
        return None
    alts = [a for a in site.alts if len(a) == 1]
    if not alts:
        return None

    offsets = {_TRANSITIONS[(site.ref, a)] for a in alts if (site.ref, a) in _TRANSITIONS}
    if not offsets:
        return None
    # A single ref base maps to one offset, whatever alt matched.
    return offsets.pop()


def classify_site(site: VariantSite, chrom: str, seq: str) -> Optional[RipCall]:
    """Classify one site against its chromosome sequence.

    Returns None when the site is skipped: not a candidate, or the neighbour
    base falls outside the chromosome.
    """
    offset = candidate_offset(site)
    if offset is None:
        return None

    npos = site.pos + offset
    if npos < 0 or npos >= len(seq):
        return None
    ref_base = site.ref
    next_base = seq[npos]

    if offset == 1 and next_base == "A":
        strand, is_rip = 1, True
    elif offset == -1 and next_base == "T":
        strand, is_rip = -1, True
    else:
        strand, is_rip = 0, False

    return RipCall(
        chrom=chrom,
        pos=site.pos,
        strand=strand,
        bases=(ref_base, next_base),
        is_rip=is_rip,
    )


def scan_sites(
    sites: Iterable[VariantSite],
    genome: GenomeIndex,
    resolve: ContigResolver,
    *,
    counts: Optional[Dict[str, int]] = None,
) -> Iterator[RipCall]:
    """Classify sites in input order.

    The chromosome is only looked up for candidate sites; a candidate on a
    chromosome missing from ``genome`` raises ``MissingChromosomeError``.
    ``counts``, if given, is updated with per-outcome counters.
    """
    if counts is None:
        counts = {}
    for key in ("records_total", "skipped_non_candidate", "skipped_out_of_bounds", "calls", "calls_rip"):
        counts.setdefault(key, 0)

    for site in sites:
        counts["records_total"] += 1
        if candidate_offset(site) is None:
            counts["skipped_non_candidate"] += 1
            continue

        chrom = resolve(site.rid)
        if chrom is None:
            raise MalformedRecordError(f"Missing contig name for reference id {site.rid}.")
        seq = genome.get(chrom)

        call = classify_site(site, chrom, seq)
        if call is None:
            logger.debug("Neighbour of %s:%d is outside the chromosome; skipping.", chrom, site.pos)
            counts["skipped_out_of_bounds"] += 1
            continue

        counts["calls"] += 1
        if call.is_rip:
            counts["calls_rip"] += 1
        yield call


def contig_resolver(header: pysam.VariantHeader) -> ContigResolver:
    """Build a ``rid -> contig name`` function from a VCF header."""
    names = {int(contig.id): name for name, contig in header.contigs.items()}
    return names.get


def sites_from_vcf(vcf: pysam.VariantFile, *, path: Optional[str] = None) -> Iterator[VariantSite]:
    """Adapt pysam records to :class:`VariantSite`. Decode errors are fatal."""
    try:
        for rec in vcf:
            yield VariantSite(
                rid=int(rec.rid),
                pos=int(rec.start),
                ref=rec.ref or "",
                alts=tuple(rec.alts or ()),
            )
    except (OSError, ValueError) as e:
        raise MalformedRecordError(f"Error reading VCF record: {e}", path=path) from e
