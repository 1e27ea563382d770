from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, Optional

from .errors import InputNotFoundError, IntegerParseError, WindowParameterError

logger = logging.getLogger(__name__)


_UCSC_PREFIX = "chr"


def parse_positive_int(value: str) -> int:
    """Parse a strictly positive integer; raise IntegerParseError otherwise."""
    try:
        n = int(str(value).strip())
    except ValueError:
        raise IntegerParseError(f"Couldn't parse as integer: {value}", value=str(value)) from None
    if n <= 0:
        raise IntegerParseError(f"Expected a positive integer, got: {value}", value=str(value))
    return n


def check_input_path(path: str | Path) -> str:
    """Accept ``-`` (stdin) or an existing regular file."""
    p = str(path)
    if p == "-":
        return p
    if not Path(p).is_file():
        raise InputNotFoundError(f"Couldn't find file at path: {p}", path=p)
    return p


def check_window_params(size: int, step: int) -> None:
    """Windows must not leave gaps: require 0 < step <= size."""
    if size <= 0 or step <= 0:
        raise WindowParameterError(
            f"Window size and step must be positive (size={size}, step={step}).",
            size=size,
            step=step,
        )
    if step > size:
        raise WindowParameterError(
            f"Step ({step}) must not exceed window size ({size}).",
            size=size,
            step=step,
        )


def detect_contig_style(contigs: Iterable[str]) -> str:
    """Infer contig style: 'ucsc' if most contigs start with 'chr', else 'ensembl'."""
    names = [c for c in contigs if c]
    if not names:
        return "unknown"
    chr_like = [c for c in names if c.startswith(_UCSC_PREFIX)]
    if len(chr_like) >= max(1, int(0.5 * len(names))):
        return "ucsc"
    return "ensembl"


def remap_contig(contig: str, style: str) -> str:
    """Remap a contig name to the requested style (ucsc or ensembl)."""
    if style == "ucsc":
        if contig.startswith(_UCSC_PREFIX):
            return contig
        if contig == "MT":
            return "chrM"
        return f"{_UCSC_PREFIX}{contig}"
    if style == "ensembl":
        if contig.startswith(_UCSC_PREFIX):
            core = contig[len(_UCSC_PREFIX) :]
            if core == "M":
                return "MT"
            return core
        return contig
    return contig


def contig_style_hint(chrom: str, genome_contigs: Iterable[str]) -> Optional[str]:
    """Explain a missing chromosome that only differs by naming style (chr1 vs 1)."""
    names = list(genome_contigs)
    style = detect_contig_style(names)
    if style == "unknown":
        return None
    candidate = remap_contig(chrom, style)
    if candidate != chrom and candidate in names:
        return (
            f"The FASTA uses {style}-style names ({candidate!r}); "
            "rename the VCF or FASTA contigs so they match."
        )
    return None
