"""High-level pipeline functions behind the CLI sub-commands."""

from __future__ import annotations

import logging
import time
from pathlib import Path
from typing import Dict, Iterable, Iterator, Optional, Sequence

import pysam
from tqdm import tqdm

from .bedgraph import format_header, write_blocks, write_rip_calls, write_rows
from .errors import MalformedRecordError
from .fields import evaluate_fields, resolve_fields
from .genome import GenomeIndex, iter_fasta
from .models import ScoreBlock, SequenceRecord, WindowRow
from .snp import contig_resolver, scan_sites, sites_from_vcf
from .stats import WindowStat, composite_rip_index, gc_content, sliding_windows
from .utils import open_output, write_json
from .validation import check_input_path, check_window_params
from .windows import count_windows, iter_windows

logger = logging.getLogger(__name__)


def _records(fasta: str | Path, *, progress: bool) -> Iterable[SequenceRecord]:
    it: Iterable[SequenceRecord] = iter_fasta(fasta)
    if progress:
        it = tqdm(it, unit="seq", desc="Scanning sequences")
    return it


def _finish(summary: Dict[str, object], t0: float, summary_json: Optional[str | Path]) -> Dict[str, object]:
    summary["runtime_seconds"] = float(time.time() - t0)
    if summary_json is not None:
        write_json(summary_json, summary)
    return summary


def scan_record(record: SequenceRecord, size: int, step: int, func: WindowStat) -> Iterator[ScoreBlock]:
    return sliding_windows(record.seqid, record.seq, size, step, func)


def run_window_stat(
    *,
    fasta: str | Path,
    outfile: Optional[str | Path],
    size: int,
    step: int,
    func: WindowStat,
    name: str = "score",
    progress: bool = False,
    summary_json: Optional[str | Path] = None,
) -> Dict[str, object]:
    """Write one bedgraph row per window of every FASTA record."""
    t0 = time.time()
    check_window_params(size, step)
    check_input_path(fasta)

    counts = {"sequences": 0, "windows": 0, "bases": 0}
    with open_output(outfile) as out:
        for record in _records(fasta, progress=progress):
            counts["sequences"] += 1
            counts["bases"] += len(record.seq)
            n = write_blocks(out, scan_record(record, size, step, func))
            logger.debug("%s: %d windows (expected %d)", record.seqid, n, count_windows(len(record.seq), size, step))
            counts["windows"] += n

    logger.info("Wrote %d %s windows over %d sequences", counts["windows"], name, counts["sequences"])
    summary: Dict[str, object] = {
        "command": name,
        "fasta": str(fasta),
        "size": int(size),
        "step": int(step),
        "counts": counts,
    }
    return _finish(summary, t0, summary_json)


def run_gc(**kwargs) -> Dict[str, object]:
    return run_window_stat(func=gc_content, name="gc", **kwargs)


def run_cri(**kwargs) -> Dict[str, object]:
    return run_window_stat(func=composite_rip_index, name="cri", **kwargs)


def run_window(
    *,
    fasta: str | Path,
    outfile: Optional[str | Path],
    size: int,
    step: int,
    fields: Sequence[str],
    header: bool = True,
    progress: bool = False,
    summary_json: Optional[str | Path] = None,
) -> Dict[str, object]:
    """Write a table with several statistics per window.

    Unlike the single-statistic commands, ``end`` here is the true end of the
    window, so a short final window is reported with its real length.
    """
    t0 = time.time()
    check_window_params(size, step)
    check_input_path(fasta)
    selected = resolve_fields(fields)

    counts = {"sequences": 0, "windows": 0, "bases": 0}
    with open_output(outfile) as out:
        if header:
            out.write(format_header([f.name for f in selected]) + "\n")
        for record in _records(fasta, progress=progress):
            counts["sequences"] += 1
            counts["bases"] += len(record.seq)
            rows = (
                WindowRow(
                    seqid=record.seqid,
                    start=win.start,
                    end=win.end,
                    values=evaluate_fields(win.value, selected),
                )
                for win in iter_windows(record.seq, size, step)
            )
            counts["windows"] += write_rows(out, rows)

    logger.info("Wrote %d windows with %d fields", counts["windows"], len(selected))
    summary: Dict[str, object] = {
        "command": "window",
        "fasta": str(fasta),
        "size": int(size),
        "step": int(step),
        "fields": [f.name for f in selected],
        "counts": counts,
    }
    return _finish(summary, t0, summary_json)


def run_ripsnp(
    *,
    fasta: str | Path,
    vcf: str | Path,
    outfile: Optional[str | Path],
    progress: bool = False,
    summary_json: Optional[str | Path] = None,
) -> Dict[str, object]:
    """Classify VCF substitutions against the reference and write BED-like calls."""
    t0 = time.time()
    vcf_path = check_input_path(vcf)
    check_input_path(fasta)

    genome = GenomeIndex.from_fasta(fasta)

    try:
        reader = pysam.VariantFile(vcf_path)
    except (OSError, ValueError) as e:
        raise MalformedRecordError(f"Could not read VCF file {vcf_path}: {e}", path=vcf_path) from e

    counts: Dict[str, int] = {}
    with reader, open_output(outfile) as out:
        resolve = contig_resolver(reader.header)
        sites = sites_from_vcf(reader, path=vcf_path)
        if progress:
            sites = tqdm(sites, unit="record", desc="Classifying variants")
        write_rip_calls(out, scan_sites(sites, genome, resolve, counts=counts))

    logger.info(
        "Classified %d of %d VCF records (%d RIP-like)",
        counts.get("calls", 0),
        counts.get("records_total", 0),
        counts.get("calls_rip", 0),
    )
    summary: Dict[str, object] = {
        "command": "snp",
        "fasta": str(fasta),
        "vcf": vcf_path,
        "genome_sequences": len(genome),
        "counts": counts,
    }
    return _finish(summary, t0, summary_json)
