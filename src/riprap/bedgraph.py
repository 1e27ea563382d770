"""Tab-delimited output for score blocks and RIP calls."""

from __future__ import annotations

import math
from typing import Iterable, Sequence, TextIO

import numpy as np

from .models import RipCall, ScoreBlock, WindowRow


def format_score(score: float) -> str:
    """Shortest positional form: ``1``, ``0.5``, ``-0.25``, ``inf``, ``-inf``, ``NaN``."""
    score = float(score)
    if math.isnan(score):
        return "NaN"
    if math.isinf(score):
        return "inf" if score > 0 else "-inf"
    return np.format_float_positional(score, trim="-")


def format_block(block: ScoreBlock) -> str:
    return f"{block.seqid}\t{block.start}\t{block.end}\t{format_score(block.score)}"


def format_row(row: WindowRow) -> str:
    values = "\t".join(format_score(v) for v in row.values)
    return f"{row.seqid}\t{row.start}\t{row.end}\t{values}"


def format_header(field_names: Sequence[str]) -> str:
    return "\t".join(["seqid", "start", "end", *field_names])


def format_rip_call(call: RipCall) -> str:
    """``chrom  pos  pos+1  strand  <ref><neighbour>  0|1``"""
    ref_base, next_base = call.bases
    return (
        f"{call.chrom}\t{call.pos}\t{call.pos + 1}\t{call.strand}\t"
        f"{ref_base}{next_base}\t{int(call.is_rip)}"
    )


def write_blocks(handle: TextIO, blocks: Iterable[ScoreBlock]) -> int:
    n = 0
    for block in blocks:
        handle.write(format_block(block) + "\n")
        n += 1
    return n


def write_rows(handle: TextIO, rows: Iterable[WindowRow]) -> int:
    n = 0
    for row in rows:
        handle.write(format_row(row) + "\n")
        n += 1
    return n


def write_rip_calls(handle: TextIO, calls: Iterable[RipCall]) -> int:
    n = 0
    for call in calls:
        handle.write(format_rip_call(call) + "\n")
        n += 1
    return n
