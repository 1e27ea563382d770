"""Named per-window statistics for the ``riprap window`` command.

A field is a column of the output table. Shorthand choices on the command
line (``di``, ``tri_nr``, ``all``...) expand to several fields.
"""

from __future__ import annotations

import itertools
from dataclasses import dataclass
from functools import cached_property
from typing import Callable, Dict, List, Sequence, Tuple

from .counter import FrequencyCounter
from .errors import FieldChoiceError
from .stats import (
    canonical_kmer,
    canonical_kmer_counts,
    cri_from_counts,
    dinucleotide_counts,
    gc_content,
    kmer_proportion,
    margolin1,
    margolin2,
    trinucleotide_counts,
)

_BASES = "ACGT"


def _kmers(k: int) -> List[str]:
    return ["".join(p) for p in itertools.product(_BASES, repeat=k)]


DINUCLEOTIDES: Tuple[str, ...] = tuple(_kmers(2))
TRINUCLEOTIDES: Tuple[str, ...] = tuple(_kmers(3))
CANONICAL_DINUCLEOTIDES: Tuple[str, ...] = tuple(sorted({canonical_kmer(k) for k in DINUCLEOTIDES}))
CANONICAL_TRINUCLEOTIDES: Tuple[str, ...] = tuple(sorted({canonical_kmer(k) for k in TRINUCLEOTIDES}))


class WindowProfile:
    """Lazily computed counters for one window, shared by all its fields."""

    def __init__(self, seq: str) -> None:
        self.seq = seq

    @cached_property
    def di(self) -> FrequencyCounter[str]:
        return dinucleotide_counts(self.seq)

    @cached_property
    def tri(self) -> FrequencyCounter[str]:
        return trinucleotide_counts(self.seq)

    @cached_property
    def di_nr(self) -> FrequencyCounter[str]:
        return canonical_kmer_counts(self.seq, 2)

    @cached_property
    def tri_nr(self) -> FrequencyCounter[str]:
        return canonical_kmer_counts(self.seq, 3)


@dataclass(frozen=True)
class Field:
    name: str
    func: Callable[[WindowProfile], float]

    def __call__(self, profile: WindowProfile) -> float:
        return self.func(profile)


def _prop_field(name: str, kmer: str, table: str) -> Field:
    return Field(name=name, func=lambda p: kmer_proportion(getattr(p, table), kmer))


def _build_registry() -> Dict[str, List[Field]]:
    reg: Dict[str, List[Field]] = {
        "perc_gc": [Field("perc_gc", lambda p: gc_content(p.seq))],
        "cri": [Field("cri", lambda p: cri_from_counts(p.di))],
        "margolin1": [Field("margolin1", lambda p: margolin1(p.di))],
        "margolin2": [Field("margolin2", lambda p: margolin2(p.di))],
        "di": [_prop_field(k, k, "di") for k in DINUCLEOTIDES],
        "tri": [_prop_field(k, k, "tri") for k in TRINUCLEOTIDES],
        "di_nr": [_prop_field(f"{k}_nr", k, "di_nr") for k in CANONICAL_DINUCLEOTIDES],
        "tri_nr": [_prop_field(f"{k}_nr", k, "tri_nr") for k in CANONICAL_TRINUCLEOTIDES],
    }
    reg["all"] = [f for key in list(reg) for f in reg[key]]
    return reg


FIELD_CHOICES: Dict[str, List[Field]] = _build_registry()


def resolve_fields(choices: Sequence[str]) -> List[Field]:
    """Expand shorthand choices into an ordered, de-duplicated list of fields."""
    fields: List[Field] = []
    seen = set()
    for choice in choices:
        if choice not in FIELD_CHOICES:
            raise FieldChoiceError(choice, valid_choices=list(FIELD_CHOICES))
        for field in FIELD_CHOICES[choice]:
            if field.name in seen:
                continue
            seen.add(field.name)
            fields.append(field)
    return fields


def evaluate_fields(seq: str, fields: Sequence[Field]) -> Tuple[float, ...]:
    profile = WindowProfile(seq)
    return tuple(field(profile) for field in fields)
