import math

import pytest

from riprap.models import ScoreBlock
from riprap.stats import (
    base_content,
    canonical_kmer,
    canonical_kmer_counts,
    composite_rip_index,
    dinucleotide_counts,
    gc_content,
    kmer_counts,
    margolin1,
    margolin2,
    reverse_complement,
    sliding_windows,
    trinucleotide_counts,
)


def test_base_content():
    assert base_content("ATGC", "GC") == 0.5
    assert base_content("ATGC", "TGC") == 0.75
    assert gc_content("GGCC") == 1.0


def test_base_content_empty_window_is_zero():
    assert base_content("", "GC") == 0.0


def test_base_content_is_case_sensitive():
    assert gc_content("gcAT") == 0.0


def test_cri_regression_value():
    assert composite_rip_index("TACATGT") == 0.0


def test_dinucleotide_and_trinucleotide_counts():
    di = dinucleotide_counts("TACATGTN")
    assert di.count("TA") == 1
    assert di.total() == 7

    tri = trinucleotide_counts("TACATGTN")
    assert tri.count("TAC") == 1
    assert tri.total() == 6

    assert dinucleotide_counts("A").total() == 0
    assert kmer_counts("", 2).total() == 0


def test_kmer_counts_rejects_non_positive_k():
    with pytest.raises(ValueError):
        kmer_counts("ACGT", 0)


def test_margolin1_is_unguarded():
    # TpA without any ApT
    assert math.isinf(margolin1(dinucleotide_counts("TAA")))
    # neither TpA nor ApT
    assert math.isnan(margolin1(dinucleotide_counts("GGG")))


def test_margolin2_is_guarded():
    assert margolin2(dinucleotide_counts("GGG")) == 0.0
    assert margolin2(dinucleotide_counts("CAC")) == 1.0


def test_cri_propagates_non_finite_scores():
    assert math.isinf(composite_rip_index("TAA"))
    assert math.isnan(composite_rip_index("GGG"))
    assert math.isnan(composite_rip_index(""))


def test_canonical_kmers():
    assert reverse_complement("AACG") == "CGTT"
    assert canonical_kmer("TG") == "CA"
    assert canonical_kmer("CA") == "CA"
    assert canonical_kmer("TAG") == "CTA"
    assert canonical_kmer("AA") == "AA"

    counts = canonical_kmer_counts("TTAA", 2)
    assert counts.count("AA") == 2
    assert counts.count("TA") == 1
    assert counts.count("TT") == 0


def test_sliding_windows():
    result = list(sliding_windows("test_id", "ATGC", 2, 1, lambda _: 1.0))
    assert result == [
        ScoreBlock("test_id", 0, 2, 1.0),
        ScoreBlock("test_id", 1, 3, 1.0),
        ScoreBlock("test_id", 2, 4, 1.0),
    ]


def test_sliding_windows_uses_nominal_end_for_short_tail():
    result = list(sliding_windows("s", "ATGC", 3, 2, gc_content))
    assert [(b.start, b.end) for b in result] == [(0, 3), (2, 5)]
    assert result[1].score == 1.0
