import pytest

from riprap.errors import FieldChoiceError
from riprap.fields import FIELD_CHOICES, evaluate_fields, resolve_fields
from riprap.stats import composite_rip_index


def test_shorthands_expand():
    assert [f.name for f in resolve_fields(["di"])][:4] == ["AA", "AC", "AG", "AT"]
    assert len(resolve_fields(["di"])) == 16
    assert len(resolve_fields(["tri"])) == 64
    assert len(resolve_fields(["di_nr"])) == 10
    assert len(resolve_fields(["tri_nr"])) == 32
    assert len(resolve_fields(["all"])) == 4 + 16 + 64 + 10 + 32


def test_duplicates_are_dropped_keeping_order():
    names = [f.name for f in resolve_fields(["cri", "all"])]
    assert names[0] == "cri"
    assert names.count("cri") == 1
    assert len(names) == len(FIELD_CHOICES["all"])


def test_unknown_field():
    with pytest.raises(FieldChoiceError) as exc:
        resolve_fields(["gc"])
    assert "perc_gc" in str(exc.value)


def test_evaluate_fields():
    fields = resolve_fields(["perc_gc", "cri", "margolin1", "margolin2"])
    assert evaluate_fields("TACATGT", fields) == (2 / 7, 0.0, 1.0, 1.0)


def test_non_redundant_proportions():
    fields = {f.name: f for f in resolve_fields(["di_nr"])}
    values = evaluate_fields("TTAA", [fields["AA_nr"], fields["AT_nr"]])
    assert values == (2 / 3, 0.0)


def test_cri_field_matches_composite_rip_index():
    (cri,) = resolve_fields(["cri"])
    for seq in ("TACATGT", "TATATAAATTTA", "TTAACCATG"):
        assert evaluate_fields(seq, [cri]) == (composite_rip_index(seq),)
