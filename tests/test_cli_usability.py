import json
import subprocess
import sys
from pathlib import Path
from typing import Optional

import pysam

from riprap.toy_data import make_toy_data


def _run_cli(args: list[str], stdin_text: Optional[str] = None) -> subprocess.CompletedProcess:
    return subprocess.run(
        [sys.executable, "-m", "riprap"] + args,
        input=stdin_text,
        check=False,
        capture_output=True,
        text=True,
    )


def _make_small_vcf(path: Path, contig: str) -> Path:
    header = pysam.VariantHeader()
    header.add_meta("fileformat", "VCFv4.2")
    header.contigs.add(contig, length=200)

    vcf_path = path / "other.vcf"
    with pysam.VariantFile(str(vcf_path), "w", header=header) as vcf:
        rec = vcf.new_record(
            contig=contig,
            start=10,
            stop=11,
            alleles=("C", "T"),
            id=f"{contig}:11:C:T",
            qual=60,
            filter="PASS",
        )
        vcf.write(rec)
    return vcf_path


def test_quickstart_output() -> None:
    cp = _run_cli(["quickstart"])
    assert cp.returncode == 0
    assert "riprap gc" in cp.stdout
    assert "riprap snp" in cp.stdout


def test_make_toy_data_dry_run_does_not_write(tmp_path: Path) -> None:
    outdir = tmp_path / "toy"
    cp = _run_cli(["make-toy-data", "--outdir", str(outdir), "--dry-run"])
    assert cp.returncode == 0
    assert "Would write" in cp.stdout
    assert not outdir.exists()


def test_snp_on_toy_data(tmp_path: Path) -> None:
    toy_dir = tmp_path / "toy"
    cp = _run_cli(["make-toy-data", "--outdir", str(toy_dir)])
    assert cp.returncode == 0

    for vcf in ("variants.vcf", "variants.vcf.gz"):
        cp = _run_cli(["snp", str(toy_dir / "toy_ref.fa"), str(toy_dir / vcf)])
        assert cp.returncode == 0, cp.stderr
        assert cp.stdout.splitlines() == [
            "chr1\t10\t11\t1\tCA\t1",
            "chr1\t20\t21\t-1\tGT\t1",
            "chr1\t30\t31\t0\tCG\t0",
        ]


def test_snp_writes_outfile_and_summary(tmp_path: Path) -> None:
    toy = make_toy_data(outdir=tmp_path / "toy")
    out = tmp_path / "out" / "rip.bed"
    summary = tmp_path / "summary.json"
    cp = _run_cli(
        ["snp", toy["ref_fa"], toy["vcf_gz"], "-o", str(out), "--summary-json", str(summary)]
    )
    assert cp.returncode == 0, cp.stderr
    assert cp.stdout == ""
    assert len(out.read_text().splitlines()) == 3

    counts = json.loads(summary.read_text())["counts"]
    assert counts["records_total"] == 5
    assert counts["skipped_non_candidate"] == 2
    assert counts["calls_rip"] == 2


def test_gc_windows_on_toy_data(tmp_path: Path) -> None:
    toy = make_toy_data(outdir=tmp_path / "toy")
    cp = _run_cli(["gc", toy["ref_fa"], "--size", "50", "--step", "50"])
    assert cp.returncode == 0, cp.stderr

    rows = [line.split("\t") for line in cp.stdout.splitlines()]
    assert [r[:3] for r in rows] == [
        ["chr1", "0", "50"],
        ["chr1", "50", "100"],
        ["chr2", "0", "50"],
        ["chr2", "50", "100"],
    ]
    assert rows[2][3] == "0"
    assert rows[3][3] == "0.8"


def test_cri_reports_non_finite_scores(tmp_path: Path) -> None:
    toy = make_toy_data(outdir=tmp_path / "toy")
    cp = _run_cli(["cri", toy["ref_fa"], "-w", "40", "-s", "40"])
    assert cp.returncode == 0, cp.stderr
    scores = [line.split("\t")[3] for line in cp.stdout.splitlines()]
    # chr2 ends in a GC-only block: no TpA, no ApT
    assert scores[-1] == "NaN"


def test_window_table_has_header(tmp_path: Path) -> None:
    toy = make_toy_data(outdir=tmp_path / "toy")
    cp = _run_cli(["window", toy["ref_fa"], "-w", "30", "-s", "30", "--fields", "perc_gc", "cri"])
    assert cp.returncode == 0, cp.stderr
    lines = cp.stdout.splitlines()
    assert lines[0] == "seqid\tstart\tend\tperc_gc\tcri"
    # chr1 (80 bp) keeps its short tail with the true end
    assert lines[3].split("\t")[:3] == ["chr1", "60", "80"]


def test_step_larger_than_size_is_rejected(tmp_path: Path) -> None:
    toy = make_toy_data(outdir=tmp_path / "toy")
    cp = _run_cli(["gc", toy["ref_fa"], "--size", "10", "--step", "20"])
    assert cp.returncode == 2
    assert "WindowParameterError" in cp.stderr


def test_bad_integer_is_rejected(tmp_path: Path) -> None:
    toy = make_toy_data(outdir=tmp_path / "toy")
    cp = _run_cli(["gc", toy["ref_fa"], "--size", "abc"])
    assert cp.returncode != 0
    assert "Couldn't parse as integer" in cp.stderr


def test_missing_input_is_rejected(tmp_path: Path) -> None:
    cp = _run_cli(["gc", str(tmp_path / "missing.fa")])
    assert cp.returncode != 0
    assert "Couldn't find file at path" in cp.stderr


def test_missing_chromosome_message(tmp_path: Path) -> None:
    toy = make_toy_data(outdir=tmp_path / "toy")
    vcf = _make_small_vcf(tmp_path, contig="1")

    cp = _run_cli(["snp", toy["ref_fa"], str(vcf)])
    assert cp.returncode == 2
    assert "MissingChromosomeError" in cp.stderr
    assert "chr1" in cp.stderr


def test_gc_reads_fasta_from_stdin(tmp_path: Path) -> None:
    toy = make_toy_data(outdir=tmp_path / "toy")
    args = ["--size", "50", "--step", "50"]
    from_path = _run_cli(["gc", toy["ref_fa"]] + args)
    from_stdin = _run_cli(["gc", "-"] + args, stdin_text=Path(toy["ref_fa"]).read_text())

    assert from_stdin.returncode == 0, from_stdin.stderr
    assert len(from_stdin.stdout.splitlines()) == 4
    assert from_stdin.stdout == from_path.stdout


def test_cri_and_window_read_fasta_from_stdin(tmp_path: Path) -> None:
    toy = make_toy_data(outdir=tmp_path / "toy")
    fasta_text = Path(toy["ref_fa"]).read_text()
    for cmd in ("cri", "window"):
        args = [cmd, "-w", "40", "-s", "20"]
        from_path = _run_cli(args[:1] + [toy["ref_fa"]] + args[1:])
        from_stdin = _run_cli(args[:1] + ["-"] + args[1:], stdin_text=fasta_text)
        assert from_stdin.returncode == 0, from_stdin.stderr
        assert from_stdin.stdout
        assert from_stdin.stdout == from_path.stdout


def test_snp_reads_vcf_from_stdin(tmp_path: Path) -> None:
    toy = make_toy_data(outdir=tmp_path / "toy")
    cp = _run_cli(["snp", toy["ref_fa"], "-"], stdin_text=Path(toy["vcf"]).read_text())
    assert cp.returncode == 0, cp.stderr
    assert cp.stdout.splitlines() == [
        "chr1\t10\t11\t1\tCA\t1",
        "chr1\t20\t21\t-1\tGT\t1",
        "chr1\t30\t31\t0\tCG\t0",
    ]


def test_closed_stdout_exits_quietly(tmp_path: Path) -> None:
    fasta = tmp_path / "big.fa"
    fasta.write_text(">big\n" + "ACGTTGCA" * 25000 + "\n")

    proc = subprocess.Popen(
        [sys.executable, "-m", "riprap", "gc", str(fasta), "-w", "2", "-s", "1"],
        stdout=subprocess.PIPE,
        stderr=subprocess.PIPE,
        text=True,
    )
    assert proc.stdout.readline().startswith("big\t0\t2\t")
    proc.stdout.close()
    err = proc.stderr.read()
    proc.stderr.close()

    assert proc.wait() == 0
    assert "BrokenPipeError" not in err
    assert "Traceback" not in err
