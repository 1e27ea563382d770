from __future__ import annotations

from pathlib import Path
from typing import Dict, List, Tuple

import pysam

from .utils import ensure_outdir, write_json

# (pos0, ref, alt): one site per classifier outcome
TOY_VARIANTS: List[Tuple[int, str, str]] = [
    (10, "C", "T"),  # CpA -> RIP, strand 1
    (20, "G", "A"),  # TpG -> RIP, strand -1
    (30, "C", "T"),  # CpG -> not RIP, strand 0
    (40, "A", "C"),  # transversion -> skipped
    (45, "AC", "A"),  # multi-base ref -> skipped
]


def _write_fasta(path: Path, records: Dict[str, str]) -> None:
    lines: List[str] = []
    for contig, seq in records.items():
        lines.append(f">{contig}")
        for i in range(0, len(seq), 60):
            lines.append(seq[i : i + 60])
    path.write_text("\n".join(lines) + "\n", encoding="utf-8")


def toy_genome() -> Dict[str, str]:
    """A two-contig genome with fixed contexts around :data:`TOY_VARIANTS`."""
    chr1 = list(("ACGT" * 20)[:80])
    chr1[10], chr1[11] = "C", "A"
    chr1[19], chr1[20] = "T", "G"
    chr1[30], chr1[31] = "C", "G"
    chr1[40] = "A"
    chr1[45], chr1[46] = "A", "C"

    # AT-rich, TpA-heavy block followed by GC-rich block
    chr2 = "TATATAAATTTA" * 5 + "GCGCCGGC" * 5
    return {"chr1": "".join(chr1), "chr2": chr2}


def make_toy_data(*, outdir: str | Path) -> Dict[str, str]:
    """Create a tiny reference FASTA and VCF suitable for quick demos/tests.

    The outputs include:
    - toy_ref.fa (+ .fai)
    - variants.vcf and variants.vcf.gz (+ .tbi)

    Returns
    -------
    dict
        Paths to the generated files.
    """
    outdir_p = ensure_outdir(outdir)

    genome = toy_genome()
    ref_fa = outdir_p / "toy_ref.fa"
    _write_fasta(ref_fa, genome)
    pysam.faidx(str(ref_fa))

    vcf_path = outdir_p / "variants.vcf"
    header = pysam.VariantHeader()
    header.add_meta("fileformat", "VCFv4.2")
    for contig, seq in genome.items():
        header.contigs.add(contig, length=len(seq))

    with pysam.VariantFile(str(vcf_path), "w", header=header) as vcf:
        for pos0, ref, alt in TOY_VARIANTS:
            rec = vcf.new_record(
                contig="chr1",
                start=pos0,
                stop=pos0 + len(ref),
                alleles=(ref, alt),
                id=f"chr1:{pos0 + 1}:{ref}:{alt}",
                qual=60,
                filter="PASS",
            )
            vcf.write(rec)

    vcf_gz = outdir_p / "variants.vcf.gz"
    pysam.tabix_compress(str(vcf_path), str(vcf_gz), force=True)
    pysam.tabix_index(str(vcf_gz), preset="vcf", force=True)

    summary = {
        "ref_fa": str(ref_fa),
        "vcf": str(vcf_path),
        "vcf_gz": str(vcf_gz),
        "outdir": str(outdir_p),
    }

    write_json(outdir_p / "toy_summary.json", summary)
    return summary
