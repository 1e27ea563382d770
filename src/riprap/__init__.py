"""riprap: tools for finding RIP-like patterns in DNA.

Public API is intentionally small; most users should use the CLI:

    riprap gc genome.fa --size 5000 --step 1000
    riprap snp genome.fa variants.vcf.gz

"""

from __future__ import annotations

__all__ = ["__version__"]

__version__ = "0.1.0"
