from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from pathlib import Path
from typing import Optional

from . import __version__
from .errors import RipRapError
from .fields import FIELD_CHOICES
from .runner import run_cri, run_gc, run_ripsnp, run_window
from .toy_data import make_toy_data
from .validation import check_input_path, parse_positive_int


def _setup_logging(verbosity: int, *, logfile: Optional[Path] = None) -> None:
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity >= 2:
        level = logging.DEBUG

    log_fmt = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
    logging.basicConfig(level=level, format=log_fmt, stream=sys.stderr)

    if logfile is not None:
        logfile.parent.mkdir(parents=True, exist_ok=True)
        fh = logging.FileHandler(logfile)
        fh.setLevel(level)
        fh.setFormatter(logging.Formatter(log_fmt))
        logging.getLogger().addHandler(fh)


def _input_path(p: str) -> str:
    try:
        return check_input_path(p)
    except RipRapError as e:
        raise argparse.ArgumentTypeError(str(e)) from None


def _positive_int(s: str) -> int:
    try:
        return parse_positive_int(s)
    except RipRapError as e:
        raise argparse.ArgumentTypeError(str(e)) from None


def _handle_error(err: Exception, *, log_path: Optional[Path] = None) -> int:
    msg = f"{err.__class__.__name__}: {err}"
    sys.stderr.write(msg + "\n")
    if log_path is not None:
        sys.stderr.write(f"See log: {log_path}\n")
    return 2


def _handle_broken_pipe() -> int:
    # Reader went away (e.g. `| head`); drop the rest of stdout so the
    # interpreter's final flush does not raise again.
    devnull = os.open(os.devnull, os.O_WRONLY)
    os.dup2(devnull, sys.stdout.fileno())
    return 0


def _add_common(p: argparse.ArgumentParser) -> None:
    p.add_argument(
        "-o",
        "--outfile",
        default="-",
        help="Where to write output to. Use '-' for stdout (default).",
    )
    p.add_argument(
        "--summary-json",
        default=None,
        help="Optional path for a JSON file with run counters.",
    )
    p.add_argument("--progress", action="store_true", help="Show a progress bar on stderr.")
    p.add_argument("--log-file", default=None, help="Also write log messages to this file.")
    p.add_argument("-v", "--verbose", action="count", default=0, help="Increase verbosity (-v/-vv).")


def _add_sliding(sub: argparse._SubParsersAction, name: str, help_text: str) -> argparse.ArgumentParser:
    """Arguments shared by the sliding-window family of sub-commands."""
    s = sub.add_parser(name, help=help_text)
    s.add_argument(
        "fasta",
        type=_input_path,
        help="The reference fasta to calculate windows over. Use '-' for stdin.",
    )
    s.add_argument(
        "-w",
        "--size",
        type=_positive_int,
        default=5000,
        help="The size of the window (default: 5000).",
    )
    s.add_argument(
        "-s",
        "--step",
        type=_positive_int,
        default=1000,
        help="The step between window starts; must not exceed --size (default: 1000).",
    )
    _add_common(s)
    return s


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="riprap",
        description="riprap: tools for finding RIP-like patterns in DNA.",
    )
    p.add_argument("--version", action="version", version=f"riprap {__version__}")

    sub = p.add_subparsers(dest="cmd", required=True)

    # -----------------
    # quickstart
    # -----------------
    sub.add_parser(
        "quickstart",
        help="Print ready-to-run recipes for common scenarios.",
    )

    # -----------------
    # sliding windows
    # -----------------
    _add_sliding(sub, "gc", "Calculate GC%% in a sliding window.")
    _add_sliding(sub, "cri", "Calculate CRI in a sliding window.")

    w = _add_sliding(sub, "window", "Calculate several statistics per sliding window as a table.")
    w.add_argument(
        "-f",
        "--fields",
        nargs="+",
        choices=list(FIELD_CHOICES),
        default=["perc_gc", "cri"],
        help="Statistics to compute; shorthands expand to several columns (default: perc_gc cri).",
    )
    w.add_argument("--no-header", action="store_true", help="Do not write the column header line.")

    # -----------------
    # snp
    # -----------------
    n = sub.add_parser("snp", help="Find SNPs that are RIP-like.")
    n.add_argument("fasta", type=_input_path, help="The reference fasta. Use '-' for stdin.")
    n.add_argument(
        "vcf",
        type=_input_path,
        help="The genotyped VCF/BCF. Compressed files are read transparently. Use '-' for stdin.",
    )
    _add_common(n)

    # -----------------
    # make-toy-data
    # -----------------
    t = sub.add_parser(
        "make-toy-data",
        help="Generate a tiny reference FASTA and VCF for demos/tests.",
    )
    t.add_argument("--outdir", required=True, help="Output directory for toy data.")
    t.add_argument("--dry-run", action="store_true", help="Validate paths without writing files.")

    return p


# -----------------
# Command handlers
# -----------------

def cmd_quickstart() -> int:
    lines = [
        "riprap quickstart (copy/paste):",
        "",
        "1) GC% in 5 kb windows, 1 kb step:",
        "   riprap gc genome.fa --size 5000 --step 1000 -o gc.bedgraph",
        "",
        "2) Composite RIP index (CRI) track:",
        "   riprap cri genome.fa -o cri.bedgraph",
        "",
        "3) Several statistics per window as a table:",
        "   riprap window genome.fa --fields perc_gc cri di_nr -o windows.tsv",
        "",
        "4) RIP-like SNPs from a VCF:",
        "   riprap snp genome.fa variants.vcf.gz -o rip_snps.bed",
        "",
        "Tip: use 'riprap make-toy-data --outdir toy/' for a tiny example genome and VCF.",
    ]
    print("\n".join(lines))
    return 0


def cmd_make_toy_data(args: argparse.Namespace) -> int:
    outdir = Path(args.outdir).expanduser().resolve()
    if args.dry_run:
        print(f"Would write toy data into: {outdir}")
        return 0

    summary = make_toy_data(outdir=outdir)
    print(json.dumps(summary, indent=2))
    return 0


def cmd_sliding(args: argparse.Namespace) -> int:
    log_path = Path(args.log_file) if args.log_file else None
    _setup_logging(args.verbose, logfile=log_path)

    logger = logging.getLogger("riprap")
    logger.info("riprap %s", __version__)

    kwargs = dict(
        fasta=args.fasta,
        outfile=args.outfile,
        size=int(args.size),
        step=int(args.step),
        progress=bool(args.progress),
        summary_json=args.summary_json,
    )
    try:
        if args.cmd == "gc":
            run_gc(**kwargs)
        elif args.cmd == "cri":
            run_cri(**kwargs)
        else:
            run_window(fields=args.fields, header=not bool(args.no_header), **kwargs)
        return 0
    except BrokenPipeError:
        return _handle_broken_pipe()
    except (RipRapError, OSError) as e:
        return _handle_error(e, log_path=log_path)


def cmd_snp(args: argparse.Namespace) -> int:
    log_path = Path(args.log_file) if args.log_file else None
    _setup_logging(args.verbose, logfile=log_path)

    logger = logging.getLogger("riprap")
    logger.info("riprap %s", __version__)

    try:
        run_ripsnp(
            fasta=args.fasta,
            vcf=args.vcf,
            outfile=args.outfile,
            progress=bool(args.progress),
            summary_json=args.summary_json,
        )
        return 0
    except BrokenPipeError:
        return _handle_broken_pipe()
    except (RipRapError, OSError) as e:
        return _handle_error(e, log_path=log_path)


def main(argv: Optional[list[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.cmd == "quickstart":
        return cmd_quickstart()
    if args.cmd in ("gc", "cri", "window"):
        return cmd_sliding(args)
    if args.cmd == "snp":
        return cmd_snp(args)
    if args.cmd == "make-toy-data":
        return cmd_make_toy_data(args)

    parser.error(f"Unknown command: {args.cmd}")
    return 2


if __name__ == "__main__":
    raise SystemExit(main())
