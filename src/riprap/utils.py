from __future__ import annotations

import json
import sys
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Iterator, TextIO

STDIO = "-"


@contextmanager
def open_output(path: str | Path | None) -> Iterator[TextIO]:
    """Open ``path`` for writing text; ``-`` or None means standard output.

    Standard output is flushed on exit but never closed.
    """
    if path is None or str(path) == STDIO:
        try:
            yield sys.stdout
        finally:
            sys.stdout.flush()
        return

    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    with open(p, "wt", encoding="utf-8") as fh:
        yield fh


def ensure_outdir(path: str | Path) -> Path:
    p = Path(path)
    p.mkdir(parents=True, exist_ok=True)
    return p


def write_json(path: str | Path, obj: Any) -> None:
    with open(path, "wt", encoding="utf-8") as f:
        json.dump(obj, f, indent=2, sort_keys=True)
