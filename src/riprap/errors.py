"""Exception types raised by riprap.

Every error carries the offending value (path, chromosome, integer string) so
the CLI can print a single actionable line.
"""

from __future__ import annotations

from typing import Optional, Sequence


class RipRapError(Exception):
    """Base class for all riprap failures."""


class InputNotFoundError(RipRapError, FileNotFoundError):
    """Raised when an input path does not exist or is not a regular file."""

    def __init__(self, message: str, *, path: str) -> None:
        super().__init__(message)
        self.path = str(path)

    def __str__(self) -> str:
        return self.args[0]


class MalformedRecordError(RipRapError):
    """Raised when a FASTA or VCF record cannot be decoded."""

    def __init__(self, message: str, *, path: Optional[str] = None) -> None:
        super().__init__(message)
        self.path = path


class MissingChromosomeError(RipRapError, KeyError):
    """Raised when a variant refers to a chromosome absent from the genome."""

    def __init__(self, message: str, *, chrom: str) -> None:
        super().__init__(message)
        self.chrom = chrom

    def __str__(self) -> str:
        # KeyError would otherwise repr() the message.
        return self.args[0]


class IntegerParseError(RipRapError, ValueError):
    """Raised when a configuration value is not a positive integer."""

    def __init__(self, message: str, *, value: str) -> None:
        super().__init__(message)
        self.value = value


class WindowParameterError(RipRapError, ValueError):
    """Raised for inconsistent window size/step combinations."""

    def __init__(self, message: str, *, size: int, step: int) -> None:
        super().__init__(message)
        self.size = int(size)
        self.step = int(step)


class FieldChoiceError(RipRapError, ValueError):
    """Raised for an unknown ``--fields`` choice."""

    def __init__(self, bad_choice: str, *, valid_choices: Sequence[str]) -> None:
        super().__init__(
            f"Received an invalid choice: {bad_choice}. "
            f"Valid choices are: {', '.join(valid_choices)}"
        )
        self.bad_choice = bad_choice
        self.valid_choices = list(valid_choices)
