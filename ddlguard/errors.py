"""Exception hierarchy for schema generation, fixups and verification."""

from __future__ import annotations

from pathlib import Path
from typing import Optional


class DDLGuardError(Exception):
    """Base class for every error raised by ddlguard."""

    pass


class ConfigurationError(DDLGuardError):
    """Raised when a fixup rule or a setting is invalid.

    ``index`` is the 1-based position of the offending fixup rule, when the
    error concerns one.
    """

    def __init__(self, message: str, *, index: Optional[int] = None):
        super().__init__(message)
        self.index = index


class FixupNotAppliedError(DDLGuardError):
    """Raised when a fixup marked as required did not modify the schema."""

    def __init__(self, index: int):
        super().__init__(
            f"Schema fixup #{index} did not modify the generated schema "
            "(modification required)"
        )
        self.index = index


class PersistenceError(DDLGuardError):
    """Raised when the generated artifact cannot be read or written back."""

    def __init__(self, message: str, *, path: Path):
        super().__init__(message)
        self.path = path


class MissingBaselineError(DDLGuardError):
    """Raised when verification is requested but the baseline is missing or unreadable."""

    def __init__(self, path: Path):
        super().__init__(
            f"Error verifying schema output: verification file {path} "
            "does not exist or is not readable"
        )
        self.path = path


class SchemaMismatchError(DDLGuardError):
    """Raised when the generated schema differs from the committed baseline."""

    def __init__(
        self,
        *,
        actual_path: Path,
        expected_path: Path,
        actual_size: int,
        expected_size: int,
        offset: int,
    ):
        super().__init__(
            f"Generated schema {actual_path} differs from expected schema "
            f"{expected_path} at byte {offset} "
            f"({actual_size} vs {expected_size} bytes; schema migration may be needed)"
        )
        self.actual_path = actual_path
        self.expected_path = expected_path
        self.actual_size = actual_size
        self.expected_size = expected_size
        self.offset = offset


class ExportError(DDLGuardError):
    """Raised when DDL cannot be compiled from metadata or written out."""

    pass


__all__ = [
    "DDLGuardError",
    "ConfigurationError",
    "FixupNotAppliedError",
    "PersistenceError",
    "MissingBaselineError",
    "SchemaMismatchError",
    "ExportError",
]
