"""Byte-exact comparison of the generated schema against a committed baseline."""

from __future__ import annotations

import difflib
import logging
import os
from itertools import islice
from pathlib import Path
from typing import List, Optional

from ddlguard.errors import MissingBaselineError, PersistenceError, SchemaMismatchError
from ddlguard.shared.files import PathLike, is_unset, resolve_charset

logger = logging.getLogger(__name__)

# Diff lines logged on mismatch
MAX_DIFF_LINES = 40


def verify_output(
    actual_path: PathLike,
    expected_path: Optional[PathLike],
    charset: Optional[str] = None,
) -> bool:
    """Compare ``actual_path`` with the baseline at ``expected_path``.

    Returns ``False`` when no baseline is configured (verification skipped)
    and ``True`` when both files hold identical bytes. Raises
    ``MissingBaselineError`` if the baseline is missing and
    ``SchemaMismatchError`` if the contents differ. ``charset`` is only used
    to decode the diff that is logged on a mismatch.
    """
    if is_unset(expected_path):
        logger.info({"verify": {"skipped": "no verification file configured"}})
        return False

    actual = Path(os.fspath(actual_path))
    expected = Path(os.fspath(expected_path))
    if not expected.is_file():
        raise MissingBaselineError(expected)

    logger.info({"verify": {"comparing": str(actual), "baseline": str(expected)}})
    try:
        actual_bytes = actual.read_bytes()
    except OSError as exc:
        raise PersistenceError(
            f"Error verifying schema output {actual}: {exc}", path=actual
        ) from exc
    try:
        expected_bytes = expected.read_bytes()
    except OSError as exc:
        raise MissingBaselineError(expected) from exc

    if actual_bytes != expected_bytes:
        for line in describe_difference(
            actual_bytes, expected_bytes, actual, expected, charset=charset
        ):
            logger.warning(line)
        raise SchemaMismatchError(
            actual_path=actual,
            expected_path=expected,
            actual_size=len(actual_bytes),
            expected_size=len(expected_bytes),
            offset=first_difference(actual_bytes, expected_bytes),
        )

    logger.info({"verify": {"succeeded": True, "baseline": str(expected)}})
    return True


def first_difference(actual: bytes, expected: bytes) -> int:
    """Offset of the first differing byte, or the shorter length on a prefix match."""
    for offset, (a, b) in enumerate(zip(actual, expected)):
        if a != b:
            return offset
    return min(len(actual), len(expected))


def describe_difference(
    actual: bytes,
    expected: bytes,
    actual_path: Path,
    expected_path: Path,
    limit: int = MAX_DIFF_LINES,
    charset: Optional[str] = None,
) -> List[str]:
    encoding = resolve_charset(charset)
    diff = difflib.unified_diff(
        expected.decode(encoding, errors="replace").splitlines(),
        actual.decode(encoding, errors="replace").splitlines(),
        fromfile=str(expected_path),
        tofile=str(actual_path),
        lineterm="",
    )
    lines = list(islice(diff, limit + 1))
    if len(lines) > limit:
        lines = lines[:limit] + ["..."]
    return lines


__all__ = ["verify_output", "first_difference", "describe_difference"]
