"""Generate the schema, apply fixups and verify it against the baseline."""

from __future__ import annotations

import logging
import os
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from sqlalchemy import MetaData

from ddlguard.config import Settings
from ddlguard.errors import ConfigurationError, ExportError
from ddlguard.export import export_ddl, load_metadata
from ddlguard.fixup import apply_fixups
from ddlguard.shared.files import is_unset
from ddlguard.verify import verify_output

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SchemaCheckResult:
    """Outcome of a successful run.

    ``output_path`` is ``None`` when the generated schema went to a
    temporary file that has since been removed.
    """

    output_path: Optional[Path]
    fixups_applied: int
    verified: bool


def run_schema_check(
    settings: Settings,
    metadata: Optional[MetaData] = None,
) -> SchemaCheckResult:
    """Export DDL for ``metadata``, apply the configured fixups, then verify.

    ``metadata`` defaults to the object named by ``settings.export.metadata``.
    The first error raised by any step propagates unchanged.
    """
    if metadata is None:
        if is_unset(settings.export.metadata):
            raise ConfigurationError(
                "No metadata configured: set export.metadata to 'module:attribute'"
            )
        logger.info({"export": {"loading_metadata": settings.export.metadata}})
        metadata = load_metadata(settings.export.metadata)

    discard_output = is_unset(settings.output_file)
    if discard_output:
        output_path = _temporary_output()
    else:
        output_path = Path(settings.output_file)

    try:
        export_ddl(
            metadata,
            output_path,
            charset=settings.charset,
            dialect=settings.export.dialect,
            drop=settings.export.drop,
            delimiter=settings.export.delimiter,
            format=settings.export.format,
        )
        applied = apply_fixups(settings.fixups, output_path, settings.charset)
        verified = verify_output(output_path, settings.verify_file, settings.charset)
    finally:
        if discard_output:
            output_path.unlink(missing_ok=True)

    return SchemaCheckResult(
        output_path=None if discard_output else output_path,
        fixups_applied=applied,
        verified=verified,
    )


def _temporary_output() -> Path:
    try:
        fd, name = tempfile.mkstemp(prefix="ddlguard-", suffix=".sql")
    except OSError as exc:
        raise ExportError(f"Error creating temporary file: {exc}") from exc
    os.close(fd)
    return Path(name)


__all__ = ["SchemaCheckResult", "run_schema_check"]
