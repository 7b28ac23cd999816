"""Render SQLAlchemy metadata into DDL without a database connection."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import List

from sqlalchemy import MetaData, create_mock_engine
from sqlalchemy.exc import ArgumentError, SQLAlchemyError

from ddlguard.errors import ConfigurationError, ExportError
from ddlguard.shared.files import DEFAULT_CHARSET, PathLike, resolve_charset

logger = logging.getLogger(__name__)

DEFAULT_DIALECT = "postgresql"
DEFAULT_DELIMITER = ";"


def render_ddl(
    metadata: MetaData,
    *,
    dialect: str = DEFAULT_DIALECT,
    drop: bool = False,
    delimiter: str = DEFAULT_DELIMITER,
    format: bool = True,
) -> str:
    """Return the DROP (optional) and CREATE statements for ``metadata``.

    Every statement is terminated with ``delimiter``. With ``format`` the
    dialect's multi-line layout is kept and statements are separated by a
    blank line; otherwise each statement is folded onto one line.
    """

    statements: List[str] = []

    def capture(sql, *multiparams, **params) -> None:  # type: ignore[unused-argument]
        compiled = sql.compile(
            dialect=engine.dialect,
            compile_kwargs={"literal_binds": True},
        )
        text = str(compiled).strip()
        if text:
            statements.append(text)

    try:
        engine = create_mock_engine(f"{dialect}://", executor=capture)
    except ArgumentError as exc:
        raise ConfigurationError(f"Unknown SQL dialect {dialect!r}: {exc}") from exc

    try:
        if drop:
            metadata.drop_all(engine, checkfirst=False)
        metadata.create_all(engine, checkfirst=False)
    except SQLAlchemyError as exc:
        raise ExportError(f"Error compiling schema DDL for dialect {dialect}: {exc}") from exc
    except Exception as exc:
        raise ExportError(f"Error rendering schema DDL for dialect {dialect}: {exc}") from exc

    if not format:
        statements = [_fold(statement) for statement in statements]
    separator = "\n\n" if format else "\n"
    if not statements:
        return ""
    return separator.join(statement + (delimiter or "") for statement in statements) + "\n"


def export_ddl(
    metadata: MetaData,
    output_path: PathLike,
    *,
    charset: str = DEFAULT_CHARSET,
    dialect: str = DEFAULT_DIALECT,
    drop: bool = False,
    delimiter: str = DEFAULT_DELIMITER,
    format: bool = True,
) -> Path:
    """Render ``metadata`` and write it to ``output_path``, replacing any previous file."""
    path = Path(os.fspath(output_path))
    encoding = resolve_charset(charset)
    try:
        # Stale output must not survive a failed export
        path.unlink(missing_ok=True)
    except OSError as exc:
        raise ExportError(f"Error removing previous schema {path}: {exc}") from exc

    ddl = render_ddl(
        metadata,
        dialect=dialect,
        drop=drop,
        delimiter=delimiter,
        format=format,
    )
    try:
        data = ddl.encode(encoding)
    except UnicodeEncodeError as exc:
        raise ExportError(f"Error encoding generated schema as {encoding}: {exc}") from exc

    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)
    except OSError as exc:
        raise ExportError(f"Error writing generated schema to {path}: {exc}") from exc

    logger.info(
        {
            "export": {
                "wrote": str(path),
                "dialect": dialect,
                "tables": len(metadata.tables),
            }
        }
    )
    return path


def _fold(statement: str) -> str:
    return " ".join(line.strip() for line in statement.splitlines() if line.strip())


__all__ = ["DEFAULT_DIALECT", "DEFAULT_DELIMITER", "render_ddl", "export_ddl"]
