"""Apply an ordered list of fixups to a generated schema file.

All rules run against an in-memory copy of the file. The file is rewritten
once, after every rule has succeeded, so a failing rule leaves it untouched.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Iterable, Optional

from ddlguard.errors import FixupNotAppliedError
from ddlguard.fixup.rule import FixupRule
from ddlguard.shared.files import PathLike, read_text, resolve_charset, write_text_atomic

logger = logging.getLogger(__name__)


def apply_fixups(
    rules: Iterable[FixupRule],
    artifact_path: PathLike,
    charset: Optional[str] = None,
) -> int:
    """Apply ``rules`` in order to the file at ``artifact_path``.

    Returns the number of rules that modified the schema. Raises
    ``ConfigurationError`` for a broken rule, ``FixupNotAppliedError`` when a
    required rule changed nothing and ``PersistenceError`` when the file
    cannot be read or written back.
    """
    rules = list(rules)
    if not rules:
        return 0

    path = Path(os.fspath(artifact_path))
    encoding = resolve_charset(charset)
    logger.info({"fixups": {"applying": len(rules), "artifact": str(path)}})

    ddl = read_text(path, encoding)
    modified = 0
    for index, rule in enumerate(rules, start=1):
        logger.debug({"fixups": {"index": index, "pattern": rule.pattern}})
        updated = rule.apply(index, ddl)
        if updated == ddl:
            if rule.modification_required:
                raise FixupNotAppliedError(index)
            logger.debug({"fixups": {"index": index, "unchanged": True}})
            continue
        ddl = updated
        modified += 1

    write_text_atomic(path, ddl, encoding)
    logger.debug({"fixups": {"modified": modified, "artifact": str(path)}})
    return modified


__all__ = ["apply_fixups"]
