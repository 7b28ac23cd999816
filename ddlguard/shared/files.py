"""File helpers shared by the fixup pipeline, the verifier and the exporter."""

from __future__ import annotations

import codecs
import os
import shutil
import tempfile
from pathlib import Path
from typing import Optional, Union

from ddlguard.errors import ConfigurationError, PersistenceError

__all__ = [
    "DEFAULT_CHARSET",
    "UNSET_SENTINEL",
    "PathLike",
    "is_unset",
    "resolve_charset",
    "read_text",
    "write_text_atomic",
]

DEFAULT_CHARSET = "utf-8"
UNSET_SENTINEL = "NONE"

PathLike = Union[str, "os.PathLike[str]"]


def is_unset(value: Optional[PathLike]) -> bool:
    """True for ``None``, the empty string and the ``NONE`` sentinel."""
    if value is None:
        return True
    text = os.fspath(value)
    return text == "" or text == UNSET_SENTINEL


def resolve_charset(charset: Optional[str]) -> str:
    """Return a usable codec name, defaulting to UTF-8."""
    name = charset or DEFAULT_CHARSET
    try:
        codecs.lookup(name)
    except LookupError as exc:
        raise ConfigurationError(f"Unknown schema charset {name!r}") from exc
    return name


def read_text(path: Path, charset: str) -> str:
    try:
        data = path.read_bytes()
    except OSError as exc:
        raise PersistenceError(f"Error reading {path}: {exc}", path=path) from exc
    try:
        return data.decode(charset)
    except UnicodeDecodeError as exc:
        raise PersistenceError(
            f"Error decoding {path} as {charset}: {exc}", path=path
        ) from exc


def write_text_atomic(path: Path, text: str, charset: str) -> None:
    """Replace the contents of ``path`` without ever leaving it half-written.

    The data goes to a temporary file in the same directory which is then
    renamed over ``path``. The original file mode is kept.
    """
    try:
        data = text.encode(charset)
    except UnicodeEncodeError as exc:
        raise PersistenceError(
            f"Error encoding schema for {path} as {charset}: {exc}", path=path
        ) from exc

    directory = path.parent
    tmp_name: Optional[str] = None
    try:
        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{path.name}.", suffix=".tmp", dir=directory
        )
        with os.fdopen(fd, "wb") as handle:
            handle.write(data)
            handle.flush()
            os.fsync(handle.fileno())
        if path.exists():
            shutil.copymode(path, tmp_name)
        os.replace(tmp_name, path)
        tmp_name = None
    except OSError as exc:
        raise PersistenceError(f"Error writing {path}: {exc}", path=path) from exc
    finally:
        if tmp_name is not None:
            try:
                os.unlink(tmp_name)
            except OSError:
                pass
