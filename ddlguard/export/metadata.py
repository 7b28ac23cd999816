"""Locate the SQLAlchemy ``MetaData`` to export from an import path."""

from __future__ import annotations

import importlib
from typing import Any

from sqlalchemy import MetaData

from ddlguard.errors import ConfigurationError

# Module attributes tried, in order, when the import path names no attribute
DEFAULT_ATTRIBUTES = ("metadata", "Base")


def load_metadata(import_path: str) -> MetaData:
    """Resolve ``"package.module:attr"`` to a ``MetaData`` instance.

    ``attr`` may be a ``MetaData`` or anything exposing one as ``.metadata``,
    such as a declarative base class. Dotted attributes are followed.
    """
    if not import_path or not import_path.strip():
        raise ConfigurationError("No metadata import path configured")

    module_name, _, attr_path = import_path.strip().partition(":")
    try:
        module = importlib.import_module(module_name)
    except ImportError as exc:
        raise ConfigurationError(
            f"Cannot import metadata module {module_name!r}: {exc}"
        ) from exc
    except Exception as exc:
        raise ConfigurationError(
            f"Error importing metadata module {module_name!r}: {exc}"
        ) from exc

    if attr_path:
        target = _resolve_attribute(module, attr_path, import_path)
    else:
        target = None
        for name in DEFAULT_ATTRIBUTES:
            if hasattr(module, name):
                target = getattr(module, name)
                break
        if target is None:
            raise ConfigurationError(
                f"Module {module_name!r} defines none of {', '.join(DEFAULT_ATTRIBUTES)}; "
                "use 'module:attribute'"
            )

    return _as_metadata(target, import_path)


def _resolve_attribute(module: Any, attr_path: str, import_path: str) -> Any:
    target = module
    for part in attr_path.split("."):
        try:
            target = getattr(target, part)
        except AttributeError as exc:
            raise ConfigurationError(
                f"Cannot resolve {import_path!r}: no attribute {part!r}"
            ) from exc
    return target


def _as_metadata(target: Any, import_path: str) -> MetaData:
    if isinstance(target, MetaData):
        return target
    candidate = getattr(target, "metadata", None)
    if isinstance(candidate, MetaData):
        return candidate
    raise ConfigurationError(
        f"{import_path!r} is a {type(target).__name__}, not SQLAlchemy MetaData "
        "or a declarative base"
    )


__all__ = ["DEFAULT_ATTRIBUTES", "load_metadata"]
