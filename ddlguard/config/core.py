"""Settings for a schema export/fixup/verify run.

Values come from, in decreasing priority: keyword overrides (the command
line), a YAML file, ``DDLGUARD_*`` environment variables, then defaults.
"""

from __future__ import annotations

import codecs
import os
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ddlguard.errors import ConfigurationError
from ddlguard.export.renderer import DEFAULT_DELIMITER, DEFAULT_DIALECT
from ddlguard.fixup.rule import FixupRule
from ddlguard.shared.files import DEFAULT_CHARSET, PathLike

DEFAULT_OUTPUT_FILE = "build/generated-resources/schema.ddl"
DEFAULT_VERIFY_FILE = "schema/schema.ddl"
YAML_SECTION = "ddlguard"


class ExportOptions(BaseModel):
    metadata: Optional[str] = Field(
        default=None,
        description="Import path of the SQLAlchemy MetaData, e.g. 'myapp.models:Base'.",
    )
    dialect: str = Field(default=DEFAULT_DIALECT, min_length=1)
    drop: bool = False
    delimiter: str = DEFAULT_DELIMITER
    format: bool = True

    @field_validator("delimiter", mode="before")
    @classmethod
    def _none_is_empty(cls, value: Any) -> Any:
        return "" if value is None else value


class LoggingSettings(BaseModel):
    json_logs: bool = False
    level: str = "INFO"

    @model_validator(mode="before")
    @classmethod
    def _alias_json(cls, data: Any) -> Any:
        if isinstance(data, dict) and "json" in data and "json_logs" not in data:
            data = dict(data)
            data["json_logs"] = data.pop("json")
        return data

    @field_validator("level")
    @classmethod
    def _known_level(cls, value: str) -> str:
        level = value.upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"unknown log level {value!r}")
        return level


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="DDLGUARD_",
        env_nested_delimiter="__",
        extra="ignore",
    )

    export: ExportOptions = Field(default_factory=ExportOptions)
    output_file: Optional[str] = DEFAULT_OUTPUT_FILE
    verify_file: Optional[str] = DEFAULT_VERIFY_FILE
    charset: str = DEFAULT_CHARSET
    fixups: List[FixupRule] = Field(default_factory=list)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    @field_validator("charset", mode="before")
    @classmethod
    def _known_charset(cls, value: Any) -> Any:
        if value is None or value == "":
            return DEFAULT_CHARSET
        try:
            codecs.lookup(value)
        except LookupError:
            raise ValueError(f"unknown charset {value!r}")
        return value


def load_settings(yaml_path: Optional[PathLike] = None, **overrides: Any) -> Settings:
    """Build ``Settings`` from an optional YAML file plus keyword overrides.

    Overrides whose value is ``None`` are ignored so callers can pass
    unset command line options straight through.
    """
    data: Dict[str, Any] = {}
    if yaml_path is not None:
        data = _load_yaml(Path(os.fspath(yaml_path)))
    merged = _merge(data, overrides)
    try:
        return Settings(**merged)
    except ValidationError as exc:
        raise ConfigurationError(f"Invalid ddlguard settings: {exc}") from exc


def _load_yaml(path: Path) -> Dict[str, Any]:
    try:
        with path.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except OSError as exc:
        raise ConfigurationError(f"Cannot read settings file {path}: {exc}") from exc
    except yaml.YAMLError as exc:
        raise ConfigurationError(f"Invalid YAML in settings file {path}: {exc}") from exc

    if not isinstance(data, dict):
        raise ConfigurationError(f"Settings file {path} must contain a mapping")
    section = data.get(YAML_SECTION)
    if isinstance(section, dict):
        return section
    return data


def _merge(base: Dict[str, Any], overrides: Dict[str, Any]) -> Dict[str, Any]:
    merged: Dict[str, Any] = dict(base)
    for key, value in overrides.items():
        if value is None:
            continue
        current = merged.get(key)
        if isinstance(value, dict):
            merged[key] = _merge(current if isinstance(current, dict) else {}, value)
        else:
            merged[key] = value
    return merged


__all__ = [
    "DEFAULT_OUTPUT_FILE",
    "DEFAULT_VERIFY_FILE",
    "ExportOptions",
    "LoggingSettings",
    "Settings",
    "load_settings",
]
