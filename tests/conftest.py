from __future__ import annotations

import sys
import textwrap

import pytest
from sqlalchemy import Column, ForeignKey, Integer, MetaData, String, Table


SAMPLE_MODULE = "ddlguard_sample_models"

SAMPLE_MODULE_SOURCE = textwrap.dedent(
    """
    from sqlalchemy import Column, Integer, MetaData, String, Table

    metadata = MetaData()

    widget = Table(
        "widget",
        metadata,
        Column("id", Integer, primary_key=True),
        Column("name", String(50), nullable=False),
    )


    class Registry:
        metadata = metadata


    not_metadata = 42
    """
)


@pytest.fixture
def sample_metadata() -> MetaData:
    """Two tables linked by a foreign key."""
    metadata = MetaData()
    Table(
        "widget",
        metadata,
        Column("id", Integer, primary_key=True),
        Column("name", String(50), nullable=False),
    )
    Table(
        "gadget",
        metadata,
        Column("id", Integer, primary_key=True),
        Column("widget_id", Integer, ForeignKey("widget.id"), nullable=False),
    )
    return metadata


@pytest.fixture
def sample_models_module(tmp_path, monkeypatch):
    """Importable module defining ``metadata`` with a single ``widget`` table."""
    module_dir = tmp_path / "modules"
    module_dir.mkdir()
    (module_dir / f"{SAMPLE_MODULE}.py").write_text(SAMPLE_MODULE_SOURCE, encoding="utf-8")
    monkeypatch.syspath_prepend(str(module_dir))
    sys.modules.pop(SAMPLE_MODULE, None)
    yield SAMPLE_MODULE
    sys.modules.pop(SAMPLE_MODULE, None)


BROKEN_MODULE = "ddlguard_broken_models"


@pytest.fixture
def broken_models_module(tmp_path, monkeypatch):
    """Importable module that fails with a non-import error while loading."""
    module_dir = tmp_path / "broken"
    module_dir.mkdir()
    (module_dir / f"{BROKEN_MODULE}.py").write_text(
        'raise RuntimeError("bad model")\n', encoding="utf-8"
    )
    monkeypatch.syspath_prepend(str(module_dir))
    sys.modules.pop(BROKEN_MODULE, None)
    yield BROKEN_MODULE
    sys.modules.pop(BROKEN_MODULE, None)
