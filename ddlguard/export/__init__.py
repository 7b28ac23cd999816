from .metadata import load_metadata
from .renderer import export_ddl, render_ddl

__all__ = [
    "load_metadata",
    "render_ddl",
    "export_ddl",
]
