from .pipeline import apply_fixups
from .rule import FixupRule

__all__ = [
    "FixupRule",
    "apply_fixups",
]
