"""Single match/replace fixup applied to generated schema DDL."""

from __future__ import annotations

import re
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from ddlguard.errors import ConfigurationError


class FixupRule(BaseModel):
    """A regular expression and the replacement applied to all of its matches.

    The replacement uses the ``re`` module template syntax, so capture groups
    are referenced as ``\\1``, ``\\g<1>`` or ``\\g<name>``.
    """

    model_config = ConfigDict(frozen=True, extra="forbid", populate_by_name=True)

    pattern: str = Field(
        min_length=1,
        description="Regular expression matched against the generated schema DDL.",
    )
    replacement: str = Field(
        default="",
        description="Replacement template applied to every match.",
    )
    modification_required: bool = Field(
        default=False,
        validation_alias=AliasChoices(
            "modification_required",
            "modificationRequired",
            "modification-required",
        ),
        description="Fail the run when this fixup leaves the schema unchanged.",
    )

    @field_validator("replacement", mode="before")
    @classmethod
    def _none_is_empty(cls, value: Any) -> Any:
        # Config layers hand empty values over as null
        return "" if value is None else value

    def apply(self, index: int, text: str) -> str:
        """Return ``text`` with every non-overlapping match replaced.

        ``index`` is the 1-based position of this rule and only feeds error
        messages. The result equals ``text`` when nothing matched.
        """
        if not self.pattern:
            raise ConfigurationError(
                f"Error applying schema fixup #{index}: no pattern specified",
                index=index,
            )
        replacement = self.replacement or ""
        try:
            regex = re.compile(self.pattern)
        except re.error as exc:
            raise ConfigurationError(
                f"Error applying schema fixup #{index}: invalid regular expression: {exc}",
                index=index,
            ) from exc
        try:
            return regex.sub(replacement, text)
        except (re.error, IndexError) as exc:
            raise ConfigurationError(
                f"Error applying schema fixup #{index}: invalid replacement: {exc}",
                index=index,
            ) from exc


__all__ = ["FixupRule"]
