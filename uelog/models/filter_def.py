"""Filter definition models for uelog.

These models describe which log entries are shown in the final report.
Filters are configured per field (severity type and category).
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator


class FieldFilter(BaseModel):
    """Allow/deny rules for a single record field.

    Attributes:
        ignore: Skip filtering on this field entirely.
        allow_undefined: Keep entries where the field is absent.
        whitelist: Values to keep. An empty whitelist keeps every value.
        blacklist: Values to drop, applied after the whitelist.
    """

    model_config = ConfigDict(frozen=False)

    ignore: bool = False
    allow_undefined: bool = True
    whitelist: list[str] = Field(default_factory=list)
    blacklist: list[str] = Field(default_factory=list)

    @field_validator("whitelist", "blacklist")
    @classmethod
    def validate_values(cls, v: list[str]) -> list[str]:
        """Reject blank values, which can never match a trimmed field."""
        for value in v:
            if not value.strip():
                raise ValueError("Filter values must not be blank")
        return v

    def excludes(self, value: str | None) -> bool:
        """Check whether a field value is filtered out.

        Args:
            value: The record's field value, or None when absent.

        Returns:
            True if the entry carrying this value should be hidden.
        """
        if self.ignore:
            return False
        if value is None:
            return not self.allow_undefined
        if self.whitelist and value not in self.whitelist:
            return True
        return value in self.blacklist


class FilterConfig(BaseModel):
    """Filters for both filterable fields of a LogRecord."""

    model_config = ConfigDict(frozen=False)

    type: FieldFilter = Field(default_factory=FieldFilter)
    category: FieldFilter = Field(default_factory=FieldFilter)

    @classmethod
    def passthrough(cls) -> "FilterConfig":
        """A filter configuration that keeps every entry."""
        return cls(
            type=FieldFilter(ignore=True),
            category=FieldFilter(ignore=True),
        )
