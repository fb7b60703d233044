"""
Pydantic schemas for normalized leads.

Every field is a trimmed string and never None, so row building cannot
fail on missing data.
"""

import json

from pydantic import BaseModel, ConfigDict, Field, field_validator

# Keys written to the compact "Raw" cell, in column order.
RAW_KEYS = ("name", "phone", "email", "role", "inquiry", "market", "dealSize", "urgency")


def as_text(value) -> str:
    """Scalar as a trimmed string; None, objects and arrays become ""."""
    if value is None or isinstance(value, (dict, list)):
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value).strip()


class Lead(BaseModel):
    """Caller and inquiry attributes extracted from one webhook payload."""

    model_config = ConfigDict(populate_by_name=True)

    name: str = ""
    phone: str = ""
    email: str = ""
    role: str = ""
    inquiry: str = ""
    market: str = ""
    deal_size: str = Field("", alias="dealSize")
    urgency: str = ""
    summary: str = ""

    @field_validator("*", mode="before")
    @classmethod
    def _coerce(cls, value):
        return as_text(value)

    @property
    def is_meaningful(self) -> bool:
        """True when any field other than summary carries data."""
        return any(self.model_dump(exclude={"summary"}).values())

    def compact_raw(self, max_chars: int) -> str:
        """Compact JSON of the non-summary fields, cut to max_chars."""
        data = self.model_dump(by_alias=True, exclude={"summary"})
        raw = json.dumps({k: data[k] for k in RAW_KEYS}, ensure_ascii=False, separators=(",", ":"))
        return raw[:max_chars]

    @classmethod
    def from_raw(cls, raw: str) -> "Lead":
        """Rebuild a Lead from an untruncated compact_raw() string."""
        return cls.model_validate(json.loads(raw))


class Extraction(BaseModel):
    """Result of running the extractor over one webhook body."""

    lead: Lead
    call_id: str | None = None
    brokerage: str
    event_type: str = "unknown"
