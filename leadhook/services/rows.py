"""Sheet row building: one Lead becomes exactly twelve string cells."""

from datetime import datetime, timezone

from leadhook.schemas.lead import Lead

HEADERS = (
    "Timestamp",
    "Brokerage",
    "Name",
    "Phone",
    "Email",
    "Role",
    "Inquiry",
    "Market",
    "Deal Size",
    "Urgency",
    "Summary",
    "Raw",
)


def format_timestamp(moment: datetime) -> str:
    """ISO instant with "T" -> " " and "Z" -> " UTC": 2025-01-31 14:05:09.123 UTC."""
    moment = moment.astimezone(timezone.utc)
    return f"{moment:%Y-%m-%d %H:%M:%S}.{moment.microsecond // 1000:03d} UTC"


def build_row(
    lead: Lead,
    *,
    brokerage: str,
    raw_max_chars: int,
    now: datetime | None = None,
) -> list[str]:
    return [
        format_timestamp(now or datetime.now(timezone.utc)),
        brokerage,
        lead.name,
        lead.phone,
        lead.email,
        lead.role,
        lead.inquiry,
        lead.market,
        lead.deal_size,
        lead.urgency,
        lead.summary,
        lead.compact_raw(raw_max_chars),
    ]
