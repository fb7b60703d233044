"""
Lead extraction from Vapi webhook bodies.

The webhook shape has drifted over time: structured outputs as an object or
an array, nested under different keys, legacy caller/qualifications objects,
or nothing but a summary and transcript. Each shape is handled by a
LeadSource; sources are tried in priority order and, per field, the first
non-empty value wins.
"""

from typing import Any, Iterable

from leadhook.schemas.lead import Extraction, Lead
from leadhook.schemas.lead import as_text as _text
from leadhook.services.free_text import find_email, find_name, find_phone

DEFAULT_BROKERAGE = "Ariel Property Advisors"

LEAD_FIELDS = (
    "name", "phone", "email", "role", "inquiry", "market", "deal_size", "urgency", "summary",
)

# Accepted keys per Lead field inside any lead-bearing object, first present wins.
FIELD_ALIASES: dict[str, tuple[str, ...]] = {
    "name": ("name", "fullName", "full_name"),
    "phone": ("phone", "phoneNumber", "phone_number"),
    "email": ("email",),
    "role": ("role",),
    "inquiry": ("inquiry",),
    "market": ("market", "location"),
    "deal_size": ("deal_size", "dealSize", "budget"),
    "urgency": ("urgency", "timeline"),
    "summary": ("summary",),
}

STRUCTURED_OUTPUT_PATHS = (
    "structured_output",
    "structuredOutput",
    "structured_outputs",
    "structuredOutputs",
    "output",
    "outputs",
    "assistant.structured_output",
    "assistant.structuredOutput",
    "data.structured_output",
    "data.structuredOutput",
    "data.outputs",
    "result.structured_output",
    "result.structuredOutput",
    "message.structured_output",
    "message.structuredOutput",
    "message.artifact.structured_output",
    "message.artifact.structuredOutput",
    "message.artifact.structured_outputs",
    "message.artifact.structuredOutputs",
)

STRUCTURED_DATA_PATHS = (
    "structured_data",
    "structuredData",
    "analysis.structuredData",
    "message.analysis.structuredData",
    "call.analysis.structuredData",
)

SUMMARY_PATHS = (
    "summary",
    "final_summary",
    "analysis.summary",
    "message.analysis.summary",
    "message.summary",
)

TRANSCRIPT_PATHS = (
    "transcript",
    "message.transcript",
    "message.artifact.transcript",
    "artifact.transcript",
)

# Events that end a call; legacy payloads carry no type at all.
FINAL_EVENT_TYPES = {"end-of-call-report", "unknown"}

# Free text beyond this is not scanned by the regex fallbacks.
MAX_SCAN_CHARS = 100_000

CUSTOMER_NUMBER_PATHS =("customer.number", "call.customer.number", "message.customer.number")

CALL_ID_PATHS = (
    "call_id",
    "callId",
    "call.id",
    "message.call.id",
    "message.call_id",
    "message.callId",
)

BROKERAGE_PATHS = (
    "assistant.metadata.brokerageName",
    "message.assistant.metadata.brokerageName",
    "call.assistant.metadata.brokerageName",
    "metadata.brokerageName",
    "brokerage",
)

# Checked in order; the first canonical role whose needle appears wins.
ROLE_VOCABULARY = (
    ("owner", ("owner", "seller", "landlord")),
    ("buyer", ("buyer", "investor", "purchas")),
    ("lender", ("lender", "lending")),
    ("general", ("general", "inquiry")),
)


# ── Path helpers ─────────────────────────────────────────────────────────────

def dig(obj: Any, path: str) -> Any:
    """Follow a dotted path through nested dicts; None when any hop is missing."""
    for key in path.split("."):
        if not isinstance(obj, dict):
            return None
        obj = obj.get(key)
    return obj


def first(obj: Any, paths: Iterable[str]) -> Any:
    """Value at the first path that is present and not None."""
    for path in paths:
        value = dig(obj, path)
        if value is not None:
            return value
    return None


def first_text(obj: Any, paths: Iterable[str]) -> str:
    """First non-empty scalar at the given paths, as a trimmed string."""
    for path in paths:
        value = _text(dig(obj, path))
        if value:
            return value
    return ""


def lead_fields(obj: Any) -> dict[str, Any]:
    """Map a lead-bearing object onto Lead field names via FIELD_ALIASES."""
    if not isinstance(obj, dict):
        return {}
    found = {}
    for field, aliases in FIELD_ALIASES.items():
        for alias in aliases:
            if obj.get(alias) is not None:
                found[field] = obj[alias]
                break
    return found


# ── Sources ──────────────────────────────────────────────────────────────────

class LeadSource:
    """One strategy for finding lead values in a payload."""

    name = "base"
    fallback = False

    def lookup(self, payload: dict) -> dict[str, Any]:
        raise NotImplementedError


class StructuredOutputSource(LeadSource):
    """The assistant's "lead" structured output, wherever it is nested."""

    name = "structured_output"

    def lookup(self, payload: dict) -> dict[str, Any]:
        for path in STRUCTURED_OUTPUT_PATHS:
            lead = self._lead_from_container(dig(payload, path))
            if lead:
                return lead
        return {}

    def _lead_from_container(self, container: Any) -> dict[str, Any]:
        if isinstance(container, list):
            return self._lead_from_items(container)
        if not isinstance(container, dict):
            return {}
        if isinstance(container.get("lead"), dict):
            return lead_fields(container["lead"])
        if self._is_lead_item(container):
            tagged = self._lead_from_items([container])
            if tagged:
                return tagged
        flat = lead_fields(container)
        if flat:
            return flat
        # Keyed by output id: {"<id>": {"name": "lead", "result": {...}}}
        return self._lead_from_items([v for v in container.values() if isinstance(v, dict)])

    def _lead_from_items(self, items: list) -> dict[str, Any]:
        for item in items:
            if not isinstance(item, dict) or not self._is_lead_item(item):
                continue
            for key in ("lead", "data", "result"):
                if isinstance(item.get(key), dict):
                    return lead_fields(item[key])
            found = lead_fields(item)
            # The tag itself, not the caller's name.
            if _text(found.get("name")).lower() == "lead":
                found.pop("name")
            if found:
                return found
        return {}

    @staticmethod
    def _is_lead_item(item: dict) -> bool:
        for key in ("name", "type", "id"):
            if _text(item.get(key)).lower() == "lead":
                return True
        return isinstance(item.get("lead"), dict) or isinstance(item.get("data"), dict)


class CallerQualificationsSource(LeadSource):
    """Legacy shape: top-level caller and qualifications objects."""

    name = "caller_qualifications"

    def lookup(self, payload: dict) -> dict[str, Any]:
        caller = payload.get("caller") if isinstance(payload.get("caller"), dict) else {}
        quals = (
            payload.get("qualifications") if isinstance(payload.get("qualifications"), dict) else {}
        )
        found = {k: v for k, v in lead_fields(caller).items() if k in ("name", "phone", "email")}
        for field, value in lead_fields(quals).items():
            if field not in ("name", "phone", "email", "summary"):
                found[field] = value
        summary = first_text(payload, ("summary", "final_summary"))
        if summary:
            found["summary"] = summary
        return found


class StructuredDataSource(LeadSource):
    """Call analysis structured data."""

    name = "structured_data"

    def lookup(self, payload: dict) -> dict[str, Any]:
        for path in STRUCTURED_DATA_PATHS:
            found = lead_fields(dig(payload, path))
            if found:
                return found
        return {}


class CustomerNumberSource(LeadSource):
    """The platform's caller-id number, sent on every server message."""

    name = "customer_number"
    fallback = True

    def lookup(self, payload: dict) -> dict[str, Any]:
        return {"phone": first_text(payload, CUSTOMER_NUMBER_PATHS)}


class FreeTextSource(LeadSource):
    """Regex fallback over summary and transcript text."""

    name = "free_text"
    fallback = True

    def lookup(self, payload: dict) -> dict[str, Any]:
        summary = first_text(payload, SUMMARY_PATHS)
        texts = [summary] + [_text(dig(payload, path)) for path in TRANSCRIPT_PATHS]
        text = "\n".join(t for t in texts if t)[:MAX_SCAN_CHARS]
        if not text:
            return {}
        return {
            "email": find_email(text),
            "phone": find_phone(text),
            "name": find_name(text),
            "summary": summary,
        }


DEFAULT_SOURCES: tuple[LeadSource, ...] = (
    StructuredOutputSource(),
    CallerQualificationsSource(),
    StructuredDataSource(),
    CustomerNumberSource(),
    FreeTextSource(),
)


# ── Public API ───────────────────────────────────────────────────────────────

def normalize_role(value: str) -> str:
    """Map free-text role onto owner/buyer/lender/general; "" when nothing matches."""
    lowered = (value or "").lower()
    for role, needles in ROLE_VOCABULARY:
        if any(needle in lowered for needle in needles):
            return role
    return ""


def build_summary(lead: Lead) -> str:
    """Short sentence from the qualification fields, used when no summary was sent."""
    bits = []
    if lead.role:
        bits.append(lead.role)
    if lead.inquiry:
        bits.append(lead.inquiry)
    if lead.market:
        bits.append(f"in {lead.market}")
    if lead.deal_size:
        bits.append(lead.deal_size)
    if lead.urgency:
        bits.append(lead.urgency)
    return ", ".join(bits)


def find_call_id(payload: dict) -> str | None:
    return first_text(payload, CALL_ID_PATHS) or None


def resolve_brokerage(payload: dict, default: str = DEFAULT_BROKERAGE) -> str:
    return first_text(payload, BROKERAGE_PATHS) or default


def event_type(payload: dict) -> str:
    return first_text(payload, ("type", "message.type")) or "unknown"


def merge_sources(
    payload: dict,
    sources: Iterable[LeadSource] = DEFAULT_SOURCES,
    merged: dict[str, str] | None = None,
) -> dict[str, str]:
    """Per field, the first non-empty value across sources in priority order."""
    merged = dict(merged) if merged else {field: "" for field in LEAD_FIELDS}
    for source in sources:
        missing = [f for f in LEAD_FIELDS if not merged[f]]
        if not missing:
            break
        found = source.lookup(payload)
        for field in missing:
            merged[field] = _text(found.get(field))
    return merged


def extract_lead(
    payload: dict,
    *,
    normalize_roles: bool = True,
    default_brokerage: str = DEFAULT_BROKERAGE,
    sources: Iterable[LeadSource] = DEFAULT_SOURCES,
) -> Extraction:
    """
    Build a normalized Lead plus call id, brokerage and event type.

    Never raises on unexpected shapes; unknown payloads yield an empty Lead.

    Fallback sources (caller-id number, free-text regex) only fill gaps once a
    structured source found a lead field, or on a final event. Mid-call
    messages carry the customer number and partial transcripts, and must not
    produce a lead on their own.
    """
    sources = tuple(sources)
    kind = event_type(payload)
    merged = merge_sources(payload, [s for s in sources if not s.fallback])
    if kind in FINAL_EVENT_TYPES or any(merged[f] for f in LEAD_FIELDS if f != "summary"):
        merged = merge_sources(payload, [s for s in sources if s.fallback], merged)
    if normalize_roles:
        merged["role"] = normalize_role(merged["role"])
    lead = Lead(**merged)
    if not lead.summary:
        lead.summary = build_summary(lead)

    return Extraction(
        lead=lead,
        call_id=find_call_id(payload),
        brokerage=resolve_brokerage(payload, default_brokerage),
        event_type=kind,
    )
