"""
POST /vapi/webhook — call-completion events to one sheet row.

Always answers 200 so the platform never retries; failures are reported in
the body as {"ok": false, "error": ...}.
"""

import json
import logging

from fastapi import APIRouter, Request

from leadhook.services.extraction import extract_lead
from leadhook.services.rows import build_row

logger = logging.getLogger(__name__)

router = APIRouter(tags=["webhook"])


@router.post("/webhook")
async def vapi_webhook(request: Request):
    """
    Extract a lead from the webhook body and append it to the sheet.

    - Gated: events without any lead field are acknowledged and skipped.
    - De-duplicated: a call id already written is acknowledged and skipped.
    - Body is parsed as JSON whatever the content type (text/plain included).
    """
    state = request.app.state
    settings = state.settings

    # ── 1. Parse body ────────────────────────────────────────────────────────
    body = await request.body()
    if len(body) > settings.max_payload_bytes:
        return {"ok": False, "error": f"Payload too large (max {settings.max_payload_bytes} bytes)"}
    try:
        payload = json.loads(body) if body.strip() else {}
    except ValueError:
        return {"ok": False, "error": "Invalid JSON body"}
    if not isinstance(payload, dict):
        return {"ok": False, "error": "Payload must be a JSON object"}

    call_id = None
    registry = state.call_registry
    try:
        # ── 2. Extract + gate ────────────────────────────────────────────────
        extraction = extract_lead(
            payload,
            normalize_roles=settings.normalize_roles,
            default_brokerage=settings.default_brokerage,
        )
        if not extraction.lead.is_meaningful:
            logger.info("Skipping event=%s: no lead data", extraction.event_type)
            return {"ok": True, "skipped": f"no lead data (event={extraction.event_type})"}

        # ── 3. De-dupe ───────────────────────────────────────────────────────
        if extraction.call_id:
            if not await registry.claim(extraction.call_id):
                logger.info("Skipping duplicate call %s", extraction.call_id)
                return {"ok": True, "skipped": f"duplicate call {extraction.call_id}"}
            call_id = extraction.call_id

        # ── 4. Append ────────────────────────────────────────────────────────
        writer = state.sheet_writer
        if writer is None:
            raise RuntimeError("Sheet writer is not configured")
        row = build_row(
            extraction.lead,
            brokerage=extraction.brokerage,
            raw_max_chars=settings.raw_max_chars,
        )
        await writer.append_row(row)
    except Exception as e:
        logger.exception("Webhook error")
        if call_id:
            try:
                await registry.release(call_id)
            except Exception:
                logger.exception("Failed to release call id %s", call_id)
        return {"ok": False, "error": str(e)}

    return {"ok": True, "wrote": True}
