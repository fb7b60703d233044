"""Liveness endpoints for the hosting platform."""

from fastapi import APIRouter, Request
from fastapi.responses import PlainTextResponse

router = APIRouter(tags=["health"])


@router.get("/", response_class=PlainTextResponse)
async def root():
    return "Webhook running"


@router.get("/healthz")
@router.get("/health")
async def health(request: Request):
    """Health check for load balancers; echoes the configured sheet target."""
    settings = request.app.state.settings
    return {
        "ok": True,
        "status": "ok",
        "spreadsheet_id": settings.spreadsheet_id,
        "sheet_range": settings.sheet_range,
    }
