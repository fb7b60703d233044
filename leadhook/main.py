"""
Vapi Lead Webhook — FastAPI Service

Receives call-completion webhooks, extracts the caller's lead details and
appends one row per call to a Google Sheet.
"""

import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI

from leadhook.config import ConfigError, Settings
from leadhook.config import settings as default_settings
from leadhook.db.session import init_db
from leadhook.routes import health, webhook
from leadhook.services.dedupe import SqlCallRegistry, build_call_registry
from leadhook.services.sheets import build_sheet_writer

logger = logging.getLogger("leadhook")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Build the sheet writer (raises ConfigError) and the de-dupe table if needed."""
    state = app.state
    registry = state.call_registry
    try:
        if state.sheet_writer is None:
            state.sheet_writer = build_sheet_writer(state.settings)
        if isinstance(registry, SqlCallRegistry) and registry.engine is not None:
            await init_db(registry.engine)
        logger.info(
            "Writing leads to %s (%s), de-dupe store: %s",
            state.settings.spreadsheet_id,
            state.settings.sheet_range,
            type(registry).__name__,
        )
        yield
    finally:
        await registry.close()


def create_app(
    settings: Settings | None = None,
    *,
    sheet_writer=None,
    call_registry=None,
) -> FastAPI:
    settings = settings or default_settings
    app = FastAPI(
        title="Vapi Lead Webhook",
        description="Voice-call leads appended to Google Sheets.",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.sheet_writer = sheet_writer
    app.state.call_registry = call_registry or build_call_registry(settings)

    app.include_router(webhook.router, prefix="/vapi")
    app.include_router(health.router)
    return app


app = create_app()


def run() -> None:
    """Console entry point: validate configuration, then serve."""
    settings = Settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    try:
        writer = build_sheet_writer(settings)
    except ConfigError as e:
        logger.error("Startup aborted: %s", e)
        raise SystemExit(1) from e

    uvicorn.run(
        create_app(settings, sheet_writer=writer),
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    run()
