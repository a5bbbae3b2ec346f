"""REST API exposing the stat book load/save endpoints."""

from __future__ import annotations

import logging
from typing import AsyncContextManager, Callable, Optional

from fastapi import Body, FastAPI, HTTPException
from fastapi.responses import Response

from pyrink.config.settings import WorkbookSettings
from pyrink.errors import ConfigurationError, WorkbookSyncError
from pyrink.models import WorkbookSnapshot
from pyrink.sync import WorkbookSync
from pyrink.workbook.graph import open_graph_store
from pyrink.workbook.store import WorkbookStore


logger = logging.getLogger("uvicorn.error")

StoreFactory = Callable[[WorkbookSettings], AsyncContextManager[WorkbookStore]]

LOAD_FAILED = "Failed to load data from Excel."
SAVE_FAILED = "Failed to persist data to Excel."


def _failure(message: str, exc: Exception) -> HTTPException:
    return HTTPException(status_code=500, detail={"message": message, "detail": str(exc)})


def create_app(
    settings: Optional[WorkbookSettings] = None,
    store_factory: Optional[StoreFactory] = None,
) -> FastAPI:
    app = FastAPI(title="pyrink stat book")
    config_error: Optional[ConfigurationError] = None
    if settings is None:
        try:
            settings = WorkbookSettings.from_env()
        except ConfigurationError as exc:
            logger.error("Workbook configuration invalid: %s", exc)
            config_error = exc
    app.state.settings = settings
    open_store = store_factory or open_graph_store

    def require_settings(message: str) -> WorkbookSettings:
        if settings is None:
            raise _failure(message, config_error or ConfigurationError("Workbook settings missing"))
        return settings

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    @app.get("/data", response_model=WorkbookSnapshot)
    async def get_data() -> WorkbookSnapshot:
        active = require_settings(LOAD_FAILED)
        try:
            async with open_store(active) as store:
                return await WorkbookSync(active, store).load_tables()
        except WorkbookSyncError as exc:
            logger.error("get-data failed: %s", exc)
            raise _failure(LOAD_FAILED, exc) from exc

    @app.post("/data", status_code=204)
    async def save_data(payload: WorkbookSnapshot | None = Body(None)) -> Response:
        if payload is None:
            raise HTTPException(status_code=400, detail={"message": "Missing request body."})
        active = require_settings(SAVE_FAILED)
        try:
            async with open_store(active) as store:
                await WorkbookSync(active, store).save_tables(payload)
        except WorkbookSyncError as exc:
            logger.error("save-data failed: %s", exc)
            raise _failure(SAVE_FAILED, exc) from exc
        return Response(status_code=204)

    return app
