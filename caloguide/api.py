# -*- coding: utf-8 -*-
"""
Calo guided-tour API

Per-user tour completion flags for the mobile client.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from . import __version__
from .app_db import init_app_db
from .config import settings
from .tutorial.api import router as tutorial_router

logger = logging.getLogger(__name__)

app = FastAPI(
    title="Calo guided tour",
    description="Tour gating and completion flags",
    version=__version__,
    docs_url="/api/docs",
    redoc_url="/api/redoc",
    openapi_url="/api/openapi.json",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.on_event("startup")
def _startup_init_db() -> None:
    init_app_db(settings.app_db_path)


# Ensure the app DB exists even when lifespan events are not triggered (e.g. some test clients).
init_app_db(settings.app_db_path)

app.include_router(tutorial_router)


@app.get("/api/health")
def health() -> dict:
    return {"status": "ok", "version": __version__}


if __name__ == "__main__":
    import uvicorn

    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logger.info("Serving on %s:%d (db: %s)", settings.host, settings.port, settings.app_db_path)
    uvicorn.run("caloguide.api:app", host=settings.host, port=settings.port, reload=False)
