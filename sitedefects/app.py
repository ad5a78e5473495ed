from __future__ import annotations

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from sitedefects.api.router import router as api_router
from sitedefects.core.config import settings
from sitedefects.services.store_service import DefectStore, build_store


def create_app(store: DefectStore | None = None) -> FastAPI:
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app = FastAPI(title=f"{settings.project_name} Defect Tracker API", version="0.1.0")
    app.state.store = store if store is not None else build_store(settings)

    allow_origins = settings.cors_allow_origins.split(",")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=allow_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(api_router, prefix="/v1")
    return app


app = create_app()
