"""Module: main."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.middleware.sessions import SessionMiddleware

from vetclinic.api.v1.api import api_router
from vetclinic.core.config import Settings, settings
from vetclinic.core.errors import ClinicError
from vetclinic.core.logging import setup_logging
from vetclinic.db.init_db import init_db

logger = logging.getLogger(__name__)


def create_app(app_settings: Settings = settings) -> FastAPI:
    setup_logging(app_settings.log_level, app_settings.log_json)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if app_settings.create_tables_on_startup:
            init_db()
            logger.info("Database schema ensured")
        yield

    app = FastAPI(title="Vet Clinic API", version="0.1.0", lifespan=lifespan)

    app.include_router(api_router, prefix="/api/v1")

    app.add_middleware(
        CORSMiddleware,
        allow_origins=app_settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    # Signed-cookie session; holds the clinician's diagnosis access code.
    app.add_middleware(
        SessionMiddleware,
        secret_key=app_settings.session_secret,
        max_age=app_settings.session_max_age_seconds,
        same_site="lax",
    )

    @app.exception_handler(ClinicError)
    async def clinic_error_handler(request: Request, exc: ClinicError):
        if exc.status_code >= 500:
            logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    return app


app = create_app()
