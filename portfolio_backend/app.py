"""
FastAPI application entry point for the portfolio backend.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from portfolio_backend.config import get_settings
from portfolio_backend.errors import register_exception_handlers
from portfolio_backend.routes import api_router, functions_router

CORS_HEADERS = [
    "Authorization",
    "Content-Type",
    "X-Client-Info",
    "Apikey",
    "X-Admin-Token",
    "X-Developer-Token",
]


def create_app() -> FastAPI:
    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app = FastAPI(title="Portfolio Backend (FastAPI)", version="0.1.0")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=CORS_HEADERS,
    )
    register_exception_handlers(app)
    app.include_router(api_router, prefix=settings.api_prefix)
    app.include_router(functions_router, prefix=settings.functions_prefix)

    @app.get("/healthz", include_in_schema=False)
    def healthz():
        return {"status": "ok"}

    return app


app = create_app()
