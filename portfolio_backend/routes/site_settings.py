from __future__ import annotations

import logging

from fastapi import APIRouter, Depends

from portfolio_backend.db import DbClient
from portfolio_backend.dependencies import get_db_client
from portfolio_backend.errors import ApiError
from portfolio_backend.schemas import APIResponse, success_response
from portfolio_backend.site_defaults import default_settings

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("", response_model=APIResponse)
def get_site_settings(db: DbClient = Depends(get_db_client)):
    """Every setting as a flat key -> value object, seeding defaults on first use."""
    records = db.list_settings()
    if not records:
        logger.info("Site settings empty; seeding defaults")
        db.upsert_settings(default_settings())
        records = db.list_settings()
    return success_response("Settings loaded", {record.key: record.value for record in records})


@router.get("/{key}", response_model=APIResponse)
def get_site_setting(key: str, db: DbClient = Depends(get_db_client)):
    record = db.get_setting(key)
    if record is None:
        raise ApiError(404, "Setting not found")
    return success_response(
        "Setting loaded",
        {
            "key": record.key,
            "value": record.value,
            "category": record.category,
            "description": record.description,
        },
    )
