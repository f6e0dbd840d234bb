"""
Login and token verification for admins and developers.
"""

from __future__ import annotations

import logging
import time

from fastapi import APIRouter, Depends

from portfolio_backend.auth import issue_token, require_admin, require_developer, verify_password
from portfolio_backend.config import Settings, get_settings
from portfolio_backend.db import DbClient
from portfolio_backend.dependencies import get_db_client
from portfolio_backend.errors import ApiError
from portfolio_backend.records import AdminRecord, DeveloperRecord
from portfolio_backend.schemas import APIResponse, LoginRequest, success_response

logger = logging.getLogger(__name__)

router = APIRouter()

INVALID_CREDENTIALS = "Invalid email or password"


def _credentials(payload: LoginRequest) -> tuple[str, str]:
    email = (payload.email or "").strip().lower()
    password = payload.password or ""
    if not email or not password:
        raise ApiError(400, "Email and password are required")
    return email, password


@router.post("/login", response_model=APIResponse)
def admin_login(
    payload: LoginRequest,
    db: DbClient = Depends(get_db_client),
    settings: Settings = Depends(get_settings),
):
    """
    Exchange admin credentials for an admin token.

    Repeated failures lock the account for ``lockout_minutes``; a login after
    the lock has lapsed starts counting from zero again.
    """
    email, password = _credentials(payload)
    admin = db.get_admin_by_email(email)
    if admin is None:
        raise ApiError(401, INVALID_CREDENTIALS)

    now = time.time()
    attempts = admin.login_attempts
    if admin.locked_until:
        if admin.locked_until > now:
            raise ApiError(423, "Account temporarily locked")
        attempts = 0

    if not verify_password(password, admin.password_hash):
        attempts += 1
        locked_until = None
        if attempts >= settings.max_login_attempts:
            locked_until = now + settings.lockout_minutes * 60
            logger.warning("Admin %s locked after %d failed logins", admin.id, attempts)
        db.update_admin_login_state(
            admin.id, login_attempts=attempts, locked_until=locked_until
        )
        raise ApiError(401, INVALID_CREDENTIALS)

    db.update_admin_login_state(
        admin.id, login_attempts=0, locked_until=None, last_login=now
    )
    logger.info("Admin %s logged in", admin.id)
    profile = admin.as_dict()
    profile["last_login"] = now
    return success_response(
        "Login successful",
        {"token": issue_token(admin.id, admin.email), "admin": profile},
    )


@router.get("/verify", response_model=APIResponse)
def verify_admin(admin: AdminRecord = Depends(require_admin)):
    return success_response("Token valid", admin.as_dict())


@router.post("/developer/login", response_model=APIResponse)
def developer_login(payload: LoginRequest, db: DbClient = Depends(get_db_client)):
    email, password = _credentials(payload)
    developer = db.get_developer_by_email(email)
    if developer is None or not verify_password(password, developer.password_hash):
        raise ApiError(401, INVALID_CREDENTIALS)
    logger.info("Developer %s logged in", developer.id)
    return success_response(
        "Login successful",
        {
            "token": issue_token(developer.id, developer.email),
            "developer": developer.as_dict(),
        },
    )


@router.get("/developer/verify", response_model=APIResponse)
def verify_developer(developer: DeveloperRecord = Depends(require_developer)):
    return success_response("Token valid", developer.as_dict())
