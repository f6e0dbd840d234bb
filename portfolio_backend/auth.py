"""
Admin and developer session tokens plus password hashing.

A session token is base64-encoded JSON ``{"id", "email", "timestamp"}`` where
``timestamp`` is the issue time in epoch milliseconds. Tokens are valid for
``admin_token_ttl_seconds`` (24 hours by default); a token exactly that old is
still accepted. When ``admin_token_secret`` is configured the payload also
carries ``sig``, an HMAC-SHA256 over ``"{id}:{timestamp}"``, and unsigned or
tampered tokens are rejected.
"""

from __future__ import annotations

import base64
import binascii
import hashlib
import hmac
import json
import math
import time
from dataclasses import dataclass
from typing import Optional

import bcrypt
from fastapi import Depends, Header

from portfolio_backend.config import get_settings
from portfolio_backend.db import DbClient
from portfolio_backend.dependencies import get_db_client
from portfolio_backend.errors import ApiError
from portfolio_backend.records import AdminRecord, DeveloperRecord

# bcrypt only considers the first 72 bytes of a password.
BCRYPT_MAX_BYTES = 72


class InvalidTokenError(Exception):
    """Token could not be decoded or failed its signature check."""


class ExpiredTokenError(InvalidTokenError):
    """Token decoded fine but is older than the configured TTL."""


@dataclass(frozen=True)
class TokenClaims:
    id: str
    email: Optional[str]
    timestamp: int


def now_ms() -> int:
    return int(time.time() * 1000)


def _signature(secret: str, subject_id: str, timestamp: int) -> str:
    message = f"{subject_id}:{timestamp}".encode("utf-8")
    return hmac.new(secret.encode("utf-8"), message, hashlib.sha256).hexdigest()


def issue_token(
    subject_id: str,
    email: Optional[str] = None,
    *,
    issued_at_ms: Optional[int] = None,
    secret: Optional[str] = None,
) -> str:
    if secret is None:
        secret = get_settings().admin_token_secret
    timestamp = now_ms() if issued_at_ms is None else issued_at_ms
    payload = {"id": subject_id, "email": email, "timestamp": timestamp}
    if secret:
        payload["sig"] = _signature(secret, subject_id, timestamp)
    raw = json.dumps(payload, separators=(",", ":")).encode("utf-8")
    return base64.b64encode(raw).decode("ascii")


def decode_token(
    token: str,
    *,
    current_ms: Optional[int] = None,
    ttl_seconds: Optional[int] = None,
    secret: Optional[str] = None,
) -> TokenClaims:
    settings = get_settings()
    if ttl_seconds is None:
        ttl_seconds = settings.admin_token_ttl_seconds
    if secret is None:
        secret = settings.admin_token_secret

    try:
        payload = json.loads(base64.b64decode(token.strip(), validate=True))
    except (binascii.Error, ValueError) as exc:
        raise InvalidTokenError("token is not base64-encoded JSON") from exc
    if not isinstance(payload, dict):
        raise InvalidTokenError("token payload is not an object")

    subject_id = payload.get("id")
    timestamp = payload.get("timestamp")
    if not isinstance(subject_id, str) or not subject_id:
        raise InvalidTokenError("token has no subject id")
    if isinstance(timestamp, bool) or not isinstance(timestamp, (int, float)):
        raise InvalidTokenError("token has no timestamp")
    # json accepts NaN and Infinity, and overflowing literals decode as inf.
    if not math.isfinite(timestamp):
        raise InvalidTokenError("token timestamp is not finite")
    timestamp = int(timestamp)

    if secret:
        signature = payload.get("sig")
        expected = _signature(secret, subject_id, timestamp)
        if not isinstance(signature, str) or not hmac.compare_digest(
            signature, expected
        ):
            raise InvalidTokenError("token signature mismatch")

    current = now_ms() if current_ms is None else current_ms
    if current - timestamp > ttl_seconds * 1000:
        raise ExpiredTokenError("token expired")

    email = payload.get("email")
    return TokenClaims(
        id=subject_id,
        email=email if isinstance(email, str) else None,
        timestamp=timestamp,
    )


def hash_password(plain_password: str) -> str:
    secret = plain_password.encode("utf-8")[:BCRYPT_MAX_BYTES]
    return bcrypt.hashpw(secret, bcrypt.gensalt()).decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    if not hashed_password:
        return False
    secret = plain_password.encode("utf-8")[:BCRYPT_MAX_BYTES]
    try:
        return bcrypt.checkpw(secret, hashed_password.encode("utf-8"))
    except ValueError:
        # Not a bcrypt hash (e.g. a row seeded before hashing was enforced).
        return False


def _claims_from_header(token: Optional[str], kind: str) -> TokenClaims:
    if not token:
        raise ApiError(401, f"{kind.capitalize()} token required")
    try:
        return decode_token(token)
    except ExpiredTokenError:
        raise ApiError(401, f"{kind.capitalize()} token expired")
    except InvalidTokenError:
        raise ApiError(401, f"Invalid {kind} token")


def require_admin(
    x_admin_token: Optional[str] = Header(default=None),
    db: DbClient = Depends(get_db_client),
) -> AdminRecord:
    """Resolve the ``X-Admin-Token`` header to an existing admin."""
    claims = _claims_from_header(x_admin_token, "admin")
    admin = db.get_admin(claims.id)
    if admin is None:
        raise ApiError(403, "Unauthorized")
    return admin


def require_developer(
    x_developer_token: Optional[str] = Header(default=None),
    db: DbClient = Depends(get_db_client),
) -> DeveloperRecord:
    """Resolve the ``X-Developer-Token`` header to an existing developer."""
    claims = _claims_from_header(x_developer_token, "developer")
    developer = db.get_developer(claims.id)
    if developer is None:
        raise ApiError(403, "Unauthorized")
    return developer
