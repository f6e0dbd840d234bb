"""
Audit trail for admin mutations.

Audit rows are written after the mutation they describe, outside of any
transaction: a failed write is logged and the request still succeeds.
"""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import Request

from portfolio_backend.db import DbClient
from portfolio_backend.records import AuditLogRecord, new_id

logger = logging.getLogger(__name__)


def client_ip(request: Optional[Request]) -> Optional[str]:
    if request is None:
        return None
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        first_hop = forwarded.split(",")[0].strip()
        if first_hop:
            return first_hop
    return request.client.host if request.client else None


def record_audit(
    db: DbClient,
    *,
    admin_id: Optional[str],
    action: str,
    table_name: Optional[str] = None,
    record_id: Optional[str] = None,
    old_values: Optional[dict] = None,
    new_values: Optional[dict] = None,
    request: Optional[Request] = None,
) -> None:
    record = AuditLogRecord(
        id=new_id(),
        admin_id=admin_id,
        action=action,
        table_name=table_name,
        record_id=record_id,
        old_values=old_values,
        new_values=new_values,
        ip_address=client_ip(request),
        user_agent=request.headers.get("user-agent") if request else None,
    )
    try:
        db.add_audit_log(record)
    except Exception:
        logger.warning("Failed to write audit entry %s", action, exc_info=True)


def log_create(db, admin_id, table_name, record_id, new_values, request=None) -> None:
    record_audit(
        db,
        admin_id=admin_id,
        action=f"CREATE_{table_name.upper()}",
        table_name=table_name,
        record_id=record_id,
        new_values=new_values,
        request=request,
    )


def log_update(
    db, admin_id, table_name, record_id, old_values, new_values, request=None
) -> None:
    record_audit(
        db,
        admin_id=admin_id,
        action=f"UPDATE_{table_name.upper()}",
        table_name=table_name,
        record_id=record_id,
        old_values=old_values,
        new_values=new_values,
        request=request,
    )


def log_delete(db, admin_id, table_name, record_id, old_values, request=None) -> None:
    record_audit(
        db,
        admin_id=admin_id,
        action=f"DELETE_{table_name.upper()}",
        table_name=table_name,
        record_id=record_id,
        old_values=old_values,
        request=request,
    )


def log_file_upload(db, admin_id, file_name, file_path, file_size, request=None) -> None:
    record_audit(
        db,
        admin_id=admin_id,
        action="UPLOAD_FILE",
        new_values={
            "file_name": file_name,
            "file_path": file_path,
            "file_size": file_size,
        },
        request=request,
    )


def log_file_delete(db, admin_id, file_name, file_path, request=None) -> None:
    record_audit(
        db,
        admin_id=admin_id,
        action="DELETE_FILE",
        old_values={"file_name": file_name, "file_path": file_path},
        request=request,
    )
