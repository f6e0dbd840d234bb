from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from portfolio_backend.auth import require_admin
from portfolio_backend.db import DbClient
from portfolio_backend.dependencies import get_db_client
from portfolio_backend.records import AdminRecord
from portfolio_backend.schemas import APIResponse, success_response

router = APIRouter()


@router.get("", response_model=APIResponse)
def list_audit_logs(
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
    admin: AdminRecord = Depends(require_admin),
    db: DbClient = Depends(get_db_client),
):
    admins: dict = {}
    entries = []
    for record in db.list_audit_logs(limit=limit, offset=offset):
        entry = record.as_dict()
        if record.admin_id and record.admin_id not in admins:
            admins[record.admin_id] = db.get_admin(record.admin_id)
        author = admins.get(record.admin_id)
        entry["admin"] = {"username": author.username, "email": author.email} if author else None
        entries.append(entry)
    return success_response("Audit logs loaded", entries)
