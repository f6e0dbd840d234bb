from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Request

from portfolio_backend import audit
from portfolio_backend.auth import require_admin, require_developer
from portfolio_backend.db import DbClient
from portfolio_backend.dependencies import get_db_client
from portfolio_backend.errors import ApiError
from portfolio_backend.records import AdminRecord, DeveloperRecord
from portfolio_backend.routes.common import strip_or_none
from portfolio_backend.schemas import (
    APIResponse,
    DeveloperSelfUpdate,
    OrderUpdateRequest,
    success_response,
)

logger = logging.getLogger(__name__)

router = APIRouter()


def _with_projects(db: DbClient, developer: DeveloperRecord) -> dict:
    data = developer.as_dict()
    data["projects"] = [p.as_dict() for p in db.list_developer_projects(developer.id)]
    return data


@router.get("", response_model=APIResponse)
def list_developers(db: DbClient = Depends(get_db_client)):
    developers = [d.as_dict() for d in db.list_developers()]
    return success_response("Developers loaded", developers)


@router.get("/me", response_model=APIResponse)
def get_own_profile(
    developer: DeveloperRecord = Depends(require_developer),
    db: DbClient = Depends(get_db_client),
):
    return success_response("Profile loaded", _with_projects(db, developer))


@router.put("/me", response_model=APIResponse)
def update_own_profile(
    payload: DeveloperSelfUpdate,
    developer: DeveloperRecord = Depends(require_developer),
    db: DbClient = Depends(get_db_client),
):
    """Developers may edit their public profile but not email, password or order."""
    changes = {}
    for field, value in payload.model_dump(exclude_unset=True).items():
        if field == "skills":
            changes[field] = value or []
        else:
            changes[field] = strip_or_none(value)
    if "name" in changes and not changes["name"]:
        raise ApiError(400, "Developer name cannot be empty")

    updated = db.update_developer(developer.id, changes) if changes else developer
    if updated is None:
        raise ApiError(404, "Developer not found")
    logger.info("Developer %s updated their profile (%s)", developer.id, ", ".join(changes))
    return success_response("Profile updated successfully", updated.as_dict())


@router.put("/order", response_model=APIResponse)
def update_developer_order(
    payload: OrderUpdateRequest,
    request: Request,
    admin: AdminRecord = Depends(require_admin),
    db: DbClient = Depends(get_db_client),
):
    failed = [
        item.id
        for item in payload.orders
        if not db.set_developer_order(item.id, item.display_order)
    ]
    if len(failed) == len(payload.orders) and failed:
        raise ApiError(404, f"Failed to update {len(failed)} developer order(s)")

    audit.record_audit(
        db,
        admin_id=admin.id,
        action="REORDER_DEVELOPERS",
        table_name="developers",
        new_values={"orders": [item.model_dump() for item in payload.orders]},
        request=request,
    )
    if failed:
        return success_response(
            f"Failed to update {len(failed)} developer order(s)", {"failed": failed}
        )
    return success_response("Developer order updated", {"failed": []})


@router.get("/{developer_id}", response_model=APIResponse)
def get_developer(developer_id: str, db: DbClient = Depends(get_db_client)):
    developer = db.get_developer(developer_id)
    if developer is None:
        raise ApiError(404, "Developer not found")
    return success_response("Developer loaded", developer.as_dict())


@router.get("/{developer_id}/projects", response_model=APIResponse)
def get_developer_projects(developer_id: str, db: DbClient = Depends(get_db_client)):
    if db.get_developer(developer_id) is None:
        raise ApiError(404, "Developer not found")
    projects = [p.as_dict() for p in db.list_developer_projects(developer_id)]
    return success_response("Projects loaded", projects)
