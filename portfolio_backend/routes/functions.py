"""
Admin-only handlers mounted under the functions prefix.

These keep the request shape of the hosted edge functions they replace: one
path per handler, the operation chosen by ``?action=`` and the HTTP method,
JSON bodies, and the ``X-Admin-Token`` header for authentication.
"""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, Query, Request, UploadFile

from portfolio_backend import audit
from portfolio_backend.auth import hash_password, require_admin
from portfolio_backend.config import Settings, get_settings
from portfolio_backend.db import DbClient, DuplicateRecordError
from portfolio_backend.dependencies import get_db_client, get_storage_client
from portfolio_backend.errors import ApiError
from portfolio_backend.records import AdminRecord, DeveloperRecord, new_id
from portfolio_backend.routes.common import json_body, parse_body, strip_or_none
from portfolio_backend.schemas import (
    APIResponse,
    DeveloperCreatePayload,
    DeveloperDeletePayload,
    DeveloperUpdatePayload,
    UploadResponse,
    success_response,
)
from portfolio_backend.site_defaults import default_settings
from portfolio_backend.storage import StorageClient, storage_path_from_url
from portfolio_backend.uploads import check_image_upload, file_extension, validate_image

logger = logging.getLogger(__name__)

router = APIRouter()

DUPLICATE_EMAIL_MESSAGE = "A developer with this email already exists"
_TRIMMED_DEVELOPER_FIELDS = ("github_link", "linkedin", "title", "profile_picture", "bio")


def _create_developer(
    body: dict, db: DbClient, admin: AdminRecord, request: Request
) -> APIResponse:
    payload = parse_body(DeveloperCreatePayload, body)
    name = (payload.name or "").strip()
    email = (payload.email or "").strip().lower()
    if not name or not email or not payload.password:
        raise ApiError(400, "Name, email, and password are required")

    if db.get_developer_by_email(email):
        raise ApiError(409, DUPLICATE_EMAIL_MESSAGE)

    record = DeveloperRecord(
        id=new_id(),
        name=name,
        email=email,
        password_hash=hash_password(payload.password),
        skills=payload.skills or [],
        display_order=payload.display_order or 0,
        **{field: strip_or_none(getattr(payload, field)) for field in _TRIMMED_DEVELOPER_FIELDS},
    )
    try:
        developer = db.create_developer(record)
    except DuplicateRecordError:
        raise ApiError(409, DUPLICATE_EMAIL_MESSAGE)

    logger.info("Admin %s created developer %s", admin.id, developer.id)
    audit.log_create(db, admin.id, "developers", developer.id, developer.as_dict(), request)
    return success_response("Developer created successfully", developer.as_dict())


def _update_developer(
    body: dict, db: DbClient, admin: AdminRecord, request: Request
) -> APIResponse:
    payload = parse_body(DeveloperUpdatePayload, body)
    if not payload.id:
        raise ApiError(400, "Developer ID is required")

    existing = db.get_developer(payload.id)
    if existing is None:
        raise ApiError(404, "Developer not found")
    before = existing.as_dict()

    provided = payload.model_dump(exclude_unset=True)
    provided.pop("id", None)
    changes: dict = {}
    if "name" in provided:
        name = (provided["name"] or "").strip()
        if not name:
            raise ApiError(400, "Developer name cannot be empty")
        changes["name"] = name
    if "email" in provided:
        email = (provided["email"] or "").strip().lower()
        if not email:
            raise ApiError(400, "Developer email cannot be empty")
        other = db.get_developer_by_email(email)
        if other and other.id != existing.id:
            raise ApiError(409, DUPLICATE_EMAIL_MESSAGE)
        changes["email"] = email
    # A blank password leaves the current one in place.
    password = (provided.get("password") or "").strip()
    if password:
        changes["password_hash"] = hash_password(password)
    for field in _TRIMMED_DEVELOPER_FIELDS:
        if field in provided:
            changes[field] = strip_or_none(provided[field])
    if "skills" in provided:
        changes["skills"] = provided["skills"] or []
    if provided.get("display_order") is not None:
        changes["display_order"] = provided["display_order"]

    try:
        developer = db.update_developer(existing.id, changes)
    except DuplicateRecordError:
        raise ApiError(409, DUPLICATE_EMAIL_MESSAGE)
    if developer is None:
        raise ApiError(404, "Developer not found")

    after = developer.as_dict()
    changed = [key for key in changes if key in after]
    new_values = {key: after[key] for key in changed}
    if "password_hash" in changes:
        new_values["password_changed"] = True
    audit.log_update(
        db,
        admin.id,
        "developers",
        developer.id,
        {key: before[key] for key in changed},
        new_values,
        request,
    )
    return success_response("Developer updated successfully", after)


def _delete_developer(
    body: dict, db: DbClient, admin: AdminRecord, request: Request
) -> APIResponse:
    payload = parse_body(DeveloperDeletePayload, body)
    if not payload.id:
        raise ApiError(400, "Developer ID is required")

    developer = db.get_developer(payload.id)
    if developer is None:
        raise ApiError(404, "Developer not found")
    if db.list_developer_projects(developer.id):
        raise ApiError(
            409,
            "Cannot delete developer who is associated with projects. "
            "Remove project associations first.",
        )

    db.delete_developer(developer.id)
    logger.info("Admin %s deleted developer %s", admin.id, developer.id)
    audit.log_delete(db, admin.id, "developers", developer.id, developer.as_dict(), request)
    return success_response("Developer deleted successfully")


@router.api_route(
    "/admin-developer-management",
    methods=["GET", "POST", "PUT", "DELETE"],
    response_model=APIResponse,
)
async def admin_developer_management(
    request: Request,
    action: Optional[str] = Query(None),
    admin: AdminRecord = Depends(require_admin),
    db: DbClient = Depends(get_db_client),
):
    """
    Create, update or delete a developer.

    ``POST ?action=create``, ``PUT ?action=update`` and ``DELETE ?action=delete``
    each take a JSON body; any other combination is rejected.
    """
    if request.method == "POST" and action == "create":
        return _create_developer(await json_body(request), db, admin, request)
    if request.method == "PUT" and action == "update":
        return _update_developer(await json_body(request), db, admin, request)
    if request.method == "DELETE" and action == "delete":
        return _delete_developer(await json_body(request), db, admin, request)
    raise ApiError(400, "Invalid action or method")


@router.api_route(
    "/admin-site-settings", methods=["POST", "PUT"], response_model=APIResponse
)
async def admin_site_settings(
    request: Request,
    action: Optional[str] = Query(None),
    admin: AdminRecord = Depends(require_admin),
    db: DbClient = Depends(get_db_client),
):
    if action == "update":
        body = await json_body(request)
        previous = {}
        for key in body:
            existing = db.get_setting(key)
            if existing is not None:
                previous[key] = existing.value
        db.upsert_settings([{"key": key, "value": value} for key, value in body.items()])
        audit.record_audit(
            db,
            admin_id=admin.id,
            action="UPDATE_SITE_SETTINGS",
            table_name="site_settings",
            old_values=previous or None,
            new_values=body,
            request=request,
        )
        return success_response("Settings updated successfully")

    if action == "reset":
        db.upsert_settings(default_settings())
        audit.record_audit(
            db,
            admin_id=admin.id,
            action="RESET_SITE_SETTINGS",
            table_name="site_settings",
            new_values={"reset_to_defaults": True},
            request=request,
        )
        return success_response("Settings reset successfully")

    raise ApiError(400, "Invalid action")


@router.post("/upload-developer-profile", response_model=UploadResponse)
async def upload_developer_profile(
    request: Request,
    file: Optional[UploadFile] = File(None),
    developer_id: Optional[str] = Form(None, alias="developerId"),
    admin: AdminRecord = Depends(require_admin),
    db: DbClient = Depends(get_db_client),
    storage: StorageClient = Depends(get_storage_client),
    settings: Settings = Depends(get_settings),
):
    """Replace a developer's profile picture with an uploaded image."""
    if file is None:
        raise ApiError(400, "No file provided")
    if not developer_id:
        raise ApiError(400, "Developer ID is required")

    check_image_upload(file.content_type, file.size)
    data = await file.read()
    content_type = validate_image(file.content_type, data)

    developer = db.get_developer(developer_id)
    if developer is None:
        raise ApiError(404, "Developer not found")

    bucket = settings.developer_profiles_bucket
    file_name = f"developer-{developer.id}.{file_extension(file.filename, content_type)}"

    old_path = storage_path_from_url(developer.profile_picture, bucket)
    if old_path and old_path.rsplit("/", 1)[-1].startswith("developer-"):
        storage.remove(bucket, [old_path])

    storage.upload_bytes(bucket, file_name, data, content_type, upsert=True)
    url = storage.public_url(bucket, file_name)

    # The object is already stored; a failed row update leaves it orphaned.
    if db.update_developer(developer.id, {"profile_picture": url}) is None:
        raise ApiError(404, "Developer not found")

    audit.log_file_upload(db, admin.id, file.filename, f"{bucket}/{file_name}", len(data), request)
    return UploadResponse(
        success=True, url=url, message="Profile picture uploaded successfully"
    )
