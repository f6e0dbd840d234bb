"""
Admin file browser over the two public buckets.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query, Request

from portfolio_backend import audit
from portfolio_backend.auth import require_admin
from portfolio_backend.config import Settings, get_settings
from portfolio_backend.db import DbClient
from portfolio_backend.dependencies import get_db_client, get_storage_client
from portfolio_backend.errors import ApiError
from portfolio_backend.records import AdminRecord
from portfolio_backend.schemas import APIResponse, success_response
from portfolio_backend.storage import StorageClient

router = APIRouter()

IMAGE_EXTENSIONS = {"jpg", "jpeg", "png", "gif", "webp", "svg"}
VIDEO_EXTENSIONS = {"mp4", "webm", "mov", "avi", "mkv"}


def file_type(path: str) -> str:
    ext = path.rsplit(".", 1)[-1].lower() if "." in path else ""
    if ext in IMAGE_EXTENSIONS:
        return "image"
    if ext in VIDEO_EXTENSIONS:
        return "video"
    return "other"


def _known_bucket(bucket: str, settings: Settings) -> str:
    if bucket not in (settings.developer_profiles_bucket, settings.project_images_bucket):
        raise ApiError(404, "Unknown bucket")
    return bucket


@router.get("/{bucket}", response_model=APIResponse)
def list_files(
    bucket: str,
    prefix: str = Query(""),
    admin: AdminRecord = Depends(require_admin),
    storage: StorageClient = Depends(get_storage_client),
    settings: Settings = Depends(get_settings),
):
    bucket = _known_bucket(bucket, settings)
    files = [
        {
            "name": path.rsplit("/", 1)[-1],
            "path": path,
            "url": storage.public_url(bucket, path),
            "type": file_type(path),
        }
        for path in storage.list_objects(bucket, prefix)
    ]
    return success_response(f"Found {len(files)} files", files)


@router.get("/{bucket}/sign-url", response_model=APIResponse)
def sign_file_url(
    bucket: str,
    path: str = Query(..., min_length=1, description="Object path in the bucket"),
    expires_in: int = Query(3600, ge=60, le=86400),
    admin: AdminRecord = Depends(require_admin),
    storage: StorageClient = Depends(get_storage_client),
    settings: Settings = Depends(get_settings),
):
    bucket = _known_bucket(bucket, settings)
    url = storage.presign_get(bucket, path, expires_in=expires_in)
    return success_response("Signed URL created", {"url": url, "expires_in": expires_in})


@router.delete("/{bucket}", response_model=APIResponse)
def delete_file(
    bucket: str,
    request: Request,
    path: str = Query(..., min_length=1),
    admin: AdminRecord = Depends(require_admin),
    db: DbClient = Depends(get_db_client),
    storage: StorageClient = Depends(get_storage_client),
    settings: Settings = Depends(get_settings),
):
    bucket = _known_bucket(bucket, settings)
    if path not in storage.list_objects(bucket, path):
        raise ApiError(404, "File not found")
    storage.remove(bucket, [path])
    audit.log_file_delete(db, admin.id, path.rsplit("/", 1)[-1], f"{bucket}/{path}", request)
    return success_response("File deleted successfully")
