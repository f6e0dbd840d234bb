"""
Project gallery: image and video upload, delete and primary-image selection.
"""

from __future__ import annotations

import logging
import uuid
from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, Request, UploadFile

from portfolio_backend import audit
from portfolio_backend.auth import now_ms, require_admin
from portfolio_backend.config import Settings, get_settings
from portfolio_backend.db import DbClient
from portfolio_backend.dependencies import get_db_client, get_storage_client
from portfolio_backend.errors import ApiError
from portfolio_backend.records import AdminRecord, ProjectImageRecord, new_id
from portfolio_backend.routes.common import strip_or_none
from portfolio_backend.schemas import APIResponse, success_response
from portfolio_backend.storage import StorageClient
from portfolio_backend.uploads import (
    MAX_PROJECT_IMAGES,
    check_image_upload,
    check_video_upload,
    file_extension,
    validate_image,
    validate_video,
    video_extension,
)

logger = logging.getLogger(__name__)

router = APIRouter()

CAP_MESSAGE = f"Maximum of {MAX_PROJECT_IMAGES} images allowed per project"


def _require_image(db: DbClient, image_id: str) -> ProjectImageRecord:
    image = db.get_project_image(image_id)
    if image is None:
        raise ApiError(404, "Image not found")
    return image


def _object_path(project_id: str, ext: str, kind: Optional[str] = None) -> str:
    stem = f"project-{project_id}-{kind}" if kind else f"project-{project_id}"
    return f"{stem}-{now_ms()}-{uuid.uuid4().hex[:6]}.{ext}"


def _store_image(
    db: DbClient,
    storage: StorageClient,
    bucket: str,
    project_id: str,
    file_name: Optional[str],
    data: bytes,
    content_type: str,
    admin: AdminRecord,
    make_primary: bool,
    request: Request,
    alt_text: Optional[str] = None,
) -> ProjectImageRecord:
    path = _object_path(project_id, file_extension(file_name, content_type))
    storage.upload_bytes(bucket, path, data, content_type)
    image = db.add_project_image(
        ProjectImageRecord(
            id=new_id(),
            project_id=project_id,
            image_path=path,
            image_url=storage.public_url(bucket, path),
            alt_text=strip_or_none(alt_text),
            is_primary=make_primary,
            uploader_id=admin.id,
        )
    )
    if make_primary:
        db.set_primary_image(project_id, image.id)
        image.is_primary = True

    audit.log_file_upload(db, admin.id, file_name, f"{bucket}/{path}", len(data), request)
    return image


def _has_primary(images: List[ProjectImageRecord]) -> bool:
    return any(image.is_primary for image in images)


@router.get("/projects/{project_id}/images", response_model=APIResponse)
def list_project_images(project_id: str, db: DbClient = Depends(get_db_client)):
    if db.get_project(project_id) is None:
        raise ApiError(404, "Project not found")
    images = [image.as_dict() for image in db.list_project_images(project_id)]
    return success_response("Images loaded", images)


@router.post("/projects/{project_id}/images", response_model=APIResponse)
async def upload_project_image(
    project_id: str,
    request: Request,
    file: Optional[UploadFile] = File(None),
    is_primary: bool = Form(False),
    alt_text: Optional[str] = Form(None),
    admin: AdminRecord = Depends(require_admin),
    db: DbClient = Depends(get_db_client),
    storage: StorageClient = Depends(get_storage_client),
    settings: Settings = Depends(get_settings),
):
    """
    Store an image for a project.

    The first image of a project always becomes primary; later ones only when
    ``is_primary`` is set, in which case the previous primary is demoted.
    """
    if file is None:
        raise ApiError(400, "No file provided")
    check_image_upload(file.content_type, file.size)
    data = await file.read()
    content_type = validate_image(file.content_type, data)

    if db.get_project(project_id) is None:
        raise ApiError(404, "Project not found")
    existing = db.list_project_images(project_id)
    if len(existing) >= MAX_PROJECT_IMAGES:
        raise ApiError(400, CAP_MESSAGE)

    image = _store_image(
        db,
        storage,
        settings.project_images_bucket,
        project_id,
        file.filename,
        data,
        content_type,
        admin,
        is_primary or not _has_primary(existing),
        request,
        alt_text=alt_text,
    )
    return success_response("Image uploaded successfully", image.as_dict())


@router.post("/projects/{project_id}/images/batch", response_model=APIResponse)
async def upload_project_images(
    project_id: str,
    request: Request,
    files: Optional[List[UploadFile]] = File(None),
    admin: AdminRecord = Depends(require_admin),
    db: DbClient = Depends(get_db_client),
    storage: StorageClient = Depends(get_storage_client),
    settings: Settings = Depends(get_settings),
):
    """
    Store several images at once.

    Every file is validated and the cap is checked for the whole batch before
    anything is written. The first file becomes primary when the project has
    no primary image yet.
    """
    if not files:
        raise ApiError(400, "No files provided")
    if db.get_project(project_id) is None:
        raise ApiError(404, "Project not found")
    existing = db.list_project_images(project_id)
    if len(existing) + len(files) > MAX_PROJECT_IMAGES:
        raise ApiError(
            400,
            f"Cannot upload {len(files)} images. Maximum {MAX_PROJECT_IMAGES} images "
            f"allowed per project (currently {len(existing)})",
        )

    for upload in files:
        check_image_upload(upload.content_type, upload.size)
    validated = []
    for upload in files:
        data = await upload.read()
        validated.append((upload.filename, data, validate_image(upload.content_type, data)))

    bucket = settings.project_images_bucket
    needs_primary = not _has_primary(existing)
    stored = []
    for index, (file_name, data, content_type) in enumerate(validated):
        image = _store_image(
            db,
            storage,
            bucket,
            project_id,
            file_name,
            data,
            content_type,
            admin,
            needs_primary and index == 0,
            request,
        )
        stored.append(image.as_dict())

    logger.info("Admin %s uploaded %d images to project %s", admin.id, len(stored), project_id)
    return success_response(f"{len(stored)} image(s) uploaded successfully", stored)


@router.post("/projects/{project_id}/videos", response_model=APIResponse)
async def upload_project_video(
    project_id: str,
    request: Request,
    file: Optional[UploadFile] = File(None),
    alt_text: Optional[str] = Form(None),
    admin: AdminRecord = Depends(require_admin),
    db: DbClient = Depends(get_db_client),
    storage: StorageClient = Depends(get_storage_client),
    settings: Settings = Depends(get_settings),
):
    """Store a video in the project gallery. Videos never become primary."""
    if file is None:
        raise ApiError(400, "No file provided")
    check_video_upload(file.content_type, file.size)
    data = await file.read()
    content_type = validate_video(file.content_type, data)

    if db.get_project(project_id) is None:
        raise ApiError(404, "Project not found")
    if len(db.list_project_images(project_id)) >= MAX_PROJECT_IMAGES:
        raise ApiError(400, CAP_MESSAGE)

    bucket = settings.project_images_bucket
    path = _object_path(project_id, video_extension(content_type), kind="video")
    storage.upload_bytes(bucket, path, data, content_type)
    video = db.add_project_image(
        ProjectImageRecord(
            id=new_id(),
            project_id=project_id,
            image_path=path,
            image_url=storage.public_url(bucket, path),
            alt_text=strip_or_none(alt_text),
            type="video",
            uploader_id=admin.id,
        )
    )

    audit.log_file_upload(db, admin.id, file.filename, f"{bucket}/{path}", len(data), request)
    return success_response("Video uploaded successfully", video.as_dict())


@router.delete("/project-images/{image_id}", response_model=APIResponse)
def delete_project_image(
    image_id: str,
    request: Request,
    admin: AdminRecord = Depends(require_admin),
    db: DbClient = Depends(get_db_client),
    storage: StorageClient = Depends(get_storage_client),
    settings: Settings = Depends(get_settings),
):
    image = _require_image(db, image_id)
    bucket = settings.project_images_bucket
    storage.remove(bucket, [image.image_path])
    db.delete_project_image(image.id)

    if image.is_primary:
        remaining = [r for r in db.list_project_images(image.project_id) if r.type != "video"]
        if remaining:
            db.set_primary_image(image.project_id, remaining[0].id)
            logger.info("Promoted image %s to primary for project %s", remaining[0].id, image.project_id)

    file_name = image.image_path.rsplit("/", 1)[-1]
    audit.log_file_delete(db, admin.id, file_name, f"{bucket}/{image.image_path}", request)
    return success_response("Image deleted successfully")


@router.post("/project-images/{image_id}/primary", response_model=APIResponse)
def set_primary_image(
    image_id: str,
    request: Request,
    admin: AdminRecord = Depends(require_admin),
    db: DbClient = Depends(get_db_client),
):
    image = _require_image(db, image_id)
    if image.type == "video":
        raise ApiError(400, "Videos cannot be set as primary")
    if image.is_primary:
        raise ApiError(400, "Image is already set as primary")
    db.set_primary_image(image.project_id, image.id)
    audit.log_update(
        db,
        admin.id,
        "project_images",
        image.id,
        {"is_primary": False},
        {"is_primary": True},
        request,
    )
    return success_response("Primary image updated successfully")
