"""
Project catalogue: public listing plus admin create, update, delete and import.
"""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Request

from portfolio_backend import audit, github
from portfolio_backend.auth import require_admin
from portfolio_backend.config import Settings, get_settings
from portfolio_backend.db import DbClient
from portfolio_backend.dependencies import get_db_client, get_storage_client
from portfolio_backend.errors import ApiError
from portfolio_backend.records import AdminRecord, ProjectImageRecord, ProjectRecord, new_id
from portfolio_backend.routes.common import (
    ensure_developers_exist,
    project_details,
    strip_or_none,
)
from portfolio_backend.schemas import (
    APIResponse,
    GithubImportRequest,
    OrderUpdateRequest,
    ProjectPayload,
    success_response,
)
from portfolio_backend.storage import StorageClient, storage_path_from_url
from portfolio_backend.uploads import MAX_PROJECT_IMAGES

logger = logging.getLogger(__name__)

router = APIRouter()

_TRIMMED_PROJECT_FIELDS = ("description", "github_link", "live_demo_link", "thumbnail")


def _require_project(db: DbClient, project_id: str) -> ProjectRecord:
    project = db.get_project(project_id)
    if project is None:
        raise ApiError(404, "Project not found")
    return project


def _thumbnail_image(
    db: DbClient,
    settings: Settings,
    project_id: str,
    thumbnail: Optional[str],
    uploader_id: str,
) -> Optional[ProjectImageRecord]:
    """
    Work out which gallery row a thumbnail in the image bucket maps to.

    Returns the project's existing row for it, a new unsaved row when the
    object is one of this project's own uploads, or None. Objects named for
    another project are never recorded so that deleting this project cannot
    remove them.

    Raises:
        ApiError: 400 when a new row would exceed the gallery cap.
    """
    path = storage_path_from_url(thumbnail, settings.project_images_bucket)
    if not path:
        return None
    images = db.list_project_images(project_id)
    for image in images:
        if image.image_url == thumbnail or image.image_path == path:
            return image if image.type != "video" else None
    if not path.rsplit("/", 1)[-1].startswith(f"project-{project_id}-"):
        logger.info("Thumbnail %s belongs to another project; keeping the URL only", path)
        return None
    if len(images) >= MAX_PROJECT_IMAGES:
        raise ApiError(400, f"Maximum of {MAX_PROJECT_IMAGES} images allowed per project")
    return ProjectImageRecord(
        id=new_id(),
        project_id=project_id,
        image_path=path,
        image_url=thumbnail,
        uploader_id=uploader_id,
    )


def _make_primary(db: DbClient, project_id: str, image: ProjectImageRecord) -> None:
    if db.get_project_image(image.id) is None:
        image = db.add_project_image(image)
    if not image.is_primary:
        db.set_primary_image(project_id, image.id)


@router.get("", response_model=APIResponse)
def list_published_projects(db: DbClient = Depends(get_db_client)):
    projects = [project_details(db, p) for p in db.list_projects(published_only=True)]
    return success_response("Projects loaded", projects)


@router.get("/all", response_model=APIResponse)
def list_all_projects(
    admin: AdminRecord = Depends(require_admin),
    db: DbClient = Depends(get_db_client),
):
    projects = [project_details(db, p) for p in db.list_projects()]
    return success_response("Projects loaded", projects)


@router.put("/order", response_model=APIResponse)
def update_project_order(
    payload: OrderUpdateRequest,
    request: Request,
    admin: AdminRecord = Depends(require_admin),
    db: DbClient = Depends(get_db_client),
):
    failed = [
        item.id
        for item in payload.orders
        if not db.set_project_order(item.id, item.display_order)
    ]
    if len(failed) == len(payload.orders) and failed:
        raise ApiError(404, f"Failed to update {len(failed)} project order(s)")

    audit.record_audit(
        db,
        admin_id=admin.id,
        action="REORDER_PROJECTS",
        table_name="projects",
        new_values={"orders": [item.model_dump() for item in payload.orders]},
        request=request,
    )
    if failed:
        return success_response(
            f"Failed to update {len(failed)} project order(s)", {"failed": failed}
        )
    return success_response("Project order updated", {"failed": []})


@router.post("/import/github", response_model=APIResponse)
def import_from_github(
    payload: GithubImportRequest,
    admin: AdminRecord = Depends(require_admin),
):
    """Preview a GitHub user's repositories as project drafts; nothing is saved."""
    try:
        repos = github.fetch_github_repos(payload.username.strip())
    except github.GitHubError as exc:
        raise ApiError(502, str(exc))
    drafts = [github.repo_to_project_draft(repo, payload.developer_ids) for repo in repos]
    logger.info("Admin %s previewed %d repositories of %s", admin.id, len(drafts), payload.username)
    return success_response(f"Found {len(drafts)} repositories", drafts)


@router.post("", response_model=APIResponse)
def create_project(
    payload: ProjectPayload,
    request: Request,
    admin: AdminRecord = Depends(require_admin),
    db: DbClient = Depends(get_db_client),
    settings: Settings = Depends(get_settings),
):
    title = (payload.title or "").strip()
    if not title:
        raise ApiError(400, "Project title is required")
    developer_ids = payload.developer_ids or []
    ensure_developers_exist(db, developer_ids)

    project = db.create_project(
        ProjectRecord(
            id=new_id(),
            title=title,
            technologies=payload.technologies or [],
            featured=bool(payload.featured),
            published=payload.published is not False,
            status=payload.status or "active",
            display_order=payload.display_order or 0,
            creator_id=admin.id,
            **{field: strip_or_none(getattr(payload, field)) for field in _TRIMMED_PROJECT_FIELDS},
        )
    )
    if developer_ids:
        db.set_project_developers(project.id, developer_ids)
    thumbnail_image = _thumbnail_image(db, settings, project.id, project.thumbnail, admin.id)
    if thumbnail_image is not None:
        _make_primary(db, project.id, thumbnail_image)

    logger.info("Admin %s created project %s", admin.id, project.id)
    audit.log_create(
        db, admin.id, "projects", project.id, payload.model_dump(exclude_none=True), request
    )
    return success_response("Project created successfully", project_details(db, project))


@router.get("/{project_id}", response_model=APIResponse)
def get_project(project_id: str, db: DbClient = Depends(get_db_client)):
    project = _require_project(db, project_id)
    return success_response("Project loaded", project_details(db, project))


@router.put("/{project_id}", response_model=APIResponse)
def update_project(
    project_id: str,
    payload: ProjectPayload,
    request: Request,
    admin: AdminRecord = Depends(require_admin),
    db: DbClient = Depends(get_db_client),
    settings: Settings = Depends(get_settings),
):
    existing = _require_project(db, project_id)
    before = existing.as_dict()

    provided = payload.model_dump(exclude_unset=True)
    developer_ids = provided.pop("developer_ids", None)
    changes: dict = {}
    if "title" in provided:
        title = (provided["title"] or "").strip()
        if not title:
            raise ApiError(400, "Project title is required")
        changes["title"] = title
    for field in _TRIMMED_PROJECT_FIELDS:
        if field in provided:
            changes[field] = strip_or_none(provided[field])
    if "technologies" in provided:
        changes["technologies"] = provided["technologies"] or []
    for field in ("featured", "published", "status", "display_order"):
        if provided.get(field) is not None:
            changes[field] = provided[field]
    if developer_ids is not None:
        ensure_developers_exist(db, developer_ids)
    thumbnail_image = None
    if changes.get("thumbnail"):
        thumbnail_image = _thumbnail_image(db, settings, project_id, changes["thumbnail"], admin.id)

    project = db.update_project(project_id, changes) if changes else existing
    if project is None:
        raise ApiError(404, "Project not found")
    if developer_ids is not None:
        db.set_project_developers(project_id, developer_ids)
    if thumbnail_image is not None:
        _make_primary(db, project_id, thumbnail_image)

    after = project.as_dict()
    new_values = {key: after[key] for key in changes}
    if developer_ids is not None:
        new_values["developer_ids"] = list(dict.fromkeys(developer_ids))
    audit.log_update(
        db,
        admin.id,
        "projects",
        project_id,
        {key: before[key] for key in changes},
        new_values,
        request,
    )
    return success_response("Project updated successfully", project_details(db, project))


@router.delete("/{project_id}", response_model=APIResponse)
def delete_project(
    project_id: str,
    request: Request,
    admin: AdminRecord = Depends(require_admin),
    db: DbClient = Depends(get_db_client),
    storage: StorageClient = Depends(get_storage_client),
    settings: Settings = Depends(get_settings),
):
    project = _require_project(db, project_id)
    paths = [image.image_path for image in db.list_project_images(project_id) if image.image_path]
    # Objects go first so a storage failure leaves the row in place.
    if paths:
        storage.remove(settings.project_images_bucket, paths)
    db.delete_project(project_id)

    logger.info("Admin %s deleted project %s (%d images)", admin.id, project_id, len(paths))
    audit.log_delete(db, admin.id, "projects", project_id, project.as_dict(), request)
    return success_response("Project deleted successfully")


@router.post("/{project_id}/toggle-publish", response_model=APIResponse)
def toggle_publish(
    project_id: str,
    request: Request,
    admin: AdminRecord = Depends(require_admin),
    db: DbClient = Depends(get_db_client),
):
    project = _require_project(db, project_id)
    was_published = project.published
    updated = db.update_project(project_id, {"published": not was_published})
    if updated is None:
        raise ApiError(404, "Project not found")
    audit.log_update(
        db,
        admin.id,
        "projects",
        project_id,
        {"published": was_published},
        {"published": updated.published},
        request,
    )
    message = "Project published" if updated.published else "Project unpublished"
    return success_response(message, updated.as_dict())
