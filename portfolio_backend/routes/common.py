"""
Helpers shared by the route modules.
"""

from __future__ import annotations

from typing import Optional, TypeVar

from fastapi import Request
from pydantic import BaseModel, ValidationError

from portfolio_backend.db import DbClient
from portfolio_backend.errors import ApiError
from portfolio_backend.records import ProjectRecord

M = TypeVar("M", bound=BaseModel)


def strip_or_none(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    return value.strip()


async def json_body(request: Request) -> dict:
    try:
        body = await request.json()
    except ValueError:
        raise ApiError(400, "Invalid JSON body")
    if not isinstance(body, dict):
        raise ApiError(400, "Request body must be a JSON object")
    return body


def parse_body(model: type[M], body: dict) -> M:
    try:
        return model.model_validate(body)
    except ValidationError as exc:
        first = exc.errors()[0]
        location = ".".join(str(part) for part in first.get("loc", ()))
        raise ApiError(400, f"Invalid request: {location}: {first.get('msg')}")


def ensure_developers_exist(db: DbClient, developer_ids: list[str]) -> None:
    missing = [d for d in dict.fromkeys(developer_ids) if db.get_developer(d) is None]
    if missing:
        raise ApiError(400, f"Unknown developer id(s): {', '.join(missing)}")


def project_details(db: DbClient, project: ProjectRecord) -> dict:
    """Project with its images and associated developers."""
    data = project.as_dict()
    data["images"] = [image.as_dict() for image in db.list_project_images(project.id)]
    developers = []
    for link in db.list_project_developers(project.id):
        developer = db.get_developer(link.developer_id)
        if developer:
            developers.append({**developer.as_dict(), "role": link.role})
    data["developers"] = developers
    return data
