"""
Pydantic schemas for the portfolio backend.
"""

from __future__ import annotations

from typing import Any, Literal, Optional

from pydantic import BaseModel, Field

ProjectStatus = Literal["active", "archived", "draft"]


class APIResponse(BaseModel):
    """Standard response envelope."""

    success: bool
    message: Optional[str] = None
    data: Any = None


def success_response(message: str = "Success", data: Any = None) -> APIResponse:
    return APIResponse(success=True, message=message, data=data)


class UploadResponse(BaseModel):
    success: bool
    url: str
    message: str


class LoginRequest(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None


class DeveloperCreatePayload(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None
    github_link: Optional[str] = None
    linkedin: Optional[str] = None
    title: Optional[str] = None
    skills: Optional[list[str]] = None
    profile_picture: Optional[str] = None
    bio: Optional[str] = None
    display_order: Optional[int] = None


class DeveloperUpdatePayload(DeveloperCreatePayload):
    id: Optional[str] = None


class DeveloperDeletePayload(BaseModel):
    id: Optional[str] = None


class DeveloperSelfUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1)
    title: Optional[str] = None
    bio: Optional[str] = None
    skills: Optional[list[str]] = None
    github_link: Optional[str] = None
    linkedin: Optional[str] = None


class OrderItem(BaseModel):
    id: str
    display_order: int


class OrderUpdateRequest(BaseModel):
    orders: list[OrderItem]


class ProjectPayload(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    technologies: Optional[list[str]] = None
    github_link: Optional[str] = None
    live_demo_link: Optional[str] = None
    thumbnail: Optional[str] = None
    featured: Optional[bool] = None
    published: Optional[bool] = None
    status: Optional[ProjectStatus] = None
    display_order: Optional[int] = None
    developer_ids: Optional[list[str]] = None


class GithubImportRequest(BaseModel):
    username: str = Field(..., min_length=1, max_length=39)
    developer_ids: list[str] = Field(default_factory=list)
