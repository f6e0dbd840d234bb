"""
Plain records passed between the database clients and the HTTP layer.
"""

from __future__ import annotations

import time
import uuid
from dataclasses import dataclass, field
from typing import Any, Optional


def new_id() -> str:
    return str(uuid.uuid4())


def _now() -> float:
    return time.time()


@dataclass
class AdminRecord:
    id: str
    username: str
    email: Optional[str]
    password_hash: str
    last_login: Optional[float] = None
    login_attempts: int = 0
    locked_until: Optional[float] = None
    created_at: float = field(default_factory=_now)

    def as_dict(self) -> dict:
        return {
            "id": self.id,
            "username": self.username,
            "email": self.email,
            "last_login": self.last_login,
            "created_at": self.created_at,
        }


@dataclass
class DeveloperRecord:
    id: str
    name: str
    email: str
    password_hash: str = ""
    github_link: Optional[str] = None
    linkedin: Optional[str] = None
    title: Optional[str] = None
    skills: list[str] = field(default_factory=list)
    profile_picture: Optional[str] = None
    bio: Optional[str] = None
    display_order: int = 0
    created_at: float = field(default_factory=_now)
    updated_at: float = field(default_factory=_now)

    def as_dict(self) -> dict:
        """Public view; the password hash never leaves the service."""
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "github_link": self.github_link,
            "linkedin": self.linkedin,
            "title": self.title,
            "skills": list(self.skills or []),
            "profile_picture": self.profile_picture,
            "bio": self.bio,
            "display_order": self.display_order,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }


@dataclass
class ProjectRecord:
    id: str
    title: str
    description: Optional[str] = None
    technologies: list[str] = field(default_factory=list)
    github_link: Optional[str] = None
    live_demo_link: Optional[str] = None
    thumbnail: Optional[str] = None
    featured: bool = False
    published: bool = True
    status: str = "active"
    display_order: int = 0
    creator_id: Optional[str] = None
    created_at: float = field(default_factory=_now)
    updated_at: float = field(default_factory=_now)

    def as_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "technologies": list(self.technologies or []),
            "github_link": self.github_link,
            "live_demo_link": self.live_demo_link,
            "thumbnail": self.thumbnail,
            "featured": self.featured,
            "published": self.published,
            "status": self.status,
            "display_order": self.display_order,
            "creator_id": self.creator_id,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }


@dataclass
class ProjectImageRecord:
    id: str
    project_id: str
    image_path: str
    image_url: Optional[str] = None
    alt_text: Optional[str] = None
    is_primary: bool = False
    type: str = "image"
    uploader_id: Optional[str] = None
    created_at: float = field(default_factory=_now)

    def as_dict(self) -> dict:
        return {
            "id": self.id,
            "project_id": self.project_id,
            "image_path": self.image_path,
            "image_url": self.image_url,
            "alt_text": self.alt_text,
            "is_primary": self.is_primary,
            "type": self.type,
            "uploader_id": self.uploader_id,
            "created_at": self.created_at,
        }


@dataclass
class ProjectDeveloperRecord:
    id: str
    project_id: str
    developer_id: str
    role: str = "developer"
    created_at: float = field(default_factory=_now)


@dataclass
class SiteSettingRecord:
    id: str
    key: str
    value: Any
    category: str = "general"
    description: Optional[str] = None
    created_at: float = field(default_factory=_now)
    updated_at: float = field(default_factory=_now)


@dataclass
class AuditLogRecord:
    id: str
    action: str
    admin_id: Optional[str] = None
    table_name: Optional[str] = None
    record_id: Optional[str] = None
    old_values: Optional[dict] = None
    new_values: Optional[dict] = None
    ip_address: Optional[str] = None
    user_agent: Optional[str] = None
    created_at: float = field(default_factory=_now)

    def as_dict(self) -> dict:
        return {
            "id": self.id,
            "admin_id": self.admin_id,
            "action": self.action,
            "table_name": self.table_name,
            "record_id": self.record_id,
            "old_values": self.old_values,
            "new_values": self.new_values,
            "ip_address": self.ip_address,
            "user_agent": self.user_agent,
            "created_at": self.created_at,
        }
