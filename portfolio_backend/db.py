"""
Database abstraction for Postgres and an in-memory test implementation.
"""

from __future__ import annotations

import dataclasses
import time
from typing import Dict, Optional, Protocol, TypeVar

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    Float,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
    create_engine,
    select,
)
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from portfolio_backend.records import (
    AdminRecord,
    AuditLogRecord,
    DeveloperRecord,
    ProjectDeveloperRecord,
    ProjectImageRecord,
    ProjectRecord,
    SiteSettingRecord,
    new_id,
)

R = TypeVar("R")


class DuplicateRecordError(Exception):
    """Raised when a unique column (email, username, setting key) collides."""


class DbClient(Protocol):
    """Interface for database access."""

    # admins
    def create_admin(self, record: AdminRecord) -> AdminRecord:
        ...

    def get_admin(self, admin_id: str) -> Optional[AdminRecord]:
        ...

    def get_admin_by_email(self, email: str) -> Optional[AdminRecord]:
        ...

    def find_admin(self, username: str, email: str) -> Optional[AdminRecord]:
        ...

    def update_admin_login_state(
        self,
        admin_id: str,
        *,
        login_attempts: int,
        locked_until: Optional[float],
        last_login: Optional[float] = None,
    ) -> None:
        ...

    # developers
    def list_developers(self) -> list[DeveloperRecord]:
        ...

    def get_developer(self, developer_id: str) -> Optional[DeveloperRecord]:
        ...

    def get_developer_by_email(self, email: str) -> Optional[DeveloperRecord]:
        ...

    def create_developer(self, record: DeveloperRecord) -> DeveloperRecord:
        ...

    def update_developer(
        self, developer_id: str, changes: dict
    ) -> Optional[DeveloperRecord]:
        ...

    def delete_developer(self, developer_id: str) -> bool:
        ...

    def set_developer_order(self, developer_id: str, display_order: int) -> bool:
        ...

    # projects
    def list_projects(self, *, published_only: bool = False) -> list[ProjectRecord]:
        ...

    def get_project(self, project_id: str) -> Optional[ProjectRecord]:
        ...

    def create_project(self, record: ProjectRecord) -> ProjectRecord:
        ...

    def update_project(self, project_id: str, changes: dict) -> Optional[ProjectRecord]:
        ...

    def delete_project(self, project_id: str) -> bool:
        ...

    def set_project_order(self, project_id: str, display_order: int) -> bool:
        ...

    def set_project_developers(
        self, project_id: str, developer_ids: list[str]
    ) -> None:
        ...

    def list_project_developers(
        self, project_id: str
    ) -> list[ProjectDeveloperRecord]:
        ...

    def list_developer_projects(self, developer_id: str) -> list[ProjectRecord]:
        ...

    # project images
    def list_project_images(self, project_id: str) -> list[ProjectImageRecord]:
        ...

    def get_project_image(self, image_id: str) -> Optional[ProjectImageRecord]:
        ...

    def add_project_image(self, record: ProjectImageRecord) -> ProjectImageRecord:
        ...

    def delete_project_image(self, image_id: str) -> bool:
        ...

    def set_primary_image(self, project_id: str, image_id: Optional[str]) -> None:
        ...

    # site settings
    def list_settings(self) -> list[SiteSettingRecord]:
        ...

    def get_setting(self, key: str) -> Optional[SiteSettingRecord]:
        ...

    def upsert_settings(self, items: list[dict]) -> None:
        ...

    # audit logs
    def add_audit_log(self, record: AuditLogRecord) -> None:
        ...

    def list_audit_logs(self, limit: int = 50, offset: int = 0) -> list[AuditLogRecord]:
        ...


def _developer_sort_key(developer: DeveloperRecord):
    return (developer.display_order, developer.created_at)


def _project_sort_key(published_only: bool):
    if published_only:
        return lambda p: (p.display_order, -int(p.featured), -p.created_at)
    return lambda p: (p.display_order, -p.created_at)


class InMemoryDbClient:
    """Simple in-memory database for development and tests."""

    def __init__(self):
        self.admins: Dict[str, AdminRecord] = {}
        self.developers: Dict[str, DeveloperRecord] = {}
        self.projects: Dict[str, ProjectRecord] = {}
        self.project_images: Dict[str, ProjectImageRecord] = {}
        self.project_developers: list[ProjectDeveloperRecord] = []
        self.settings: Dict[str, SiteSettingRecord] = {}
        self.audit_logs: list[AuditLogRecord] = []

    def create_admin(self, record: AdminRecord) -> AdminRecord:
        if self.find_admin(record.username, record.email or ""):
            raise DuplicateRecordError("admin username or email already exists")
        self.admins[record.id] = record
        return record

    def get_admin(self, admin_id: str) -> Optional[AdminRecord]:
        return self.admins.get(admin_id)

    def get_admin_by_email(self, email: str) -> Optional[AdminRecord]:
        for admin in self.admins.values():
            if admin.email == email:
                return admin
        return None

    def find_admin(self, username: str, email: str) -> Optional[AdminRecord]:
        for admin in self.admins.values():
            if admin.username == username or (email and admin.email == email):
                return admin
        return None

    def update_admin_login_state(
        self,
        admin_id: str,
        *,
        login_attempts: int,
        locked_until: Optional[float],
        last_login: Optional[float] = None,
    ) -> None:
        admin = self.admins.get(admin_id)
        if not admin:
            return
        admin.login_attempts = login_attempts
        admin.locked_until = locked_until
        if last_login is not None:
            admin.last_login = last_login

    def list_developers(self) -> list[DeveloperRecord]:
        return sorted(self.developers.values(), key=_developer_sort_key)

    def get_developer(self, developer_id: str) -> Optional[DeveloperRecord]:
        return self.developers.get(developer_id)

    def get_developer_by_email(self, email: str) -> Optional[DeveloperRecord]:
        for developer in self.developers.values():
            if developer.email == email:
                return developer
        return None

    def create_developer(self, record: DeveloperRecord) -> DeveloperRecord:
        if self.get_developer_by_email(record.email):
            raise DuplicateRecordError("developer email already exists")
        self.developers[record.id] = record
        return record

    def update_developer(
        self, developer_id: str, changes: dict
    ) -> Optional[DeveloperRecord]:
        developer = self.developers.get(developer_id)
        if not developer:
            return None
        email = changes.get("email")
        if email:
            existing = self.get_developer_by_email(email)
            if existing and existing.id != developer_id:
                raise DuplicateRecordError("developer email already exists")
        for key, value in changes.items():
            setattr(developer, key, value)
        developer.updated_at = time.time()
        return developer

    def delete_developer(self, developer_id: str) -> bool:
        if developer_id not in self.developers:
            return False
        del self.developers[developer_id]
        self.project_developers = [
            link
            for link in self.project_developers
            if link.developer_id != developer_id
        ]
        return True

    def set_developer_order(self, developer_id: str, display_order: int) -> bool:
        developer = self.developers.get(developer_id)
        if not developer:
            return False
        developer.display_order = display_order
        developer.updated_at = time.time()
        return True

    def list_projects(self, *, published_only: bool = False) -> list[ProjectRecord]:
        projects = list(self.projects.values())
        if published_only:
            projects = [p for p in projects if p.published and p.status == "active"]
        return sorted(projects, key=_project_sort_key(published_only))

    def get_project(self, project_id: str) -> Optional[ProjectRecord]:
        return self.projects.get(project_id)

    def create_project(self, record: ProjectRecord) -> ProjectRecord:
        self.projects[record.id] = record
        return record

    def update_project(self, project_id: str, changes: dict) -> Optional[ProjectRecord]:
        project = self.projects.get(project_id)
        if not project:
            return None
        for key, value in changes.items():
            setattr(project, key, value)
        project.updated_at = time.time()
        return project

    def delete_project(self, project_id: str) -> bool:
        if project_id not in self.projects:
            return False
        del self.projects[project_id]
        for image_id in [
            i.id for i in self.project_images.values() if i.project_id == project_id
        ]:
            del self.project_images[image_id]
        self.project_developers = [
            link for link in self.project_developers if link.project_id != project_id
        ]
        return True

    def set_project_order(self, project_id: str, display_order: int) -> bool:
        project = self.projects.get(project_id)
        if not project:
            return False
        project.display_order = display_order
        project.updated_at = time.time()
        return True

    def set_project_developers(
        self, project_id: str, developer_ids: list[str]
    ) -> None:
        self.project_developers = [
            link for link in self.project_developers if link.project_id != project_id
        ]
        for developer_id in dict.fromkeys(developer_ids):
            self.project_developers.append(
                ProjectDeveloperRecord(
                    id=new_id(), project_id=project_id, developer_id=developer_id
                )
            )

    def list_project_developers(
        self, project_id: str
    ) -> list[ProjectDeveloperRecord]:
        return [
            link for link in self.project_developers if link.project_id == project_id
        ]

    def list_developer_projects(self, developer_id: str) -> list[ProjectRecord]:
        project_ids = {
            link.project_id
            for link in self.project_developers
            if link.developer_id == developer_id
        }
        return [p for p in self.list_projects() if p.id in project_ids]

    def list_project_images(self, project_id: str) -> list[ProjectImageRecord]:
        images = [i for i in self.project_images.values() if i.project_id == project_id]
        return sorted(images, key=lambda i: i.created_at)

    def get_project_image(self, image_id: str) -> Optional[ProjectImageRecord]:
        return self.project_images.get(image_id)

    def add_project_image(self, record: ProjectImageRecord) -> ProjectImageRecord:
        self.project_images[record.id] = record
        return record

    def delete_project_image(self, image_id: str) -> bool:
        return self.project_images.pop(image_id, None) is not None

    def set_primary_image(self, project_id: str, image_id: Optional[str]) -> None:
        for image in self.project_images.values():
            if image.project_id == project_id:
                image.is_primary = image.id == image_id

    def list_settings(self) -> list[SiteSettingRecord]:
        return list(self.settings.values())

    def get_setting(self, key: str) -> Optional[SiteSettingRecord]:
        return self.settings.get(key)

    def upsert_settings(self, items: list[dict]) -> None:
        now = time.time()
        for item in items:
            existing = self.settings.get(item["key"])
            if existing:
                existing.value = item["value"]
                if item.get("category"):
                    existing.category = item["category"]
                if item.get("description"):
                    existing.description = item["description"]
                existing.updated_at = now
            else:
                self.settings[item["key"]] = SiteSettingRecord(
                    id=new_id(),
                    key=item["key"],
                    value=item["value"],
                    category=item.get("category") or "general",
                    description=item.get("description"),
                )

    def add_audit_log(self, record: AuditLogRecord) -> None:
        self.audit_logs.append(record)

    def list_audit_logs(self, limit: int = 50, offset: int = 0) -> list[AuditLogRecord]:
        # Newest first; entries sharing a timestamp come out latest-inserted first.
        ordered = sorted(
            reversed(self.audit_logs), key=lambda r: r.created_at, reverse=True
        )
        return ordered[offset : offset + limit]


class SqlDbClient:
    """
    SQLAlchemy-backed implementation. Accepts any SQLAlchemy URL (e.g., Postgres or SQLite for tests).
    """

    def __init__(self, database_url: str):
        if not database_url:
            raise ValueError("DATABASE_URL is required for SqlDbClient")
        engine_kwargs: dict = {"future": True, "pool_pre_ping": True}
        if database_url.startswith("sqlite"):
            engine_kwargs["connect_args"] = {"check_same_thread": False}
            if ":memory:" in database_url or database_url.rstrip("/") == "sqlite:":
                # One shared connection, otherwise each checkout sees an empty DB.
                engine_kwargs["poolclass"] = StaticPool
        else:
            engine_kwargs["pool_recycle"] = 1800
        self.engine = create_engine(database_url, **engine_kwargs)
        self.Session = sessionmaker(
            bind=self.engine, class_=Session, expire_on_commit=False, future=True
        )
        Base.metadata.create_all(self.engine)

    @staticmethod
    def _to_record(record_cls: type[R], row) -> R:
        values = {f.name: getattr(row, f.name) for f in dataclasses.fields(record_cls)}
        return record_cls(**values)

    @staticmethod
    def _to_row(row_cls, record):
        return row_cls(**dataclasses.asdict(record))

    def _add(self, row_cls, record, record_cls: type[R]) -> R:
        with self.Session() as session:
            row = self._to_row(row_cls, record)
            session.add(row)
            try:
                session.commit()
            except IntegrityError as exc:
                session.rollback()
                raise DuplicateRecordError(str(exc.orig)) from exc
            session.refresh(row)
            return self._to_record(record_cls, row)

    # admins

    def create_admin(self, record: AdminRecord) -> AdminRecord:
        return self._add(AdminRow, record, AdminRecord)

    def get_admin(self, admin_id: str) -> Optional[AdminRecord]:
        with self.Session() as session:
            row = session.get(AdminRow, admin_id)
            return self._to_record(AdminRecord, row) if row else None

    def get_admin_by_email(self, email: str) -> Optional[AdminRecord]:
        with self.Session() as session:
            stmt = select(AdminRow).where(AdminRow.email == email).limit(1)
            row = session.execute(stmt).scalar_one_or_none()
            return self._to_record(AdminRecord, row) if row else None

    def find_admin(self, username: str, email: str) -> Optional[AdminRecord]:
        with self.Session() as session:
            stmt = (
                select(AdminRow)
                .where((AdminRow.username == username) | (AdminRow.email == email))
                .limit(1)
            )
            row = session.execute(stmt).scalar_one_or_none()
            return self._to_record(AdminRecord, row) if row else None

    def update_admin_login_state(
        self,
        admin_id: str,
        *,
        login_attempts: int,
        locked_until: Optional[float],
        last_login: Optional[float] = None,
    ) -> None:
        with self.Session() as session:
            row = session.get(AdminRow, admin_id)
            if not row:
                return
            row.login_attempts = login_attempts
            row.locked_until = locked_until
            if last_login is not None:
                row.last_login = last_login
            session.commit()

    # developers

    def list_developers(self) -> list[DeveloperRecord]:
        with self.Session() as session:
            rows = (
                session.query(DeveloperRow)
                .order_by(
                    DeveloperRow.display_order.asc(), DeveloperRow.created_at.asc()
                )
                .all()
            )
            return [self._to_record(DeveloperRecord, row) for row in rows]

    def get_developer(self, developer_id: str) -> Optional[DeveloperRecord]:
        with self.Session() as session:
            row = session.get(DeveloperRow, developer_id)
            return self._to_record(DeveloperRecord, row) if row else None

    def get_developer_by_email(self, email: str) -> Optional[DeveloperRecord]:
        with self.Session() as session:
            stmt = select(DeveloperRow).where(DeveloperRow.email == email).limit(1)
            row = session.execute(stmt).scalar_one_or_none()
            return self._to_record(DeveloperRecord, row) if row else None

    def create_developer(self, record: DeveloperRecord) -> DeveloperRecord:
        return self._add(DeveloperRow, record, DeveloperRecord)

    def update_developer(
        self, developer_id: str, changes: dict
    ) -> Optional[DeveloperRecord]:
        with self.Session() as session:
            row = session.get(DeveloperRow, developer_id)
            if not row:
                return None
            for key, value in changes.items():
                setattr(row, key, value)
            row.updated_at = time.time()
            try:
                session.commit()
            except IntegrityError as exc:
                session.rollback()
                raise DuplicateRecordError(str(exc.orig)) from exc
            session.refresh(row)
            return self._to_record(DeveloperRecord, row)

    def delete_developer(self, developer_id: str) -> bool:
        with self.Session() as session:
            row = session.get(DeveloperRow, developer_id)
            if not row:
                return False
            session.query(ProjectDeveloperRow).filter(
                ProjectDeveloperRow.developer_id == developer_id
            ).delete(synchronize_session=False)
            session.delete(row)
            session.commit()
            return True

    def set_developer_order(self, developer_id: str, display_order: int) -> bool:
        with self.Session() as session:
            row = session.get(DeveloperRow, developer_id)
            if not row:
                return False
            row.display_order = display_order
            row.updated_at = time.time()
            session.commit()
            return True

    # projects

    def list_projects(self, *, published_only: bool = False) -> list[ProjectRecord]:
        with self.Session() as session:
            query = session.query(ProjectRow)
            if published_only:
                query = query.filter(
                    ProjectRow.published.is_(True), ProjectRow.status == "active"
                ).order_by(
                    ProjectRow.display_order.asc(),
                    ProjectRow.featured.desc(),
                    ProjectRow.created_at.desc(),
                )
            else:
                query = query.order_by(
                    ProjectRow.display_order.asc(), ProjectRow.created_at.desc()
                )
            return [self._to_record(ProjectRecord, row) for row in query.all()]

    def get_project(self, project_id: str) -> Optional[ProjectRecord]:
        with self.Session() as session:
            row = session.get(ProjectRow, project_id)
            return self._to_record(ProjectRecord, row) if row else None

    def create_project(self, record: ProjectRecord) -> ProjectRecord:
        return self._add(ProjectRow, record, ProjectRecord)

    def update_project(self, project_id: str, changes: dict) -> Optional[ProjectRecord]:
        with self.Session() as session:
            row = session.get(ProjectRow, project_id)
            if not row:
                return None
            for key, value in changes.items():
                setattr(row, key, value)
            row.updated_at = time.time()
            session.commit()
            session.refresh(row)
            return self._to_record(ProjectRecord, row)

    def delete_project(self, project_id: str) -> bool:
        with self.Session() as session:
            row = session.get(ProjectRow, project_id)
            if not row:
                return False
            session.query(ProjectImageRow).filter(
                ProjectImageRow.project_id == project_id
            ).delete(synchronize_session=False)
            session.query(ProjectDeveloperRow).filter(
                ProjectDeveloperRow.project_id == project_id
            ).delete(synchronize_session=False)
            session.delete(row)
            session.commit()
            return True

    def set_project_order(self, project_id: str, display_order: int) -> bool:
        with self.Session() as session:
            row = session.get(ProjectRow, project_id)
            if not row:
                return False
            row.display_order = display_order
            row.updated_at = time.time()
            session.commit()
            return True

    def set_project_developers(
        self, project_id: str, developer_ids: list[str]
    ) -> None:
        with self.Session() as session:
            session.query(ProjectDeveloperRow).filter(
                ProjectDeveloperRow.project_id == project_id
            ).delete(synchronize_session=False)
            now = time.time()
            for developer_id in dict.fromkeys(developer_ids):
                session.add(
                    ProjectDeveloperRow(
                        id=new_id(),
                        project_id=project_id,
                        developer_id=developer_id,
                        role="developer",
                        created_at=now,
                    )
                )
            session.commit()

    def list_project_developers(
        self, project_id: str
    ) -> list[ProjectDeveloperRecord]:
        with self.Session() as session:
            rows = (
                session.query(ProjectDeveloperRow)
                .filter(ProjectDeveloperRow.project_id == project_id)
                .order_by(ProjectDeveloperRow.created_at.asc())
                .all()
            )
            return [self._to_record(ProjectDeveloperRecord, row) for row in rows]

    def list_developer_projects(self, developer_id: str) -> list[ProjectRecord]:
        with self.Session() as session:
            rows = (
                session.query(ProjectRow)
                .join(
                    ProjectDeveloperRow,
                    ProjectDeveloperRow.project_id == ProjectRow.id,
                )
                .filter(ProjectDeveloperRow.developer_id == developer_id)
                .order_by(ProjectRow.display_order.asc(), ProjectRow.created_at.desc())
                .all()
            )
            return [self._to_record(ProjectRecord, row) for row in rows]

    # project images

    def list_project_images(self, project_id: str) -> list[ProjectImageRecord]:
        with self.Session() as session:
            rows = (
                session.query(ProjectImageRow)
                .filter(ProjectImageRow.project_id == project_id)
                .order_by(ProjectImageRow.created_at.asc())
                .all()
            )
            return [self._to_record(ProjectImageRecord, row) for row in rows]

    def get_project_image(self, image_id: str) -> Optional[ProjectImageRecord]:
        with self.Session() as session:
            row = session.get(ProjectImageRow, image_id)
            return self._to_record(ProjectImageRecord, row) if row else None

    def add_project_image(self, record: ProjectImageRecord) -> ProjectImageRecord:
        return self._add(ProjectImageRow, record, ProjectImageRecord)

    def delete_project_image(self, image_id: str) -> bool:
        with self.Session() as session:
            row = session.get(ProjectImageRow, image_id)
            if not row:
                return False
            session.delete(row)
            session.commit()
            return True

    def set_primary_image(self, project_id: str, image_id: Optional[str]) -> None:
        with self.Session() as session:
            rows = (
                session.query(ProjectImageRow)
                .filter(ProjectImageRow.project_id == project_id)
                .all()
            )
            for row in rows:
                row.is_primary = row.id == image_id
            session.commit()

    # site settings

    def list_settings(self) -> list[SiteSettingRecord]:
        with self.Session() as session:
            rows = session.query(SiteSettingRow).order_by(SiteSettingRow.key.asc()).all()
            return [self._to_record(SiteSettingRecord, row) for row in rows]

    def get_setting(self, key: str) -> Optional[SiteSettingRecord]:
        with self.Session() as session:
            stmt = select(SiteSettingRow).where(SiteSettingRow.key == key).limit(1)
            row = session.execute(stmt).scalar_one_or_none()
            return self._to_record(SiteSettingRecord, row) if row else None

    def upsert_settings(self, items: list[dict]) -> None:
        now = time.time()
        with self.Session() as session:
            for item in items:
                stmt = select(SiteSettingRow).where(SiteSettingRow.key == item["key"])
                row = session.execute(stmt).scalar_one_or_none()
                if row:
                    row.value = item["value"]
                    if item.get("category"):
                        row.category = item["category"]
                    if item.get("description"):
                        row.description = item["description"]
                    row.updated_at = now
                else:
                    session.add(
                        SiteSettingRow(
                            id=new_id(),
                            key=item["key"],
                            value=item["value"],
                            category=item.get("category") or "general",
                            description=item.get("description"),
                            created_at=now,
                            updated_at=now,
                        )
                    )
            session.commit()

    # audit logs

    def add_audit_log(self, record: AuditLogRecord) -> None:
        with self.Session() as session:
            session.add(self._to_row(AuditLogRow, record))
            session.commit()

    def list_audit_logs(self, limit: int = 50, offset: int = 0) -> list[AuditLogRecord]:
        with self.Session() as session:
            rows = (
                session.query(AuditLogRow)
                .order_by(AuditLogRow.created_at.desc())
                .offset(offset)
                .limit(limit)
                .all()
            )
            return [self._to_record(AuditLogRecord, row) for row in rows]


Base = declarative_base()


class AdminRow(Base):
    __tablename__ = "admins"

    id = Column(String, primary_key=True)
    username = Column(String, nullable=False, unique=True, index=True)
    email = Column(String, nullable=True, unique=True, index=True)
    password_hash = Column("password", String, nullable=False)
    last_login = Column(Float, nullable=True)
    login_attempts = Column(Integer, nullable=False, default=0)
    locked_until = Column(Float, nullable=True)
    created_at = Column(Float, nullable=False)


class DeveloperRow(Base):
    __tablename__ = "developers"

    id = Column(String, primary_key=True)
    name = Column(String, nullable=False)
    email = Column(String, nullable=False, unique=True, index=True)
    password_hash = Column("password", String, nullable=False, default="")
    github_link = Column(String, nullable=True)
    linkedin = Column(String, nullable=True)
    title = Column(String, nullable=True)
    skills = Column(JSON, nullable=False, default=list)
    profile_picture = Column(String, nullable=True)
    bio = Column(Text, nullable=True)
    display_order = Column(Integer, nullable=False, default=0, index=True)
    created_at = Column(Float, nullable=False)
    updated_at = Column(Float, nullable=False)


class ProjectRow(Base):
    __tablename__ = "projects"

    id = Column(String, primary_key=True)
    title = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    technologies = Column(JSON, nullable=False, default=list)
    github_link = Column(String, nullable=True)
    live_demo_link = Column(String, nullable=True)
    thumbnail = Column(String, nullable=True)
    featured = Column(Boolean, nullable=False, default=False, index=True)
    published = Column(Boolean, nullable=False, default=True)
    status = Column(String, nullable=False, default="active", index=True)
    display_order = Column(Integer, nullable=False, default=0, index=True)
    creator_id = Column(String, ForeignKey("admins.id"), nullable=True)
    created_at = Column(Float, nullable=False)
    updated_at = Column(Float, nullable=False)


class ProjectImageRow(Base):
    __tablename__ = "project_images"

    id = Column(String, primary_key=True)
    project_id = Column(
        String, ForeignKey("projects.id", ondelete="CASCADE"), nullable=False, index=True
    )
    image_path = Column(String, nullable=False)
    image_url = Column(String, nullable=True)
    alt_text = Column(String, nullable=True)
    is_primary = Column(Boolean, nullable=False, default=False)
    type = Column(String, nullable=False, default="image")
    uploader_id = Column(String, ForeignKey("admins.id"), nullable=True)
    created_at = Column(Float, nullable=False)


class ProjectDeveloperRow(Base):
    __tablename__ = "project_developers"
    __table_args__ = (UniqueConstraint("project_id", "developer_id"),)

    id = Column(String, primary_key=True)
    project_id = Column(
        String, ForeignKey("projects.id", ondelete="CASCADE"), nullable=False, index=True
    )
    developer_id = Column(
        String,
        ForeignKey("developers.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    role = Column(String, nullable=False, default="developer")
    created_at = Column(Float, nullable=False)


class SiteSettingRow(Base):
    __tablename__ = "site_settings"

    id = Column(String, primary_key=True)
    key = Column(String, nullable=False, unique=True)
    value = Column(JSON, nullable=True)
    category = Column(String, nullable=False, default="general")
    description = Column(Text, nullable=True)
    created_at = Column(Float, nullable=False)
    updated_at = Column(Float, nullable=False)


class AuditLogRow(Base):
    __tablename__ = "audit_logs"

    id = Column(String, primary_key=True)
    admin_id = Column(String, ForeignKey("admins.id", ondelete="SET NULL"), nullable=True, index=True)
    action = Column(String, nullable=False)
    table_name = Column(String, nullable=True, index=True)
    record_id = Column(String, nullable=True)
    old_values = Column(JSON, nullable=True)
    new_values = Column(JSON, nullable=True)
    ip_address = Column(String, nullable=True)
    user_agent = Column(String, nullable=True)
    created_at = Column(Float, nullable=False, index=True)
