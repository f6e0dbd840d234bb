"""
Shared fixtures for the API tests: a fresh app wired to in-memory backends.
"""

import io
import unittest

from fastapi.testclient import TestClient
from PIL import Image

from portfolio_backend.app import create_app
from portfolio_backend.auth import hash_password, issue_token
from portfolio_backend.db import InMemoryDbClient
from portfolio_backend.dependencies import get_db_client, get_storage_client
from portfolio_backend.records import AdminRecord, DeveloperRecord, new_id
from portfolio_backend.storage import InMemoryStorageClient

ADMIN_EMAIL = "admin@example.com"
ADMIN_PASSWORD = "correct-horse"
DEVELOPER_PASSWORD = "dev-secret"

# Hashed once; bcrypt is deliberately slow.
ADMIN_PASSWORD_HASH = hash_password(ADMIN_PASSWORD)
DEVELOPER_PASSWORD_HASH = hash_password(DEVELOPER_PASSWORD)


def image_bytes(fmt: str = "PNG", size=(4, 4)) -> bytes:
    buffer = io.BytesIO()
    Image.new("RGB", size, color=(200, 40, 40)).save(buffer, format=fmt)
    return buffer.getvalue()


class ApiTestCase(unittest.TestCase):
    raise_server_exceptions = True

    def setUp(self):
        self.db = InMemoryDbClient()
        self.storage = InMemoryStorageClient()
        self.app = create_app()
        self.app.dependency_overrides[get_db_client] = lambda: self.db
        self.app.dependency_overrides[get_storage_client] = lambda: self.storage
        self.client = TestClient(
            self.app, raise_server_exceptions=self.raise_server_exceptions
        )

        self.admin = self.db.create_admin(
            AdminRecord(
                id=new_id(),
                username="admin",
                email=ADMIN_EMAIL,
                password_hash=ADMIN_PASSWORD_HASH,
            )
        )
        self.admin_headers = {"X-Admin-Token": issue_token(self.admin.id, self.admin.email)}

    def add_developer(self, name="Ada Lovelace", email="ada@example.com", **fields):
        return self.db.create_developer(
            DeveloperRecord(
                id=new_id(),
                name=name,
                email=email,
                password_hash=DEVELOPER_PASSWORD_HASH,
                **fields,
            )
        )

    def developer_headers(self, developer):
        return {"X-Developer-Token": issue_token(developer.id, developer.email)}

    def create_project(self, **fields) -> dict:
        body = {"title": "Portfolio Site"}
        body.update(fields)
        response = self.client.post("/api/projects", json=body, headers=self.admin_headers)
        self.assertEqual(response.status_code, 200, response.text)
        return response.json()["data"]

    def upload_image(self, project_id, fmt="PNG", content_type="image/png", **form):
        return self.client.post(
            f"/api/projects/{project_id}/images",
            files={"file": ("shot.png", image_bytes(fmt), content_type)},
            data=form,
            headers=self.admin_headers,
        )

    def audit_actions(self):
        return [entry.action for entry in self.db.audit_logs]
