import unittest

from portfolio_backend import audit
from portfolio_backend.site_defaults import DEFAULT_SITE_SETTINGS
from portfolio_backend.tests.support import ApiTestCase


class SiteSettingsApiTests(ApiTestCase):
    def test_empty_table_is_seeded(self):
        response = self.client.get("/api/site-settings")
        self.assertEqual(response.status_code, 200)
        data = response.json()["data"]
        self.assertEqual(len(data), len(DEFAULT_SITE_SETTINGS))
        self.assertEqual(data["default_theme"], "dark")
        self.assertEqual(len(self.db.list_settings()), len(DEFAULT_SITE_SETTINGS))

    def test_existing_values_are_not_overwritten(self):
        self.db.upsert_settings([{"key": "site_title", "value": "Mine"}])
        data = self.client.get("/api/site-settings").json()["data"]
        self.assertEqual(data, {"site_title": "Mine"})

    def test_values_keep_their_json_type(self):
        self.db.upsert_settings([{"key": "stats", "value": {"projects": 12}}])
        response = self.client.get("/api/site-settings/stats")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["data"]["value"], {"projects": 12})

    def test_missing_key(self):
        response = self.client.get("/api/site-settings/nope")
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.json(), {"success": False, "message": "Setting not found"})


class AuditLogTests(ApiTestCase):
    def test_entries_newest_first_with_admin(self):
        self.create_project(title="One")
        self.create_project(title="Two")
        response = self.client.get("/api/audit-logs", headers=self.admin_headers)
        self.assertEqual(response.status_code, 200)
        entries = response.json()["data"]
        self.assertEqual(len(entries), 2)
        self.assertEqual(entries[0]["new_values"]["title"], "Two")
        self.assertEqual(entries[0]["admin"], {"username": "admin", "email": "admin@example.com"})
        self.assertEqual(entries[0]["ip_address"], "testclient")

    def test_forwarded_for_first_hop_is_recorded(self):
        self.client.post(
            "/api/projects",
            json={"title": "Proxied"},
            headers={**self.admin_headers, "X-Forwarded-For": "203.0.113.9, 10.0.0.1"},
        )
        self.assertEqual(self.db.audit_logs[-1].ip_address, "203.0.113.9")

    def test_pagination(self):
        for title in ("A", "B", "C"):
            self.create_project(title=title)
        response = self.client.get(
            "/api/audit-logs", params={"limit": 1, "offset": 1}, headers=self.admin_headers
        )
        entries = response.json()["data"]
        self.assertEqual([e["new_values"]["title"] for e in entries], ["B"])

    def test_bad_limit(self):
        response = self.client.get("/api/audit-logs", params={"limit": 0}, headers=self.admin_headers)
        self.assertEqual(response.status_code, 400)

    def test_audit_failure_does_not_fail_request(self):
        def broken(record):
            raise RuntimeError("audit table missing")

        self.db.add_audit_log = broken
        with self.assertLogs(audit.logger, level="WARNING"):
            response = self.client.post("/api/projects", json={"title": "Still saved"}, headers=self.admin_headers)
        self.assertEqual(response.status_code, 200)
        self.assertEqual(len(self.db.list_projects()), 1)

    def test_requires_admin(self):
        self.assertEqual(self.client.get("/api/audit-logs").status_code, 401)


class FileBrowserTests(ApiTestCase):
    def setUp(self):
        super().setUp()
        self.storage.upload_bytes("project_images", "project-1-1.png", b"x", "image/png")
        self.storage.upload_bytes("project_images", "notes.txt", b"x", "text/plain")

    def test_list(self):
        response = self.client.get("/api/files/project_images", headers=self.admin_headers)
        self.assertEqual(response.status_code, 200)
        files = {f["path"]: f["type"] for f in response.json()["data"]}
        self.assertEqual(files, {"project-1-1.png": "image", "notes.txt": "other"})

    def test_list_with_prefix(self):
        response = self.client.get(
            "/api/files/project_images", params={"prefix": "project-"}, headers=self.admin_headers
        )
        self.assertEqual([f["name"] for f in response.json()["data"]], ["project-1-1.png"])

    def test_unknown_bucket(self):
        response = self.client.get("/api/files/secrets", headers=self.admin_headers)
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.json()["message"], "Unknown bucket")

    def test_sign_url(self):
        response = self.client.get(
            "/api/files/project_images/sign-url",
            params={"path": "project-1-1.png", "expires_in": 120},
            headers=self.admin_headers,
        )
        self.assertEqual(response.status_code, 200)
        self.assertIn("project-1-1.png", response.json()["data"]["url"])
        self.assertEqual(response.json()["data"]["expires_in"], 120)

    def test_delete(self):
        response = self.client.delete(
            "/api/files/project_images", params={"path": "notes.txt"}, headers=self.admin_headers
        )
        self.assertEqual(response.status_code, 200)
        self.assertNotIn(("project_images", "notes.txt"), self.storage.stored_objects)
        self.assertEqual(self.db.audit_logs[-1].action, "DELETE_FILE")

        missing = self.client.delete(
            "/api/files/project_images", params={"path": "notes.txt"}, headers=self.admin_headers
        )
        self.assertEqual(missing.status_code, 404)


class HealthTests(ApiTestCase):
    def test_healthz(self):
        response = self.client.get("/healthz")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {"status": "ok"})

    def test_unknown_route_uses_error_envelope(self):
        response = self.client.get("/api/nothing-here")
        self.assertEqual(response.status_code, 404)
        self.assertFalse(response.json()["success"])


if __name__ == "__main__":
    unittest.main()
