import unittest
from unittest import mock

from starlette.datastructures import UploadFile as StarletteUploadFile

from portfolio_backend.tests.support import ApiTestCase, image_bytes
from portfolio_backend.uploads import (
    INVALID_VIDEO_TYPE_MESSAGE,
    MAX_IMAGE_BYTES,
    TOO_LARGE_MESSAGE,
)

MP4_BYTES = b"\x00\x00\x00\x18ftypmp42" + b"\x00" * 32
WEBM_BYTES = b"\x1a\x45\xdf\xa3" + b"\x00" * 32


class ProjectImageTests(ApiTestCase):
    def setUp(self):
        super().setUp()
        self.project = self.create_project()

    def primary_ids(self):
        return [i.id for i in self.db.list_project_images(self.project["id"]) if i.is_primary]

    def test_first_upload_becomes_primary(self):
        response = self.upload_image(self.project["id"], alt_text=" Home page ")
        self.assertEqual(response.status_code, 200, response.text)
        image = response.json()["data"]
        self.assertTrue(image["is_primary"])
        self.assertEqual(image["alt_text"], "Home page")
        self.assertEqual(image["uploader_id"], self.admin.id)
        self.assertTrue(image["image_path"].startswith(f"project-{self.project['id']}-"))
        self.assertTrue(image["image_path"].endswith(".png"))
        self.assertIn(("project_images", image["image_path"]), self.storage.stored_objects)
        self.assertEqual(self.db.audit_logs[-1].action, "UPLOAD_FILE")

    def test_later_uploads_keep_primary_unless_asked(self):
        first = self.upload_image(self.project["id"]).json()["data"]
        self.upload_image(self.project["id"])
        self.assertEqual(self.primary_ids(), [first["id"]])

        third = self.upload_image(self.project["id"], is_primary="true").json()["data"]
        self.assertEqual(self.primary_ids(), [third["id"]])

    def test_image_cap(self):
        for _ in range(7):
            self.assertEqual(self.upload_image(self.project["id"]).status_code, 200)
        response = self.upload_image(self.project["id"])
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["message"], "Maximum of 7 images allowed per project")
        self.assertEqual(len(self.storage.stored_objects), 7)

    def test_unknown_project(self):
        response = self.upload_image("missing")
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.json()["message"], "Project not found")

    def test_type_validation(self):
        response = self.client.post(
            f"/api/projects/{self.project['id']}/images",
            files={"file": ("clip.gif", b"GIF89a", "image/gif")},
            headers=self.admin_headers,
        )
        self.assertEqual(response.status_code, 400)

    def test_webp_upload(self):
        response = self.client.post(
            f"/api/projects/{self.project['id']}/images",
            files={"file": ("shot.webp", image_bytes("WEBP"), "image/webp")},
            headers=self.admin_headers,
        )
        self.assertEqual(response.status_code, 200, response.text)
        self.assertTrue(response.json()["data"]["image_path"].endswith(".webp"))

    def test_list_images(self):
        self.upload_image(self.project["id"])
        self.upload_image(self.project["id"])
        response = self.client.get(f"/api/projects/{self.project['id']}/images")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(len(response.json()["data"]), 2)

    def test_deleting_primary_promotes_oldest_remaining(self):
        first = self.upload_image(self.project["id"]).json()["data"]
        second = self.upload_image(self.project["id"]).json()["data"]
        self.upload_image(self.project["id"])

        response = self.client.delete(f"/api/project-images/{first['id']}", headers=self.admin_headers)
        self.assertEqual(response.status_code, 200)
        self.assertIsNone(self.db.get_project_image(first["id"]))
        self.assertNotIn(("project_images", first["image_path"]), self.storage.stored_objects)
        self.assertEqual(self.primary_ids(), [second["id"]])
        self.assertEqual(self.db.audit_logs[-1].action, "DELETE_FILE")

    def test_deleting_last_image(self):
        only = self.upload_image(self.project["id"]).json()["data"]
        response = self.client.delete(f"/api/project-images/{only['id']}", headers=self.admin_headers)
        self.assertEqual(response.status_code, 200)
        self.assertEqual(self.db.list_project_images(self.project["id"]), [])

    def test_set_primary(self):
        first = self.upload_image(self.project["id"]).json()["data"]
        second = self.upload_image(self.project["id"]).json()["data"]

        response = self.client.post(
            f"/api/project-images/{second['id']}/primary", headers=self.admin_headers
        )
        self.assertEqual(response.status_code, 200)
        self.assertEqual(self.primary_ids(), [second["id"]])

        again = self.client.post(
            f"/api/project-images/{second['id']}/primary", headers=self.admin_headers
        )
        self.assertEqual(again.status_code, 400)
        self.assertEqual(again.json()["message"], "Image is already set as primary")
        self.assertNotIn(first["id"], self.primary_ids())

    def test_missing_image(self):
        response = self.client.delete("/api/project-images/missing", headers=self.admin_headers)
        self.assertEqual(response.status_code, 404)

    def test_extension_follows_decoded_format(self):
        response = self.client.post(
            f"/api/projects/{self.project['id']}/images",
            files={"file": ("x.png", image_bytes("JPEG"), "image/jpg")},
            headers=self.admin_headers,
        )
        self.assertEqual(response.status_code, 200, response.text)
        self.assertTrue(response.json()["data"]["image_path"].endswith(".jpg"))

    def test_oversized_upload_is_rejected_without_reading(self):
        reads = []
        original_read = StarletteUploadFile.read

        async def tracking_read(upload, *args, **kwargs):
            reads.append(upload.filename)
            return await original_read(upload, *args, **kwargs)

        with mock.patch.object(StarletteUploadFile, "read", tracking_read):
            response = self.client.post(
                f"/api/projects/{self.project['id']}/images",
                files={"file": ("big.png", b"\0" * (MAX_IMAGE_BYTES + 1), "image/png")},
                headers=self.admin_headers,
            )
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["message"], TOO_LARGE_MESSAGE)
        self.assertEqual(reads, [])
        self.assertEqual(self.storage.stored_objects, {})


class BatchUploadTests(ApiTestCase):
    def setUp(self):
        super().setUp()
        self.project = self.create_project()
        self.url = f"/api/projects/{self.project['id']}/images/batch"

    def post_batch(self, count, fmt="PNG", content_type="image/png"):
        files = [("files", (f"shot-{i}.png", image_bytes(fmt), content_type)) for i in range(count)]
        return self.client.post(self.url, files=files, headers=self.admin_headers)

    def test_batch_stores_every_file_first_primary(self):
        response = self.post_batch(3)
        self.assertEqual(response.status_code, 200, response.text)
        body = response.json()
        self.assertEqual(body["message"], "3 image(s) uploaded successfully")
        self.assertEqual([i["is_primary"] for i in body["data"]], [True, False, False])
        self.assertEqual(len(self.storage.stored_objects), 3)
        self.assertEqual(self.audit_actions().count("UPLOAD_FILE"), 3)

    def test_batch_keeps_existing_primary(self):
        first = self.upload_image(self.project["id"]).json()["data"]
        response = self.post_batch(2)
        self.assertEqual(response.status_code, 200, response.text)
        primaries = [i.id for i in self.db.list_project_images(self.project["id"]) if i.is_primary]
        self.assertEqual(primaries, [first["id"]])

    def test_batch_over_cap_writes_nothing(self):
        for _ in range(5):
            self.upload_image(self.project["id"])
        response = self.post_batch(3)
        self.assertEqual(response.status_code, 400)
        self.assertEqual(
            response.json()["message"],
            "Cannot upload 3 images. Maximum 7 images allowed per project (currently 5)",
        )
        self.assertEqual(len(self.db.list_project_images(self.project["id"])), 5)
        self.assertEqual(len(self.storage.stored_objects), 5)

    def test_batch_fills_cap_exactly(self):
        for _ in range(5):
            self.upload_image(self.project["id"])
        self.assertEqual(self.post_batch(2).status_code, 200)
        self.assertEqual(len(self.db.list_project_images(self.project["id"])), 7)

    def test_one_bad_file_rejects_the_batch(self):
        files = [
            ("files", ("good.png", image_bytes(), "image/png")),
            ("files", ("bad.png", b"not an image", "image/png")),
        ]
        response = self.client.post(self.url, files=files, headers=self.admin_headers)
        self.assertEqual(response.status_code, 400)
        self.assertEqual(self.storage.stored_objects, {})
        self.assertEqual(self.db.list_project_images(self.project["id"]), [])

    def test_no_files(self):
        response = self.client.post(self.url, data={"other": "x"}, headers=self.admin_headers)
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["message"], "No files provided")

    def test_unknown_project(self):
        response = self.client.post(
            "/api/projects/missing/images/batch",
            files=[("files", ("a.png", image_bytes(), "image/png"))],
            headers=self.admin_headers,
        )
        self.assertEqual(response.status_code, 404)


class VideoUploadTests(ApiTestCase):
    def setUp(self):
        super().setUp()
        self.project = self.create_project()
        self.url = f"/api/projects/{self.project['id']}/videos"

    def upload_video(self, data=MP4_BYTES, content_type="video/mp4", filename="demo.mp4"):
        return self.client.post(
            self.url, files={"file": (filename, data, content_type)}, headers=self.admin_headers
        )

    def test_video_is_stored_as_gallery_row(self):
        response = self.upload_video()
        self.assertEqual(response.status_code, 200, response.text)
        body = response.json()
        self.assertEqual(body["message"], "Video uploaded successfully")
        video = body["data"]
        self.assertEqual(video["type"], "video")
        self.assertFalse(video["is_primary"])
        self.assertTrue(video["image_path"].startswith(f"project-{self.project['id']}-video-"))
        self.assertTrue(video["image_path"].endswith(".mp4"))
        self.assertEqual(self.storage.get_bytes("project_images", video["image_path"]), MP4_BYTES)
        self.assertEqual(self.db.audit_logs[-1].action, "UPLOAD_FILE")

    def test_webm_and_quicktime(self):
        webm = self.upload_video(WEBM_BYTES, "video/webm", "clip.webm").json()["data"]
        self.assertTrue(webm["image_path"].endswith(".webm"))
        mov = self.upload_video(MP4_BYTES, "video/quicktime", "clip.mov").json()["data"]
        self.assertTrue(mov["image_path"].endswith(".mov"))

    def test_rejects_other_types_and_bytes(self):
        for data, content_type in ((MP4_BYTES, "video/avi"), (b"plain text here", "video/mp4")):
            with self.subTest(content_type=content_type):
                response = self.upload_video(data, content_type)
                self.assertEqual(response.status_code, 400)
                self.assertEqual(response.json()["message"], INVALID_VIDEO_TYPE_MESSAGE)
        self.assertEqual(self.storage.stored_objects, {})

    def test_first_image_after_video_becomes_primary(self):
        self.upload_video()
        image = self.upload_image(self.project["id"]).json()["data"]
        self.assertTrue(image["is_primary"])

    def test_video_counts_toward_cap(self):
        for _ in range(6):
            self.upload_image(self.project["id"])
        self.assertEqual(self.upload_video().status_code, 200)
        response = self.upload_video()
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["message"], "Maximum of 7 images allowed per project")

    def test_video_is_never_primary(self):
        first = self.upload_image(self.project["id"]).json()["data"]
        video = self.upload_video().json()["data"]
        later = self.upload_image(self.project["id"]).json()["data"]

        response = self.client.post(f"/api/project-images/{video['id']}/primary", headers=self.admin_headers)
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["message"], "Videos cannot be set as primary")

        self.client.delete(f"/api/project-images/{first['id']}", headers=self.admin_headers)
        primaries = [i.id for i in self.db.list_project_images(self.project["id"]) if i.is_primary]
        self.assertEqual(primaries, [later["id"]])


if __name__ == "__main__":
    unittest.main()
