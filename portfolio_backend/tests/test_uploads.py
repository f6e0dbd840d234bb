import unittest

from portfolio_backend.errors import ApiError
from portfolio_backend.storage import (
    InMemoryStorageClient,
    ObjectExistsError,
    storage_path_from_url,
)
from portfolio_backend.tests.support import image_bytes
from portfolio_backend.uploads import (
    INVALID_TYPE_MESSAGE,
    INVALID_VIDEO_TYPE_MESSAGE,
    MAX_IMAGE_BYTES,
    MAX_VIDEO_BYTES,
    TOO_LARGE_MESSAGE,
    VIDEO_TOO_LARGE_MESSAGE,
    check_image_upload,
    file_extension,
    validate_image,
    validate_video,
)


class ValidateImageTests(unittest.TestCase):
    def assert_rejected(self, content_type, data, message):
        with self.assertRaises(ApiError) as ctx:
            validate_image(content_type, data)
        self.assertEqual(ctx.exception.status_code, 400)
        self.assertEqual(ctx.exception.message, message)

    def test_accepts_allowed_types(self):
        self.assertEqual(validate_image("image/png", image_bytes("PNG")), "image/png")
        self.assertEqual(validate_image("IMAGE/JPEG", image_bytes("JPEG")), "image/jpeg")
        self.assertEqual(validate_image("image/jpg", image_bytes("JPEG")), "image/jpg")
        self.assertEqual(validate_image("image/webp", image_bytes("WEBP")), "image/webp")

    def test_rejects_unlisted_type(self):
        self.assert_rejected("image/gif", image_bytes("GIF"), INVALID_TYPE_MESSAGE)
        self.assert_rejected(None, image_bytes("PNG"), INVALID_TYPE_MESSAGE)

    def test_type_checked_before_size(self):
        self.assert_rejected("application/pdf", b"\0" * (MAX_IMAGE_BYTES + 1), INVALID_TYPE_MESSAGE)

    def test_size_limit_is_inclusive(self):
        self.assert_rejected("image/png", b"\0" * (MAX_IMAGE_BYTES + 1), TOO_LARGE_MESSAGE)
        # Exactly at the limit passes the size check and fails on content instead.
        self.assert_rejected("image/png", b"\0" * MAX_IMAGE_BYTES, INVALID_TYPE_MESSAGE)

    def test_declared_type_must_match_bytes(self):
        self.assert_rejected("image/png", image_bytes("JPEG"), INVALID_TYPE_MESSAGE)

    def test_declared_size_checked_before_reading(self):
        self.assertEqual(check_image_upload("image/png", MAX_IMAGE_BYTES), "image/png")
        self.assertEqual(check_image_upload("image/png", None), "image/png")
        with self.assertRaises(ApiError) as ctx:
            check_image_upload("image/png", MAX_IMAGE_BYTES + 1)
        self.assertEqual(ctx.exception.message, TOO_LARGE_MESSAGE)
        with self.assertRaises(ApiError) as ctx:
            check_image_upload("image/gif", 10)
        self.assertEqual(ctx.exception.message, INVALID_TYPE_MESSAGE)


class ValidateVideoTests(unittest.TestCase):
    def assert_rejected(self, content_type, data, message):
        with self.assertRaises(ApiError) as ctx:
            validate_video(content_type, data)
        self.assertEqual(ctx.exception.status_code, 400)
        self.assertEqual(ctx.exception.message, message)

    def test_accepts_known_containers(self):
        mp4 = b"\x00\x00\x00\x18ftypisom" + b"\x00" * 8
        self.assertEqual(validate_video("video/mp4", mp4), "video/mp4")
        self.assertEqual(validate_video("Video/QuickTime", mp4), "video/quicktime")
        self.assertEqual(validate_video("video/webm", b"\x1a\x45\xdf\xa3\x01"), "video/webm")

    def test_rejects_unlisted_type(self):
        self.assert_rejected("video/x-msvideo", b"RIFF....AVI ", INVALID_VIDEO_TYPE_MESSAGE)
        self.assert_rejected("image/png", image_bytes("PNG"), INVALID_VIDEO_TYPE_MESSAGE)

    def test_rejects_oversized(self):
        self.assert_rejected("video/mp4", b"\0" * (MAX_VIDEO_BYTES + 1), VIDEO_TOO_LARGE_MESSAGE)

    def test_rejects_mislabelled_bytes(self):
        self.assert_rejected("video/webm", b"\x00\x00\x00\x18ftypmp42", INVALID_VIDEO_TYPE_MESSAGE)
        self.assert_rejected("video/mp4", image_bytes("PNG"), INVALID_VIDEO_TYPE_MESSAGE)


class NamingTests(unittest.TestCase):
    def test_extension_from_filename(self):
        self.assertEqual(file_extension("Photo.JPEG", "image/jpeg"), "jpeg")

    def test_extension_falls_back_to_content_type(self):
        self.assertEqual(file_extension(None, "image/png"), "png")
        self.assertEqual(file_extension("payload.exe", "image/webp"), "webp")
        self.assertEqual(file_extension("noext", "image/jpg"), "jpg")

    def test_extension_must_match_decoded_format(self):
        self.assertEqual(file_extension("x.png", "image/jpg"), "jpg")
        self.assertEqual(file_extension("photo.jpg", "image/webp"), "webp")
        self.assertEqual(file_extension("photo.jpeg", "image/jpg"), "jpeg")

    def test_storage_path_from_url(self):
        url = "https://example.test/storage/v1/object/public/project_images/a/b.png?t=1"
        self.assertEqual(storage_path_from_url(url, "project_images"), "a/b.png")
        self.assertIsNone(storage_path_from_url(url, "developer_profiles"))
        self.assertIsNone(storage_path_from_url(None, "project_images"))


class InMemoryStorageTests(unittest.TestCase):
    def test_upload_without_upsert_refuses_overwrite(self):
        storage = InMemoryStorageClient()
        storage.upload_bytes("project_images", "a.png", b"one", "image/png")
        with self.assertRaises(ObjectExistsError):
            storage.upload_bytes("project_images", "a.png", b"two", "image/png")
        storage.upload_bytes("project_images", "a.png", b"two", "image/png", upsert=True)
        self.assertEqual(storage.get_bytes("project_images", "a.png"), b"two")

    def test_remove_ignores_missing_objects(self):
        storage = InMemoryStorageClient()
        storage.upload_bytes("project_images", "a.png", b"x", "image/png")
        storage.remove("project_images", ["a.png", "never-there.png"])
        self.assertEqual(storage.list_objects("project_images"), [])
        with self.assertRaises(FileNotFoundError):
            storage.get_bytes("project_images", "a.png")


if __name__ == "__main__":
    unittest.main()
