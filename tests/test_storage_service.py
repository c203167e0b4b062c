#!/usr/bin/env python3
"""Tests for image validation and upload routing."""

import re
import unittest

from helpers import fake_remote, local_config, remote_config

from storefront.services.storage_service import MAX_IMAGE_BYTES, ImageStorage, storage_path, validate_image
from storefront.utils.errors import ImageValidationError


class TestImageStorage(unittest.TestCase):

    def setUp(self):
        self.remote = fake_remote()
        self.remote.public_url.side_effect = lambda bucket, path: f"https://cdn.test/{bucket}/{path}"
        self.storage = ImageStorage(config=remote_config(), remote_factory=lambda config: self.remote)

    def test_rejects_non_image_before_any_call(self):
        with self.assertRaises(ImageValidationError):
            self.storage.upload_image("notes.pdf", b"%PDF", "application/pdf")
        self.remote.upload.assert_not_called()

    def test_rejects_oversized_before_any_call(self):
        with self.assertRaises(ImageValidationError):
            self.storage.upload_image("big.jpg", b"0" * (MAX_IMAGE_BYTES + 1), "image/jpeg")
        self.remote.upload.assert_not_called()

    def test_exactly_five_megabytes_is_accepted(self):
        validate_image(b"0" * MAX_IMAGE_BYTES, "image/jpeg")

    def test_rejects_empty_content(self):
        with self.assertRaises(ImageValidationError):
            validate_image(b"", "image/png")

    def test_remote_upload_returns_public_url(self):
        url = self.storage.upload_image("cake.PNG", b"png-bytes", "image/png")

        bucket, path, content, content_type = self.remote.upload.call_args[0]
        self.assertEqual(bucket, "order-images")
        self.assertRegex(path, re.compile(r"^orders/\d+-[a-z0-9]{6}\.PNG$"))
        self.assertEqual(content, b"png-bytes")
        self.assertEqual(content_type, "image/png")
        self.assertEqual(url, f"https://cdn.test/order-images/{path}")

    def test_local_mode_returns_data_url(self):
        storage = ImageStorage(config=local_config(), remote_factory=lambda config: self.remote)
        self.assertEqual(storage.upload_image("a.gif", b"GIF89a", "image/gif"), "data:image/gif;base64,R0lGODlh")
        self.remote.upload.assert_not_called()

    def test_storage_path_extension(self):
        self.assertTrue(storage_path("products", "photo.jpeg", 42).startswith("products/42-"))
        self.assertTrue(storage_path("orders", "photo.jpeg", 42).endswith(".jpeg"))
        self.assertTrue(storage_path("orders", "noext", 42).endswith(".img"))


if __name__ == '__main__':
    unittest.main()
