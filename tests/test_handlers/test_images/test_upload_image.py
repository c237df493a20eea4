import json
import unittest
from unittest.mock import patch

import handlers.images.upload_image as mod
from common.utils.custom_exceptions import ImageUploadFailed


class UploadImageTests(unittest.TestCase):

    def setUp(self):
        self.p_upload = patch.object(mod.image_service, "upload")
        self.mock_upload = self.p_upload.start()

    def tearDown(self):
        self.p_upload.stop()

    def _event(self, body=None, role="ADMIN"):
        return {
            "body": json.dumps(body) if body is not None else None,
            "requestContext": {"authorizer": {"role": role}},
        }

    def test_success_returns_url(self):
        self.mock_upload.return_value = "https://i.ibb.co/abc/room.jpg"

        resp = mod.upload_image(self._event({"image": "aGVsbG8=", "filename": "room.jpg"}), None)

        self.assertEqual(201, resp["statusCode"])
        self.assertEqual(json.loads(resp["body"])["data"]["url"], "https://i.ibb.co/abc/room.jpg")
        self.mock_upload.assert_called_once_with("aGVsbG8=", filename="room.jpg")

    def test_missing_body_returns_400(self):
        resp = mod.upload_image(self._event(), None)
        self.assertEqual(400, resp["statusCode"])

    def test_empty_image_returns_400(self):
        resp = mod.upload_image(self._event({"image": ""}), None)
        self.assertEqual(400, resp["statusCode"])

    def test_upstream_failure_returns_502(self):
        self.mock_upload.side_effect = ImageUploadFailed("Invalid API v1 key.")

        resp = mod.upload_image(self._event({"image": "aGVsbG8="}), None)

        self.assertEqual(502, resp["statusCode"])
        self.assertIn("Invalid API v1 key.", json.loads(resp["body"])["message"])

    def test_non_admin_forbidden(self):
        resp = mod.upload_image(self._event({"image": "aGVsbG8="}, role="STAFF"), None)
        self.assertEqual(403, resp["statusCode"])


if __name__ == "__main__":
    unittest.main()
