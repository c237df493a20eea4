import importlib
import json
import os
import unittest
from unittest.mock import MagicMock, patch
from botocore.exceptions import ClientError

from common.utils.custom_exceptions import (
    BookingConflict,
    InvalidTransition,
    InventoryReleaseFailed,
    NotFoundException,
)


class UpdateBookingStatusTests(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        cls.env = patch.dict(os.environ, {"TABLE_NAME": "test-table"}, clear=False)
        cls.env.start()
        cls.resource = patch("handlers.bookings.update_booking_status.resource")
        mock_res = cls.resource.start()
        mock_res.return_value.Table.return_value = MagicMock()
        import handlers.bookings.update_booking_status as mod
        cls.mod = importlib.reload(mod)

    @classmethod
    def tearDownClass(cls):
        cls.resource.stop()
        cls.env.stop()

    def setUp(self):
        self.patches = {
            name: patch.object(self.mod.booking_service, name)
            for name in ("verify_payment", "reject_payment", "cancel", "reconfirm")
        }
        self.mocks = {name: p.start() for name, p in self.patches.items()}
        for mock in self.mocks.values():
            mock.return_value = {"id": "b1"}

    def tearDown(self):
        for p in self.patches.values():
            p.stop()

    def _event(self, action="cancel", body=None, role="ADMIN", booking_id="b1"):
        return {
            "pathParameters": {"booking_id": booking_id, "action": action},
            "body": json.dumps(body if body is not None else {"confirm": True}),
            "requestContext": {"authorizer": {"role": role} if role else {}},
        }

    def test_each_action_dispatches_to_service(self):
        expected = {
            "verify": "verify_payment",
            "reject": "reject_payment",
            "cancel": "cancel",
            "reconfirm": "reconfirm",
        }
        for action, method in expected.items():
            with self.subTest(action=action):
                resp = self.mod.update_booking_status(self._event(action=action), None)
                self.assertEqual(200, resp["statusCode"])
                self.mocks[method].assert_called_with("b1", expected_version=None)

    def test_expected_version_is_forwarded(self):
        self.mod.update_booking_status(
            self._event(body={"confirm": True, "expected_version": 4}), None
        )
        self.mocks["cancel"].assert_called_once_with("b1", expected_version=4)

    def test_missing_confirmation_returns_400(self):
        resp = self.mod.update_booking_status(self._event(body={}), None)
        self.assertEqual(400, resp["statusCode"])
        self.assertIn("Confirmation required", json.loads(resp["body"])["message"])
        self.mocks["cancel"].assert_not_called()

    def test_unknown_action_returns_400(self):
        resp = self.mod.update_booking_status(self._event(action="archive"), None)
        self.assertEqual(400, resp["statusCode"])

    def test_invalid_body_returns_400(self):
        resp = self.mod.update_booking_status(
            self._event(body={"confirm": True, "expected_version": -1}), None
        )
        self.assertEqual(400, resp["statusCode"])

    def test_missing_role_returns_401(self):
        resp = self.mod.update_booking_status(self._event(role=None), None)
        self.assertEqual(401, resp["statusCode"])

    def test_non_admin_role_returns_403(self):
        resp = self.mod.update_booking_status(self._event(role="GUEST"), None)
        self.assertEqual(403, resp["statusCode"])

    def test_error_mapping(self):
        cases = [
            (NotFoundException("booking", "b1", 404), 404),
            (InvalidTransition("b1", "cancelled", "cancel"), 400),
            (BookingConflict("b1"), 409),
            (InventoryReleaseFailed("b1", RuntimeError("down")), 500),
            (ClientError({"Error": {"Code": "AccessDenied"}}, "UpdateItem"), 500),
            (RuntimeError("boom"), 500),
        ]
        for error, status in cases:
            with self.subTest(error=type(error).__name__):
                self.mocks["cancel"].side_effect = error
                resp = self.mod.update_booking_status(self._event(), None)
                self.assertEqual(status, resp["statusCode"])


if __name__ == "__main__":
    unittest.main()
