import importlib
import json
import os
import unittest
from datetime import date
from unittest.mock import MagicMock, patch

from common.models.bookings import Booking, BookedRoom, Guest, Stay
from common.utils.custom_exceptions import NotFoundException


class GetBookingsTests(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        cls.env = patch.dict(os.environ, {"TABLE_NAME": "test-table"}, clear=False)
        cls.env.start()
        cls.resource = patch("handlers.bookings.get_bookings.resource")
        mock_res = cls.resource.start()
        mock_res.return_value.Table.return_value = MagicMock()
        import handlers.bookings.get_bookings as mod
        cls.mod = importlib.reload(mod)

    @classmethod
    def tearDownClass(cls):
        cls.resource.stop()
        cls.env.stop()

    def setUp(self):
        self.p_list = patch.object(self.mod.booking_service, "list_bookings")
        self.p_get = patch.object(self.mod.booking_service, "get_booking")
        self.mock_list = self.p_list.start()
        self.mock_get = self.p_get.start()
        self.booking = Booking(
            id="b1",
            guest=Guest(name="Asha", email="asha@example.com"),
            room=BookedRoom(name="Deluxe"),
            stay=Stay(check_in=date(2024, 5, 1), check_out=date(2024, 5, 3)),
        )

    def tearDown(self):
        self.p_list.stop()
        self.p_get.stop()

    def _event(self, params=None, path=None, role="ADMIN"):
        return {
            "queryStringParameters": params,
            "pathParameters": path,
            "requestContext": {"authorizer": {"role": role}},
        }

    def test_list_success(self):
        self.mock_list.return_value = [self.booking]

        resp = self.mod.get_bookings(self._event({"status": "pending", "search": "asha"}), None)

        self.assertEqual(200, resp["statusCode"])
        self.mock_list.assert_called_once_with(status="pending", search="asha")
        data = json.loads(resp["body"])["data"]
        self.assertEqual(data["count"], 1)
        self.assertEqual(data["bookings"][0]["stay"]["check_in"], "2024-05-01")
        self.assertEqual(data["bookings"][0]["status"], "pending")

    def test_list_defaults_to_all(self):
        self.mock_list.return_value = []

        self.mod.get_bookings(self._event(), None)

        self.mock_list.assert_called_once_with(status="all", search=None)

    def test_list_invalid_status_returns_400(self):
        resp = self.mod.get_bookings(self._event({"status": "archived"}), None)
        self.assertEqual(400, resp["statusCode"])
        self.mock_list.assert_not_called()

    def test_list_unhandled_error_returns_500(self):
        self.mock_list.side_effect = RuntimeError("boom")
        resp = self.mod.get_bookings(self._event(), None)
        self.assertEqual(500, resp["statusCode"])

    def test_list_forbidden_for_non_admin(self):
        resp = self.mod.get_bookings(self._event(role="STAFF"), None)
        self.assertEqual(403, resp["statusCode"])

    def test_get_booking_success(self):
        self.mock_get.return_value = self.booking

        resp = self.mod.get_booking(self._event(path={"booking_id": "b1"}), None)

        self.assertEqual(200, resp["statusCode"])
        self.assertEqual(json.loads(resp["body"])["data"]["id"], "b1")

    def test_get_booking_not_found(self):
        self.mock_get.side_effect = NotFoundException("booking", "b9", 404)

        resp = self.mod.get_booking(self._event(path={"booking_id": "b9"}), None)

        self.assertEqual(404, resp["statusCode"])

    def test_get_booking_missing_id(self):
        resp = self.mod.get_booking(self._event(path={}), None)
        self.assertEqual(400, resp["statusCode"])


if __name__ == "__main__":
    unittest.main()
