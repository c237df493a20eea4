import importlib
import os
import unittest
from unittest.mock import patch
import jwt


class JwtAuthorizerTests(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        cls.env = patch.dict(os.environ, {"JWT_SECRET": "testsecret", "JWT_ALGORITHM": "HS256"}, clear=False)
        cls.env.start()
        import handlers.auth.jwt_authorizer as mod
        cls.mod = importlib.reload(mod)

    @classmethod
    def tearDownClass(cls):
        cls.env.stop()

    def setUp(self):
        self.p_decode = patch("handlers.auth.jwt_authorizer.jwt.decode")
        self.mock_decode = self.p_decode.start()

    def tearDown(self):
        self.p_decode.stop()

    def _event(self, token=None, method_arn="arn:aws:execute-api:123/test/GET/resource", headers=None):
        event = {"methodArn": method_arn}
        if token:
            event["authorizationToken"] = token
        if headers:
            event["headers"] = headers
        return event

    def _effect(self, resp):
        return resp["policyDocument"]["Statement"][0]["Effect"]

    def test_missing_token_denies(self):
        resp = self.mod.lambda_handler(self._event(), None)
        self.assertEqual("Deny", self._effect(resp))
        self.assertEqual("unauthorized", resp["principalId"])
        self.mock_decode.assert_not_called()

    def test_admin_token_allows(self):
        self.mock_decode.return_value = {"user_id": "u2", "email": "x@test.com", "name": "Desk", "role": "admin"}
        resp = self.mod.lambda_handler(self._event(token="Bearer testtoken"), None)
        self.assertEqual("Allow", self._effect(resp))
        self.assertEqual("u2", resp["principalId"])
        self.assertEqual("ADMIN", resp["context"]["role"])
        self.assertEqual("Desk", resp["context"]["name"])
        self.assertEqual("testtoken", self.mock_decode.call_args.args[0])

    def test_header_token_is_accepted(self):
        self.mock_decode.return_value = {"user_id": "u2", "role": "ADMIN"}
        resp = self.mod.lambda_handler(self._event(headers={"authorization": "Bearer t"}), None)
        self.assertEqual("Allow", self._effect(resp))

    def test_non_admin_role_denies(self):
        self.mock_decode.return_value = {"user_id": "u3", "role": "STAFF"}
        resp = self.mod.lambda_handler(self._event(token="Bearer testtoken"), None)
        self.assertEqual("Deny", self._effect(resp))

    def test_token_missing_user_id_denies(self):
        self.mock_decode.return_value = {"email": "e@test.com", "role": "ADMIN"}
        resp = self.mod.lambda_handler(self._event(token="Bearer testtoken"), None)
        self.assertEqual("Deny", self._effect(resp))

    def test_expired_signature_denies(self):
        self.mock_decode.side_effect = jwt.ExpiredSignatureError()
        resp = self.mod.lambda_handler(self._event(token="Bearer testtoken"), None)
        self.assertEqual("Deny", self._effect(resp))

    def test_invalid_token_denies(self):
        self.mock_decode.side_effect = jwt.InvalidTokenError()
        resp = self.mod.lambda_handler(self._event(token="Bearer testtoken"), None)
        self.assertEqual("Deny", self._effect(resp))

    def test_policy_covers_whole_stage(self):
        self.mock_decode.return_value = {"user_id": "u2", "role": "ADMIN"}
        resp = self.mod.lambda_handler(self._event(token="Bearer t"), None)
        self.assertEqual(
            "arn:aws:execute-api:123/test/*/*",
            resp["policyDocument"]["Statement"][0]["Resource"],
        )


if __name__ == "__main__":
    unittest.main()
