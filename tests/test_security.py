"""Unit tests for app.core.security: bcrypt hashing and JWT round trip."""

import unittest
from datetime import UTC, datetime, timedelta

import jwt
from pydantic import SecretStr

from app.core.config import Settings
from app.core.security import (
    create_access_token,
    decode_access_token,
    hash_password,
    verify_password,
)

TEST_SECRET = "unit-test-secret-that-is-long-enough"


class TestPasswordHashing(unittest.TestCase):
    def test_hash_is_not_plaintext_and_verifies(self) -> None:
        hashed = hash_password("secret1", rounds=4)
        self.assertNotEqual(hashed, "secret1")
        self.assertTrue(hashed.startswith("$2"))
        self.assertTrue(verify_password("secret1", hashed))
        self.assertFalse(verify_password("secret2", hashed))

    def test_same_password_gets_distinct_salts(self) -> None:
        self.assertNotEqual(hash_password("secret1", rounds=4), hash_password("secret1", rounds=4))

    def test_malformed_hash_does_not_verify(self) -> None:
        self.assertFalse(verify_password("secret1", "not-a-bcrypt-hash"))


class TestAccessToken(unittest.TestCase):
    def setUp(self) -> None:
        self.settings = Settings(JWT_SECRET=SecretStr(TEST_SECRET), JWT_EXPIRE_MINUTES=5)

    def test_round_trip(self) -> None:
        token = create_access_token(sub=7, role="admin", settings=self.settings)
        payload = decode_access_token(token, self.settings)
        self.assertEqual(payload["sub"], "7")
        self.assertEqual(payload["role"], "admin")

    def test_expired_token_rejected(self) -> None:
        past = datetime.now(UTC) - timedelta(minutes=1)
        token = jwt.encode({"sub": "7", "role": "user", "exp": past}, TEST_SECRET, algorithm="HS256")
        with self.assertRaises(jwt.ExpiredSignatureError):
            decode_access_token(token, self.settings)

    def test_wrong_secret_rejected(self) -> None:
        token = jwt.encode({"sub": "7", "role": "user"}, "another-secret-that-is-long-enough-000", algorithm="HS256")
        with self.assertRaises(jwt.InvalidSignatureError):
            decode_access_token(token, self.settings)


if __name__ == "__main__":
    unittest.main()
