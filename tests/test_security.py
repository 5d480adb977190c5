import random
import unittest
from datetime import datetime, timedelta, timezone

import jwt

from app.core.avatar import AVATAR_STYLES, random_avatar_url
from app.core.config import settings
from app.core.exceptions import AuthError
from app.core.security import (
    create_access_token,
    decode_access_token,
    hash_password,
    verify_password,
)


class PasswordHashTestCase(unittest.TestCase):

    def test_hash_and_verify(self):
        hashed = hash_password("secret123")
        self.assertNotEqual(hashed, "secret123")
        self.assertTrue(verify_password("secret123", hashed))
        self.assertFalse(verify_password("wrong-pass", hashed))

    def test_verify_against_garbage_hash(self):
        self.assertFalse(verify_password("secret123", "not-a-hash"))


class AccessTokenTestCase(unittest.TestCase):

    def test_round_trip(self):
        token = create_access_token("u-1", "a@example.com", "admin")
        payload = decode_access_token(token)
        self.assertEqual(payload["userId"], "u-1")
        self.assertEqual(payload["email"], "a@example.com")
        self.assertEqual(payload["role"], "admin")

    def test_expired_token(self):
        past = datetime.now(timezone.utc) - timedelta(hours=2)
        token = jwt.encode(
            {"userId": "u-1", "iat": past, "exp": past + timedelta(minutes=5)},
            settings.JWT_SECRET_KEY,
            algorithm=settings.JWT_ALGORITHM,
        )
        with self.assertRaises(AuthError) as ctx:
            decode_access_token(token)
        self.assertIn("expired", ctx.exception.message)

    def test_wrong_signature(self):
        token = jwt.encode({"userId": "u-1"}, "another-secret-key-that-is-long-enough", algorithm="HS256")
        with self.assertRaises(AuthError):
            decode_access_token(token)

    def test_missing_user_id(self):
        token = jwt.encode({"email": "a@example.com"}, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)
        with self.assertRaises(AuthError):
            decode_access_token(token)


class AvatarTestCase(unittest.TestCase):

    def test_url_uses_known_style(self):
        url = random_avatar_url(random.Random(1))
        self.assertTrue(url.startswith("https://api.dicebear.com/9.x/"))
        self.assertTrue(url.endswith("/svg"))
        self.assertIn(url.split("/")[-2], AVATAR_STYLES)

    def test_seeded_rng_is_reproducible(self):
        self.assertEqual(random_avatar_url(random.Random(42)), random_avatar_url(random.Random(42)))


if __name__ == "__main__":
    unittest.main()
