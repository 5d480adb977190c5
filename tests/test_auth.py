import random

from app.core.avatar import get_avatar_rng, random_avatar_url
from main import app
from tests.test_base import ApiTestCase


class RegisterTestCase(ApiTestCase):

    def test_register_returns_user_and_token(self):
        resp = self.client.post(
            "/auth/register",
            json={"username": "alice", "email": "Alice@Example.com", "password": "secret123"},
        )
        self.assertEqual(resp.status_code, 201)
        body = resp.json()
        self.assertTrue(body["success"])
        user = body["data"]["user"]
        self.assertEqual(user["username"], "alice")
        self.assertEqual(user["email"], "alice@example.com")
        self.assertEqual(user["role"], "user")
        self.assertNotIn("password", user)
        self.assertTrue(body["data"]["token"])

    def test_avatar_comes_from_injected_rng(self):
        app.dependency_overrides[get_avatar_rng] = lambda: random.Random(7)
        resp = self.client.post(
            "/auth/register",
            json={"username": "alice", "email": "alice@example.com", "password": "secret123"},
        )
        self.assertEqual(resp.json()["data"]["user"]["avatar_url"], random_avatar_url(random.Random(7)))

    def test_duplicate_email_conflict(self):
        self.register("alice")
        resp = self.client.post(
            "/auth/register",
            json={"username": "alice2", "email": "alice@example.com", "password": "secret123"},
        )
        self.assertEqual(resp.status_code, 409)
        self.assertFalse(resp.json()["success"])

    def test_duplicate_username_allowed(self):
        self.register("alice", email="one@example.com")
        self.register("alice", email="two@example.com")

    def test_short_password_rejected(self):
        resp = self.client.post(
            "/auth/register",
            json={"username": "alice", "email": "alice@example.com", "password": "123"},
        )
        self.assertEqual(resp.status_code, 400)

    def test_invalid_email_rejected(self):
        resp = self.client.post(
            "/auth/register",
            json={"username": "alice", "email": "not-an-email", "password": "secret123"},
        )
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json()["error"], "ValidationError")

    def test_username_moderated(self):
        resp = self.client.post(
            "/auth/register",
            json={"username": "赌场老板", "email": "boss@example.com", "password": "secret123"},
        )
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json()["error"], "ModerationError")
        self.assertEqual(resp.json()["data"]["found_words"], ["赌场"])


class LoginTestCase(ApiTestCase):

    def setUp(self):
        super().setUp()
        self.uid, self.headers = self.register("alice")

    def test_login_ok(self):
        resp = self.client.post("/auth/login", json={"email": "alice@example.com", "password": "secret123"})
        self.assertEqual(resp.status_code, 200)
        data = resp.json()["data"]
        self.assertEqual(data["user"]["uid"], self.uid)
        self.assertIsNotNone(data["user"]["last_login_at"])

    def test_wrong_password(self):
        resp = self.client.post("/auth/login", json={"email": "alice@example.com", "password": "wrong-pass"})
        self.assertEqual(resp.status_code, 401)

    def test_unknown_email(self):
        resp = self.client.post("/auth/login", json={"email": "nobody@example.com", "password": "secret123"})
        self.assertEqual(resp.status_code, 401)

    def test_inactive_user_forbidden(self):
        _, admin_headers = self.make_admin()
        resp = self.client.put(f"/users/{self.uid}/status", json={"is_active": False}, headers=admin_headers)
        self.assertEqual(resp.status_code, 200)
        self.assertFalse(resp.json()["data"]["is_active"])

        resp = self.client.post("/auth/login", json={"email": "alice@example.com", "password": "secret123"})
        self.assertEqual(resp.status_code, 403)


class UsersTestCase(ApiTestCase):

    def setUp(self):
        super().setUp()
        self.uid, self.headers = self.register("alice")

    def test_me_requires_token(self):
        resp = self.client.get("/users/me")
        self.assertEqual(resp.status_code, 401)
        self.assertEqual(resp.json()["error"], "AuthError")

    def test_invalid_token(self):
        resp = self.client.get("/users/me", headers=self.auth("garbage"))
        self.assertEqual(resp.status_code, 401)

    def test_get_me(self):
        resp = self.client.get("/users/me", headers=self.headers)
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["data"]["email"], "alice@example.com")

    def test_update_me(self):
        resp = self.client.put("/users/me", json={"username": "alice_w"}, headers=self.headers)
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["data"]["username"], "alice_w")

    def test_update_me_moderated(self):
        resp = self.client.put("/users/me", json={"username": "赌场老板"}, headers=self.headers)
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json()["error"], "ModerationError")
        self.assertEqual(resp.json()["data"]["found_words"], ["赌场"])
        self.assertEqual(self.client.get("/users/me", headers=self.headers).json()["data"]["username"], "alice")

    def test_change_password(self):
        resp = self.client.put(
            "/users/me/password",
            json={"old_password": "wrong-pass", "new_password": "another123"},
            headers=self.headers,
        )
        self.assertEqual(resp.status_code, 400)

        resp = self.client.put(
            "/users/me/password",
            json={"old_password": "secret123", "new_password": "another123"},
            headers=self.headers,
        )
        self.assertEqual(resp.status_code, 200)
        self.login("alice@example.com", "another123")

    def test_public_profile(self):
        resp = self.client.get(f"/users/{self.uid}")
        self.assertEqual(resp.status_code, 200)
        data = resp.json()["data"]
        self.assertEqual(data["user"]["uid"], self.uid)
        self.assertEqual(data["following_count"], 0)
        self.assertEqual(data["followers_count"], 0)
        self.assertNotIn("email", data["user"])

    def test_unknown_profile(self):
        resp = self.client.get("/users/does-not-exist")
        self.assertEqual(resp.status_code, 404)

    def test_admin_routes_forbidden_for_users(self):
        resp = self.client.put(f"/users/{self.uid}/role", json={"role": "admin"}, headers=self.headers)
        self.assertEqual(resp.status_code, 403)
        self.assertEqual(resp.json()["error"], "PermissionDeniedError")

    def test_admin_sets_role(self):
        _, admin_headers = self.make_admin()
        resp = self.client.put(f"/users/{self.uid}/role", json={"role": "admin"}, headers=admin_headers)
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["data"]["role"], "admin")
