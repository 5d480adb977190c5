from tests.test_base import ApiTestCase


class BlacklistTestCase(ApiTestCase):

    def setUp(self):
        super().setUp()
        self.alice, self.alice_headers = self.register("alice")
        self.bob, self.bob_headers = self.register("bob")

    def block(self, headers, target, reason=None):
        kwargs = {"json": {"reason": reason}} if reason is not None else {}
        return self.client.post(f"/block/{target}", headers=headers, **kwargs)

    def test_block_with_reason(self):
        resp = self.block(self.alice_headers, self.bob, reason="spam")
        self.assertEqual(resp.status_code, 200)
        data = resp.json()["data"]
        self.assertEqual(data["blocker_id"], self.alice)
        self.assertEqual(data["blocked_id"], self.bob)
        self.assertEqual(data["reason"], "spam")

    def test_block_without_body(self):
        resp = self.block(self.alice_headers, self.bob)
        self.assertEqual(resp.status_code, 200)
        self.assertIsNone(resp.json()["data"]["reason"])

    def test_block_yourself(self):
        resp = self.block(self.alice_headers, self.alice)
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json()["error"], "SelfReferenceError")

    def test_block_twice(self):
        self.block(self.alice_headers, self.bob)
        resp = self.block(self.alice_headers, self.bob)
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json()["error"], "AlreadyExistsError")

    def test_block_unknown_user(self):
        resp = self.block(self.alice_headers, "no-such-user")
        self.assertEqual(resp.status_code, 404)

    def test_reason_too_long(self):
        resp = self.block(self.alice_headers, self.bob, reason="x" * 201)
        self.assertEqual(resp.status_code, 400)

    def test_reason_moderated(self):
        resp = self.block(self.alice_headers, self.bob, reason="他在赌场洗钱")
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json()["error"], "ModerationError")
        self.assertEqual(resp.json()["data"]["found_words"], ["赌场", "洗钱"])

        data = self.client.get(f"/block/check/{self.bob}", headers=self.alice_headers).json()["data"]
        self.assertFalse(data["is_blocked"])

    def test_blank_reason_stored_as_none(self):
        resp = self.block(self.alice_headers, self.bob, reason="   ")
        self.assertEqual(resp.status_code, 200)
        self.assertIsNone(resp.json()["data"]["reason"])

    def test_check_is_directional(self):
        self.block(self.alice_headers, self.bob)

        data = self.client.get(f"/block/check/{self.bob}", headers=self.alice_headers).json()["data"]
        self.assertTrue(data["is_blocked"])
        self.assertTrue(data["has_block_relation"])

        data = self.client.get(f"/block/check/{self.alice}", headers=self.bob_headers).json()["data"]
        self.assertFalse(data["is_blocked"])
        self.assertTrue(data["has_block_relation"])

    def test_list_blocked(self):
        carol, _ = self.register("carol")
        self.block(self.alice_headers, self.bob, reason="spam")
        self.block(self.alice_headers, carol)

        data = self.client.get("/block", headers=self.alice_headers).json()["data"]
        self.assertEqual(data["total"], 2)
        self.assertEqual({item["user"]["uid"] for item in data["items"]}, {self.bob, carol})

        data = self.client.get("/block", params={"page": 0, "page_size": 1}, headers=self.alice_headers).json()["data"]
        self.assertEqual(data["total"], 2)
        self.assertEqual(data["count"], 1)

    def test_unblock(self):
        self.block(self.alice_headers, self.bob)
        resp = self.client.delete(f"/block/{self.bob}", headers=self.alice_headers)
        self.assertEqual(resp.status_code, 200)

        data = self.client.get(f"/block/check/{self.bob}", headers=self.alice_headers).json()["data"]
        self.assertFalse(data["is_blocked"])
        self.assertFalse(data["has_block_relation"])

        resp = self.client.delete(f"/block/{self.bob}", headers=self.alice_headers)
        self.assertEqual(resp.status_code, 404)

    def test_block_keeps_existing_follow(self):
        self.client.post("/follow/follow", json={"user_id": self.bob}, headers=self.alice_headers)
        self.block(self.alice_headers, self.bob)

        resp = self.client.get("/follow/status", params={"user_id": self.alice, "follow_id": self.bob})
        self.assertTrue(resp.json()["data"]["is_following"])
