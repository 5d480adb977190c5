from unittest import mock

from app.core.exceptions import UnexpectedError
from app.storage.database import SessionLocal
from app.storage.user_stats.SQLAlchemyUserStatsRepository import SQLAlchemyUserStatsRepository
from tests.test_base import ApiTestCase


class FollowTestCase(ApiTestCase):

    def setUp(self):
        super().setUp()
        self.alice, self.alice_headers = self.register("alice")
        self.bob, self.bob_headers = self.register("bob")
        self.carol, self.carol_headers = self.register("carol")

    def follow(self, headers, target):
        return self.client.post("/follow/follow", json={"user_id": target}, headers=headers)

    def unfollow(self, headers, target):
        return self.client.post("/follow/unfollow", json={"user_id": target}, headers=headers)

    def profile(self, uid):
        return self.client.get(f"/users/{uid}").json()["data"]

    def test_follow_updates_both_counters(self):
        resp = self.follow(self.alice_headers, self.bob)
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["data"]["followed_user_id"], self.bob)

        self.assertEqual(self.profile(self.alice)["following_count"], 1)
        self.assertEqual(self.profile(self.alice)["followers_count"], 0)
        self.assertEqual(self.profile(self.bob)["followers_count"], 1)

    def test_follow_notifies_target(self):
        self.follow(self.alice_headers, self.bob)
        items = self.notifications(self.bob_headers)["items"]
        self.assertEqual(len(items), 1)
        self.assertEqual(items[0]["type"], "follow")
        self.assertEqual(items[0]["sender_id"], self.alice)
        self.assertEqual(items[0]["sender"]["username"], "alice")

    def test_follow_yourself(self):
        resp = self.follow(self.alice_headers, self.alice)
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json()["error"], "SelfReferenceError")
        self.assertEqual(self.profile(self.alice)["following_count"], 0)

    def test_follow_twice(self):
        self.follow(self.alice_headers, self.bob)
        resp = self.follow(self.alice_headers, self.bob)
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json()["error"], "AlreadyExistsError")
        self.assertEqual(self.profile(self.bob)["followers_count"], 1)

    def test_follow_unknown_user(self):
        resp = self.follow(self.alice_headers, "no-such-user")
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json()["error"], "NotFoundError")

    def test_follow_requires_login(self):
        resp = self.client.post("/follow/follow", json={"user_id": self.bob})
        self.assertEqual(resp.status_code, 401)

    def test_unfollow_restores_counters(self):
        self.follow(self.alice_headers, self.bob)
        resp = self.unfollow(self.alice_headers, self.bob)
        self.assertEqual(resp.status_code, 200)
        self.assertTrue(resp.json()["data"])

        self.assertEqual(self.profile(self.alice)["following_count"], 0)
        self.assertEqual(self.profile(self.bob)["followers_count"], 0)

    def test_unfollow_when_not_following(self):
        resp = self.unfollow(self.alice_headers, self.bob)
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(self.profile(self.alice)["following_count"], 0)

    def test_refollow_after_unfollow(self):
        self.follow(self.alice_headers, self.bob)
        self.unfollow(self.alice_headers, self.bob)
        resp = self.follow(self.alice_headers, self.bob)
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(self.profile(self.bob)["followers_count"], 1)

    def test_follow_status(self):
        self.follow(self.alice_headers, self.bob)
        resp = self.client.get("/follow/status", params={"user_id": self.alice, "follow_id": self.bob})
        self.assertTrue(resp.json()["data"]["is_following"])
        resp = self.client.get("/follow/status", params={"user_id": self.bob, "follow_id": self.alice})
        self.assertFalse(resp.json()["data"]["is_following"])

    def test_relationship_info_for_viewer(self):
        # alice -> bob, carol -> bob, alice -> carol
        self.follow(self.alice_headers, self.bob)
        self.follow(self.carol_headers, self.bob)
        self.follow(self.alice_headers, self.carol)

        resp = self.client.get("/follow/info", params={"user_id": self.bob}, headers=self.alice_headers)
        self.assertEqual(resp.status_code, 200)
        data = resp.json()["data"]
        self.assertEqual(data["followers_count"], 2)
        self.assertTrue(data["is_following"])
        # 新关注的在前
        self.assertEqual([u["uid"] for u in data["followers"]], [self.carol, self.alice])
        flags = {u["uid"]: u["is_following"] for u in data["followers"]}
        self.assertEqual(flags, {self.carol: True, self.alice: False})

    def test_relationship_info_defaults_to_self(self):
        self.follow(self.alice_headers, self.bob)
        data = self.client.get("/follow/info", headers=self.alice_headers).json()["data"]
        self.assertEqual(data["user_id"], self.alice)
        self.assertEqual([u["uid"] for u in data["following"]], [self.bob])
        self.assertTrue(data["following"][0]["is_following"])

    def test_relationship_info_anonymous(self):
        self.follow(self.alice_headers, self.bob)
        resp = self.client.get("/follow/info", params={"user_id": self.bob})
        self.assertEqual(resp.status_code, 200)
        data = resp.json()["data"]
        self.assertFalse(data["is_following"])
        self.assertFalse(data["followers"][0]["is_following"])

        resp = self.client.get("/follow/info")
        self.assertEqual(resp.status_code, 400)

    def test_counter_failure_then_reconcile(self):
        with mock.patch.object(
            SQLAlchemyUserStatsRepository,
            "update_followers",
            side_effect=UnexpectedError("stats table unavailable"),
        ):
            resp = self.follow(self.alice_headers, self.bob)
        self.assertEqual(resp.status_code, 500)

        # 关注关系已经落库，粉丝数没跟上
        self.assertTrue(
            self.client.get("/follow/status", params={"user_id": self.alice, "follow_id": self.bob})
            .json()["data"]["is_following"]
        )
        self.assertEqual(self.profile(self.bob)["followers_count"], 0)

        _, admin_headers = self.make_admin()
        resp = self.client.post(f"/users/{self.bob}/stats/reconcile", headers=admin_headers)
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["data"]["followers_count"], 1)
        self.assertEqual(self.profile(self.bob)["followers_count"], 1)

    def test_reconcile_requires_admin(self):
        resp = self.client.post(f"/users/{self.bob}/stats/reconcile", headers=self.alice_headers)
        self.assertEqual(resp.status_code, 403)


class UserStatsRepositoryTestCase(ApiTestCase):

    def setUp(self):
        super().setUp()
        self.uid, _ = self.register("alice")
        self.db = SessionLocal()
        self.repo = SQLAlchemyUserStatsRepository(self.db)

    def tearDown(self):
        self.db.close()
        super().tearDown()

    def test_decrement_stops_at_zero(self):
        stats = self.repo.update_followers(self.uid, step=-1)
        self.assertEqual(stats.followers_count, 0)

    def test_increments_accumulate(self):
        self.repo.update_following(self.uid, step=1)
        self.repo.update_following(self.uid, step=1)
        stats = self.repo.update_following(self.uid, step=-1)
        self.assertEqual(stats.following_count, 1)

    def test_increment_applied_against_stored_value(self):
        # 另一个会话先加 1，本会话持有的旧对象不能把它覆盖掉
        self.repo.get_by_user_id(self.uid)
        other = SessionLocal()
        try:
            SQLAlchemyUserStatsRepository(other).update_followers(self.uid, step=1)
        finally:
            other.close()

        stats = self.repo.update_followers(self.uid, step=1)
        self.assertEqual(stats.followers_count, 2)
