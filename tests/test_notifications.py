from datetime import timedelta

from app.core.time import now_utc8
from app.models.notification import NotificationType
from app.schemas.notification import NotificationCreate
from app.service.notification_dispatcher import NotificationDispatcher, compose_message
from app.storage.database import SessionLocal
from app.storage.notification.SQLAlchemyNotificationRepository import SQLAlchemyNotificationRepository
from tests.test_base import ApiTestCase


class NotificationTestCase(ApiTestCase):

    def setUp(self):
        super().setUp()
        self.alice, self.alice_headers = self.register("alice")
        self.bob, self.bob_headers = self.register("bob")
        self.blog = self.create_blog(self.bob_headers)
        # bob 收到：alice 的评论 + alice 的关注
        self.cid = self.create_comment(self.alice_headers, self.blog, "写得不错")
        self.client.post("/follow/follow", json={"user_id": self.bob}, headers=self.alice_headers)

    def test_list_newest_first(self):
        data = self.notifications(self.bob_headers)
        self.assertEqual(data["total"], 2)
        self.assertEqual(data["unread_count"], 2)
        self.assertEqual([n["type"] for n in data["items"]], ["follow", "comment"])
        comment = data["items"][1]
        self.assertEqual(comment["title"], "新评论")
        self.assertIn("alice", comment["content"])
        self.assertIn("写得不错", comment["content"])
        self.assertEqual(comment["priority"], "normal")
        self.assertIsNotNone(comment["expires_at"])

    def test_filters(self):
        data = self.notifications(self.bob_headers, type="comment")
        self.assertEqual(data["total"], 1)
        data = self.notifications(self.bob_headers, is_read=True)
        self.assertEqual(data["total"], 0)

    def test_recipient_only(self):
        self.assertEqual(self.notifications(self.alice_headers)["total"], 0)

    def test_mark_read(self):
        nid = self.notifications(self.bob_headers)["items"][0]["nid"]

        resp = self.client.post(f"/notifications/read/{nid}", headers=self.alice_headers)
        self.assertEqual(resp.status_code, 404)

        resp = self.client.post(f"/notifications/read/{nid}", headers=self.bob_headers)
        self.assertEqual(resp.status_code, 200)
        self.assertTrue(resp.json()["data"]["is_read"])
        self.assertIsNotNone(resp.json()["data"]["read_at"])

        count = self.client.get("/notifications/unread-count", headers=self.bob_headers).json()["data"]
        self.assertEqual(count, {"unread_count": 1})

    def test_mark_all_read_by_type(self):
        resp = self.client.post("/notifications/read-all", params={"type": "follow"}, headers=self.bob_headers)
        self.assertEqual(resp.json()["data"], {"modified_count": 1})

        resp = self.client.post("/notifications/read-all", headers=self.bob_headers)
        self.assertEqual(resp.json()["data"], {"modified_count": 1})
        self.assertEqual(self.notifications(self.bob_headers)["unread_count"], 0)

    def test_delete_one(self):
        nid = self.notifications(self.bob_headers)["items"][0]["nid"]
        self.assertEqual(self.client.delete(f"/notifications/{nid}", headers=self.alice_headers).status_code, 404)
        self.assertEqual(self.client.delete(f"/notifications/{nid}", headers=self.bob_headers).status_code, 200)
        self.assertEqual(self.notifications(self.bob_headers)["total"], 1)

    def test_batch_delete(self):
        resp = self.client.request("DELETE", "/notifications", json={}, headers=self.bob_headers)
        self.assertEqual(resp.status_code, 400)

        resp = self.client.request("DELETE", "/notifications", json={"type": "comment"}, headers=self.bob_headers)
        self.assertEqual(resp.json()["data"], {"deleted_count": 1})

        self.client.post("/notifications/read-all", headers=self.bob_headers)
        resp = self.client.request("DELETE", "/notifications", json={"delete_read": True}, headers=self.bob_headers)
        self.assertEqual(resp.json()["data"], {"deleted_count": 1})
        self.assertEqual(self.notifications(self.bob_headers)["total"], 0)

    def test_batch_delete_by_ids(self):
        ids = [n["nid"] for n in self.notifications(self.bob_headers)["items"]]
        resp = self.client.request("DELETE", "/notifications", json={"ids": ids}, headers=self.bob_headers)
        self.assertEqual(resp.json()["data"], {"deleted_count": 2})

    def test_stats(self):
        nid = self.notifications(self.bob_headers, type="follow")["items"][0]["nid"]
        self.client.post(f"/notifications/read/{nid}", headers=self.bob_headers)

        data = self.client.get("/notifications/stats", headers=self.bob_headers).json()["data"]
        self.assertEqual(data["total"], 2)
        self.assertEqual(data["unread"], 1)
        self.assertEqual(data["by_type"]["follow"], {"total": 1, "unread": 0})
        self.assertEqual(data["by_type"]["comment"], {"total": 1, "unread": 1})

    def test_expired_notifications_are_purged(self):
        db = SessionLocal()
        try:
            SQLAlchemyNotificationRepository(db).create(
                NotificationCreate(
                    recipient_id=self.bob,
                    sender_id=self.alice,
                    type=NotificationType.SYSTEM,
                    title="old news",
                    content="expired",
                    expires_at=now_utc8() - timedelta(days=1),
                )
            )
        finally:
            db.close()

        data = self.notifications(self.bob_headers)
        self.assertEqual(data["total"], 2)
        self.assertNotIn("system", [n["type"] for n in data["items"]])


class DispatcherTestCase(ApiTestCase):

    def setUp(self):
        super().setUp()
        self.alice, _ = self.register("alice")
        self.bob, self.bob_headers = self.register("bob")

    def test_inline_delivery_without_background_tasks(self):
        NotificationDispatcher(SessionLocal).notify(
            recipient_id=self.bob, sender_id=self.alice, type=NotificationType.FOLLOW
        )
        items = self.notifications(self.bob_headers)["items"]
        self.assertEqual(len(items), 1)
        self.assertEqual(items[0]["title"], "新粉丝")
        self.assertIn("alice", items[0]["content"])

    def test_self_notification_skipped(self):
        NotificationDispatcher(SessionLocal).notify(
            recipient_id=self.bob, sender_id=self.bob, type=NotificationType.FOLLOW
        )
        self.assertEqual(self.notifications(self.bob_headers)["total"], 0)

    def test_failure_is_swallowed(self):
        def factory():
            raise RuntimeError("notification store unreachable")

        NotificationDispatcher(factory).notify(
            recipient_id=self.bob, sender_id=self.alice, type=NotificationType.FOLLOW
        )
        self.assertEqual(self.notifications(self.bob_headers)["total"], 0)

    def test_compose_message_truncates(self):
        title, content = compose_message(NotificationType.SYSTEM, "alice", None, "x" * 600)
        self.assertEqual(title, "系统通知")
        self.assertEqual(len(content), 500)
