import unittest

from fastapi.testclient import TestClient

from main import app
from app.models.base import Base
from app.models.user import User
from app.storage.database import SessionLocal, engine, init_db

DEFAULT_PASSWORD = "secret123"


class ApiTestCase(unittest.TestCase):
    """
    API 测试基类：
    - 每个用例前重建内存 sqlite 的全部表
    - 提供注册 / 登录 / 发博客等常用步骤
    """

    def setUp(self):
        init_db()
        self.client = TestClient(app)

    def tearDown(self):
        app.dependency_overrides.clear()
        self.client.close()
        Base.metadata.drop_all(bind=engine)

    # ---- helpers ----

    @staticmethod
    def auth(token: str) -> dict:
        return {"Authorization": f"Bearer {token}"}

    def register(self, username: str, email: str = None, password: str = DEFAULT_PASSWORD):
        """注册并返回 (uid, headers)"""
        email = email or f"{username}@example.com"
        resp = self.client.post(
            "/auth/register",
            json={"username": username, "email": email, "password": password},
        )
        self.assertEqual(resp.status_code, 201, resp.text)
        data = resp.json()["data"]
        return data["user"]["uid"], self.auth(data["token"])

    def login(self, email: str, password: str = DEFAULT_PASSWORD):
        resp = self.client.post("/auth/login", json={"email": email, "password": password})
        self.assertEqual(resp.status_code, 200, resp.text)
        return self.auth(resp.json()["data"]["token"])

    def make_admin(self, username: str = "admin"):
        """直接改库把用户提升为管理员，再重新登录拿带 admin 角色的 token"""
        uid, _ = self.register(username)
        db = SessionLocal()
        try:
            db.query(User).filter(User.uid == uid).update({User.role: "admin"})
            db.commit()
        finally:
            db.close()
        return uid, self.login(f"{username}@example.com")

    def create_blog(self, headers: dict, title: str = "Weekend notes", content: str = "A quiet walk by the river."):
        resp = self.client.post("/blogs", json={"title": title, "content": content}, headers=headers)
        self.assertEqual(resp.status_code, 201, resp.text)
        return resp.json()["data"]["bid"]

    def create_comment(self, headers: dict, blog_id: str, content: str = "Nice post"):
        resp = self.client.post("/comment/create", json={"blog_id": blog_id, "content": content}, headers=headers)
        self.assertEqual(resp.status_code, 201, resp.text)
        return resp.json()["data"]["cid"]

    def reply(self, headers: dict, comment_id: str, content: str = "Thanks", reply_to: str = None):
        body = {"comment_id": comment_id, "content": content}
        if reply_to:
            body["reply_to"] = reply_to
        resp = self.client.post("/comment/reply", json=body, headers=headers)
        self.assertEqual(resp.status_code, 201, resp.text)
        return resp.json()["data"]

    def notifications(self, headers: dict, **params) -> dict:
        resp = self.client.get("/notifications", params=params, headers=headers)
        self.assertEqual(resp.status_code, 200, resp.text)
        return resp.json()["data"]
