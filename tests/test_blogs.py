from app.storage.blog.SQLAlchemyBlogRepository import SQLAlchemyBlogRepository
from app.storage.database import SessionLocal
from tests.test_base import ApiTestCase


class BlogTestCase(ApiTestCase):

    def setUp(self):
        super().setUp()
        self.alice, self.alice_headers = self.register("alice")
        self.bob, self.bob_headers = self.register("bob")
        self.blog = self.create_blog(self.alice_headers, title="Morning coffee", content="Notes on brewing.")

    def test_create_validates_title(self):
        resp = self.client.post("/blogs", json={"title": "", "content": "body"}, headers=self.alice_headers)
        self.assertEqual(resp.status_code, 400)

        resp = self.client.post("/blogs", json={"title": "x" * 101, "content": "body"}, headers=self.alice_headers)
        self.assertEqual(resp.status_code, 400)

    def test_create_moderated(self):
        resp = self.client.post(
            "/blogs", json={"title": "今晚去赌场", "content": "body"}, headers=self.alice_headers
        )
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json()["data"]["found_words"], ["赌场"])

    def test_list_and_search(self):
        self.create_blog(self.bob_headers, title="Evening tea", content="Green or black.")

        data = self.client.get("/blogs").json()["data"]
        self.assertEqual(data["total"], 2)
        self.assertEqual(data["items"][0]["title"], "Evening tea")

        data = self.client.get("/blogs", params={"search": "coffee"}).json()["data"]
        self.assertEqual([b["bid"] for b in data["items"]], [self.blog])

        data = self.client.get("/blogs", params={"user_id": self.bob}).json()["data"]
        self.assertEqual(data["total"], 1)

    def test_detail_counts_every_view(self):
        for expected in (1, 2, 3):
            resp = self.client.get(f"/blogs/{self.blog}")
            self.assertEqual(resp.status_code, 200)
            self.assertEqual(resp.json()["data"]["view_count"], expected)
        self.assertEqual(resp.json()["data"]["author"]["uid"], self.alice)

    def test_detail_unknown(self):
        self.assertEqual(self.client.get("/blogs/no-such-blog").status_code, 404)

    def test_update_by_author_only(self):
        resp = self.client.put(f"/blogs/{self.blog}", json={"title": "Stolen"}, headers=self.bob_headers)
        self.assertEqual(resp.status_code, 403)

        resp = self.client.put(f"/blogs/{self.blog}", json={"title": "Afternoon coffee"}, headers=self.alice_headers)
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["data"]["title"], "Afternoon coffee")
        self.assertEqual(resp.json()["data"]["content"], "Notes on brewing.")

    def test_delete_cascades(self):
        cid = self.create_comment(self.bob_headers, self.blog)
        self.reply(self.alice_headers, cid)
        self.client.post("/favorites", json={"blog_id": self.blog}, headers=self.bob_headers)
        self.client.get(f"/blogs/{self.blog}", headers=self.bob_headers)

        resp = self.client.delete(f"/blogs/{self.blog}", headers=self.bob_headers)
        self.assertEqual(resp.status_code, 403)

        resp = self.client.delete(f"/blogs/{self.blog}", headers=self.alice_headers)
        self.assertEqual(resp.status_code, 200)

        self.assertEqual(self.client.get(f"/blogs/{self.blog}").status_code, 404)
        self.assertEqual(self.client.get("/comment", params={"blog_id": self.blog}).status_code, 404)
        self.assertEqual(self.client.get("/favorites", headers=self.bob_headers).json()["data"]["total"], 0)
        self.assertEqual(self.client.get("/history", headers=self.bob_headers).json()["data"]["total"], 0)


class FavoriteTestCase(BlogTestCase):

    def favorite_count(self):
        return self.client.get(f"/blogs/{self.blog}").json()["data"]["favorite_count"]

    def test_add_and_remove(self):
        resp = self.client.post(
            "/favorites", json={"blog_id": self.blog, "category": "reading", "note": "later"}, headers=self.bob_headers
        )
        self.assertEqual(resp.status_code, 201)
        self.assertEqual(resp.json()["data"]["blog_title"], "Morning coffee")
        self.assertEqual(self.favorite_count(), 1)

        check = self.client.get(f"/favorites/check/{self.blog}", headers=self.bob_headers).json()["data"]
        self.assertTrue(check["is_favorited"])

        resp = self.client.delete(f"/favorites/{self.blog}", headers=self.bob_headers)
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(self.favorite_count(), 0)

        resp = self.client.delete(f"/favorites/{self.blog}", headers=self.bob_headers)
        self.assertEqual(resp.status_code, 404)
        self.assertEqual(self.favorite_count(), 0)

    def test_duplicate_favorite(self):
        self.client.post("/favorites", json={"blog_id": self.blog}, headers=self.bob_headers)
        resp = self.client.post("/favorites", json={"blog_id": self.blog}, headers=self.bob_headers)
        self.assertEqual(resp.status_code, 409)
        self.assertEqual(self.favorite_count(), 1)

    def test_default_category_and_filter(self):
        self.client.post("/favorites", json={"blog_id": self.blog}, headers=self.bob_headers)
        data = self.client.get("/favorites", headers=self.bob_headers).json()["data"]
        self.assertEqual(data["items"][0]["category"], "default")

        data = self.client.get("/favorites", params={"category": "reading"}, headers=self.bob_headers).json()["data"]
        self.assertEqual(data["total"], 0)

    def test_note_moderated(self):
        resp = self.client.post(
            "/favorites", json={"blog_id": self.blog, "note": "买毒品"}, headers=self.bob_headers
        )
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json()["error"], "ModerationError")
        self.assertEqual(resp.json()["data"]["found_words"], ["毒品"])
        self.assertEqual(self.favorite_count(), 0)
        self.assertEqual(self.client.get("/favorites", headers=self.bob_headers).json()["data"]["total"], 0)

    def test_category_moderated(self):
        resp = self.client.post(
            "/favorites", json={"blog_id": self.blog, "category": "赌场"}, headers=self.bob_headers
        )
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json()["error"], "ModerationError")

    def test_note_too_long(self):
        resp = self.client.post(
            "/favorites", json={"blog_id": self.blog, "note": "x" * 501}, headers=self.bob_headers
        )
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json()["error"], "ValidationError")

    def test_unknown_blog(self):
        resp = self.client.post("/favorites", json={"blog_id": "no-such-blog"}, headers=self.bob_headers)
        self.assertEqual(resp.status_code, 404)


class HistoryTestCase(BlogTestCase):

    def test_visit_recorded_once_per_blog(self):
        other = self.create_blog(self.alice_headers, title="Second post", content="More notes.")
        self.client.get(f"/blogs/{self.blog}", headers=self.bob_headers)
        self.client.get(f"/blogs/{other}", params={"source": "search"}, headers=self.bob_headers)
        self.client.get(f"/blogs/{self.blog}", params={"source": "share"}, headers=self.bob_headers)

        data = self.client.get("/history", headers=self.bob_headers).json()["data"]
        self.assertEqual(data["total"], 2)
        # 最近访问的在前，重复访问只刷新时间和来源
        self.assertEqual([h["blog_id"] for h in data["items"]], [self.blog, other])
        self.assertEqual(data["items"][0]["source"], "share")

    def test_anonymous_view_not_recorded(self):
        self.client.get(f"/blogs/{self.blog}")
        data = self.client.get("/history", headers=self.bob_headers).json()["data"]
        self.assertEqual(data["total"], 0)

    def test_delete_and_clear(self):
        self.client.get(f"/blogs/{self.blog}", headers=self.bob_headers)

        resp = self.client.delete(f"/history/{self.blog}", headers=self.bob_headers)
        self.assertEqual(resp.status_code, 200)
        resp = self.client.delete(f"/history/{self.blog}", headers=self.bob_headers)
        self.assertEqual(resp.status_code, 404)

        self.client.get(f"/blogs/{self.blog}", headers=self.bob_headers)
        resp = self.client.delete("/history", headers=self.bob_headers)
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(self.client.get("/history", headers=self.bob_headers).json()["data"]["total"], 0)


class BlogRepositoryTestCase(ApiTestCase):

    def setUp(self):
        super().setUp()
        _, headers = self.register("alice")
        self.blog = self.create_blog(headers)

    def test_favorite_count_stops_at_zero(self):
        db = SessionLocal()
        try:
            repo = SQLAlchemyBlogRepository(db)
            self.assertEqual(repo.update_favorite_count(self.blog, step=-1).favorite_count, 0)
            repo.update_favorite_count(self.blog, step=1)
            self.assertEqual(repo.update_favorite_count(self.blog, step=1).favorite_count, 2)
        finally:
            db.close()
