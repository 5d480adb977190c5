import unittest

from app.core.content_filter import (
    check_sensitive_content,
    filter_sensitive_content,
    validate_content,
)
from app.core.exceptions import ModerationError, ValidationError


class CheckSensitiveContentTestCase(unittest.TestCase):

    def test_clean_text_is_valid(self):
        result = check_sensitive_content("this is clean text")
        self.assertTrue(result.is_valid)
        self.assertEqual(result.found_words, [])

    def test_empty_text_is_valid(self):
        self.assertTrue(check_sensitive_content("").is_valid)
        self.assertTrue(check_sensitive_content(None).is_valid)

    def test_base_word_is_found(self):
        result = check_sensitive_content("我要杀死你")
        self.assertFalse(result.is_valid)
        self.assertEqual(result.found_words, ["杀死"])
        self.assertIn("杀死", result.message)

    def test_found_words_follow_list_order(self):
        result = check_sensitive_content("他们在赌场洗钱")
        self.assertEqual(result.found_words, ["赌场", "洗钱"])

    def test_political_words_only_in_strict_mode(self):
        text = "讨论革命历史"
        self.assertFalse(check_sensitive_content(text, strict_mode=True).is_valid)
        self.assertTrue(check_sensitive_content(text, strict_mode=False).is_valid)


class FilterSensitiveContentTestCase(unittest.TestCase):

    def test_words_are_masked_with_same_length(self):
        self.assertEqual(filter_sensitive_content("他们在赌场洗钱"), "他们在****")

    def test_custom_replacement(self):
        self.assertEqual(filter_sensitive_content("我要杀死你", replacement="#"), "我要##你")

    def test_political_words_always_masked(self):
        self.assertEqual(filter_sensitive_content("讨论革命历史"), "讨论**历史")

    def test_clean_text_unchanged(self):
        self.assertEqual(filter_sensitive_content("写得不错"), "写得不错")
        self.assertIsNone(filter_sensitive_content(None))


class ValidateContentTestCase(unittest.TestCase):

    def test_empty_rejected(self):
        with self.assertRaises(ValidationError):
            validate_content("   ")

    def test_empty_allowed_when_flagged(self):
        validate_content("", allow_empty=True)

    def test_too_short(self):
        with self.assertRaises(ValidationError):
            validate_content("ab", min_length=3)

    def test_too_long_checked_before_moderation(self):
        with self.assertRaises(ValidationError):
            validate_content("杀死" + "a" * 20, max_length=10)

    def test_sensitive_word_raises_moderation_error(self):
        with self.assertRaises(ModerationError) as ctx:
            validate_content("我要杀死你")
        self.assertEqual(ctx.exception.found_words, ["杀死"])

    def test_clean_content_passes(self):
        validate_content("写得不错", max_length=10)


class ModerationApiTestCase(unittest.TestCase):

    def setUp(self):
        from fastapi.testclient import TestClient
        from main import app

        self.client = TestClient(app)

    def test_check_endpoint(self):
        resp = self.client.post("/moderation/check", json={"text": "我要杀死你"})
        self.assertEqual(resp.status_code, 200)
        data = resp.json()["data"]
        self.assertFalse(data["is_valid"])
        self.assertEqual(data["found_words"], ["杀死"])

    def test_check_endpoint_non_strict(self):
        resp = self.client.post("/moderation/check", json={"text": "讨论革命历史", "strict_mode": False})
        self.assertTrue(resp.json()["data"]["is_valid"])

    def test_filter_endpoint(self):
        resp = self.client.post("/moderation/filter", json={"text": "他们在赌场洗钱", "replacement": "x"})
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["data"], {"original": "他们在赌场洗钱", "filtered": "他们在xxxx"})


if __name__ == "__main__":
    unittest.main()
