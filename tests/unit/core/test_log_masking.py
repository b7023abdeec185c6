import pytest

from config.settings import mask_sensitive_data

pytestmark = pytest.mark.unit


class TestSensitiveDataMasking:
    def test_email_masked(self):
        result = mask_sensitive_data(None, None, {"user": "tunde@example.com"})
        assert "tunde@example.com" not in result["user"]
        assert "***MASKED***" in result["user"]

    @pytest.mark.parametrize("phone", ["08031234567", "+2348031234567", "07061234567"])
    def test_nigerian_phone_masked(self, phone):
        result = mask_sensitive_data(None, None, {"contact": f"call {phone} today"})
        assert phone not in result["contact"]
        assert result["contact"].startswith("call ***MASKED***")

    def test_password_masked(self):
        result = mask_sensitive_data(None, None, {"data": "password='s3cret123'"})
        assert "s3cret123" not in result["data"]

    def test_token_masked(self):
        result = mask_sensitive_data(None, None, {"header": "token=abc123xyz"})
        assert "abc123xyz" not in result["header"]
        assert "***MASKED***" in result["header"]

    def test_webhook_signature_masked(self):
        result = mask_sensitive_data(None, None, {"raw": "signature: 9f86d081884c7d65"})
        assert "9f86d081884c7d65" not in result["raw"]

    def test_non_sensitive_data_unchanged(self):
        event_dict = {
            "event": "delivery.claimed",
            "order_number": "ORD-20260101-ABC123",
            "attempts": 3,
        }
        result = mask_sensitive_data(None, None, event_dict)
        assert result == {
            "event": "delivery.claimed",
            "order_number": "ORD-20260101-ABC123",
            "attempts": 3,
        }
