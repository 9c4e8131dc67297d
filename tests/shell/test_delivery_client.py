"""Tests for the webhook delivery client.

Uses the `responses` library to mock HTTP requests.
"""

import json

import pytest
import requests
import responses

from safezone.core.errors import DeliveryError
from safezone.shell.delivery_client import DeliveryResponse, WebhookDeliveryClient


WEBHOOK_URL = "https://hooks.example.com/notify"


@pytest.fixture
def client():
    return WebhookDeliveryClient(WEBHOOK_URL, timeout=3)


class TestWebhookDeliveryClient:
    """Tests for WebhookDeliveryClient.send()."""

    @responses.activate
    def test_successful_delivery(self, client):
        """A 2xx reply is a successful delivery."""
        responses.add(responses.POST, WEBHOOK_URL, json={"ok": True}, status=202)

        result = client.send("user-a", {"report_id": 42, "text": "hello"})

        assert result == DeliveryResponse(user_id="user-a", status_code=202)
        request = responses.calls[0].request
        assert json.loads(request.body) == {"report_id": 42, "text": "hello"}
        assert request.headers["Content-Type"] == "application/json"

    @responses.activate
    def test_non_2xx_raises(self, client):
        """Error statuses raise DeliveryError with the body."""
        responses.add(responses.POST, WEBHOOK_URL, body="unknown user", status=404)

        with pytest.raises(DeliveryError) as exc_info:
            client.send("user-a", {})

        assert exc_info.value.user_id == "user-a"
        assert exc_info.value.message == "Webhook returned 404: unknown user"

    @responses.activate
    def test_timeout_raises(self, client):
        """Timeouts raise DeliveryError."""
        responses.add(responses.POST, WEBHOOK_URL, body=requests.Timeout())

        with pytest.raises(DeliveryError) as exc_info:
            client.send("user-a", {})

        assert exc_info.value.message == "Request timed out"

    @responses.activate
    def test_connection_error_raises(self, client):
        """Connection failures raise DeliveryError."""
        responses.add(
            responses.POST, WEBHOOK_URL, body=requests.ConnectionError("refused"),
        )

        with pytest.raises(DeliveryError) as exc_info:
            client.send("user-b", {})

        assert exc_info.value.user_id == "user-b"
        assert "refused" in exc_info.value.message
