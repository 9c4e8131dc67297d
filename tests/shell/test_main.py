"""Tests for the Cloud Function entry points.

Configuration and the notifier are patched out.
"""

import base64
import json
from types import SimpleNamespace
from unittest.mock import patch

import pytest
from flask import Request
from werkzeug.test import EnvironBuilder

from safezone.core.config import Config
from safezone.core.errors import StorageError
from safezone.main import (
    _decode_pubsub_payload,
    notify_subscribers,
    notify_subscribers_pubsub,
    report_scores,
)
from safezone.notifier import NotificationResult


def make_event(payload):
    """Build a Pub/Sub CloudEvent-like object."""
    if isinstance(payload, bytes):
        raw = base64.b64encode(payload).decode()
    else:
        raw = base64.b64encode(json.dumps(payload).encode()).decode()
    return SimpleNamespace(data={"message": {"data": raw}})


class TestDecodePubsubPayload:
    """Tests for _decode_pubsub_payload()."""

    def test_decodes_json(self):
        assert _decode_pubsub_payload(make_event({"report_id": 42})) == {"report_id": 42}

    def test_missing_data(self):
        assert _decode_pubsub_payload(SimpleNamespace(data={"message": {}})) is None
        assert _decode_pubsub_payload(SimpleNamespace(data=None)) is None

    def test_not_json(self):
        assert _decode_pubsub_payload(make_event(b"not json")) is None


class TestNotifySubscribersPubsub:
    """Tests for the Pub/Sub trigger."""

    @patch("safezone.main.SubscriberNotifier")
    @patch("safezone.main._get_config")
    def test_notifies(self, mock_get_config, mock_notifier_class):
        """Valid events run the notifier."""
        mock_get_config.return_value = Config()
        mock_notifier_class.return_value.notify.return_value = NotificationResult(
            report_id=42, subscriptions_checked=0,
        )

        notify_subscribers_pubsub(make_event({"report_id": 42}))

        mock_notifier_class.return_value.notify.assert_called_once_with(42)

    @pytest.mark.parametrize("payload", [{"report_id": -1}, {"report_id": "42"}, {}])
    @patch("safezone.main.SubscriberNotifier")
    @patch("safezone.main._get_config")
    def test_invalid_event_dropped(self, mock_get_config, mock_notifier_class, payload):
        """Invalid events are dropped without touching storage."""
        notify_subscribers_pubsub(make_event(payload))

        mock_get_config.assert_not_called()
        mock_notifier_class.assert_not_called()

    @patch("safezone.main.SubscriberNotifier")
    @patch("safezone.main._get_config")
    def test_failures_are_raised(self, mock_get_config, mock_notifier_class):
        """Storage failures propagate so the trigger can retry."""
        mock_get_config.return_value = Config()
        mock_notifier_class.return_value.notify.side_effect = StorageError("down")

        with pytest.raises(StorageError):
            notify_subscribers_pubsub(make_event({"report_id": 42}))


class TestNotifySubscribersHttp:
    """Tests for the HTTP trigger."""

    @patch("safezone.main._get_config")
    def test_config_error(self, mock_get_config):
        """Configuration failures give a 500."""
        mock_get_config.side_effect = ValueError("bad timeout")
        builder = EnvironBuilder(method="POST", json={"report_id": 42})
        request = Request(builder.get_environ())

        response = notify_subscribers(request)

        assert response.status_code == 500
        assert json.loads(response.get_data(as_text=True)) == {
            "error": "Configuration error: bad timeout",
        }
        assert response.headers["Access-Control-Allow-Origin"] == "*"

    @patch("safezone.main._get_config")
    def test_config_error_preflight(self, mock_get_config):
        """Preflight succeeds even when configuration is broken."""
        mock_get_config.side_effect = ValueError("bad timeout")
        request = Request(EnvironBuilder(method="OPTIONS").get_environ())

        response = notify_subscribers(request)

        assert response.status_code == 200
        assert response.headers["Access-Control-Allow-Origin"] == "*"

    @patch("safezone.main.SubscriberNotifier")
    @patch("safezone.main._get_config")
    def test_delegates_to_handler(self, mock_get_config, mock_notifier_class):
        """Requests are handled with the configured CORS origin."""
        mock_get_config.return_value = Config(cors_allow_origin="https://safezone.example.com")
        mock_notifier_class.return_value.notify.return_value = NotificationResult(
            report_id=42, subscriptions_checked=0,
        )
        builder = EnvironBuilder(method="POST", json={"report_id": 42})
        request = Request(builder.get_environ())

        response = notify_subscribers(request)

        assert response.status_code == 200
        assert response.headers["Access-Control-Allow-Origin"] == "https://safezone.example.com"


class TestReportScoresHttp:
    """Tests for the scores HTTP trigger."""

    @patch("safezone.main._get_config")
    def test_config_error(self, mock_get_config):
        """Configuration failures give a JSON 500 with CORS headers."""
        mock_get_config.side_effect = ValueError("bad timeout")
        request = Request(EnvironBuilder(method="GET").get_environ())

        response = report_scores(request)

        assert response.status_code == 500
        assert response.headers["Access-Control-Allow-Origin"] == "*"
        assert response.headers["Access-Control-Allow-Methods"] == "GET, OPTIONS"

    @patch("safezone.main.FirestoreClient")
    @patch("safezone.main._get_config")
    def test_storage_timeout_passed(self, mock_get_config, mock_firestore_class):
        """The vote store gets the configured read timeout."""
        mock_get_config.return_value = Config(storage_timeout_seconds=3)
        mock_firestore_class.return_value.list_votes.return_value = []

        response = report_scores(Request(EnvironBuilder(method="GET").get_environ()))

        assert response.status_code == 200
        assert mock_firestore_class.call_args[0][0].timeout_seconds == 3
