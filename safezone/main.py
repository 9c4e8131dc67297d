"""Cloud Function Entry Points.

This module provides the entry points for Google Cloud Functions.
They are thin wrappers that load configuration, build the notifier and
delegate to the API handler.
"""

import base64
import binascii
import json
import logging
import os
from typing import Any

import functions_framework
from flask import Request, Response

from safezone.api_handler import (
    NOTIFY_METHODS,
    SCORES_METHODS,
    handle_config_error,
    handle_notify_subscribers,
    handle_report_scores,
)
from safezone.core.config import Config
from safezone.core.errors import ValidationError
from safezone.core.validation import parse_notify_request
from safezone.notifier import SubscriberNotifier
from safezone.shell.config_loader import load_config, load_config_from_env
from safezone.shell.firestore_client import FirestoreClient, FirestoreConfig


# Configure logging
log_level = os.environ.get("LOG_LEVEL", "INFO").upper()
logging.basicConfig(
    level=getattr(logging, log_level, logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


def _get_config() -> Config:
    """Load configuration from file or environment."""
    config_path = os.environ.get("CONFIG_PATH")

    if config_path:
        return load_config(config_path)
    elif os.environ.get("NOTIFICATION_WEBHOOK_URL") or os.environ.get("FIRESTORE_DATABASE"):
        # Simple env-based config
        return load_config_from_env()
    else:
        # Try default config path
        return load_config()


def _decode_pubsub_payload(cloud_event: Any) -> Any:
    """Decode the JSON body of a Pub/Sub CloudEvent, or None if unreadable."""
    data = getattr(cloud_event, "data", None) or {}
    raw = (data.get("message") or {}).get("data")
    if not raw:
        return None

    try:
        return json.loads(base64.b64decode(raw))
    except (binascii.Error, ValueError):
        logger.error("Pub/Sub message data is not base64-encoded JSON")
        return None


@functions_framework.http
def notify_subscribers(request: Request) -> Response:
    """HTTP Cloud Function entry point.

    Called after a report is created, with {"report_id": <int>}.

    Args:
        request: Flask request object

    Returns:
        JSON response (see api_handler.handle_notify_subscribers)
    """
    try:
        config = _get_config()
    except Exception as e:
        logger.exception("Failed to load configuration")
        return handle_config_error(request, e, NOTIFY_METHODS)

    notifier = SubscriberNotifier(config)
    return handle_notify_subscribers(
        request,
        notifier,
        allow_origin=config.cors_allow_origin,
    )


@functions_framework.http
def report_scores(request: Request) -> Response:
    """HTTP Cloud Function entry point for ranked vote scores.

    Args:
        request: Flask request object

    Returns:
        JSON response (see api_handler.handle_report_scores)
    """
    try:
        config = _get_config()
    except Exception as e:
        logger.exception("Failed to load configuration")
        return handle_config_error(request, e, SCORES_METHODS)

    vote_store = FirestoreClient(
        FirestoreConfig(
            database=config.firestore_database,
            votes_collection=config.votes_collection,
            timeout_seconds=config.storage_timeout_seconds,
        )
    )
    return handle_report_scores(
        request,
        vote_store,
        allow_origin=config.cors_allow_origin,
    )


@functions_framework.cloud_event
def notify_subscribers_pubsub(cloud_event: Any) -> None:
    """Pub/Sub Cloud Function entry point.

    Alternative trigger: a "report created" message {"report_id": <int>}.
    Invalid messages are dropped; other failures are raised so the
    trigger's retry policy applies.

    Args:
        cloud_event: CloudEvent from Pub/Sub
    """
    logger.info("Report-created event received (Pub/Sub trigger)")

    payload = _decode_pubsub_payload(cloud_event)

    try:
        report_id = parse_notify_request(payload)
    except ValidationError as e:
        logger.error("Dropping invalid report-created event: %s", e.details)
        return

    try:
        config = _get_config()
        notifier = SubscriberNotifier(config)
        result = notifier.notify(report_id)
    except Exception:
        logger.exception("Failed to notify subscribers for report %d", report_id)
        raise

    logger.info("Completed: %s", result.summary)
