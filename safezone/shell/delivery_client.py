"""Webhook Delivery Client - Imperative Shell.

This module delivers notification payloads to an HTTP webhook (an
email/push relay). All I/O is contained here; payload formatting is in
the core module.
"""

import logging
from dataclasses import dataclass
from typing import Any

import requests

from safezone.core.errors import DeliveryError


logger = logging.getLogger(__name__)


# Default timeout for webhook requests (seconds)
DEFAULT_TIMEOUT = 10


@dataclass
class DeliveryResponse:
    """Response from the delivery webhook.

    Attributes:
        user_id: Subscriber the payload was delivered for
        status_code: HTTP status code
    """
    user_id: str
    status_code: int


class WebhookDeliveryClient:
    """Client for delivering notifications via a webhook.

    This is part of the imperative shell - it handles HTTP I/O.
    """

    def __init__(self, webhook_url: str, timeout: int = DEFAULT_TIMEOUT) -> None:
        """Initialize delivery client.

        Args:
            webhook_url: Endpoint receiving one POST per subscriber
            timeout: Request timeout in seconds
        """
        self.webhook_url = webhook_url
        self.timeout = timeout

    def send(self, user_id: str, payload: dict[str, Any]) -> DeliveryResponse:
        """Deliver one notification payload.

        This method performs HTTP I/O.

        Args:
            user_id: Subscriber being notified
            payload: Notification payload (from formatter)

        Returns:
            DeliveryResponse for a 2xx reply

        Raises:
            DeliveryError: On timeout, connection failure or non-2xx status
        """
        logger.info("Delivering notification to user %s", user_id)

        try:
            response = requests.post(
                self.webhook_url,
                json=payload,
                timeout=self.timeout,
                headers={"Content-Type": "application/json"},
            )
        except requests.Timeout as e:
            logger.error("Delivery to user %s timed out", user_id)
            raise DeliveryError(user_id, "Request timed out") from e
        except requests.RequestException as e:
            logger.error("Delivery to user %s failed: %s", user_id, str(e))
            raise DeliveryError(user_id, str(e)) from e

        if not 200 <= response.status_code < 300:
            logger.warning(
                "Delivery webhook returned non-2xx for user %s: %d - %s",
                user_id,
                response.status_code,
                response.text,
            )
            raise DeliveryError(
                user_id,
                f"Webhook returned {response.status_code}: {response.text}",
            )

        logger.info("Notification delivered to user %s", user_id)
        return DeliveryResponse(user_id=user_id, status_code=response.status_code)
