"""Subscriber Notifier - Wires Functional Core and Imperative Shell.

This module coordinates one notification run: it loads a report and the
subscription list from storage, lets the pure core decide who is covered,
and optionally hands each decision to a delivery channel.
"""

import logging
from dataclasses import dataclass, field, replace
from typing import Any, Protocol

from safezone.core.address import AddressInfo
from safezone.core.config import Config
from safezone.core.errors import DeliveryError, ReportNotFoundError
from safezone.core.formatter import format_notification_payload
from safezone.core.report import Report, Subscription, parse_report, parse_subscriptions
from safezone.core.subscriptions import (
    STATUS_FAILED,
    NotificationIntent,
    make_notification_intents,
)
from safezone.core.validation import validate_report_id
from safezone.shell.delivery_client import WebhookDeliveryClient
from safezone.shell.firestore_client import FirestoreClient, FirestoreConfig
from safezone.shell.geocoding_client import NominatimClient


logger = logging.getLogger(__name__)


class ReportStore(Protocol):
    """Anything that can load one report row by id."""

    def get_report_by_id(self, report_id: int) -> dict[str, Any] | None: ...


class SubscriptionStore(Protocol):
    """Anything that can list all subscription rows."""

    def list_subscriptions(self) -> list[dict[str, Any]]: ...


@dataclass
class NotificationResult:
    """Result of notifying subscribers about one report.

    Attributes:
        report_id: The report processed
        subscriptions_checked: Valid subscriptions evaluated
        subscriptions_found: Subscription rows loaded, valid or not
        notifications: Intents that were decided (and delivered, if a
            delivery channel is configured)
        failures: Intents whose delivery failed
    """
    report_id: int
    subscriptions_checked: int
    subscriptions_found: int = 0
    notifications: list[NotificationIntent] = field(default_factory=list)
    failures: list[NotificationIntent] = field(default_factory=list)

    @property
    def notified_count(self) -> int:
        """Number of subscribers notified."""
        return len(self.notifications)

    @property
    def summary(self) -> str:
        """Human-readable summary of the result."""
        return (
            f"Report {self.report_id}: checked {self.subscriptions_checked} subscriptions, "
            f"{self.notified_count} notified, "
            f"{len(self.failures)} failed"
        )


class SubscriberNotifier:
    """Decides and dispatches notifications for newly created reports.

    This class wires together:
    - Report store (loads the report)
    - Subscription store (loads every subscription)
    - Core functions (parsing, coverage, formatting)
    - Delivery client (optional, sends one payload per subscriber)
    - Geocoding client (optional, street name for delivered payloads)
    """

    def __init__(
        self,
        config: Config,
        report_store: ReportStore | None = None,
        subscription_store: SubscriptionStore | None = None,
        delivery_client: WebhookDeliveryClient | None = None,
        geocoding_client: NominatimClient | None = None,
    ) -> None:
        """Initialize notifier with configuration.

        Args:
            config: Application configuration
            report_store: Report store (Firestore if not provided)
            subscription_store: Subscription store (Firestore if not provided)
            delivery_client: Delivery client (created if delivery is configured)
            geocoding_client: Geocoding client (created if geocoding is enabled
                and delivery is configured)
        """
        self.config = config

        if report_store is None or subscription_store is None:
            firestore_client = FirestoreClient(
                FirestoreConfig(
                    database=config.firestore_database,
                    reports_collection=config.reports_collection,
                    subscriptions_collection=config.subscriptions_collection,
                    votes_collection=config.votes_collection,
                    timeout_seconds=config.storage_timeout_seconds,
                )
            )
            if report_store is None:
                report_store = firestore_client
            if subscription_store is None:
                subscription_store = firestore_client

        self.report_store = report_store
        self.subscription_store = subscription_store

        if delivery_client is None and config.delivery.enabled:
            delivery_client = WebhookDeliveryClient(
                config.delivery.webhook_url,
                timeout=config.delivery.timeout_seconds,
            )
        self.delivery_client = delivery_client

        if geocoding_client is None and delivery_client is not None and config.geocoding.enabled:
            geocoding_client = NominatimClient(
                base_url=config.geocoding.base_url,
                user_agent=config.geocoding.user_agent,
                timeout=config.geocoding.timeout_seconds,
            )
        self.geocoding_client = geocoding_client

    def _load_report(self, report_id: int) -> Report:
        """Load and parse the report.

        Raises:
            ReportNotFoundError: If the report does not exist or is unusable
            StorageError: If the store fails
        """
        data = self.report_store.get_report_by_id(report_id)

        if data is None:
            raise ReportNotFoundError(report_id)

        report = parse_report(data, report_id=report_id)
        if report is None:
            raise ReportNotFoundError(report_id, "report has no usable location")

        return report

    def _load_subscriptions(self) -> tuple[list[Subscription], int]:
        """Load and parse every subscription.

        Returns:
            Tuple of (valid subscriptions, number of rows loaded)

        Raises:
            StorageError: If the store fails
        """
        rows = self.subscription_store.list_subscriptions()
        subscriptions = parse_subscriptions(rows)

        skipped = len(rows) - len(subscriptions)
        if skipped:
            logger.warning(
                "Skipped %d invalid subscriptions (of %d)",
                skipped,
                len(rows),
            )

        return subscriptions, len(rows)

    def _lookup_address(self, report: Report) -> AddressInfo | None:
        """Reverse-geocode the report location, if a geocoder is configured."""
        if self.geocoding_client is None:
            return None

        return self.geocoding_client.get_address_info(
            report.coordinate.latitude,
            report.coordinate.longitude,
        )

    def _deliver(
        self,
        report: Report,
        intents: list[NotificationIntent],
    ) -> tuple[list[NotificationIntent], list[NotificationIntent]]:
        """Deliver intents one by one.

        A failed delivery is recorded and does not stop the others.

        Returns:
            Tuple of (delivered intents, failed intents)
        """
        delivered: list[NotificationIntent] = []
        failed: list[NotificationIntent] = []

        address = self._lookup_address(report)

        for intent in intents:
            payload = format_notification_payload(intent, report, address)

            try:
                self.delivery_client.send(intent.user_id, payload)
            except DeliveryError as e:
                logger.error(
                    "Failed to notify user %s about report %d: %s",
                    intent.user_id,
                    report.id,
                    e.message,
                )
                failed.append(replace(intent, status=STATUS_FAILED, error=e.message))
                continue

            delivered.append(intent)

        return delivered, failed

    def notify(self, report_id: Any) -> NotificationResult:
        """Notify every subscriber whose region covers a report.

        This is the main entry point that:
        1. Validates the report id (before any storage access)
        2. Loads the report
        3. Loads all subscriptions
        4. Keeps subscriptions whose circle contains the report
        5. Delivers one notification per match, if delivery is configured

        Args:
            report_id: Positive integer report id

        Returns:
            NotificationResult with the decided notifications

        Raises:
            ValidationError: If report_id is not a positive integer
            ReportNotFoundError: If the report does not exist
            StorageError: If the report or subscription store fails
        """
        report_id = validate_report_id(report_id)

        report = self._load_report(report_id)
        subscriptions, found = self._load_subscriptions()

        if not found:
            logger.info("No subscribers to notify for report %d", report_id)
            return NotificationResult(report_id=report_id, subscriptions_checked=0)

        intents = make_notification_intents(report, subscriptions)

        logger.info(
            "%d of %d subscriptions cover report %d",
            len(intents),
            len(subscriptions),
            report_id,
        )

        for intent in intents:
            logger.info(
                "Notifying user %s about a new '%s' report",
                intent.user_id,
                report.category,
            )

        if self.delivery_client is None or not intents:
            return NotificationResult(
                report_id=report_id,
                subscriptions_checked=len(subscriptions),
                subscriptions_found=found,
                notifications=intents,
            )

        delivered, failed = self._deliver(report, intents)

        result = NotificationResult(
            report_id=report_id,
            subscriptions_checked=len(subscriptions),
            subscriptions_found=found,
            notifications=delivered,
            failures=failed,
        )
        logger.info("Completed: %s", result.summary)

        return result
