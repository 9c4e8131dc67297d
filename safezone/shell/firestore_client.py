"""Firestore Client - Imperative Shell.

This module reads reports, subscriptions and votes from Google Cloud
Firestore. It serves as both the report store and the subscription store
of the notifier.

All I/O is contained here; parsing and filtering logic is in the core module.
"""

import logging
from dataclasses import dataclass
from typing import Any

from google.api_core import exceptions as gcp_exceptions
from google.auth import exceptions as auth_exceptions
from google.cloud import firestore

from safezone.core.errors import StorageError


logger = logging.getLogger(__name__)


# Fields the notifier needs from each collection
REPORT_FIELDS = ["lat", "lng", "category", "description", "created_at", "status"]
SUBSCRIPTION_FIELDS = ["user_id", "center_lat", "center_lng", "radius_m"]
VOTE_FIELDS = ["report_id", "user_id", "vote_type"]

# Firestore limit on values in an 'in' filter
IN_QUERY_LIMIT = 30

_STORAGE_EXCEPTIONS = (gcp_exceptions.GoogleAPIError, auth_exceptions.GoogleAuthError)


@dataclass
class FirestoreConfig:
    """Configuration for Firestore client.

    Attributes:
        project_id: GCP project ID (None for default)
        database: Firestore database name (None for default database)
        reports_collection: Collection holding reports
        subscriptions_collection: Collection holding subscriptions
        votes_collection: Collection holding votes
        timeout_seconds: Timeout passed to every read
    """
    project_id: str | None = None
    database: str | None = None
    reports_collection: str = "reports"
    subscriptions_collection: str = "subscriptions"
    votes_collection: str = "votes"
    timeout_seconds: float = 10


class FirestoreClient:
    """Client for reading notifier inputs from Firestore.

    This is part of the imperative shell - it handles database I/O.

    Report documents are keyed by the numeric report id:
    reports/{report_id} = {"lat", "lng", "category", "description", ...}
    """

    def __init__(self, config: FirestoreConfig | None = None) -> None:
        """Initialize Firestore client.

        Args:
            config: Firestore configuration
        """
        self.config = config or FirestoreConfig()
        self._client: firestore.Client | None = None

    @property
    def client(self) -> firestore.Client:
        """Lazy initialization of Firestore client."""
        if self._client is None:
            kwargs = {}
            if self.config.project_id:
                kwargs['project'] = self.config.project_id
            if self.config.database:
                kwargs['database'] = self.config.database
            self._client = firestore.Client(**kwargs)
        return self._client

    def get_report_by_id(self, report_id: int) -> dict[str, Any] | None:
        """Fetch a single report.

        This method performs database I/O.

        Args:
            report_id: Report identifier (document id)

        Returns:
            Report fields with "id" added, or None if it does not exist

        Raises:
            StorageError: If Firestore is unreachable or errors
        """
        logger.info("Fetching report %d from Firestore", report_id)

        try:
            doc = (
                self.client
                .collection(self.config.reports_collection)
                .document(str(report_id))
                .get(field_paths=REPORT_FIELDS, timeout=self.config.timeout_seconds)
            )
        except _STORAGE_EXCEPTIONS as e:
            logger.error("Failed to fetch report %d: %s", report_id, str(e))
            raise StorageError(f"Error fetching report {report_id}: {e}") from e

        if not doc.exists:
            logger.info("Report %d not found", report_id)
            return None

        data = doc.to_dict() or {}
        data["id"] = report_id
        return data

    def list_subscriptions(self) -> list[dict[str, Any]]:
        """Fetch every subscription.

        This method performs database I/O.

        Returns:
            Subscription rows with the document id as "id"

        Raises:
            StorageError: If Firestore is unreachable or errors
        """
        logger.info("Fetching subscriptions from Firestore")

        try:
            docs = (
                self.client
                .collection(self.config.subscriptions_collection)
                .select(SUBSCRIPTION_FIELDS)
                .stream(timeout=self.config.timeout_seconds)
            )
            rows = [{**(doc.to_dict() or {}), "id": doc.id} for doc in docs]
        except _STORAGE_EXCEPTIONS as e:
            logger.error("Failed to fetch subscriptions: %s", str(e))
            raise StorageError(f"Error fetching subscriptions: {e}") from e

        logger.info("Fetched %d subscriptions from Firestore", len(rows))
        return rows

    def list_votes(self, report_ids: list[int] | None = None) -> list[dict[str, Any]]:
        """Fetch votes, optionally only for some reports.

        This method performs database I/O. Votes for all requested reports
        come from one query per chunk of IN_QUERY_LIMIT ids.

        Args:
            report_ids: Reports to fetch votes for (None for all)

        Returns:
            Vote rows

        Raises:
            StorageError: If Firestore is unreachable or errors
        """
        logger.info("Fetching votes from Firestore")

        try:
            collection = self.client.collection(self.config.votes_collection)

            if report_ids is None:
                queries = [collection.select(VOTE_FIELDS)]
            else:
                unique_ids = sorted(set(report_ids))
                queries = [
                    collection
                    .where(filter=firestore.FieldFilter(
                        "report_id", "in", unique_ids[i:i + IN_QUERY_LIMIT],
                    ))
                    .select(VOTE_FIELDS)
                    for i in range(0, len(unique_ids), IN_QUERY_LIMIT)
                ]

            rows = [
                doc.to_dict() or {}
                for query in queries
                for doc in query.stream(timeout=self.config.timeout_seconds)
            ]
        except _STORAGE_EXCEPTIONS as e:
            logger.error("Failed to fetch votes: %s", str(e))
            raise StorageError(f"Error fetching votes: {e}") from e

        logger.info("Fetched %d votes from Firestore", len(rows))
        return rows
