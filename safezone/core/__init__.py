"""Functional Core - Pure functions with no side effects.

This module contains all business logic as pure functions:
- Great-circle distance calculations
- Report and subscription parsing
- Subscription coverage evaluation
- Request validation
- Message formatting
- Vote score aggregation

All functions here are deterministic and have no I/O.
"""

from safezone.core.geo import Coordinate, calculate_distance, is_within_radius
from safezone.core.report import Report, Subscription, parse_report, parse_subscriptions
from safezone.core.subscriptions import (
    NotificationIntent,
    covers,
    make_notification_intents,
)
from safezone.core.errors import (
    DeliveryError,
    NotifierError,
    ReportNotFoundError,
    StorageError,
    ValidationError,
)
from safezone.core.validation import parse_notify_request
from safezone.core.formatter import format_notification_payload, format_report_summary
from safezone.core.votes import aggregate_scores, rank_by_score

__all__ = [
    # Geo
    "Coordinate",
    "calculate_distance",
    "is_within_radius",
    # Models
    "Report",
    "Subscription",
    "parse_report",
    "parse_subscriptions",
    # Coverage
    "NotificationIntent",
    "covers",
    "make_notification_intents",
    # Errors
    "NotifierError",
    "ValidationError",
    "ReportNotFoundError",
    "StorageError",
    "DeliveryError",
    # Validation
    "parse_notify_request",
    # Formatter
    "format_notification_payload",
    "format_report_summary",
    # Votes
    "aggregate_scores",
    "rank_by_score",
]
