"""Subscription coverage evaluation - Pure functions.

This module decides which subscriptions cover a report and builds the
notification intents for them. All functions are pure with no side effects.
"""

from dataclasses import dataclass

from safezone.core.geo import distance_between
from safezone.core.report import Report, Subscription


STATUS_NOTIFIED = "notified"
STATUS_FAILED = "failed"


@dataclass(frozen=True)
class NotificationIntent:
    """A decided but undelivered notification.

    Attributes:
        user_id: Subscriber to notify
        report_id: Report the notification is about
        status: 'notified' or 'failed'
        error: Delivery error message if failed
    """
    user_id: str
    report_id: int
    status: str = STATUS_NOTIFIED
    error: str | None = None


def distance_to_report(subscription: Subscription, report: Report) -> float:
    """Distance in meters from a subscription center to a report.

    Pure function.
    """
    return distance_between(subscription.center, report.coordinate)


def covers(subscription: Subscription, report: Report) -> bool:
    """Check if a subscription's circle contains the report.

    Pure function. Inclusive: a report exactly radius_m away is covered.
    """
    return distance_to_report(subscription, report) <= subscription.radius_m


def find_covering_subscriptions(
    report: Report,
    subscriptions: list[Subscription],
) -> list[Subscription]:
    """Filter subscriptions to those covering a report.

    Pure function. Input order is preserved.

    Args:
        report: The report to locate
        subscriptions: All subscriptions

    Returns:
        Subscriptions whose circle contains the report
    """
    return [s for s in subscriptions if covers(s, report)]


def make_notification_intents(
    report: Report,
    subscriptions: list[Subscription],
) -> list[NotificationIntent]:
    """Build one notification intent per covering subscription.

    Pure function.

    Args:
        report: The newly created report
        subscriptions: All subscriptions

    Returns:
        Intents for every subscription that covers the report
    """
    return [
        NotificationIntent(user_id=s.user_id, report_id=report.id)
        for s in find_covering_subscriptions(report, subscriptions)
    ]
