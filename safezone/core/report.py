"""Report and subscription models and parsing - Pure functions.

This module turns raw storage rows into typed Report and Subscription
objects. All functions are pure with no side effects.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any

from safezone.core.geo import Coordinate


# Categories offered by the report form
CATEGORIES = ("crime", "road", "flood", "lamp", "accident", "disaster", "other")


@dataclass(frozen=True)
class Report:
    """Immutable incident report.

    Attributes:
        id: Positive report identifier
        coordinate: Report location
        category: Category tag (kept verbatim, may be outside CATEGORIES)
        description: Free-text description
        created_at: Creation timestamp (UTC), if known
        status: Review status, if known
    """
    id: int
    coordinate: Coordinate
    category: str
    description: str
    created_at: datetime | None = None
    status: str | None = None


@dataclass(frozen=True)
class Subscription:
    """A user's circular notification region.

    Attributes:
        id: Subscription identifier
        user_id: Owning user
        center: Circle center
        radius_m: Circle radius in meters
    """
    id: str
    user_id: str
    center: Coordinate
    radius_m: float


def _parse_timestamp(value: Any) -> datetime | None:
    """Parse a datetime or ISO-8601 string into an aware UTC datetime."""
    if value is None:
        return None

    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str):
        try:
            parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            return None
    else:
        return None

    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def parse_report(data: dict[str, Any], report_id: int | None = None) -> Report | None:
    """Parse a report row into a Report.

    Pure function: takes raw dict, returns typed Report or None if invalid.

    Args:
        data: Row with lat, lng, category, description (and optionally
            id, created_at, status)
        report_id: Id to use when the row does not carry one

    Returns:
        Report object or None if parsing fails
    """
    try:
        raw_id = data.get("id", report_id)
        if raw_id is None:
            return None

        lat = data.get("lat")
        lng = data.get("lng")
        if lat is None or lng is None:
            return None

        return Report(
            id=int(raw_id),
            coordinate=Coordinate(latitude=float(lat), longitude=float(lng)),
            category=str(data.get("category") or "other"),
            description=str(data.get("description") or ""),
            created_at=_parse_timestamp(data.get("created_at")),
            status=data.get("status"),
        )
    except (KeyError, TypeError, ValueError):
        return None


def parse_subscription(data: dict[str, Any]) -> Subscription | None:
    """Parse a subscription row into a Subscription.

    Pure function. Rows with a missing center or a non-positive radius
    are rejected.

    Args:
        data: Row with user_id, center_lat, center_lng, radius_m

    Returns:
        Subscription object or None if parsing fails
    """
    try:
        user_id = data.get("user_id")
        if not user_id:
            return None

        center_lat = data.get("center_lat")
        center_lng = data.get("center_lng")
        radius = data.get("radius_m")
        if center_lat is None or center_lng is None or radius is None:
            return None

        radius_m = float(radius)
        if radius_m <= 0:
            return None

        return Subscription(
            id=str(data.get("id", "")),
            user_id=str(user_id),
            center=Coordinate(latitude=float(center_lat), longitude=float(center_lng)),
            radius_m=radius_m,
        )
    except (KeyError, TypeError, ValueError):
        return None


def parse_subscriptions(rows: list[dict[str, Any]]) -> list[Subscription]:
    """Parse subscription rows, dropping invalid ones.

    Pure function. Order of valid rows is preserved.

    Args:
        rows: Raw subscription rows

    Returns:
        List of valid Subscription objects
    """
    subscriptions = []

    for row in rows:
        subscription = parse_subscription(row)
        if subscription is not None:
            subscriptions.append(subscription)

    return subscriptions
