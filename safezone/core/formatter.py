"""Message formatting - Pure functions.

This module formats reports into notification messages and payloads.
All functions are pure with no side effects.
"""

from dataclasses import dataclass
from typing import Any

from safezone.core.address import AddressInfo
from safezone.core.report import Report
from safezone.core.subscriptions import NotificationIntent


@dataclass(frozen=True)
class CategoryStyle:
    """Presentation for a report category.

    Attributes:
        icon: Emoji shown next to the report
        color: Hex marker colour
        label: Human-readable name
    """
    icon: str
    color: str
    label: str


CATEGORY_STYLES: dict[str, CategoryStyle] = {
    "crime": CategoryStyle(icon="🚨", color="#dc2626", label="Crime"),
    "road": CategoryStyle(icon="🚧", color="#f59e0b", label="Road"),
    "flood": CategoryStyle(icon="🌊", color="#2563eb", label="Flood"),
    "lamp": CategoryStyle(icon="💡", color="#7c3aed", label="Street lamp"),
    "accident": CategoryStyle(icon="⚠️", color="#ea580c", label="Accident"),
    "disaster": CategoryStyle(icon="🔥", color="#16a34a", label="Disaster"),
    "other": CategoryStyle(icon="📍", color="#6b7280", label="Other"),
}


def get_category_style(category: str) -> CategoryStyle:
    """Look up the style for a category, defaulting to 'other'.

    Pure function.
    """
    return CATEGORY_STYLES.get(category, CATEGORY_STYLES["other"])


def get_maps_url(report: Report) -> str:
    """Google Maps link for the report location."""
    return (
        f"https://www.google.com/maps?q="
        f"{report.coordinate.latitude},{report.coordinate.longitude}"
    )


def format_report_summary(report: Report, address: AddressInfo | None = None) -> str:
    """Format a one-line summary of a report.

    Pure function.

    Args:
        report: Report to summarize
        address: Optional reverse-geocoded address

    Returns:
        One-line summary string
    """
    style = get_category_style(report.category)

    if address is not None:
        where = address.street_name
    else:
        where = f"{report.coordinate.latitude:.4f}, {report.coordinate.longitude:.4f}"

    summary = f"{style.icon} New {report.category.upper()} report near {where}"

    description = report.description.strip()
    if description:
        if len(description) > 140:
            description = description[:137] + "..."
        summary = f"{summary}: {description}"

    return summary


def format_notification_payload(
    intent: NotificationIntent,
    report: Report,
    address: AddressInfo | None = None,
) -> dict[str, Any]:
    """Format the delivery payload for one subscriber.

    Pure function.

    Args:
        intent: The subscriber's notification intent
        report: The report being announced
        address: Optional reverse-geocoded address

    Returns:
        JSON-serializable payload dict
    """
    style = get_category_style(report.category)

    payload: dict[str, Any] = {
        "user_id": intent.user_id,
        "report_id": report.id,
        "category": report.category,
        "icon": style.icon,
        "color": style.color,
        "description": report.description,
        "latitude": report.coordinate.latitude,
        "longitude": report.coordinate.longitude,
        "maps_url": get_maps_url(report),
        "text": format_report_summary(report, address),
    }

    if report.created_at is not None:
        payload["created_at"] = report.created_at.isoformat()

    if address is not None:
        payload["street_name"] = address.street_name
        payload["address"] = address.full_address

    return payload


def format_notify_message(report_id: int, notified_count: int, subscriber_count: int) -> str:
    """Human-readable outcome of a notify request.

    Pure function.
    """
    if subscriber_count == 0:
        return "No subscribers to notify."

    return (
        f"Successfully processed report {report_id}. "
        f"Notified {notified_count} subscribers."
    )
