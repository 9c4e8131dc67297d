"""Cloud Function Entry Point - Root Module.

This is the root-level entry point for Google Cloud Functions.
It imports from the safezone package.
"""

from safezone.main import (
    notify_subscribers,
    notify_subscribers_pubsub,
    report_scores,
)

__all__ = [
    "notify_subscribers",
    "notify_subscribers_pubsub",
    "report_scores",
]
