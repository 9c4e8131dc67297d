"""Imperative Shell - I/O and side effects.

This module contains all code that interacts with external systems:
- Firestore client (reports, subscriptions, votes)
- Webhook delivery client (HTTP)
- Nominatim reverse-geocoding client (HTTP)
- Configuration loading (environment/files/Secret Manager)

Keep this layer thin and simple. All business logic should be in core.
"""

from safezone.shell.firestore_client import FirestoreClient, FirestoreConfig
from safezone.shell.delivery_client import WebhookDeliveryClient
from safezone.shell.geocoding_client import NominatimClient
from safezone.shell.config_loader import load_config, load_config_from_env

__all__ = [
    "FirestoreClient",
    "FirestoreConfig",
    "WebhookDeliveryClient",
    "NominatimClient",
    "load_config",
    "load_config_from_env",
]
