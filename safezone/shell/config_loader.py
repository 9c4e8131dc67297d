"""Configuration Loader - Imperative Shell.

This module handles loading configuration from YAML files and
environment variables. All I/O is contained here.

Models (Config, DeliveryConfig, GeocodingConfig) are defined in
safezone/core/config.py.
"""

import logging
import os
from pathlib import Path
from typing import Any, Optional

import yaml

from safezone.core.config import (
    DEFAULT_NOMINATIM_URL,
    DEFAULT_USER_AGENT,
    Config,
    DeliveryConfig,
    GeocodingConfig,
    validate_config,
)
from safezone.shell.secret_manager_client import SecretManagerClient, SecretManagerConfig


logger = logging.getLogger(__name__)


DEFAULT_CONFIG_PATH = "config/config.yaml"

_TRUE_VALUES = {"1", "true", "yes", "on"}


def _get_secret_manager_client() -> Optional[SecretManagerClient]:
    """Get a Secret Manager client.

    Returns None if no project is configured (e.g., local development).
    """
    project_id = os.environ.get("GCP_PROJECT") or os.environ.get("GOOGLE_CLOUD_PROJECT")
    if project_id:
        return SecretManagerClient(SecretManagerConfig(project_id=project_id))
    return None


def _resolve_value(value: Any, secret_client: Optional[SecretManagerClient] = None) -> Any:
    """Resolve a value that may contain secret or env var placeholders.

    Args:
        value: Value to resolve (may contain ${...} placeholders)
        secret_client: Client for resolving secrets

    Returns:
        Resolved value
    """
    if not isinstance(value, str):
        return value

    if secret_client:
        return secret_client.resolve(value)

    # No secret client - only handle env vars
    if value.startswith("${") and value.endswith("}"):
        var_spec = value[2:-1]
        if not var_spec.startswith("secret:"):
            env_value = os.environ.get(var_spec)
            if env_value:
                return env_value
            logger.warning("Environment variable %s not set", var_spec)

    return value


def _parse_bool(value: Any, default: bool) -> bool:
    """Parse a YAML or environment boolean."""
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in _TRUE_VALUES


def _parse_delivery(
    data: dict[str, Any],
    secret_client: Optional[SecretManagerClient] = None,
) -> DeliveryConfig:
    """Parse delivery settings from config data."""
    return DeliveryConfig(
        webhook_url=_resolve_value(data.get("webhook_url", ""), secret_client) or "",
        timeout_seconds=int(data.get("timeout_seconds", 10)),
    )


def _parse_geocoding(data: dict[str, Any]) -> GeocodingConfig:
    """Parse reverse-geocoding settings from config data."""
    return GeocodingConfig(
        enabled=_parse_bool(data.get("enabled"), True),
        base_url=data.get("base_url", DEFAULT_NOMINATIM_URL),
        user_agent=data.get("user_agent", DEFAULT_USER_AGENT),
        timeout_seconds=int(data.get("timeout_seconds", 5)),
    )


def load_config_from_dict(data: dict[str, Any]) -> Config:
    """Load configuration from a dictionary.

    This is a pure-ish function (only placeholder expansion has side effects).

    Args:
        data: Configuration dictionary

    Returns:
        Parsed Config object
    """
    secret_client = _get_secret_manager_client()

    return Config(
        firestore_database=data.get("firestore_database"),
        reports_collection=data.get("reports_collection", "reports"),
        subscriptions_collection=data.get("subscriptions_collection", "subscriptions"),
        votes_collection=data.get("votes_collection", "votes"),
        storage_timeout_seconds=float(data.get("storage_timeout_seconds", 10)),
        cors_allow_origin=data.get("cors_allow_origin", "*"),
        delivery=_parse_delivery(data.get("delivery") or {}, secret_client),
        geocoding=_parse_geocoding(data.get("geocoding") or {}),
    )


def _log_validation(config: Config) -> None:
    """Log configuration problems without failing the load."""
    result = validate_config(config)
    for issue in result.issues:
        if issue.severity == "error":
            logger.error("Config error in %s: %s", issue.field, issue.message)
        else:
            logger.warning("Config warning in %s: %s", issue.field, issue.message)


def load_config(config_path: str | Path | None = None) -> Config:
    """Load configuration from a YAML file.

    This method performs file I/O.

    Args:
        config_path: Path to YAML config file.
                    If None, uses CONFIG_PATH env var or default.

    Returns:
        Parsed Config object

    Raises:
        yaml.YAMLError: If config file is invalid YAML
    """
    if config_path is None:
        config_path = os.environ.get("CONFIG_PATH", DEFAULT_CONFIG_PATH)

    path = Path(config_path)

    logger.info("Loading configuration from %s", path)

    if not path.exists():
        logger.warning("Config file not found: %s, using defaults", path)
        return Config()

    with open(path, "r") as f:
        data = yaml.safe_load(f)

    if data is None:
        logger.warning("Config file is empty, using defaults")
        return Config()

    config = load_config_from_dict(data)
    _log_validation(config)

    logger.info(
        "Loaded config: database=%s, delivery %s",
        config.firestore_database or "(default)",
        "enabled" if config.delivery.enabled else "disabled",
    )

    return config


def load_config_from_env() -> Config:
    """Load configuration from environment variables.

    Useful for deployments without a YAML file.

    Environment variables:
        FIRESTORE_DATABASE: Firestore database name
        REPORTS_COLLECTION: Reports collection name
        SUBSCRIPTIONS_COLLECTION: Subscriptions collection name
        VOTES_COLLECTION: Votes collection name
        STORAGE_TIMEOUT_SECONDS: Timeout for each Firestore read
        NOTIFICATION_WEBHOOK_URL: Delivery webhook (may be ${secret:name})
        GEOCODING_ENABLED: Whether to reverse-geocode report locations
        CORS_ALLOW_ORIGIN: Access-Control-Allow-Origin value

    Returns:
        Config object from environment
    """
    secret_client = _get_secret_manager_client()

    config = Config(
        firestore_database=os.environ.get("FIRESTORE_DATABASE"),
        reports_collection=os.environ.get("REPORTS_COLLECTION", "reports"),
        subscriptions_collection=os.environ.get("SUBSCRIPTIONS_COLLECTION", "subscriptions"),
        votes_collection=os.environ.get("VOTES_COLLECTION", "votes"),
        storage_timeout_seconds=float(os.environ.get("STORAGE_TIMEOUT_SECONDS", 10)),
        cors_allow_origin=os.environ.get("CORS_ALLOW_ORIGIN", "*"),
        delivery=DeliveryConfig(
            webhook_url=_resolve_value(
                os.environ.get("NOTIFICATION_WEBHOOK_URL", ""), secret_client,
            ),
        ),
        geocoding=GeocodingConfig(
            enabled=_parse_bool(os.environ.get("GEOCODING_ENABLED"), True),
        ),
    )
    _log_validation(config)

    return config
