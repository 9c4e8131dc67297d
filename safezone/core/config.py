"""Configuration models - Pure data structures.

These are domain models for configuration. The actual loading
(I/O) is handled by the shell layer.
"""

from dataclasses import dataclass, field


DEFAULT_NOMINATIM_URL = "https://nominatim.openstreetmap.org/reverse"
DEFAULT_USER_AGENT = "SafeZone-App/1.0"


@dataclass
class DeliveryConfig:
    """Notification delivery configuration.

    Attributes:
        webhook_url: Endpoint receiving one POST per subscriber
            (empty disables delivery)
        timeout_seconds: Request timeout
    """
    webhook_url: str = ""
    timeout_seconds: int = 10

    @property
    def enabled(self) -> bool:
        """Returns True if a usable webhook URL is configured."""
        return bool(self.webhook_url) and not self.webhook_url.startswith("${")


@dataclass
class GeocodingConfig:
    """Reverse-geocoding configuration.

    Attributes:
        enabled: Whether to look up street names for delivered notifications
        base_url: Nominatim reverse endpoint
        user_agent: User-Agent sent to Nominatim (required by its usage policy)
        timeout_seconds: Request timeout
    """
    enabled: bool = True
    base_url: str = DEFAULT_NOMINATIM_URL
    user_agent: str = DEFAULT_USER_AGENT
    timeout_seconds: int = 5


@dataclass
class Config:
    """Application configuration.

    This is a pure data structure - no I/O or side effects.

    Attributes:
        firestore_database: Firestore database name (None for default)
        reports_collection: Collection holding reports
        subscriptions_collection: Collection holding subscriptions
        votes_collection: Collection holding votes
        storage_timeout_seconds: Timeout for each Firestore read
        cors_allow_origin: Value of Access-Control-Allow-Origin
        delivery: Delivery channel configuration
        geocoding: Reverse-geocoding configuration
    """
    firestore_database: str | None = None
    reports_collection: str = "reports"
    subscriptions_collection: str = "subscriptions"
    votes_collection: str = "votes"
    storage_timeout_seconds: float = 10
    cors_allow_origin: str = "*"
    delivery: DeliveryConfig = field(default_factory=DeliveryConfig)
    geocoding: GeocodingConfig = field(default_factory=GeocodingConfig)


@dataclass
class ConfigIssue:
    """A configuration validation problem.

    Attributes:
        field: The field that has an issue
        message: Human-readable description
        severity: 'error' or 'warning'
    """
    field: str
    message: str
    severity: str = "error"


@dataclass
class ValidationResult:
    """Result of validating configuration.

    Attributes:
        valid: True if no errors (warnings are OK)
        issues: List of errors and warnings
    """
    valid: bool
    issues: list[ConfigIssue] = field(default_factory=list)

    @property
    def warnings(self) -> list[ConfigIssue]:
        """Get only warnings."""
        return [i for i in self.issues if i.severity == "warning"]

    @property
    def critical_errors(self) -> list[ConfigIssue]:
        """Get only critical errors."""
        return [i for i in self.issues if i.severity == "error"]


def validate_config(config: Config) -> ValidationResult:
    """Validate configuration for errors and warnings.

    Pure function.

    Args:
        config: Configuration to validate

    Returns:
        ValidationResult with any errors/warnings found
    """
    issues: list[ConfigIssue] = []

    for name in ("reports_collection", "subscriptions_collection", "votes_collection"):
        if not getattr(config, name):
            issues.append(ConfigIssue(
                field=name,
                message="Collection name must not be empty",
            ))

    if config.storage_timeout_seconds <= 0:
        issues.append(ConfigIssue(
            field="storage_timeout_seconds",
            message=f"Timeout must be positive, got {config.storage_timeout_seconds}",
        ))

    if config.delivery.timeout_seconds <= 0:
        issues.append(ConfigIssue(
            field="delivery.timeout_seconds",
            message=f"Timeout must be positive, got {config.delivery.timeout_seconds}",
        ))

    if config.delivery.webhook_url.startswith("${"):
        issues.append(ConfigIssue(
            field="delivery.webhook_url",
            message="Webhook URL not resolved (still contains placeholder)",
            severity="warning",
        ))

    if config.geocoding.enabled and config.geocoding.timeout_seconds <= 0:
        issues.append(ConfigIssue(
            field="geocoding.timeout_seconds",
            message=f"Timeout must be positive, got {config.geocoding.timeout_seconds}",
        ))

    has_critical = any(i.severity == "error" for i in issues)

    return ValidationResult(valid=not has_critical, issues=issues)
