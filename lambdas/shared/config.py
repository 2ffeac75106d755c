"""Environment configuration for the roster Lambda and store."""
import os
from dataclasses import dataclass, field

from .exceptions import ConfigurationError

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


def _env_flag(key: str, default: bool) -> bool:
    """Read a boolean environment variable.

    Args:
        key: Environment variable name
        default: Value used when the variable is unset or empty

    Returns:
        Parsed boolean

    Raises:
        ConfigurationError: If the value is not a recognised boolean
    """
    raw = os.environ.get(key, "").strip().lower()
    if not raw:
        return default
    if raw in _TRUE_VALUES:
        return True
    if raw in _FALSE_VALUES:
        return False
    raise ConfigurationError(
        f"{key} must be a boolean, got {raw!r}",
        config_key=key,
    )


@dataclass(frozen=True)
class RosterOptions:
    """Optional roster capabilities.

    Attributes:
        companions: Accept and emit the recursive ``companions`` field
        track_pending: Maintain the "has new characters" flag
    """

    companions: bool = True
    track_pending: bool = True

    @classmethod
    def from_env(cls) -> "RosterOptions":
        """Load capability switches from environment variables."""
        return cls(
            companions=_env_flag("ROSTER_COMPANIONS", True),
            track_pending=_env_flag("ROSTER_TRACK_PENDING", True),
        )


@dataclass
class Config:
    """Application configuration loaded from environment variables."""

    table_name: str
    environment: str
    roster_id: str
    log_level: str
    options: RosterOptions = field(default_factory=RosterOptions)

    @classmethod
    def from_env(cls) -> "Config":
        """Load configuration from environment variables.

        Returns:
            Config instance with values from environment

        Raises:
            ConfigurationError: If required environment variables are missing
                or a capability switch is not a boolean
        """
        table_name = os.environ.get("TABLE_NAME")
        if not table_name:
            raise ConfigurationError(
                "TABLE_NAME environment variable is required",
                config_key="TABLE_NAME",
            )

        return cls(
            table_name=table_name,
            environment=os.environ.get("ENVIRONMENT", "dev"),
            roster_id=os.environ.get("ROSTER_ID", "lw"),
            log_level=os.environ.get("POWERTOOLS_LOG_LEVEL", "INFO"),
            options=RosterOptions.from_env(),
        )

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment == "prod"


def get_config() -> Config:
    """Get cached configuration instance.

    Returns:
        Config instance (cached after first call)
    """
    if not hasattr(get_config, "_config"):
        get_config._config = Config.from_env()
    return get_config._config


def reset_config() -> None:
    """Drop the cached configuration (for testing)."""
    if hasattr(get_config, "_config"):
        delattr(get_config, "_config")
