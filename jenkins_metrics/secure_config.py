"""
Secure Configuration Management

Provides centralized, validated configuration for the Jenkins collector.
Replaces ad-hoc os.getenv() calls with strict validation and fail-fast behavior.

Usage:
    from jenkins_metrics.secure_config import get_config

    config = get_config()
    jenkins_config = config.get_jenkins_config()
    print(jenkins_config.url)

Security Features:
    - Strict validation of all configuration values
    - Fail-fast on missing/invalid configuration
    - Placeholder detection (e.g., "your_token_here")
    - TLS verification stays on unless insecure is explicitly enabled

Raises:
    ConfigurationError: If configuration is missing or invalid
"""

import os
from dataclasses import dataclass

from dotenv import load_dotenv

SAMPLE_CONFIG = """
## specify host for use as an additional tag
JENKINS_HOST=jenkins1
## specify url via a url matching:
##  [protocol://]address[:port]
##  e.g.
##    http://jenkins.service.consul:8080/
##    http://jenkins.foo.com/
JENKINS_URL=http://jenkins.service.consul:8080
## specify username and password for logging in to jenkins
## password may optionally be a jenkins generated API token
JENKINS_USERNAME=admin
JENKINS_PASSWORD=password
## Set insecure to true to skip TLS certificate verification.
## Only for servers with self-signed certificates; leave false otherwise
JENKINS_INSECURE=false
## Count queued builds per job label and agents per label
JENKINS_EXTENDED_METRICS=false
"""

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off", ""}


class ConfigurationError(Exception):
    """Raised when configuration is missing or invalid."""

    pass


@dataclass(frozen=True)
class JenkinsConfig:
    """
    Validated Jenkins collector configuration.

    Created once at startup and shared read-only across polling cycles.

    Attributes:
        url: Jenkins base address (also emitted as the "url" tag)
        username: Jenkins user to authenticate as
        password: Password or Jenkins-generated API token
        host: Optional value for the "host" tag (omitted when empty)
        insecure: Skip TLS certificate verification (explicit opt-in only)
        extended: Also gather per-label queue and agent counts
    """

    url: str
    username: str
    password: str
    host: str = ""
    insecure: bool = False
    extended: bool = False

    def __post_init__(self):
        """Validate configuration after initialization."""
        self._validate()

    def _validate(self):
        """
        Validate Jenkins configuration.

        Raises:
            ConfigurationError: If configuration is invalid
        """
        if not self.url:
            raise ConfigurationError("JENKINS_URL is required")

        if not self.url.startswith(("http://", "https://")):
            raise ConfigurationError(f"JENKINS_URL must start with http:// or https://: {self.url}")

        if not self.username:
            raise ConfigurationError("JENKINS_USERNAME is required")

        if not self.password:
            raise ConfigurationError("JENKINS_PASSWORD is required")

        placeholders = ["your_password", "your_token", "your_api_token", "placeholder", "replace_me"]
        if any(placeholder in self.password.lower() for placeholder in placeholders):
            raise ConfigurationError("JENKINS_PASSWORD contains a placeholder value - please set a real password or API token")


def parse_bool(name: str, value: str | None, default: bool = False) -> bool:
    """
    Parse a boolean environment value.

    Args:
        name: Variable name (used in the error message)
        value: Raw value, or None if unset
        default: Value to use when unset

    Returns:
        Parsed boolean

    Raises:
        ConfigurationError: If the value is not a recognized boolean
    """
    if value is None:
        return default

    normalized = value.strip().lower()
    if normalized in _TRUE_VALUES:
        return True
    if normalized in _FALSE_VALUES:
        return False
    raise ConfigurationError(f"{name} must be a boolean (true/false), got: {value!r}")


class SecureConfig:
    """
    Centralized secure configuration manager.

    Loads and validates collector configuration from environment variables.
    """

    def __init__(self):
        """Initialize configuration (loads .env file)."""
        load_dotenv()

    def get_jenkins_config(self) -> JenkinsConfig:
        """
        Get validated Jenkins configuration.

        Returns:
            JenkinsConfig: Validated configuration

        Raises:
            ConfigurationError: If configuration is missing or invalid
        """
        return JenkinsConfig(
            url=os.getenv("JENKINS_URL", ""),
            username=os.getenv("JENKINS_USERNAME", ""),
            password=os.getenv("JENKINS_PASSWORD", ""),
            host=os.getenv("JENKINS_HOST", ""),
            insecure=parse_bool("JENKINS_INSECURE", os.getenv("JENKINS_INSECURE")),
            extended=parse_bool("JENKINS_EXTENDED_METRICS", os.getenv("JENKINS_EXTENDED_METRICS")),
        )


_config_instance = None


def get_config() -> SecureConfig:
    """
    Get the global configuration instance (singleton pattern).

    Returns:
        SecureConfig: The configuration manager
    """
    global _config_instance
    if _config_instance is None:
        _config_instance = SecureConfig()
    return _config_instance


def validate_config_on_startup() -> JenkinsConfig:
    """
    Validate configuration at application startup.

    Call this in main() to fail fast if configuration is invalid.

    Returns:
        JenkinsConfig: The validated configuration

    Raises:
        ConfigurationError: If any required configuration is missing or invalid
    """
    return get_config().get_jenkins_config()
