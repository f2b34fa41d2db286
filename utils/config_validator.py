"""
Configuration Validation Module

Validates critical configuration values at startup to fail-fast
with clear error messages instead of runtime failures.
"""

import logging
import sys


class ConfigValidationError(Exception):
    """Raised when configuration validation fails."""
    pass


def validate_price_decimal_places(places: int) -> None:
    """
    Validate the number of decimal places money amounts are rounded to.

    Raises:
        ConfigValidationError: If places is outside 0..4
    """
    if places < 0 or places > 4:
        raise ConfigValidationError(
            f"PRICE_DECIMAL_PLACES must be between 0 and 4 (currently: {places})\n"
            "Add to .env: PRICE_DECIMAL_PLACES=2"
        )


def validate_retry_settings(max_retries: int, retry_delay: float) -> None:
    """
    Validate optimistic locking retry settings.

    Args:
        max_retries: CONFIG_SAVE_MAX_RETRIES value
        retry_delay: CONFIG_SAVE_RETRY_DELAY value

    Raises:
        ConfigValidationError: If either value is negative
    """
    if max_retries < 0:
        raise ConfigValidationError(
            f"CONFIG_SAVE_MAX_RETRIES cannot be negative (currently: {max_retries})\n"
            "Use 0 to surface every version conflict to the caller."
        )

    if retry_delay < 0:
        raise ConfigValidationError(
            f"CONFIG_SAVE_RETRY_DELAY cannot be negative (currently: {retry_delay})"
        )


def validate_log_level(log_level: str) -> None:
    if not isinstance(logging.getLevelName(log_level.upper()), int):
        raise ConfigValidationError(
            f"LOG_LEVEL '{log_level}' is not a logging level\n"
            "Valid values: DEBUG, INFO, WARNING, ERROR, CRITICAL"
        )


def validate_required_config(value: str | None, name: str, example: str = "") -> None:
    """
    Validate that a required config value is set.

    Args:
        value: The config value to check
        name: Name of the config variable
        example: Optional example value to show in error message

    Raises:
        ConfigValidationError: If value is missing
    """
    if not value:
        error_msg = f"{name} is required but not set!"
        if example:
            error_msg += f"\nAdd to .env: {name}={example}"
        raise ConfigValidationError(error_msg)


def validate_startup_config(config_module) -> None:
    """
    Validate all critical configuration at startup.

    Args:
        config_module: The config module to validate

    Raises:
        ConfigValidationError: If any validation fails
    """
    validate_required_config(config_module.DB_URL, 'DB_URL', 'sqlite+aiosqlite:///data/pricing.db')
    validate_price_decimal_places(config_module.PRICE_DECIMAL_PLACES)
    validate_retry_settings(config_module.CONFIG_SAVE_MAX_RETRIES, config_module.CONFIG_SAVE_RETRY_DELAY)
    validate_log_level(config_module.LOG_LEVEL)

    if config_module.LOG_RETENTION_DAYS < 1:
        raise ConfigValidationError(
            f"LOG_RETENTION_DAYS must be at least 1 (currently: {config_module.LOG_RETENTION_DAYS})"
        )


def validate_or_exit(config_module) -> None:
    """
    Validate configuration and exit with error code 1 if validation fails.

    This is the main entry point for startup validation.

    Args:
        config_module: The config module to validate
    """
    try:
        validate_startup_config(config_module)
    except ConfigValidationError as e:
        print(f"\n ERROR: Configuration Validation Failed\n", file=sys.stderr)
        print(str(e), file=sys.stderr)
        print("\nStartup aborted. Please fix configuration and try again.\n", file=sys.stderr)
        sys.exit(1)
