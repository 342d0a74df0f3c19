"""
Configuration Validation Module

Validates critical configuration values at startup to fail-fast
with clear error messages instead of runtime failures.
"""

import sys
from typing import Optional
from urllib.parse import urlparse

VALID_STORAGE_BACKENDS = ("sqlite", "redis")


class ConfigValidationError(Exception):
    """Raised when configuration validation fails."""
    pass


def validate_required_config(value: Optional[str], name: str, example: str = "") -> None:
    """
    Validate that a required config value is set.

    Raises:
        ConfigValidationError: If value is missing
    """
    if not value:
        error_msg = f"{name} is required but not set!"
        if example:
            error_msg += f"\nAdd to .env: {name}={example}"
        raise ConfigValidationError(error_msg)


def validate_api_base_url(url: Optional[str]) -> None:
    """
    Validate the Remote Store base URL.

    Raises:
        ConfigValidationError: If the URL is missing or not http(s)
    """
    validate_required_config(url, 'API_BASE_URL', 'https://shop.example.com/api')
    parsed = urlparse(url)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise ConfigValidationError(
            f"API_BASE_URL must be an absolute http(s) URL (currently: {url})\n"
            "Add to .env: API_BASE_URL=https://shop.example.com/api"
        )


def validate_storage_backend(backend: Optional[str], db_url: Optional[str], redis_url: Optional[str]) -> None:
    """
    Validate the Local Store backend selection and its connection URL.

    Raises:
        ConfigValidationError: If the backend is unknown or its URL is missing
    """
    if backend not in VALID_STORAGE_BACKENDS:
        raise ConfigValidationError(
            f"LOCAL_STORAGE_BACKEND must be one of {', '.join(VALID_STORAGE_BACKENDS)} (currently: {backend})"
        )
    if backend == "sqlite":
        validate_required_config(db_url, 'LOCAL_STORAGE_DB_URL', 'sqlite:///local_storage.db')
    else:
        validate_required_config(redis_url, 'REDIS_URL', 'redis://localhost:6379/0')


def validate_shipping_amounts(shipping_fee: float, free_shipping_threshold: float) -> None:
    """
    Raises:
        ConfigValidationError: If either amount is negative
    """
    if shipping_fee < 0:
        raise ConfigValidationError(f"SHIPPING_FEE must not be negative (currently: {shipping_fee})")
    if free_shipping_threshold < 0:
        raise ConfigValidationError(
            f"FREE_SHIPPING_THRESHOLD must not be negative (currently: {free_shipping_threshold})"
        )


def validate_startup_config(config_module) -> None:
    """
    Validate all critical configuration at startup.

    Args:
        config_module: The config module to validate

    Raises:
        ConfigValidationError: If any validation fails
    """
    validate_api_base_url(getattr(config_module, 'API_BASE_URL', None))

    timeout = getattr(config_module, 'API_TIMEOUT_SECONDS', 0)
    if timeout <= 0:
        raise ConfigValidationError(f"API_TIMEOUT_SECONDS must be positive (currently: {timeout})")

    validate_storage_backend(
        getattr(config_module, 'LOCAL_STORAGE_BACKEND', None),
        getattr(config_module, 'LOCAL_STORAGE_DB_URL', None),
        getattr(config_module, 'REDIS_URL', None),
    )

    validate_required_config(getattr(config_module, 'CART_STORAGE_KEY', None), 'CART_STORAGE_KEY', 'greeting_card_cart')
    validate_required_config(getattr(config_module, 'WISHLIST_STORAGE_KEY', None), 'WISHLIST_STORAGE_KEY',
                             'greeting_card_wishlist')
    if config_module.CART_STORAGE_KEY == config_module.WISHLIST_STORAGE_KEY:
        raise ConfigValidationError("CART_STORAGE_KEY and WISHLIST_STORAGE_KEY must differ")

    validate_shipping_amounts(config_module.SHIPPING_FEE, config_module.FREE_SHIPPING_THRESHOLD)


def validate_or_exit(config_module) -> None:
    """
    Validate configuration and exit with error code 1 if validation fails.

    This is the main entry point for startup validation.
    """
    try:
        validate_startup_config(config_module)
    except ConfigValidationError as e:
        print(f"\n ERROR: Configuration Validation Failed\n", file=sys.stderr)
        print(str(e), file=sys.stderr)
        print("\nStartup aborted. Please fix configuration and try again.\n", file=sys.stderr)
        sys.exit(1)
