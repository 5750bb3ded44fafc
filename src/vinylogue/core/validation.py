"""
Configuration validation utilities.
"""

import importlib
from pathlib import Path
from typing import List, Tuple
from .config import (
    SPOTIFY_CONFIG,
    TOKEN_CONFIG,
    CARD_CONFIG,
    LOGGING_CONFIG,
    ERROR_MESSAGES,
)
from .exceptions import ConfigurationError


def check_dependencies() -> Tuple[bool, List[str]]:
    """
    Check if all required dependencies are installed.

    Returns:
        Tuple of (all_installed, list_of_missing_dependencies)
    """
    required_packages = {
        "requests": "requests",
        "PIL": "Pillow",
        "rich": "rich",
    }

    missing = []
    for module_name, package_name in required_packages.items():
        try:
            importlib.import_module(module_name)
        except ImportError:
            missing.append(package_name)

    return len(missing) == 0, missing


def validate_configuration(require_credentials: bool = True) -> Tuple[bool, List[str]]:
    """
    Validate application configuration.

    Args:
        require_credentials: Whether Spotify client credentials must be present

    Returns:
        Tuple of (is_valid, list_of_errors)
    """
    errors = []

    deps_ok, missing_deps = check_dependencies()
    if not deps_ok:
        errors.append(
            f"Missing required dependencies: {', '.join(missing_deps)}. "
            f"Please install them with: pip install -e ."
        )

    if require_credentials and not (SPOTIFY_CONFIG["CLIENT_ID"] and SPOTIFY_CONFIG["CLIENT_SECRET"]):
        errors.append(ERROR_MESSAGES["MISSING_CREDENTIALS"])

    if SPOTIFY_CONFIG["TIMEOUT"] < 1:
        errors.append("Spotify TIMEOUT must be >= 1")

    if TOKEN_CONFIG["SKEW_SECONDS"] < 0:
        errors.append("Token SKEW_SECONDS must be >= 0")

    if TOKEN_CONFIG["MAX_RETRIES"] < 0:
        errors.append("Token MAX_RETRIES must be >= 0")

    for key in ("FONT_PATH", "BOLD_FONT_PATH"):
        font_path = CARD_CONFIG[key]
        if font_path and not Path(font_path).is_file():
            errors.append(f"{key} does not point to a font file: {font_path}")

    valid_log_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
    if LOGGING_CONFIG["LEVEL"] not in valid_log_levels:
        errors.append(f"LOG_LEVEL must be one of: {', '.join(valid_log_levels)}")

    is_valid = len(errors) == 0
    return is_valid, errors


def validate_and_raise(require_credentials: bool = True):
    """
    Validate configuration and raise ConfigurationError if invalid.
    """
    is_valid, errors = validate_configuration(require_credentials)
    if not is_valid:
        error_msg = "Configuration validation failed:\n" + "\n".join(f"  - {e}" for e in errors)
        raise ConfigurationError(error_msg)
