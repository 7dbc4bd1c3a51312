"""
Configuration module for skyfs.

Centralizes runtime settings with environment variable support. Only
operational settings live here; cryptographic constants (salts, KDF
parameters, container layout, padding tiers) are compatibility contracts
and are not configurable.
"""

import os

# ============================================================
# Environment Configuration
# ============================================================

ENV = os.getenv("SKYFS_ENV", "dev")  # dev|stage|prod

# Logging
LOG_LEVEL = os.getenv("SKYFS_LOG_LEVEL", "INFO")
LOG_JSON = os.getenv("SKYFS_LOG_JSON", "true").lower() in ("1", "true", "yes")
LOG_FILE = os.getenv("SKYFS_LOG_FILE", "") or None


def validate_config() -> None:
    """
    Validate configuration on startup.

    Raises:
        ValueError: If configuration is invalid
    """
    errors = []

    if ENV not in ("dev", "stage", "prod"):
        errors.append(f"Invalid SKYFS_ENV: {ENV}")

    if LOG_LEVEL.upper() not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
        errors.append(f"Invalid SKYFS_LOG_LEVEL: {LOG_LEVEL}")

    if errors:
        raise ValueError("Configuration errors: " + "; ".join(errors))
