"""
KV-HTTP Configuration Settings

This module contains all configuration constants for the KV-HTTP server.
Every value can be overridden through its environment variable; the
command line flags in ``kvhttp.server`` take precedence over both.
"""

import os
from dataclasses import dataclass


@dataclass
class Settings:
    """Server configuration settings."""

    # Network settings
    HOST: str = os.environ.get("KV_HTTP_HOST", "0.0.0.0")
    PORT: int = int(os.environ.get("KV_HTTP_PORT", "8080"))

    # Request settings
    MAX_BODY_SIZE: int = 1024 * 1024  # Bytes accepted on POST /data

    # Reporter settings
    REPORT_INTERVAL: float = float(os.environ.get("KV_HTTP_REPORT_INTERVAL", "5.0"))

    # Logging settings
    DEBUG: bool = os.environ.get("KV_HTTP_DEBUG", "false").lower() == "true"
    LOG_LEVEL: str = os.environ.get("KV_HTTP_LOG_LEVEL", "INFO")


# Global settings instance
settings = Settings()
