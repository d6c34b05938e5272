from __future__ import annotations

import socket

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Central configuration loaded from environment / .env file."""

    model_config = {
        "env_prefix": "SVCMONITOR_",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }

    # Applied to every service registered through one registry
    check_period_seconds: float = Field(default=60.0, ge=0)

    # Reporting
    sink: str = "log"  # "log" | "webhook"
    host_name: str = Field(default_factory=socket.gethostname)  # target host in reports
    webhook_url: str = ""
    webhook_timeout_seconds: float = 10.0

    # Check definitions (YAML)
    checks_file: str = "checks.yaml"

    # Management API
    api_host: str = "127.0.0.1"
    api_port: int = 8000

    # Logging
    log_level: str = "INFO"


settings = Settings()
