"""Pydantic Settings for the school client.

All environment variables use the SCHOOL_API_ prefix.
Example: SCHOOL_API_BASE_URL=https://school.example.com, SCHOOL_API_TIMEOUT_SECONDS=10
"""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings


class ClientSettings(BaseSettings):
    """School client configuration validated from environment variables."""

    # Backend
    base_url: str  # e.g. "https://school.example.com"
    timeout_seconds: float = Field(default=30.0, gt=0)

    # Logging
    log_level: str = "INFO"
    log_json: bool = True

    model_config = {"env_prefix": "SCHOOL_API_"}
