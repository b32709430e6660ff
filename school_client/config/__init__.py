"""Configuration module."""

from school_client.config.settings import ClientSettings

__all__ = ["ClientSettings"]
