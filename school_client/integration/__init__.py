"""Backend integration: the HTTP access layer and its route registry."""

from school_client.integration.api_client import (
    DEFAULT_HEADERS,
    OMITTED,
    ApiClient,
    build_url,
)
from school_client.integration.endpoints import Endpoints, encode_path_value, endpoints

__all__ = [
    "ApiClient",
    "DEFAULT_HEADERS",
    "Endpoints",
    "OMITTED",
    "build_url",
    "encode_path_value",
    "endpoints",
]
