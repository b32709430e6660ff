"""Async client for the school management REST backend."""

from school_client.errors import (
    ApiRequestError,
    AuthenticationError,
    FormValidationError,
    LookupFailedError,
    SchoolClientError,
)
from school_client.integration.api_client import ApiClient, build_url
from school_client.integration.endpoints import endpoints
from school_client.main import SchoolApi, create_school_api
from school_client.models.responses import UnwrappedResponse, extract_list, with_message
from school_client.security import hash_password
from school_client.services.school_service import SchoolService
from school_client.services.teacher_portal import TeacherPortal

__all__ = [
    "ApiClient",
    "ApiRequestError",
    "AuthenticationError",
    "FormValidationError",
    "LookupFailedError",
    "SchoolApi",
    "SchoolClientError",
    "SchoolService",
    "TeacherPortal",
    "UnwrappedResponse",
    "build_url",
    "create_school_api",
    "endpoints",
    "extract_list",
    "hash_password",
    "with_message",
]
