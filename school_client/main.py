"""Factory wiring settings, logging, the access layer and the services."""

from __future__ import annotations

import logging
from dataclasses import dataclass

import httpx

from school_client.config.settings import ClientSettings
from school_client.integration.api_client import ApiClient
from school_client.logging_config import configure_logging
from school_client.services.school_service import SchoolService
from school_client.services.teacher_portal import TeacherPortal

logger = logging.getLogger(__name__)


@dataclass
class SchoolApi:
    """Access layer plus the services built on it."""

    client: ApiClient
    school: SchoolService
    teacher_portal: TeacherPortal


def create_school_api(
    settings: ClientSettings | None = None,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
    setup_logging: bool = True,
) -> SchoolApi:
    """Build a ``SchoolApi`` from settings.

    Loads ``ClientSettings`` from the environment when none are given, so a
    missing ``SCHOOL_API_BASE_URL`` fails here rather than on the first call.
    """
    settings = settings or ClientSettings()  # type: ignore[call-arg]

    if setup_logging:
        configure_logging(settings.log_level, json_format=settings.log_json)

    client = ApiClient(
        settings.base_url,
        timeout_seconds=settings.timeout_seconds,
        transport=transport,
    )
    logger.info("School client configured for %s", client.base_url)

    return SchoolApi(
        client=client,
        school=SchoolService(client),
        teacher_portal=TeacherPortal(client),
    )
