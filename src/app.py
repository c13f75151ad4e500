"""Application composition root.

This module wires together configuration and the SObject describe client.
"""

from __future__ import annotations

from dataclasses import dataclass

from src.config.settings import Settings
from src.sobject.describe import RestDescribeClient, SObjectDescriber


@dataclass(frozen=True)
class App:
    """Shared dependencies for query generation."""

    settings: Settings
    describer: SObjectDescriber


def create_app(settings: Settings) -> App:
    """Create the application container backed by the Salesforce REST describe API.

    Raises:
        RuntimeError: If the instance URL or access token is not configured.
    """

    if not settings.salesforce_instance_url or not settings.salesforce_access_token:
        raise RuntimeError(
            "SALESFORCE_INSTANCE_URL and SALESFORCE_ACCESS_TOKEN are required to describe SObjects"
        )

    describer = RestDescribeClient(
        instance_url=settings.salesforce_instance_url,
        access_token=settings.salesforce_access_token,
        api_version=settings.salesforce_api_version,
        timeout_s=settings.describe_timeout_s,
    )
    return App(settings=settings, describer=describer)
