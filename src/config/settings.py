"""Environment configuration and validation.

This module defines strongly-typed settings for the SObject source, loaded from environment
variables (optionally via a local `.env` file).
"""

from __future__ import annotations

import re

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from src.soql.builder import DEFAULT_TIMESTAMP_FIELD, is_identifier

_API_VERSION_RE = re.compile(r"\d{2,3}\.\d")


class Settings(BaseSettings):
    """Source settings loaded from environment variables.

    Connection settings are optional so that validation and offline previews work without a
    Salesforce org; `create_app` requires them.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    salesforce_instance_url: str | None = Field(default=None, alias="SALESFORCE_INSTANCE_URL")
    salesforce_access_token: str | None = Field(default=None, alias="SALESFORCE_ACCESS_TOKEN")
    salesforce_api_version: str = Field(default="45.0", alias="SALESFORCE_API_VERSION")
    describe_timeout_s: float = Field(default=30.0, gt=0, alias="DESCRIBE_TIMEOUT_S")
    soql_timestamp_field: str = Field(default=DEFAULT_TIMESTAMP_FIELD, alias="SOQL_TIMESTAMP_FIELD")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    @field_validator("salesforce_api_version")
    @classmethod
    def validate_api_version(cls, value: str) -> str:
        """Validate the REST API version format (for example `45.0`)."""

        value = value.strip().removeprefix("v")
        if not _API_VERSION_RE.fullmatch(value):
            raise ValueError("SALESFORCE_API_VERSION must look like 45.0")
        return value

    @field_validator("soql_timestamp_field")
    @classmethod
    def validate_timestamp_field(cls, value: str) -> str:
        """Validate that the timestamp field is a plain SOQL identifier."""

        if not is_identifier(value):
            raise ValueError("SOQL_TIMESTAMP_FIELD must be a SOQL field name")
        return value


def load_settings() -> Settings:
    """Load and validate settings from environment variables.

    Raises:
        RuntimeError: If the environment configuration is invalid.
    """

    try:
        return Settings()
    except ValidationError as exc:
        raise RuntimeError(f"Invalid environment configuration: {exc}") from exc
