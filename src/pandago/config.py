# Copyright (c) 2025 CoReason, Inc.
#
# This software is proprietary and dual-licensed.
# Licensed under the Prosperity Public License 3.0 (the "License").
# A copy of the license is available at https://prosperitylicense.com/versions/3.0.0
# For details, see the LICENSE file.
# Commercial use beyond a 30-day trial requires a separate license.
#
# Source Code: https://github.com/CoReason-AI/pandago_sdk

"""
Configuration for the pandago package.
"""

from collections.abc import Mapping
from typing import Any

from pydantic import Field, SecretStr, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from pandago.exceptions import ConfigurationError
from pandago.utils.logger import logger

SANDBOX = "sandbox"
PRODUCTION = "production"

ENVIRONMENT_URLS: dict[str, dict[str, str]] = {
    SANDBOX: {
        "api": "https://pandago-api-sandbox.deliveryhero.io",
        "auth": "https://sts-st.deliveryhero.io",
    },
    PRODUCTION: {
        "api": "https://pandago-api.deliveryhero.io",
        "auth": "https://sts.deliveryhero.io",
    },
}

SUPPORTED_COUNTRIES: dict[str, str] = {
    "sg": "Singapore",
    "hk": "Hong Kong",
    "my": "Malaysia",
    "th": "Thailand",
    "ph": "Philippines",
    "tw": "Taiwan",
    "pk": "Pakistan",
    "jo": "Jordan",
    "fi": "Finland",
    "kw": "Kuwait",
    "no": "Norway",
    "se": "Sweden",
}


class PandagoConfig(BaseSettings):
    """
    Configuration settings for the pandago client.

    Values can be passed explicitly or read from `PANDAGO_*` environment variables.
    The object is frozen once built and is shared read-only by the signer, the token
    manager and the request pipeline.

    Attributes:
        client_id (str): The vendor-issued client ID (e.g. pandago:my:00000000-...).
        key_id (str): The public key identifier, sent as the JWT `kid` header.
        scope (str): The access scope of the service (e.g. pandago.api.my.*).
        private_key (SecretStr): The PEM encoded RSA private key used to sign assertions.
        country (str): The two-letter country code selecting the API path segment.
        environment (str): Either `sandbox` or `production`.
        timeout (int): Timeout in seconds for all network operations.
    """

    model_config = SettingsConfigDict(
        env_prefix="PANDAGO_",
        case_sensitive=False,
        frozen=True,
    )

    client_id: str
    key_id: str
    scope: str
    private_key: SecretStr
    country: str = "my"
    environment: str = SANDBOX
    timeout: int = Field(default=30, gt=0, description="Timeout in seconds for all network operations.")

    def __init__(self, **values: Any) -> None:
        try:
            super().__init__(**values)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid pandago configuration: {e}") from e

    @classmethod
    def from_mapping(cls, values: Mapping[str, Any]) -> "PandagoConfig":
        """
        Builds a config from a plain mapping, dropping keys whose value is None
        so that defaults apply.

        Args:
            values: Mapping keyed by field name (client_id, key_id, ...).

        Returns:
            PandagoConfig: The validated configuration.

        Raises:
            ConfigurationError: If required settings are missing or invalid.
        """
        return cls(**{key: value for key, value in values.items() if value is not None})

    @field_validator("client_id", "key_id", "scope")
    @classmethod
    def require_non_empty(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("must not be empty")
        return v

    @field_validator("private_key")
    @classmethod
    def normalize_private_key(cls, v: SecretStr) -> SecretStr:
        """
        Rejects empty keys and expands literal `\\n` sequences, which is how
        multi-line PEM blocks usually arrive through environment variables.
        """
        raw = v.get_secret_value()
        if "\\n" in raw:
            raw = raw.replace("\\n", "\n")
        raw = raw.strip()
        if not raw:
            raise ValueError("must not be empty")
        return SecretStr(raw)

    @field_validator("country")
    @classmethod
    def validate_country(cls, v: str) -> str:
        v = v.strip().lower()
        if v not in SUPPORTED_COUNTRIES:
            supported = ", ".join(SUPPORTED_COUNTRIES)
            raise ValueError(f"unsupported country '{v}', expected one of: {supported}")
        return v

    @field_validator("environment")
    @classmethod
    def normalize_environment(cls, v: str) -> str:
        v = v.strip().lower()
        if v not in ENVIRONMENT_URLS:
            logger.warning(f"Unknown pandago environment '{v}', falling back to '{SANDBOX}'.")
            return SANDBOX
        return v

    @property
    def api_base_url(self) -> str:
        """The API base URL for the configured environment and country."""
        return f"{ENVIRONMENT_URLS[self.environment]['api']}/{self.country}/api/v1"

    @property
    def auth_url(self) -> str:
        """The OAuth2 token endpoint for the configured environment."""
        return f"{ENVIRONMENT_URLS[self.environment]['auth']}/oauth2/token"

    @property
    def audience(self) -> str:
        """The `aud` claim expected by the token service."""
        return ENVIRONMENT_URLS[self.environment]["auth"]

    @staticmethod
    def is_country_supported(country: str) -> bool:
        return country.strip().lower() in SUPPORTED_COUNTRIES

    @staticmethod
    def supported_countries() -> dict[str, str]:
        return dict(SUPPORTED_COUNTRIES)
