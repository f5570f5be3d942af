"""
Configuration management using Pydantic Settings.

Type-safe, validated configuration for the engine, loaded from environment
variables prefixed with ``GATEHOUSE_``. Hosts either let the engine read its
own environment via ``get_settings()`` or construct ``GatehouseSettings``
explicitly and hand it to the container.

Usage:
    from gatehouse.core.config import GatehouseSettings

    settings = GatehouseSettings(jwt_secret="x" * 32, require_admin_approval=False)
    options = settings.access_gate_options()
"""

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from gatehouse.core.constants import (
    BCRYPT_ROUNDS_DEFAULT,
    REFRESH_TOKEN_SCAN_LIMIT_DEFAULT,
)
from gatehouse.domain.policies.access_gate import AccessGateOptions


class GatehouseSettings(BaseSettings):
    """
    Engine settings (flat structure).

    Configuration precedence:
        1. Explicit keyword arguments
        2. Environment variables (GATEHOUSE_*)
        3. Default values (only for non-sensitive config)
    """

    # Access tokens
    jwt_secret: str = Field(
        description="Secret key for access token signing (at least 32 characters)",
    )
    jwt_algorithm: str = Field(
        default="HS256",
        description="Access token signing algorithm",
    )
    access_token_expire_minutes: int = Field(
        default=15,
        description="Access token lifetime in minutes",
    )

    # Refresh tokens
    refresh_token_expire_days: int = Field(
        default=30,
        description="Refresh token lifetime in days",
    )
    refresh_token_scan_limit: int = Field(
        default=REFRESH_TOKEN_SCAN_LIMIT_DEFAULT,
        description="Most-recent unrevoked refresh tokens compared per lookup",
    )

    # Password reset
    password_reset_expire_minutes: int = Field(
        default=30,
        description="Password reset token lifetime in minutes",
    )

    # Hashing
    bcrypt_rounds: int = Field(
        default=BCRYPT_ROUNDS_DEFAULT,
        description="Number of bcrypt hashing rounds (10-14 recommended, 12 = ~250ms)",
    )

    # Access gate
    require_active: bool = Field(
        default=True,
        description="Deactivated accounts cannot log in or refresh",
    )
    require_email_verification: bool = Field(
        default=True,
        description="Email must be verified before login or refresh",
    )
    require_phone_verification: bool = Field(
        default=False,
        description="Phone must be verified before login or refresh",
    )
    require_admin_approval: bool = Field(
        default=True,
        description="An admin must approve the account before login or refresh",
    )

    # Session hygiene
    revoke_sessions_on_password_change: bool = Field(
        default=True,
        description="Revoke every refresh token after a password change or reset",
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )
    log_json: bool = Field(
        default=False,
        description="Render logs as JSON instead of the coloured console format",
    )

    model_config = SettingsConfigDict(
        env_prefix="GATEHOUSE_",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("jwt_secret")
    @classmethod
    def validate_jwt_secret(cls, v: str) -> str:
        """
        Reject signing secrets shorter than 256 bits.

        Raises:
            ValueError: If the secret is shorter than 32 characters.
        """
        if len(v) < 32:
            raise ValueError("jwt_secret must be at least 32 characters")
        return v

    @field_validator("bcrypt_rounds")
    @classmethod
    def validate_bcrypt_rounds(cls, v: int) -> int:
        """
        Validate bcrypt rounds are within bcrypt's accepted range.

        Raises:
            ValueError: If rounds are not between 4 and 31.
        """
        if not 4 <= v <= 31:
            raise ValueError("bcrypt_rounds must be between 4 and 31")
        return v

    @field_validator(
        "access_token_expire_minutes",
        "refresh_token_expire_days",
        "refresh_token_scan_limit",
        "password_reset_expire_minutes",
    )
    @classmethod
    def validate_positive(cls, v: int) -> int:
        """Lifetimes and the ledger window must be positive."""
        if v < 1:
            raise ValueError("value must be at least 1")
        return v

    def access_gate_options(self) -> AccessGateOptions:
        """
        Build the access gate configuration from the requirement flags.

        Returns:
            AccessGateOptions: Options consumed by ``decide``.
        """
        return AccessGateOptions(
            require_active=self.require_active,
            require_email_verification=self.require_email_verification,
            require_phone_verification=self.require_phone_verification,
            require_admin_approval=self.require_admin_approval,
        )


@lru_cache
def get_settings() -> GatehouseSettings:
    """Get cached settings instance read from the environment."""
    return GatehouseSettings()  # type: ignore[call-arg]
