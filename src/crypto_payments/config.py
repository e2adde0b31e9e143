"""Service settings loaded from environment variables."""

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from crypto_payments.domain.policies import ConfirmationPolicy, parse_tiers
from crypto_payments.domain.value_objects import BlockchainNetwork

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class Settings(BaseSettings):
    """Settings read from ``CRYPTO_PAYMENTS_*`` variables or a ``.env`` file."""

    log_level: str = Field(default="INFO", description="Logging level")
    log_json: bool = Field(default=True, description="Render logs as JSON lines")

    confirmation_tiers: str = Field(
        default="0:1,100:12,10000:19",
        description="Amount tiers as '<min amount>:<confirmations>' pairs (comma-separated)",
    )
    network_confirmation_tiers: dict[str, str] = Field(
        default_factory=dict,
        description="Per-network tier tables keyed by network name (JSON object)",
    )

    model_config = SettingsConfigDict(
        env_prefix="CRYPTO_PAYMENTS_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"log_level must be one of {', '.join(LOG_LEVELS)}, got {v!r}")
        return level

    @field_validator("confirmation_tiers")
    @classmethod
    def validate_confirmation_tiers(cls, v: str) -> str:
        parse_tiers(v)
        return v

    @field_validator("network_confirmation_tiers")
    @classmethod
    def validate_network_confirmation_tiers(cls, v: dict[str, str]) -> dict[str, str]:
        normalized = {}
        for name, table in v.items():
            try:
                network = BlockchainNetwork(name.strip().lower())
            except ValueError as e:
                raise ValueError(f"Unknown blockchain network: {name!r}") from e
            parse_tiers(table)
            normalized[network.value] = table
        return normalized

    def confirmation_policy(self) -> ConfirmationPolicy:
        """Build the confirmation policy described by these settings."""
        return ConfirmationPolicy.with_network_tiers(
            {
                BlockchainNetwork(name): parse_tiers(table)
                for name, table in self.network_confirmation_tiers.items()
            },
            tiers=parse_tiers(self.confirmation_tiers),
        )


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance.

    Uses lru_cache so the environment is read once per process.
    """
    return Settings()
