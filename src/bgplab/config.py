"""Application configuration using Pydantic Settings."""

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from bgplab.utils.address import ValidAddress, parse_address


class Settings(BaseSettings):
    """Application settings loaded from environment variables or .env file."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ISP A address space
    isp_a_name: str = Field(default="ISP A", description="ISP A display name")
    isp_a_block: str = Field(default="10.0.0.0", description="ISP A address block")
    isp_a_prefix: int = Field(default=8, ge=1, le=30, description="ISP A block prefix")
    isp_a_as_number: int = Field(
        default=65001, ge=0, le=4294967295, description="ISP A AS number"
    )
    isp_a_range_label: str = Field(default="10.x.x.x", description="ISP A block label")

    # ISP B address space
    isp_b_name: str = Field(default="ISP B", description="ISP B display name")
    isp_b_block: str = Field(default="172.16.0.0", description="ISP B address block")
    isp_b_prefix: int = Field(default=12, ge=1, le=30, description="ISP B block prefix")
    isp_b_as_number: int = Field(
        default=65002, ge=0, le=4294967295, description="ISP B AS number"
    )
    isp_b_range_label: str = Field(
        default="172.16.x.x", description="ISP B block label"
    )

    # eBGP peering
    peering_block: str = Field(
        default="192.168.0.0", description="Reserved eBGP peering block"
    )
    peering_block_prefix: int = Field(
        default=16, ge=1, le=30, description="Reserved eBGP peering block prefix"
    )
    peering_link_prefix: int = Field(
        default=30, ge=1, le=30, description="Required eBGP link prefix"
    )

    # Policy and zones
    default_local_preference: int = Field(
        default=100, ge=1, description="Default LOCAL_PREF for new iBGP sessions"
    )
    host_preview_limit: int = Field(
        default=256, ge=0, le=65536, description="Hosts enumerated per subnet"
    )
    zone_count: int = Field(default=30, ge=2, le=99, description="Customer zones")
    zone_seed: int | None = Field(
        default=None, description="Seed for zone host requirements (random if unset)"
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )

    # Sentry (optional)
    sentry_dsn: str | None = Field(
        default=None, description="Sentry DSN (leave empty to disable)"
    )
    sentry_environment: str = Field(
        default="development", description="Sentry environment"
    )
    sentry_traces_sample_rate: float = Field(
        default=0.1, ge=0.0, le=1.0, description="Sentry traces sample rate"
    )

    @field_validator("isp_a_block", "isp_b_block", "peering_block")
    @classmethod
    def _check_address(cls, value: str) -> str:
        parsed = parse_address(value)
        if not isinstance(parsed, ValidAddress):
            raise ValueError(f"Invalid address {value!r}: {parsed.reason}")
        return value

    @property
    def peering_range(self) -> str:
        """Reserved peering block in CIDR notation."""
        return f"{self.peering_block}/{self.peering_block_prefix}"


# Global settings instance
settings = Settings()
