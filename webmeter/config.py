"""
Service configuration loaded from environment variables.

Uses Pydantic BaseSettings for automatic env var loading and validation.
Tariff constants default to the values of the current electricity tariff
schedule and can be overridden per deployment.

CHANGELOG:
- 2026-10-19: Initial creation
"""

from pydantic import field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Webmeter API configuration.

    Attributes:
        database_url: SQLAlchemy async URL of the Reading Store.
        redis_url: Redis URL for the response cache. Cache is disabled
            when empty.
        cache_ttl_s: Expiry of cached responses in seconds.
        store_timeout_s: Deadline for each Reading Store query in seconds.
        rate_on_peak: Energy charge per on-peak kWh.
        rate_off_peak: Energy charge per off-peak kWh.
        demand_rate: Charge per unit of demand.
        pf_threshold: Power-factor ratio above which the surcharge applies.
        pf_penalty_rate: Surcharge per unit of ratio above the threshold.
        ft_rate: Fuel adjustment rate (negative values are a credit).
        vat_rate: Value added tax rate as a fraction.
        cors_origins: Comma-separated list of allowed CORS origins.
        log_level: Root log level used by the process entry point.
        host: Bind address for the process entry point.
        port: Bind port for the process entry point.
    """

    database_url: str
    redis_url: str = ""
    cache_ttl_s: int = 60
    store_timeout_s: float = 10.0

    rate_on_peak: float = 4.1839
    rate_off_peak: float = 2.6037
    demand_rate: float = 132.93
    pf_threshold: float = 728.0
    pf_penalty_rate: float = 56.07
    ft_rate: float = -0.147
    vat_rate: float = 0.07

    cors_origins: str = ""
    log_level: str = "INFO"
    host: str = "0.0.0.0"
    port: int = 2001

    @field_validator("cache_ttl_s")
    @classmethod
    def cache_ttl_must_be_positive(cls, v: int) -> int:
        """Validate cache TTL is at least one second."""
        if v < 1:
            raise ValueError("CACHE_TTL_S must be >= 1")
        return v

    @field_validator("store_timeout_s")
    @classmethod
    def store_timeout_must_be_positive(cls, v: float) -> float:
        """Validate the store deadline is strictly positive."""
        if v <= 0:
            raise ValueError("STORE_TIMEOUT_S must be > 0")
        return v

    @field_validator("vat_rate")
    @classmethod
    def vat_rate_must_be_fraction(cls, v: float) -> float:
        """Validate VAT is expressed as a fraction in [0, 1)."""
        if v < 0 or v >= 1:
            raise ValueError("VAT_RATE must be >= 0 and < 1")
        return v

    @field_validator("log_level")
    @classmethod
    def log_level_must_be_known(cls, v: str) -> str:
        """Normalise and validate the log level name."""
        level = v.upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"LOG_LEVEL must be a standard level name (got '{v}')")
        return level

    def get_cors_origins(self) -> list[str]:
        """Return the configured CORS origins as a list."""
        return [o.strip().rstrip("/") for o in self.cors_origins.split(",") if o.strip()]

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}
