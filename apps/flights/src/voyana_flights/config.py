"""Flight provider configuration via environment variables."""

from pydantic_settings import BaseSettings, SettingsConfigDict


class FlightsSettings(BaseSettings):
    """Settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="FLIGHTS_", env_file=".env", extra="ignore"
    )

    # Duffel API (duffel.com)
    duffel_enabled: bool = True
    duffel_access_token: str = ""
    duffel_base_url: str = "https://api.duffel.com"
    duffel_api_version: str = "v2"

    # Amadeus Self-Service API
    amadeus_enabled: bool = True
    amadeus_client_id: str = ""
    amadeus_client_secret: str = ""
    amadeus_hostname: str = "test"  # "test" or "production"

    # Timeouts (seconds)
    provider_timeout: float = 30.0
    http_timeout: float = 25.0

    # Retries for transient provider errors
    max_retries: int = 2
    retry_base_delay: float = 0.5
    retry_max_delay: float = 8.0

    # Search defaults
    max_results: int = 50
    default_currency: str = "USD"

    log_level: str = "INFO"


settings = FlightsSettings()
