"""Configuration management."""

import os

from dotenv import load_dotenv

# Load environment variables
load_dotenv()


class Config:
    """Configuration for the TeleSign REST client."""

    # API credentials
    CUSTOMER_ID: str = os.getenv("TELESIGN_CUSTOMER_ID", "")
    API_KEY: str = os.getenv("TELESIGN_API_KEY", "")

    # REST API URL
    REST_PRODUCTION_URL = "https://rest-api.telesign.com"
    REST_ENDPOINT: str = os.getenv("TELESIGN_REST_ENDPOINT", REST_PRODUCTION_URL)

    # Connection settings
    REST_TIMEOUT: float = float(os.getenv("TELESIGN_TIMEOUT", "10"))  # seconds

    # Outbound proxy, e.g. "http://proxy.internal:3128"
    PROXY: str | None = os.getenv("TELESIGN_PROXY") or None
    PROXY_USERNAME: str | None = os.getenv("TELESIGN_PROXY_USERNAME") or None
    PROXY_PASSWORD: str | None = os.getenv("TELESIGN_PROXY_PASSWORD") or None

    # Logging
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    @classmethod
    def get_rest_url(cls) -> str:
        """Get REST API URL, without a trailing slash."""
        return cls.REST_ENDPOINT.rstrip("/")

    @classmethod
    def validate(cls) -> bool:
        """Validate configuration."""
        if not cls.CUSTOMER_ID or not cls.API_KEY:
            return False
        return True
