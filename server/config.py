"""
Configuration loader for the dashboard server.

Loads all settings from environment variables.
"""

import os
from dataclasses import dataclass
from typing import List
from dotenv import load_dotenv

from config.constants import DATABASE_PATH, DEFAULT_EXTERNAL_API_BASE_URL, DEFAULT_EXTERNAL_API_TIMEOUT

# Load .env file from the working directory or parent
load_dotenv()


@dataclass
class ServerConfig:
    """Configuration for the dashboard server."""

    # External projects / users API
    external_api_base_url: str

    # Assessment API (same host as the projects API unless overridden)
    assessment_api_base_url: str

    # Seconds before an outgoing call is abandoned
    external_api_timeout: float

    # Local store
    database_path: str

    # Server settings
    host: str
    port: int
    cors_origins: List[str]

    @classmethod
    def from_env(cls) -> "ServerConfig":
        """Load configuration from environment variables."""

        external_api_base_url = os.getenv("EXTERNAL_API_BASE_URL", DEFAULT_EXTERNAL_API_BASE_URL).rstrip("/")
        assessment_api_base_url = os.getenv("ASSESSMENT_API_BASE_URL", external_api_base_url).rstrip("/")
        external_api_timeout = float(os.getenv("EXTERNAL_API_TIMEOUT", str(DEFAULT_EXTERNAL_API_TIMEOUT)))

        database_path = os.getenv("DATABASE_PATH", str(DATABASE_PATH))

        host = os.getenv("HOST", "0.0.0.0")
        port = int(os.getenv("PORT", "8000"))

        # Allowed browser origins (comma-separated)
        cors_origins_str = os.getenv("CORS_ORIGINS", "http://localhost:8501")
        cors_origins = [
            origin.strip()
            for origin in cors_origins_str.split(",")
            if origin.strip()
        ]

        return cls(
            external_api_base_url=external_api_base_url,
            assessment_api_base_url=assessment_api_base_url,
            external_api_timeout=external_api_timeout,
            database_path=database_path,
            host=host,
            port=port,
            cors_origins=cors_origins,
        )

    def validate(self) -> List[str]:
        """Validate configuration and return list of errors."""
        errors = []

        for name, url in (("EXTERNAL_API_BASE_URL", self.external_api_base_url),
                          ("ASSESSMENT_API_BASE_URL", self.assessment_api_base_url)):
            if not url:
                errors.append(f"{name} is required")
            elif not url.startswith(("http://", "https://")):
                errors.append(f"{name} must start with http:// or https://")
        if self.external_api_timeout <= 0:
            errors.append("EXTERNAL_API_TIMEOUT must be positive")
        if not self.database_path:
            errors.append("DATABASE_PATH is required")
        if not 0 < self.port < 65536:
            errors.append("PORT must be between 1 and 65535")

        return errors
