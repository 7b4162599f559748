"""Centralized configuration — all env vars in one place."""

import os


class Settings:
    """Application settings loaded from environment variables."""

    def __init__(self):
        self.host: str = os.getenv("HOST", "0.0.0.0")
        self.port: int = int(os.getenv("PORT", "8000"))
        self.cors_origins: list[str] = os.getenv("CORS_ORIGINS", "*").split(",")
        self.git_sha: str = os.getenv("GIT_SHA", "unknown")
        self.environment: str = os.getenv("ENVIRONMENT", "local")

        # Cache
        self.cache_ttl_seconds: float = float(os.getenv("CACHE_TTL_SECONDS", "300"))

        # REST Countries upstream
        self.countries_api_base_url: str = os.getenv(
            "COUNTRIES_API_BASE_URL", "https://restcountries.com/v3.1"
        )
        self.client_timeout_seconds: float = float(os.getenv("CLIENT_TIMEOUT_SECONDS", "10"))

        # Time given to in-flight requests on SIGINT/SIGTERM
        self.shutdown_grace_seconds: float = float(os.getenv("SHUTDOWN_GRACE_SECONDS", "30"))

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    def validate(self) -> list[str]:
        """Return list of problems with the configured values."""
        problems = []
        for var in ("CACHE_TTL_SECONDS", "CLIENT_TIMEOUT_SECONDS", "SHUTDOWN_GRACE_SECONDS"):
            if getattr(self, var.lower()) <= 0:
                problems.append(f"{var} must be positive")
        if not self.countries_api_base_url:
            problems.append("COUNTRIES_API_BASE_URL is empty")
        return problems


settings = Settings()
