"""Client configuration loaded from environment variables."""

import os
from dataclasses import dataclass

DEFAULT_BASE_URL = "https://maps.googleapis.com/maps/api"


@dataclass(frozen=True, slots=True)
class Settings:
    """Client settings populated from environment variables."""

    api_key: str | None
    client_id: str | None
    client_secret: str | None
    base_url: str
    timeout_seconds: float
    max_attempts: int
    base_backoff_seconds: float
    max_backoff_seconds: float
    queries_per_second: int

    @classmethod
    def from_env(cls) -> "Settings":
        """Create settings from environment variables.

        Unset or empty credential variables become ``None``.

        Returns:
            A frozen Settings instance with values from the environment.
        """
        return cls(
            api_key=os.getenv("MAPS_API_KEY") or None,
            client_id=os.getenv("MAPS_CLIENT_ID") or None,
            client_secret=os.getenv("MAPS_CLIENT_SECRET") or None,
            base_url=os.getenv("MAPS_BASE_URL", DEFAULT_BASE_URL),
            timeout_seconds=float(os.getenv("MAPS_TIMEOUT_SECONDS", "10")),
            max_attempts=int(os.getenv("MAPS_MAX_ATTEMPTS", "3")),
            base_backoff_seconds=float(os.getenv("MAPS_BASE_BACKOFF_SECONDS", "0.5")),
            max_backoff_seconds=float(os.getenv("MAPS_MAX_BACKOFF_SECONDS", "8")),
            queries_per_second=int(os.getenv("MAPS_QUERIES_PER_SECOND", "0")),
        )
