"""Configuration helpers for environment-driven settings."""
from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

if os.getenv("PYTEST_CURRENT_TEST") is None:
    load_dotenv()


def _resolve_path(value: str) -> Path:
    path = Path(value.strip())
    if not path.is_absolute():
        path = Path.cwd() / path
    return path


@dataclass(slots=True)
class Settings:
    """Runtime application settings sourced from environment variables."""

    HOST: str = field(init=False)
    PORT: int = field(init=False)
    DATA_PATH: Path = field(init=False)
    PUBLIC_DIR: Path = field(init=False)
    HEADERS: dict[str, str] = field(init=False)
    REQUEST_TIMEOUT: float = field(init=False)
    ANALYTICS_ENDPOINT: str = field(init=False)
    ANALYTICS_MEASUREMENT_ID: str = field(init=False)
    ANALYTICS_API_SECRET: str = field(init=False)
    ANALYTICS_CLIENT_ID: str = field(init=False)
    ITEM_BASE_URL: str = field(init=False)

    def __post_init__(self) -> None:
        self.reload()

    def reload(self) -> None:
        self.HOST = os.getenv("HOST", "0.0.0.0").strip() or "0.0.0.0"

        try:
            self.PORT = int(os.getenv("PORT", "3000"))
        except ValueError as exc:
            raise ValueError("PORT must be an integer") from exc

        self.DATA_PATH = _resolve_path(os.getenv("DATA_PATH", "data/tracked_items.json"))
        self.PUBLIC_DIR = _resolve_path(os.getenv("PUBLIC_DIR", "public"))

        self.HEADERS = {
            "User-Agent": (
                "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
                "AppleWebKit/537.36 (KHTML, like Gecko) "
                "Chrome/126.0.0.0 Safari/537.36"
            ),
            "Accept-Language": "en-US,en;q=0.9",
        }

        try:
            timeout = float(os.getenv("REQUEST_TIMEOUT", "10"))
        except ValueError as exc:
            raise ValueError("REQUEST_TIMEOUT must be a number") from exc
        if timeout <= 0:
            raise ValueError("REQUEST_TIMEOUT must be positive")
        self.REQUEST_TIMEOUT = timeout

        self.ANALYTICS_ENDPOINT = os.getenv(
            "ANALYTICS_ENDPOINT",
            "https://www.google-analytics.com/mp/collect",
        ).strip()
        self.ANALYTICS_MEASUREMENT_ID = os.getenv("ANALYTICS_MEASUREMENT_ID", "G-2ZPVT8VYJT").strip()
        self.ANALYTICS_API_SECRET = os.getenv("ANALYTICS_API_SECRET", "").strip()
        self.ANALYTICS_CLIENT_ID = os.getenv("ANALYTICS_CLIENT_ID", "anon").strip() or "anon"

        base_url = os.getenv("ITEM_BASE_URL", "https://www.ebay.com/itm/").strip()
        if not base_url.endswith("/"):
            base_url += "/"
        self.ITEM_BASE_URL = base_url

    def validate(self) -> None:
        if not 0 < self.PORT < 65536:
            raise ValueError("PORT must be between 1 and 65535")
        if not self.ANALYTICS_MEASUREMENT_ID:
            raise ValueError("ANALYTICS_MEASUREMENT_ID is required in .env file")

settings = Settings()
