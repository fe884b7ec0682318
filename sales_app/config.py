import logging
import os
from dataclasses import dataclass, field
from typing import List

from dotenv import load_dotenv

from .exceptions import ConfigError

DEFAULT_SEED_URL = "https://s3.amazonaws.com/roxiler.com/product_transaction.json"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


@dataclass
class Settings:
    """Runtime settings, read from the environment (and a local .env file)."""

    database_url: str = "sqlite:///./sales.db"
    seed_url: str = DEFAULT_SEED_URL
    seed_timeout: float = 10.0
    api_prefix: str = "/api"
    cors_origins: List[str] = field(default_factory=lambda: ["*"])
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "Settings":
        load_dotenv()

        raw_timeout = os.getenv("SEED_TIMEOUT", "10")
        try:
            seed_timeout = float(raw_timeout)
        except ValueError as e:
            raise ConfigError(f"SEED_TIMEOUT must be a number, got {raw_timeout!r}") from e
        if seed_timeout <= 0:
            raise ConfigError(f"SEED_TIMEOUT must be positive, got {seed_timeout}")

        origins = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]

        return cls(
            database_url=os.getenv("SALES_DATABASE_URL", "sqlite:///./sales.db"),
            seed_url=os.getenv("SEED_URL", DEFAULT_SEED_URL),
            seed_timeout=seed_timeout,
            api_prefix=os.getenv("API_PREFIX", "/api").rstrip("/"),
            cors_origins=origins or ["*"],
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        )


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(level=getattr(logging, level.upper(), logging.INFO), format=LOG_FORMAT)


settings = Settings.from_env()
