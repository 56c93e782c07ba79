"""Configuration loading from environment variables."""

import os
from typing import Optional
from dotenv import load_dotenv
from src.models.config_types import AppConfig
from src.models.util_types import Env
from src.util.logger import get_logger

logger = get_logger(__name__)

_ENV_FILES = (".env.local", ".env")


def load_env_files(base_dir: Optional[str] = None) -> None:
    """Load the first .env file found; existing variables are not overridden."""
    base_dir = base_dir or os.getcwd()
    for name in _ENV_FILES:
        path = os.path.join(base_dir, name)
        if os.path.exists(path):
            load_dotenv(path)
            logger.debug(f"Loaded environment from {path}")
            return


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning(f"Ignoring non-integer {name}={raw!r}, using {default}")
        return default


def load_config() -> AppConfig:
    """Build an AppConfig from the current environment.

    Called once per invocation; nothing is cached at module level.
    """
    env_name = os.getenv("ENV", Env.PRODUCTION.value)
    try:
        env = Env(env_name)
    except ValueError:
        logger.warning(f"Unknown ENV {env_name!r}, assuming production")
        env = Env.PRODUCTION

    return AppConfig(
        env=env,
        calendars_collection=os.getenv("CALENDARS_COLLECTION", "calendars"),
        years_subcollection=os.getenv("YEARS_SUBCOLLECTION", "years"),
        trade_images_path=os.getenv(
            "TRADE_IMAGES_PATH", "users/{userId}/trade-images/{imageId}"
        ),
        max_batch_size=max(1, _int_env("MAX_BATCH_SIZE", 500)),
        max_workers=max(1, _int_env("MAX_WORKERS", 8)),
    )
