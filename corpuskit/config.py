"""
Runtime settings loaded from the environment.

Load order:
1. .env.local in the project root (local development, highest priority)
2. .env in the project root
3. Plain process environment

Variables:
    LOG_LEVEL: Console log level (default: INFO)
    CORPUSKIT_LOG_FILE: Base path of the rotating log file (default: logs/corpuskit.log)
    CORPUSKIT_WORKERS: Threads used for per-document feature extraction (default: 4)
    CORPUSKIT_NGRAM_SEPARATOR: Separator joining n-gram tokens (default: "_")
"""

import logging
import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, field_validator

logger = logging.getLogger(__name__)

PROJECT_ROOT = Path(__file__).parent.parent


class Settings(BaseModel):
    """Validated runtime settings"""
    model_config = ConfigDict(frozen=True)

    log_level: str = Field(default="INFO", description="Console log level name")
    log_file: str = Field(default="logs/corpuskit.log", description="Base log file path")
    workers: int = Field(default=4, ge=1, description="Feature extraction threads")
    ngram_separator: str = Field(default="_", min_length=1, description="N-gram join string")

    @field_validator("log_level")
    @classmethod
    def _known_level(cls, value: str) -> str:
        value = value.upper()
        if not isinstance(logging.getLevelName(value), int):
            raise ValueError(f"Unknown log level: {value}")
        return value


_settings: Optional[Settings] = None


def load_environment(root: Path = PROJECT_ROOT) -> Optional[Path]:
    """
    Load .env.local (or .env) from the project root into os.environ.

    Returns:
        Path of the loaded file, or None if neither exists
    """
    env_local = root / ".env.local"
    env_file = root / ".env"

    if env_local.exists():
        load_dotenv(env_local, override=True)
        logger.debug(f"Loaded environment from: {env_local}")
        return env_local
    if env_file.exists():
        load_dotenv(env_file, override=True)
        logger.debug(f"Loaded environment from: {env_file}")
        return env_file
    return None


def get_settings(reload: bool = False) -> Settings:
    """
    Get cached settings, reading the environment on first use.

    Args:
        reload: Re-read .env files and environment variables

    Returns:
        Settings instance

    Raises:
        pydantic.ValidationError: If an environment value is invalid
            (e.g. CORPUSKIT_WORKERS=0)
    """
    global _settings

    if _settings is not None and not reload:
        return _settings

    load_environment()
    _settings = Settings(
        log_level=os.getenv("LOG_LEVEL", "INFO"),
        log_file=os.getenv("CORPUSKIT_LOG_FILE", "logs/corpuskit.log"),
        workers=int(os.getenv("CORPUSKIT_WORKERS", "4")),
        ngram_separator=os.getenv("CORPUSKIT_NGRAM_SEPARATOR", "_"),
    )
    return _settings
