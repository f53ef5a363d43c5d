"""Settings loaded from the environment and logging setup."""
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv
from rich.logging import RichHandler

DEFAULT_DB_PATH = str(Path.home() / ".study_journal" / "journal.db")
DEFAULT_MODEL = "gpt-4o-mini"
DEFAULT_API_BASE = "https://api.openai.com/v1"
DEFAULT_TIMEOUT = 30.0
DEFAULT_PORT = 3000
DEFAULT_CORS_ORIGINS = (
    "http://localhost:3000",
    "http://127.0.0.1:5500",
    "http://localhost:5173",
)


@dataclass(frozen=True)
class Settings:
    api_key: str | None = None
    model: str = DEFAULT_MODEL
    api_base: str = DEFAULT_API_BASE
    timeout: float = DEFAULT_TIMEOUT
    db_path: str = DEFAULT_DB_PATH
    port: int = DEFAULT_PORT
    cors_origins: tuple[str, ...] = field(default=DEFAULT_CORS_ORIGINS)
    log_level: str = "WARNING"


def _number(value: str | None, default, cast=float):
    if value is None or value.strip() == "":
        return default
    try:
        parsed = cast(value)
    except ValueError:
        return default
    return parsed if parsed > 0 else default


def load_settings(env_file: str | None = None) -> Settings:
    """Read settings from a .env file (if present) and the process environment."""
    load_dotenv(env_file)
    origins = os.getenv("STUDY_JOURNAL_CORS_ORIGINS")
    return Settings(
        api_key=os.getenv("OPENAI_API_KEY") or None,
        model=os.getenv("STUDY_JOURNAL_MODEL") or DEFAULT_MODEL,
        api_base=(os.getenv("STUDY_JOURNAL_API_BASE") or DEFAULT_API_BASE).rstrip("/"),
        timeout=_number(os.getenv("STUDY_JOURNAL_TIMEOUT"), DEFAULT_TIMEOUT),
        db_path=os.getenv("STUDY_JOURNAL_DB") or DEFAULT_DB_PATH,
        port=_number(os.getenv("PORT"), DEFAULT_PORT, cast=int),
        cors_origins=(
            tuple(o.strip() for o in origins.split(",") if o.strip())
            if origins else DEFAULT_CORS_ORIGINS
        ),
        log_level=(os.getenv("STUDY_JOURNAL_LOG_LEVEL") or "WARNING").upper(),
    )


def configure_logging(level: str = "WARNING") -> None:
    """Route log records through rich so they match the CLI console."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.WARNING),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(rich_tracebacks=True, show_path=False)],
        force=True,
    )
