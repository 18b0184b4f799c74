import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

TRUTHY = {"1", "true", "yes", "on"}


def load_env() -> None:
    """Load .env from project root if present."""
    env_path = Path.cwd() / ".env"
    if not env_path.exists():
        return
    load_dotenv(dotenv_path=env_path)


@dataclass
class Settings:
    database_path: Path
    log_level: str
    log_dir: Path
    log_to_file: bool


def get_settings() -> Settings:
    """Read runtime settings from the environment, falling back to defaults."""
    return Settings(
        database_path=Path(os.getenv("CREWMATCH_DB", "data/crewmatch.db")),
        log_level=os.getenv("CREWMATCH_LOG_LEVEL", "INFO"),
        log_dir=Path(os.getenv("CREWMATCH_LOG_DIR", "logs")),
        log_to_file=os.getenv("CREWMATCH_LOG_FILE", "1").strip().lower() in TRUTHY,
    )
