from pathlib import Path
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="TIMECOP_", env_file=".env", extra="ignore")

    # Single database file in $HOME.
    DATABASE_URL: str = f"sqlite:///{Path.home() / '.timecopdb'}"

    # Debug log file. Empty means console only.
    LOG_FILE: Optional[str] = None
    LOG_LEVEL: str = "DEBUG"

    @property
    def log_file_path(self) -> Optional[Path]:
        if not self.LOG_FILE:
            return None
        return Path(self.LOG_FILE).expanduser()


settings = Settings()
