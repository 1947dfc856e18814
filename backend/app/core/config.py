from pydantic_settings import BaseSettings
from typing import List
from pathlib import Path
import json
import os


SETTINGS_FILE = Path(__file__).parent.parent.parent / "settings.json"


def load_settings_from_file() -> dict:
    """Load settings from JSON file if exists."""
    if SETTINGS_FILE.exists():
        try:
            with open(SETTINGS_FILE) as f:
                return json.load(f)
        except (json.JSONDecodeError, IOError):
            pass
    return {}


class Settings(BaseSettings):
    # Filesystem root that assistants/, History/ and knowledge bases live under
    workspace_root: Path = Path(".")

    # Server
    backend_port: int = 8080
    cors_origins: List[str] = ["*"]
    log_level: str = "INFO"

    # Rate limiting (slowapi limit strings)
    rate_limit_enabled: bool = True
    upload_rate_limit: str = "60/minute"
    chat_rate_limit: str = "120/minute"

    class Config:
        env_file = ".env"
        extra = "ignore"

    def __init__(self, **kwargs):
        # Merge: kwargs > file_settings > env vars (handled by pydantic)
        file_settings = load_settings_from_file()
        merged = {**file_settings, **kwargs}

        super().__init__(**merged)

        # Handle CORS_ORIGINS given as a JSON string
        cors_env = os.getenv("CORS_ORIGINS")
        if cors_env:
            try:
                self.cors_origins = json.loads(cors_env)
            except json.JSONDecodeError:
                pass


settings = Settings()
