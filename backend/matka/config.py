"""
backend/matka/config.py

Purpose:
    Central settings loading for the matka client.

Dependencies:
    - pydantic-settings
    - pathlib
"""

from pathlib import Path
from typing import Optional

from pydantic_settings import BaseSettings

# Prefer backend/.env, fallback to project-root .env.
_BACKEND_ENV_FILE = Path(__file__).resolve().parent.parent / ".env"
_ROOT_ENV_FILE = Path(__file__).resolve().parent.parent.parent / ".env"


class Settings(BaseSettings):
    # Backend REST service
    MATKA_API_BASE_URL: str = "https://backend-pbn5.onrender.com/api"

    # Bearer token used by SettingsCredentialProvider (empty = logged out)
    MATKA_API_TOKEN: str = ""

    # None disables the timeout entirely; requests wait until the backend answers.
    HTTP_TIMEOUT_SECONDS: Optional[float] = None

    LOG_LEVEL: str = "INFO"

    model_config = {
        "env_file": (str(_BACKEND_ENV_FILE), str(_ROOT_ENV_FILE)),
        "extra": "ignore",
    }


settings = Settings()
