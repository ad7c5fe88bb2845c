from __future__ import annotations

import os
from functools import lru_cache

from pydantic import BaseModel

DEFAULT_BASE_URL = "https://api.sendblue.co/api"


class Settings(BaseModel):
    # --- Sendblue credentials ---
    # Sent as the sb-api-key-id / sb-api-secret-key headers on every request.
    api_key: str | None = None
    api_secret: str | None = None

    # Override for staging or a local mock server.
    base_url: str = DEFAULT_BASE_URL

    # Optional explicit ffmpeg binary for voice-note conversion.
    # If None, ffmpeg is looked up on PATH.
    ffmpeg_path: str | None = None

    def model_post_init(self, __context: object) -> None:  # type: ignore[override]
        # Environment wins over defaults but not over explicit arguments.
        env_map = {
            "api_key": "SENDBLUE_API_KEY",
            "api_secret": "SENDBLUE_API_SECRET",
            "ffmpeg_path": "SENDBLUE_FFMPEG_PATH",
        }
        for field, env_name in env_map.items():
            value = os.getenv(env_name)
            if value and getattr(self, field) is None:
                object.__setattr__(self, field, value)

        env_base_url = os.getenv("SENDBLUE_BASE_URL")
        if env_base_url and "base_url" not in self.model_fields_set:
            object.__setattr__(self, "base_url", env_base_url)


@lru_cache
def get_settings() -> Settings:
    return Settings()
