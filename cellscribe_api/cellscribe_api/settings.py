from __future__ import annotations

from pydantic import SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="CELLSCRIBE_API_", case_sensitive=False)

    bind_host: str = "0.0.0.0"
    bind_port: int = 9000
    shared_secret: SecretStr | None = None
