import logging
from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    app_name: str = Field(default="DevOps Challenge API", alias="APP_NAME")
    app_version: str = Field(default="1.0.0", alias="APP_VERSION")
    app_description: str = Field(default="A simple cloud-native API service", alias="APP_DESCRIPTION")
    service_tag: str = Field(default="devops-challenge", alias="SERVICE_TAG")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    enable_metrics_endpoint: bool = Field(default=True, alias="ENABLE_METRICS_ENDPOINT")
    timestamp_format: str = Field(default="%Y-%m-%d %H:%M:%S", alias="ECHO_TIMESTAMP_FORMAT")

    @property
    def logging_level(self) -> int:
        # getLevelName maps known names to ints and anything else to a string.
        level = logging.getLevelName(self.log_level.upper())
        return level if isinstance(level, int) else logging.INFO


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
