from functools import lru_cache
from typing import List

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .oer.state import LoadingPolicy
from .oer.wp_service import DEFAULT_ENDPOINT


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # Comma separated list of collection endpoints
    endpoints: str = Field(default=DEFAULT_ENDPOINT, alias="OER_ENDPOINTS")
    page_size: int = Field(default=12, alias="OER_PAGE_SIZE")
    request_timeout_seconds: float = Field(default=10.0, alias="OER_REQUEST_TIMEOUT_SECONDS")
    loading_policy: LoadingPolicy = Field(default=LoadingPolicy.FIRST_RESPONSE, alias="OER_LOADING_POLICY")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    @property
    def endpoint_list(self) -> List[str]:
        return [url.strip() for url in self.endpoints.split(",") if url.strip()]

    @model_validator(mode="after")
    def validate_runtime(self) -> "Settings":
        if not self.endpoint_list:
            raise ValueError("OER_ENDPOINTS must list at least one endpoint")
        if self.page_size < 1:
            raise ValueError("OER_PAGE_SIZE must be >= 1")
        if self.request_timeout_seconds <= 0:
            raise ValueError("OER_REQUEST_TIMEOUT_SECONDS must be > 0")
        return self


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
