"""Role resolution and caching settings."""

from pydantic_settings import BaseSettings, SettingsConfigDict


class RoleSettings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # Session-scoped resolver cache
    ROLE_CACHE_TTL_SECONDS: int = 300
    ROLE_CACHE_MAXSIZE: int = 1000

    # Redis-backed cache for profile role reads
    ROLE_QUERY_CACHE_TTL_SECONDS: int = 300
