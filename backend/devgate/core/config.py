from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file='.env',
        env_file_encoding='utf-8',
        case_sensitive=True,
        extra='forbid',
    )

    DATABASE_URL: str = 'sqlite:///./devgate.db'
    APP_ENV: str = 'development'
    CORS_ORIGINS: str = 'http://localhost:3001'
    LOG_LEVEL: str = 'INFO'

    BASE_DOMAINS: str = 'example.com'
    TRUST_PROXY_HEADERS: bool = True
    SESSION_QUERY_PARAM: str = 'sid'

    @field_validator('DATABASE_URL')
    @classmethod
    def validate_database_url(cls, value: str) -> str:
        if not value.startswith(('sqlite', 'postgresql')):
            raise ValueError('DATABASE_URL must point to SQLite or PostgreSQL')
        return value

    @field_validator('BASE_DOMAINS')
    @classmethod
    def validate_base_domains(cls, value: str) -> str:
        if not any(item.strip() for item in value.split(',')):
            raise ValueError('BASE_DOMAINS must list at least one domain')
        return value

    @field_validator('LOG_LEVEL')
    @classmethod
    def normalize_log_level(cls, value: str) -> str:
        return value.strip().upper()

    @property
    def cors_origins(self) -> list[str]:
        return [item.strip() for item in self.CORS_ORIGINS.split(',') if item.strip()]

    @property
    def base_domains(self) -> list[str]:
        return [item.strip().lower() for item in self.BASE_DOMAINS.split(',') if item.strip()]


@lru_cache
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
