from pathlib import Path
from typing import List

from pydantic import SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


_PROJECT_ROOT = Path(__file__).resolve().parents[3]
_ENV_PATH = _PROJECT_ROOT / '.env'
_ENV_FILE = _ENV_PATH if _ENV_PATH.exists() else (_PROJECT_ROOT / '.env.example')


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=str(_ENV_FILE),
        env_ignore_empty=True,
        extra='ignore',
    )

    PROJECT_NAME: str = 'Event Admission Service'
    VERSION: str = '0.1.0'
    DEBUG: bool = True  # Set to False in production
    DEPLOY_ENV: str = 'local_dev'

    # CORS
    BACKEND_CORS_ORIGINS: List[str] = []  # add your frontend URL here

    @field_validator('BACKEND_CORS_ORIGINS', mode='before')
    @classmethod
    def assemble_cors_origins(cls, v: str | List[str]) -> List[str]:
        if isinstance(v, str) and not v.startswith('['):
            return [i.strip() for i in v.split(',')]
        elif isinstance(v, list):
            return v
        return []

    # PostgreSQL
    POSTGRES_SERVER: str = 'localhost'
    POSTGRES_PORT: int = 5432
    POSTGRES_USER: str = 'postgres'
    POSTGRES_PASSWORD: SecretStr = SecretStr('postgres')
    POSTGRES_DB: str = 'event_admission'

    DB_POOL_SIZE: int = 10
    DB_POOL_MAX_OVERFLOW: int = 5
    DB_POOL_TIMEOUT: int = 30  # seconds
    DB_POOL_RECYCLE: int = 3600  # seconds
    DB_POOL_PRE_PING: bool = True
    DB_ECHO: bool = False

    @property
    def DATABASE_URL_ASYNC(self) -> str:
        return (
            f'postgresql+asyncpg://{self.POSTGRES_USER}:'
            f'{self.POSTGRES_PASSWORD.get_secret_value()}@'
            f'{self.POSTGRES_SERVER}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}'
        )

    # RaiAccept bank gateway
    RAIACCEPT_ENVIRONMENT: str = 'sandbox'
    RAIACCEPT_USERNAME: str = ''
    RAIACCEPT_PASSWORD: SecretStr = SecretStr('')
    RAIACCEPT_COGNITO_CLIENT_ID: str = ''
    RAIACCEPT_AUTH_URL: str = 'https://authenticate.raiaccept.com'
    RAIACCEPT_API_URL: str = 'https://trapi.raiaccept.com'
    RAIACCEPT_TIMEOUT_SECONDS: float = 10.0

    # Reconciliation
    RECONCILE_BATCH_LIMIT: int = 50
    RECONCILE_MAX_CONCURRENCY: int = 5

    # Ticket validation defaults (used when the settings row is missing or unreadable)
    VALIDATION_QR_CODE_ENABLED: bool = True
    VALIDATION_SCANNER_ENABLED: bool = True
    VALIDATION_REQUIRE_VALIDATOR_ROLE: bool = True
    VALIDATION_SCAN_TIME_WINDOW_DAYS: float = 1.0
    VALIDATION_ALLOW_ANYTIME: bool = False
    VALIDATION_ANTI_REPLAY_ENABLED: bool = True
    VALIDATION_POLICY_CACHE_TTL_SECONDS: float = 30.0
    VALIDATION_CALENDAR_TZ: str = 'UTC'  # IANA zone used for calendar-day comparisons

    # Observability
    OTEL_EXPORTER_OTLP_ENDPOINT: str = ''
    OTEL_SAMPLE_RATIO: float = 1.0
    OTEL_CONSOLE_EXPORT: bool = False
    REQUEST_ID_HEADER: str = 'X-Request-Id'


settings = Settings()  # type: ignore
