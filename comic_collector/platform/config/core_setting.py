from decimal import Decimal
from pathlib import Path
from typing import Optional

from pydantic import field_validator
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

    PROJECT_NAME: str = 'Comic Collector'
    VERSION: str = '0.1.0'
    DEBUG: bool = True  # Set to False in production
    SERVICE_NAME: str = 'comic-collector'

    # Reservation policy
    MAX_ACTIVE_RESERVATIONS_PER_USER: int = 3
    RESERVATION_CANCEL_WINDOW_HOURS: int = 1
    RESERVATION_HOLD_DURATION_DAYS: int = 2

    # Sale policy
    SALE_TAX_RATE: Decimal = Decimal('0.19')
    DEFAULT_CURRENCY: str = 'CLP'
    SALE_COMPENSATION_ATTEMPTS: int = 3  # Retries for post-sale hold retirement / item removal

    # User removal policy
    RECENT_SALES_DAYS: int = 30

    # Expiry sweeper
    SWEEP_INTERVAL_SECONDS: float = 60.0

    # Optional JSON snapshots (in-memory only when unset)
    CATALOG_SNAPSHOT_PATH: Optional[Path] = None
    USER_SNAPSHOT_PATH: Optional[Path] = None
    RESERVATION_SNAPSHOT_PATH: Optional[Path] = None
    SALE_SNAPSHOT_PATH: Optional[Path] = None

    @field_validator(
        'MAX_ACTIVE_RESERVATIONS_PER_USER',
        'RESERVATION_CANCEL_WINDOW_HOURS',
        'RESERVATION_HOLD_DURATION_DAYS',
        'SALE_COMPENSATION_ATTEMPTS',
        'RECENT_SALES_DAYS',
        'SWEEP_INTERVAL_SECONDS',
    )
    @classmethod
    def must_be_positive(cls, v: float) -> float:
        if v <= 0:
            raise ValueError('policy values must be positive')
        return v

    @field_validator('SALE_TAX_RATE')
    @classmethod
    def tax_rate_not_negative(cls, v: Decimal) -> Decimal:
        if v < 0:
            raise ValueError('SALE_TAX_RATE cannot be negative')
        return v

    @field_validator('DEFAULT_CURRENCY', mode='before')
    @classmethod
    def normalize_currency(cls, v: str) -> str:
        return v.strip().upper() if isinstance(v, str) else v


settings = Settings()  # type: ignore
