from pathlib import Path

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

    PROJECT_NAME: str = 'Bus Checkout Client'
    VERSION: str = '0.1.0'
    DEBUG: bool = True  # Set to False in release builds

    # Backend
    API_BASE_URL: str = 'https://gantabya-44tr.onrender.com'
    API_TIMEOUT_SECONDS: float = 30.0

    # Local persistent storage (auth token + draft backup)
    STORAGE_DIR: str = str(_PROJECT_ROOT / 'client_state')

    # Fare
    TAX_RATE: float = 0.12
    SERVICE_FEE: int = 22
    DEFAULT_SEAT_FARE: int = 520
    PRIMARY_CURRENCY: str = 'NPR'
    DISPLAY_CURRENCY: str = 'INR'
    DISPLAY_CURRENCY_RATE: float = 0.625  # NPR -> INR, display only

    # Seat map layout units
    SEAT_CELL_SIZE: int = 40
    SEAT_GAP: int = 8

    # Bookings list
    BOOKINGS_PAGE_SIZE: int = 25

    @field_validator('API_BASE_URL', mode='before')
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        if isinstance(v, str):
            return v.rstrip('/')
        return v

    @field_validator('TAX_RATE')
    @classmethod
    def validate_tax_rate(cls, v: float) -> float:
        if not 0 <= v < 1:
            raise ValueError('TAX_RATE must be a fraction between 0 and 1')
        return v


settings = Settings()  # type: ignore
