from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List

class Settings(BaseSettings):
    # Environment
    ENVIRONMENT: str = "development"
    DEBUG: bool = True
    LOG_LEVEL: str = "INFO"

    # API Settings
    PROJECT_NAME: str = "Trip Split API"
    API_V1_STR: str = "/api/v1"
    PROJECT_VERSION: str = "0.1.0"
    DESCRIPTION: str = "Shared trip expenses and group settlement API"

    # Server
    HOST: str = "0.0.0.0"
    PORT: int = 8000

    # MongoDB
    MONGODB_URL: str = "mongodb://localhost:27017"
    DATABASE_NAME: str = "tripsplit"

    # Currencies: the exchange rate is SECONDARY units per one PRIMARY unit
    PRIMARY_CURRENCY: str = "KRW"
    SECONDARY_CURRENCY: str = "TWD"
    SETTLEMENT_CURRENCY: str = "TWD"
    DEFAULT_EXCHANGE_RATE: float = 0.0245

    # Settlement
    SETTLEMENT_TOLERANCE: float = 1.0
    SPLIT_TOLERANCE: float = 0.1

    # Change streams need a replica set, so live updates are opt-in
    ENABLE_LIVE_UPDATES: bool = False
    LIVE_UPDATES_RETRY_DELAY: float = 1.0
    LIVE_UPDATES_MAX_RETRY_DELAY: float = 60.0
    LIVE_UPDATES_MAX_RETRIES: int = 5

    # CORS
    CORS_ORIGINS: List[str] = ["http://localhost:3000", "http://localhost:8000"]

    model_config = SettingsConfigDict(
        case_sensitive=True,
        env_file=".env"
    )

settings = Settings()
