"""
Configuration de l'application / Application configuration.
Utilise pydantic-settings pour charger depuis .env ou variables d'environnement.
"""

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Application
    APP_NAME: str = "Presto"
    APP_VERSION: str = "0.1.0"
    DEBUG: bool = True

    # Database - SQLite par défaut pour le développement
    # Database - SQLite by default for development
    DATABASE_URL: str = "sqlite+aiosqlite:///./presto.db"

    # CORS - origines autorisées / allowed origins
    CORS_ORIGINS: list[str] = ["http://localhost:5173", "http://localhost:3000"]

    # JWT Authentication
    SECRET_KEY: str = "change-me-in-production"
    JWT_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 30
    REFRESH_TOKEN_EXPIRE_DAYS: int = 7
    REGISTRATION_ENABLED: bool = True

    # Rate Limiting
    RATE_LIMIT_LOGIN: str = "5/minute"
    RATE_LIMIT_REGISTER: str = "3/minute"

    # Utilisateur par défaut (seed si mot de passe fourni) / Default user (seeded if password set)
    DEFAULT_USER_EMAIL: str = "admin@presto.app"
    DEFAULT_USER_PASSWORD: str = ""
    DEFAULT_USER_FIRST_NAME: str = "Admin"
    DEFAULT_USER_LAST_NAME: str = ""

    # Préférences par défaut / Default user preferences
    DEFAULT_THEME: str = "light"
    DEFAULT_LOCALE: str = "en"
    DEFAULT_BASE_CURRENCY: str = "EUR"
    DEFAULT_HOLIDAY_COUNTRY: str = "FR"

    # Bornes des années de rapport / Report year bounds
    MIN_YEAR: int = 2000
    MAX_YEAR: int = 2100

    # Taux de change (pivot USD) / Exchange rates (USD pivot)
    EXCHANGE_RATE_URL: str = "https://api.frankfurter.app/latest?base=USD"
    EXCHANGE_RATE_REFRESH_SECONDS: int = 3600
    EXCHANGE_RATE_RETRY_SECONDS: int = 300
    EXCHANGE_RATE_TIMEOUT_SECONDS: float = 10.0

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


settings = Settings()
