#config.py
from functools import lru_cache
from typing import List

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False, extra="ignore")

    # Application Settings
    APP_NAME: str = "Cybercrime Reporting API"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False
    DOCS_ENABLED: bool = True

    # Server Settings
    HOST: str = "0.0.0.0"
    PORT: int = 5001

    # Database Settings
    DATABASE_URL: str = "sqlite:///./cyberportal.db"

    # CORS Settings (comma-separated)
    ALLOWED_ORIGINS: str = "*"
    CORS_ALLOW_CREDENTIALS: bool = True

    # Request limits
    MAX_REQUEST_SIZE: int = 10 * 1024 * 1024  # 10MB
    GZIP_MIN_SIZE: int = 500  # bytes

    # OTP / credential settings
    EXPOSE_OTP_IN_RESPONSE: bool = True
    PASSWORD_SCHEMES: str = "pbkdf2_sha256"

    # Twilio Settings (SMS delivery of OTPs; logged only when unset)
    TWILIO_ACCOUNT_SID: str = ""
    TWILIO_AUTH_TOKEN: str = ""
    TWILIO_PHONE_NUMBER: str = ""

    # AI worker settings
    AI_PYTHON: str = "python"
    AI_SCRIPTS_DIR: str = "ai_models"
    AI_TIMEOUT_SECONDS: int = 120

    # Admin analytics
    SATISFACTION_SCORE: float = 4.2

    # Identity provider webhook
    IDENTITY_WEBHOOK_SECRET: str = ""

    # Logging Settings
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    # Rate Limiting
    RATE_LIMIT_PER_MINUTE: int = 120

    def _split_csv(self, value: str) -> List[str]:
        if value is None:
            return []
        value = value.strip()
        if value == "":
            return []
        return [item.strip() for item in value.split(",")]

    @property
    def allowed_origins_list(self) -> List[str]:
        return self._split_csv(self.ALLOWED_ORIGINS)

    @property
    def password_schemes_list(self) -> List[str]:
        return self._split_csv(self.PASSWORD_SCHEMES) or ["pbkdf2_sha256"]

    @property
    def twilio_configured(self) -> bool:
        return bool(self.TWILIO_ACCOUNT_SID and self.TWILIO_AUTH_TOKEN and self.TWILIO_PHONE_NUMBER)


@lru_cache()
def get_settings() -> Settings:
    return Settings()


settings: Settings = get_settings()
