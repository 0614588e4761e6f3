from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # Database
    database_url: str

    # JWT (cookie-based auth)
    JWT_SECRET: str
    JWT_ISS: str = "partylink-api"
    JWT_AUD: str = "partylink-web"

    # Cookie
    COOKIE_DOMAIN: str | None = None
    COOKIE_SECURE: bool = True
    ACCESS_TOKEN_TTL_SECONDS: int = 60 * 60 * 24 * 7  # 7 days

    # Public site (RSVP links, magic links, www -> apex redirect)
    PUBLIC_BASE_URL: str = "https://partylink.co"
    CANONICAL_HOST: str = "partylink.co"

    # naive datetimes from the create-event form are read in this zone
    DEFAULT_TIMEZONE: str = "Asia/Singapore"

    # Email sign-in
    LOGIN_CODE_TTL_SECONDS: int = 60 * 10
    LOGIN_CODE_MAX_ATTEMPTS: int = 5

    SMTP_HOST: str = ""
    SMTP_PORT: int = 587
    SMTP_USERNAME: str = ""
    SMTP_PASSWORD: str = ""
    SMTP_FROM: str = "Partylink <no-reply@partylink.co>"
    SMTP_STARTTLS: bool = True
    MAIL_DEBUG_LOG: bool = False

    CORS_ORIGINS: str = "https://partylink.co"
    LOG_LEVEL: str = "INFO"

    def cors_origins(self) -> list[str]:
        raw = (self.CORS_ORIGINS or "").strip()
        if not raw:
            return []
        return [x.strip() for x in raw.split(",") if x.strip()]


settings = Settings()
