from dotenv import load_dotenv
from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict
from sqlalchemy.engine import make_url

DEFAULT_SQLITE_URL = "sqlite:///./seva_booking.db"
DRIVER_NORMALIZATION = {
    # async -> sync
    "mysql+asyncmy": "mysql+pymysql",
    "mysql+aiomysql": "mysql+pymysql",
    "sqlite+aiosqlite": "sqlite",
    # mysql connector flavors -> pymysql (default driver)
    "mysql+mysqlconnector": "mysql+pymysql",
    "mysql+mysqldb": "mysql+pymysql",
    "mysql": "mysql+pymysql",
}

# Make .env values visible to plain os.getenv lookups too (APP_ENV, ENABLE_CREATE_ALL).
load_dotenv()


class Settings(BaseSettings):
    db_host: str = Field(default="localhost", validation_alias=AliasChoices("DB_HOST"))
    db_port: int = Field(default=3306, validation_alias=AliasChoices("DB_PORT"))
    db_username: str | None = Field(default=None, validation_alias=AliasChoices("DB_USERNAME", "DB_USER"))
    db_password: str | None = Field(default=None, validation_alias=AliasChoices("DB_PASSWORD"))
    db_name: str | None = Field(default="seva_booking", validation_alias=AliasChoices("DB_NAME"))
    db_ssl_ca: str | None = Field(default=None, validation_alias=AliasChoices("DB_SSL_CA"))
    db_timeout_seconds: int = Field(default=10, validation_alias=AliasChoices("DB_TIMEOUT_SECONDS"))
    database_url: str | None = Field(default=None, validation_alias=AliasChoices("DATABASE_URL"))
    app_env: str | None = Field(default=None, validation_alias=AliasChoices("APP_ENV"))

    port: int = Field(default=5000, validation_alias=AliasChoices("PORT"))
    base_path: str = Field(default="/oms/details", validation_alias=AliasChoices("BASE_PATH"))
    cors_origins: str | None = Field(default=None, validation_alias=AliasChoices("CORS_ORIGINS"))

    mail_user: str | None = Field(default=None, validation_alias=AliasChoices("MAIL_USER"))
    mail_pass: str | None = Field(default=None, validation_alias=AliasChoices("MAIL_PASS"))
    receiver_emails: str | None = Field(default=None, validation_alias=AliasChoices("RECEIVER_EMAILS"))
    smtp_host: str = Field(default="smtp.gmail.com", validation_alias=AliasChoices("SMTP_HOST"))
    # 465 = implicit TLS, anything else goes through STARTTLS
    smtp_port: int = Field(default=465, validation_alias=AliasChoices("SMTP_PORT"))
    mail_timeout_seconds: float = Field(default=10.0, validation_alias=AliasChoices("MAIL_TIMEOUT_SECONDS"))
    mail_sender_name: str = Field(default="Seva Booking System", validation_alias=AliasChoices("MAIL_SENDER_NAME"))

    reminder_timezone: str = Field(default="Asia/Kolkata", validation_alias=AliasChoices("REMINDER_TIMEZONE"))
    reminder_hour: int = Field(default=7, ge=0, le=23, validation_alias=AliasChoices("REMINDER_HOUR"))
    reminder_minute: int = Field(default=0, ge=0, le=59, validation_alias=AliasChoices("REMINDER_MINUTE"))
    celery_broker_url: str = Field(
        default="redis://localhost:6379/0",
        validation_alias=AliasChoices("CELERY_BROKER_URL"),
    )

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


def get_db_url(settings: "Settings") -> str:
    app_env = (settings.app_env or "").strip().lower()
    if app_env in {"local", "dev", "development", "test"}:
        # Local runs and tests always use SQLite
        return DEFAULT_SQLITE_URL

    if settings.database_url:
        return settings.database_url

    if settings.db_username and settings.db_password and settings.db_name:
        return (
            f"mysql+pymysql://{settings.db_username}:"
            f"{settings.db_password}@{settings.db_host}:{settings.db_port}/"
            f"{settings.db_name}"
        )

    # Production never falls back to the local SQLite file
    if app_env in {"production", "prod", "staging"}:
        raise ValueError("APP_ENV is set to production/staging but DB configuration is missing")

    return DEFAULT_SQLITE_URL


def normalize_db_url(url: str) -> str:
    """
    Convert async driver URLs to sync equivalents so they can be used
    with the synchronous SQLAlchemy engine/session setup.
    """
    url_obj = make_url(url)
    driver = url_obj.drivername
    if driver in DRIVER_NORMALIZATION:
        url_obj = url_obj.set(drivername=DRIVER_NORMALIZATION[driver])
    return url_obj.render_as_string(hide_password=False)


def get_cors_origins(settings: "Settings") -> list[str]:
    default_origins = ["http://localhost:3000", "http://localhost:5173"]
    raw = settings.cors_origins
    env_origins = [origin.strip() for origin in raw.split(",") if origin.strip()] if raw else []
    return list(dict.fromkeys([*default_origins, *env_origins]))


settings = Settings()
