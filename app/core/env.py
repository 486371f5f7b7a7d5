import os


def get_app_env() -> str:
    """Return current APP_ENV value or empty string when unset."""
    return os.getenv("APP_ENV", "") or ""


def is_local_env() -> bool:
    """True for local/dev/test runs where tables are created on startup."""
    return get_app_env().lower() in {"local", "dev", "development", "test"}
