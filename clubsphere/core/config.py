import os

from dotenv import load_dotenv


load_dotenv()


def _get_bool(value: str | None, default: bool = False) -> bool:
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _get_list(value: str | None, default: list[str]) -> list[str]:
    if not value:
        return default
    return [item.strip() for item in value.split(",") if item.strip()]


APP_ENV = os.getenv("APP_ENV", "development")

STORAGE_BACKEND = os.getenv("STORAGE_BACKEND", "memory").strip().lower()
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./clubsphere.db")

JWT_SECRET_KEY = os.getenv("JWT_SECRET_KEY", "change-me")
JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
JWT_EXPIRES_MINUTES = int(os.getenv("JWT_EXPIRES_MINUTES", "60"))

# Server-side login sessions. A token is accepted only while its session is alive.
SESSION_TTL_SECONDS = int(os.getenv("SESSION_TTL_SECONDS", "86400"))
SESSION_CHECK_PERIOD_SECONDS = int(os.getenv("SESSION_CHECK_PERIOD_SECONDS", "3600"))

SEED_DEMO_DATA = _get_bool(os.getenv("SEED_DEMO_DATA"), default=APP_ENV.lower() == "development")
DEMO_PASSWORD = os.getenv("DEMO_PASSWORD", "clubsphere")

CORS_ALLOW_ORIGINS = _get_list(os.getenv("CORS_ALLOW_ORIGINS"), ["http://localhost:5173"])

SUPPORTED_STORAGE_BACKENDS = {"memory", "sql"}


def validate_runtime_config() -> None:
    if APP_ENV.lower() == "production" and JWT_SECRET_KEY == "change-me":
        raise RuntimeError("JWT_SECRET_KEY must be set in production.")
    if STORAGE_BACKEND not in SUPPORTED_STORAGE_BACKENDS:
        raise RuntimeError(
            f"STORAGE_BACKEND must be one of {', '.join(sorted(SUPPORTED_STORAGE_BACKENDS))}."
        )
