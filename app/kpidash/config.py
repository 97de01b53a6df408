import os
from dataclasses import dataclass


@dataclass(frozen=True)
class Settings:
    secret_key: str
    env: str
    database_url: str

    jwt_secret: str
    jwt_expires_hours: int
    bcrypt_rounds: int

    cors_origins: str
    log_level: str

    login_rate_limit: int
    login_rate_window: int


def _getenv(name: str, default: str = "") -> str:
    return (os.environ.get(name) or default).strip()


def _getenv_int(name: str, default: int) -> int:
    raw = _getenv(name)
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        raise RuntimeError(f"{name} must be an integer (got {raw!r}).")


def normalize_database_url(url: str) -> str:
    # Hosted Postgres providers still hand out postgres:// URLs; SQLAlchemy wants postgresql://
    if url.startswith("postgres://"):
        return "postgresql://" + url[len("postgres://"):]
    return url


def is_production(env: str | None) -> bool:
    return (env or "").strip().lower() in ("prod", "production")


def load_settings() -> Settings:
    secret_key = _getenv("SECRET_KEY", "change-me")
    database_url = _getenv("DATABASE_URL") or _getenv("NEON_DATABASE_URL") or "sqlite:///kpidash.db"
    return Settings(
        secret_key=secret_key,
        env=_getenv("ENV", "development"),
        database_url=normalize_database_url(database_url),
        jwt_secret=_getenv("JWT_SECRET", secret_key),
        jwt_expires_hours=_getenv_int("JWT_EXPIRES_HOURS", 24),
        bcrypt_rounds=_getenv_int("BCRYPT_ROUNDS", 10),
        cors_origins=_getenv("CORS_ORIGINS", "*"),
        log_level=_getenv("LOG_LEVEL", "INFO").upper(),
        login_rate_limit=_getenv_int("LOGIN_RATE_LIMIT", 5),
        login_rate_window=_getenv_int("LOGIN_RATE_WINDOW", 300),
    )


def load_config() -> dict:
    s = load_settings()
    return {
        "SECRET_KEY": s.secret_key,
        "ENV": s.env,
        "DATABASE_URL": s.database_url,
        "JWT_SECRET": s.jwt_secret,
        "JWT_EXPIRES_HOURS": s.jwt_expires_hours,
        "BCRYPT_ROUNDS": s.bcrypt_rounds,
        "CORS_ORIGINS": [o.strip() for o in s.cors_origins.split(",") if o.strip()] or ["*"],
        "LOG_LEVEL": s.log_level,
        "LOGIN_RATE_LIMIT": s.login_rate_limit,
        "LOGIN_RATE_WINDOW": s.login_rate_window,
        "MAX_CONTENT_LENGTH": 1 * 1024 * 1024,
    }
