from typing import Generator, List
from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, Session, declarative_base
from pydantic_settings import BaseSettings


# =====================================================================
# SETTINGS
# =====================================================================


class Settings(BaseSettings):
    # App
    APP_NAME: str = "Health Journal API"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # Remote tier
    DATABASE_URL: str = "sqlite:///./health_journal.db"

    # Local tier - one JSON blob per key inside this directory
    LOCAL_CACHE_DIR: str = "./.journal_cache"
    LOCAL_CACHE_KEY: str = "bioguard_health_journal"
    RECENT_DAYS_DEFAULT: int = 30

    # JWT
    SECRET_KEY: str = "Supersecretkey"
    REFRESH_SECRET_KEY: str = "Journalsecretkey"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60
    REFRESH_TOKEN_EXPIRE_DAYS: int = 7

    CORS_ORIGINS: List[str] = [
        "http://localhost:5173",
        "http://localhost:3000",
        "http://127.0.0.1:5173",
        "http://127.0.0.1:3000",
    ]

    class Config:
        env_file = ".env"
        extra = "ignore"


settings = Settings()


# =====================================================================
# DATABASE
# =====================================================================


def build_engine(database_url: str, **kwargs) -> Engine:
    """Create an engine; SQLite connections get foreign key enforcement."""
    if "sqlite" in database_url:
        kwargs.setdefault("connect_args", {"check_same_thread": False})
    new_engine = create_engine(database_url, **kwargs)

    if new_engine.dialect.name == "sqlite":

        @event.listens_for(new_engine, "connect")
        def _enable_foreign_keys(dbapi_connection, connection_record):
            # attachment rows rely on ON DELETE CASCADE
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

    return new_engine


engine = build_engine(settings.DATABASE_URL)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
Base = declarative_base()


def get_db() -> Generator[Session, None, None]:
    """Database session dependency."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
