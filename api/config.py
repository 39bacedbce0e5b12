from functools import lru_cache
from typing import Optional

from dotenv import load_dotenv
from pydantic_settings import BaseSettings, SettingsConfigDict
from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from learning.catalog import DEFAULT_CATALOG, ModuleCatalog

load_dotenv()


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    database_url: str = "sqlite:///./evolutia.db"
    jwt_secret: str = "change-me-in-production"
    jwt_algorithm: str = "HS256"
    access_token_expire_minutes: int = 60
    google_client_id: Optional[str] = None
    cors_origins: list[str] = ["*"]
    module_catalog_path: Optional[str] = None
    progress_write_retries: int = 3
    log_level: str = "INFO"
    log_dir: str = "logs"
    port: int = 3636


@lru_cache
def get_settings() -> Settings:
    return Settings()


@lru_cache
def get_catalog() -> ModuleCatalog:
    """Module catalog for this process: a JSON file when configured, else the built-in subjects."""
    path = get_settings().module_catalog_path
    if path:
        return ModuleCatalog.from_json_file(path)
    return DEFAULT_CATALOG


def _make_engine(url: str):
    if url.startswith("sqlite"):
        # in-memory SQLite must share a single connection across threads
        if url in ("sqlite://", "sqlite:///:memory:"):
            return create_engine(url, connect_args={"check_same_thread": False}, poolclass=StaticPool)
        return create_engine(url, connect_args={"check_same_thread": False})
    return create_engine(url, pool_pre_ping=True)


engine = _make_engine(get_settings().database_url)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
Base = declarative_base()


def reset_db():
    Base.metadata.drop_all(bind=engine)
    create_db()


def create_db():
    # make sure every model is registered on Base before creating tables
    import api.models  # noqa: F401

    Base.metadata.create_all(bind=engine)


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
