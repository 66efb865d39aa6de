from __future__ import annotations
import os
from pathlib import Path


def _int_or_none(raw: str | None) -> int | None:
    if raw is None or raw.strip() == "":
        return None
    return int(raw)


class BaseConfig:
    SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")
    BASE_DIR = Path(__file__).resolve().parent
    # SQLite file in project directory
    SQLALCHEMY_DATABASE_URI = os.getenv("DATABASE_URL", f"sqlite:///{BASE_DIR / 'campus.db'}")
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    API_PREFIX = os.getenv("API_PREFIX", "")
    TOKEN_TTL_MINUTES = _int_or_none(os.getenv("TOKEN_TTL_MINUTES"))
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

    SEED_TEST_DATA = False
    DEFAULT_USERS: list[dict] = []


class DevConfig(BaseConfig):
    DEBUG = True
    SEED_TEST_DATA = True
    DEFAULT_USERS = [
        {"firstname": "Admin", "lastname": "User", "email": "admin@example.com",
         "password": "password", "role": "teacher"},
        {"firstname": "Student", "lastname": "User", "email": "student@example.com",
         "password": "password", "role": "student"},
    ]


class TestConfig(BaseConfig):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = "sqlite:///:memory:"
    LOG_LEVEL = "WARNING"


class ProdConfig(BaseConfig):
    DEBUG = False
    SEED_TEST_DATA = False


config_map = {
    "dev": DevConfig,
    "test": TestConfig,
    "prod": ProdConfig,
    "default": DevConfig,
}

DEFAULT_TRACKS = ("Academic", "TVL", "Arts and Design", "Sports Track")
