# backend/paytrack/config.py
from __future__ import annotations
import os
from datetime import timedelta

from dotenv import load_dotenv
from sqlalchemy.engine import URL

load_dotenv()


def _env_flag(name: str, default: str) -> bool:
    return os.environ.get(name, default).strip().lower() in ("1", "true", "yes", "on")


def _database_uri() -> str:
    """
    DATABASE_URL wins; otherwise the MySQL connection is assembled from the
    DB_* variables. Without either, fall back to a local SQLite file.
    """
    url = os.environ.get("DATABASE_URL")
    if url:
        return url

    host = os.environ.get("DB_HOST")
    name = os.environ.get("DB_NAME")
    if host and name:
        port = os.environ.get("DB_PORT")
        return URL.create(
            "mysql+pymysql",
            username=os.environ.get("DB_USER"),
            password=os.environ.get("DB_PASSWORD"),
            host=host,
            port=int(port) if port else None,
            database=name,
        ).render_as_string(hide_password=False)

    return "sqlite:///paytrack.sqlite3"


def _token_expiry():
    seconds = os.environ.get("JWT_EXPIRES_SECONDS")
    if not seconds:
        # Tokens never expire unless configured
        return False
    return timedelta(seconds=int(seconds))


class Config:
    # No default: create_app refuses to start without a signing secret
    SECRET_KEY = os.environ.get("SECRET_KEY")
    JWT_SECRET_KEY = os.environ.get("JWT_SECRET_KEY") or SECRET_KEY
    JWT_ACCESS_TOKEN_EXPIRES = _token_expiry()

    SQLALCHEMY_DATABASE_URI = _database_uri()
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ENGINE_OPTIONS = {"pool_pre_ping": True}

    PORT = int(os.environ.get("PORT", "5000"))

    API_AUTH_REQUIRED = _env_flag("API_AUTH_REQUIRED", "false")

    OVERDUE_SCANNER_ENABLED = _env_flag("OVERDUE_SCANNER_ENABLED", "true")
    OVERDUE_SCAN_INTERVAL_SECONDS = float(os.environ.get("OVERDUE_SCAN_INTERVAL_SECONDS", "3600"))

    CORS_ORIGINS = [
        o.strip()
        for o in os.environ.get("CORS_ORIGINS", "*").split(",")
        if o.strip()
    ]

    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()
