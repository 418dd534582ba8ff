# backend/finantech/config.py
from __future__ import annotations
import os


def _env_bool(name: str, default: bool) -> bool:
    raw = os.environ.get(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


class Config:
    # Optional "SECRET_KEY", with default dev key
    SECRET_KEY = os.environ.get("SECRET_KEY", "dev-secret-key-change-me")

    # SQLite DB stored in backend/instance/finantech.sqlite3
    SQLALCHEMY_DATABASE_URI = os.environ.get(
        "DATABASE_URL", #optional alternative location
        "sqlite:///finantech.sqlite3", #default local location
    )
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Load the demo catalog when no products snapshot exists yet
    SEED_CATALOG_ENABLED = _env_bool("SEED_CATALOG_ENABLED", True)

    # Cost estimate used for profit when a sold product is no longer in the catalog
    FALLBACK_COST_RATIO = os.environ.get("FALLBACK_COST_RATIO", "0.8")

    # Dashboard windows
    DASHBOARD_RECENT_SALES = int(os.environ.get("DASHBOARD_RECENT_SALES", "7"))
    DASHBOARD_LOW_STOCK_LIMIT = int(os.environ.get("DASHBOARD_LOW_STOCK_LIMIT", "6"))

    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")
