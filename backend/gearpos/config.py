# backend/gearpos/config.py
from __future__ import annotations
import os


class Config:
    # Optional "SECRET_KEY", with default dev key
    SECRET_KEY = os.environ.get("SECRET_KEY", "dev-secret-key-change-me")

    # SQLite DB stored next to the app unless DATABASE_URL points elsewhere
    SQLALCHEMY_DATABASE_URI = os.environ.get(
        "DATABASE_URL",
        "sqlite:///gearpos.sqlite3",
    )
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Store defaults (used until the operator saves their own settings)
    STORE_NAME = os.environ.get("STORE_NAME", "JOHNY GEAR STORE")
    STORE_CURRENCY = os.environ.get("STORE_CURRENCY", "NPR")
    TAX_RATE_DEFAULT = float(os.environ.get("TAX_RATE_DEFAULT", "0"))
    LOW_STOCK_THRESHOLD = int(os.environ.get("LOW_STOCK_THRESHOLD", "5"))

    # "standard" (cash/card/digital/other) or "upi" (cash/card/upi)
    PAYMENT_PROFILE = os.environ.get("PAYMENT_PROFILE", "standard")

    # Optional cloud mirror; sync is disabled when either value is empty
    SUPABASE_URL = os.environ.get("SUPABASE_URL", "")
    SUPABASE_ANON_KEY = os.environ.get("SUPABASE_ANON_KEY", "")
    SYNC_TIMEOUT_SECONDS = float(os.environ.get("SYNC_TIMEOUT_SECONDS", "20"))
    SYNC_PAGE_SIZE = int(os.environ.get("SYNC_PAGE_SIZE", "1000"))

    # Shared-credential gate; disabled when BASIC_AUTH_USER is empty
    BASIC_AUTH_USER = os.environ.get("BASIC_AUTH_USER", "")
    BASIC_AUTH_PASS = os.environ.get("BASIC_AUTH_PASS", "")

    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")
