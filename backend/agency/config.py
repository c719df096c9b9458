# backend/agency/config.py
from __future__ import annotations
import os


def _env_flag(name: str, default: bool = False) -> bool:
    raw = os.environ.get(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


class Config:
    # Optional "SECRET_KEY", with default dev key
    SECRET_KEY = os.environ.get("SECRET_KEY", "dev-secret-key-change-me")

    # SQLite DB stored in backend/instance/agency.sqlite3
    SQLALCHEMY_DATABASE_URI = os.environ.get(
        "DATABASE_URL", #optional alternative location (e.g. postgresql://...)
        "sqlite:///agency.sqlite3", #default local location
    )
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Calendar-day semantics (daily bill numbers, report ranges)
    BUSINESS_TIMEZONE = os.environ.get("BUSINESS_TIMEZONE", "Asia/Kolkata")

    # Flat surcharge added when a bill includes a pass
    PASS_AMOUNT = os.environ.get("PASS_AMOUNT", "200")

    # Where generated bill PDFs are written; None -> <instance_path>/pdfs
    BILL_PDF_DIR = os.environ.get("BILL_PDF_DIR")

    # Include exception text in 500 responses (always on when DEBUG)
    EXPOSE_ERROR_DETAIL = _env_flag("EXPOSE_ERROR_DETAIL")

    CORS_ALLOWED_ORIGINS = {
        "http://localhost:5173",
        "http://127.0.0.1:5173",
        "http://localhost:4173",
        "http://127.0.0.1:4173",
    }
