"""Configuration settings for the Auditor service."""

import os


DATABASE_PATH = os.environ.get("PDF_AUDITOR_DATABASE_PATH", "/app/data/network.db")

AUDITOR_HOST = os.environ.get("PDF_AUDITOR_HOST", "0.0.0.0")

AUDITOR_PORT = int(os.environ.get("PDF_AUDITOR_PORT", "8000"))

UPLOADS_ROOT = os.environ.get("PDF_AUDITOR_UPLOADS_ROOT", "/app/wp-content/uploads")

UPLOADS_URL_PATH = "wp-content/uploads"

URL_SCHEME = os.environ.get("PDF_AUDITOR_SCHEME", "https")

NONCE_SECRET = os.environ.get("PDF_AUDITOR_NONCE_SECRET", "change-me")

NONCE_LIFETIME = int(os.environ.get("PDF_AUDITOR_NONCE_LIFETIME", "86400"))

TABLE_PREFIX = "wp_"

MAIN_SITE_ID = 1

MAX_SITES = 999

API_KEY_PREFIX = "pda_"

# Largest value a SQLite INTEGER primary key can hold
MAX_ROW_ID = 2 ** 63 - 1
