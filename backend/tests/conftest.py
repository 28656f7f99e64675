"""Root conftest — shared test configuration."""

import os

# Ensure tests never reach a real database or identity project
os.environ.setdefault(
    "DATABASE_URL", "sqlite+aiosqlite:///:memory:",
)
os.environ.setdefault(
    "LEDGER_DATABASE_URL", "sqlite+aiosqlite:///:memory:",
)
os.environ.setdefault("FIREBASE_PROJECT_ID", "")
os.environ.setdefault("LOG_FORMAT", "text")
