"""
Environment defaults for the test run. Must be set before any app import,
since config.Settings is read at import time.
"""
import os

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("LOG_JSON", "false")
os.environ.setdefault("LOG_LEVEL", "WARNING")
