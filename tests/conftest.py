"""Shared pytest setup."""

import os

# Importing the web app builds the default engine; keep it in memory
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.pop("COMPANY_DIRECTORY_CURRENCY", None)
