"""Shared pytest configuration for the catalog API tests."""

import os

# Must happen before anything imports src.catalog.runtime.context
os.environ.setdefault("APP_ENVIRONMENT", "test")
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")

from tests.fixtures import *  # noqa: E402,F401,F403
