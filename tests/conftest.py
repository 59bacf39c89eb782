"""Pytest configuration and shared fixtures."""

import pytest

# Load environment variables from .env file at test startup
# so FILE_MANAGER_* overrides are visible before fixtures build settings
from dotenv import load_dotenv
load_dotenv()

# Import all fixtures from the fixture modules
pytest_plugins = [
    "tests.fixtures.core",
    "tests.fixtures.local",
    "tests.fixtures.api",
]
