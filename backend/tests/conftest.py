"""Root conftest — shared test configuration."""

import os

# Ensure tests never reach the real Congress.gov / OpenFEC APIs or a real database
os.environ.setdefault("CONGRESS_GOV_API_KEY", "")
os.environ.setdefault("FEC_API_KEY", "")
os.environ.setdefault(
    "DATABASE_URL",
    "sqlite+aiosqlite:///:memory:",
)
