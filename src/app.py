"""Pickup FastAPI application.

Usage:
    uvicorn app:app --app-dir src --host 0.0.0.0 --port 8000 --reload

PROTEAN_ENV selects the configuration overlay in ``pickup/domain.toml``
and whether real gateway, push and session adapters are required.
"""

from pickup.api.app import create_app
from pickup.domain import pickup

pickup.init()

app = create_app()
