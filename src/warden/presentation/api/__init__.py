"""REST API presentation layer for Warden.

Structure:
    api/
    ├── app.py                # FastAPI application factory
    ├── config.py             # API configuration
    ├── dependencies.py       # Dependency injection
    ├── exception_handlers.py # Result and error mapping
    ├── routers/              # API route handlers
    └── schemas/              # Pydantic request/response schemas
"""

from warden.presentation.api.app import create_app

__all__ = ["create_app"]
