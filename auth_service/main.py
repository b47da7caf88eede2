"""FastAPI application entry point.

Run with ``uvicorn auth_service.main:app``.
"""

from auth_service.app import create_app
from auth_service.config import configure_logging, get_settings

settings = get_settings()
configure_logging(settings.log_level)

app = create_app(settings)
