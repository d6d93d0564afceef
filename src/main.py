"""ASGI entry point for the MarketHub authentication service.

Run with ``uvicorn src.main:app``. Environment files are loaded and structlog
is configured before the app is built from the process-wide settings.
"""

from src.core.application import create_application
from src.core.initialization import initialize_application

initialize_application()

app = create_application()
