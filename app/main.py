"""
app/main.py

Purpose: Application entry point

- Loads configuration and logging
- Exposes the ASGI app built from environment settings
    uvicorn app.main:app --port 5000
- No business logic should be written here
"""

from app.core.config import get_settings
from app.core.logging import setup_logging
from app.factory import create_app

settings = get_settings()

# Initialize logging first
setup_logging(settings)
app = create_app(settings)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        app,
        host=settings.HOST,
        port=settings.PORT,
        log_level=settings.LOG_LEVEL.lower()
    )
