"""
Main FastAPI application entry point.

Following kkb_fastapi pattern. The config file is picked from the
ENVIRONMENT variable (development, production or test):

    ENVIRONMENT=production uvicorn app.main:app
"""
import logging
import os

import uvicorn

from app.core.config import get_environment_config
from app.create_app import get_app

app = get_app(get_environment_config().file_name)


if __name__ == "__main__":
    server_config = get_environment_config().section("server")
    try:
        uvicorn.run(
            app,
            host=server_config.get("host", "0.0.0.0"),
            port=int(os.environ.get("PORT", server_config.get("port", 8000))),
            log_level=server_config.get("log_level", "info"),
            loop="asyncio",
        )
    except Exception as e:
        logging.error(f"Error running FastAPI: {e}")
