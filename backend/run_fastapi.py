"""
Main entry point for the portal chat API.

Usage:
    python run_fastapi.py

Or with uvicorn directly:
    uvicorn portal_chat.fastapi_app:app --host 0.0.0.0 --port 5000 --reload
"""

import os

from dotenv import load_dotenv

# Load environment variables
load_dotenv()

import uvicorn

from portal_chat.config.settings import get_config

if __name__ == "__main__":
    env = os.getenv("APP_ENV", "development")
    settings = get_config(env)
    port = int(os.getenv("PORT", 5000))
    host = os.getenv("HOST", "0.0.0.0")

    print(f"Starting portal chat API in {env} mode...")
    print(f"Server running on http://{host}:{port}")
    print(f"API docs available at http://{host}:{port}/docs")

    uvicorn.run(
        "portal_chat.fastapi_app:app",
        host=host,
        port=port,
        reload=settings.DEBUG,
        log_level="info" if settings.DEBUG else "warning",
    )
