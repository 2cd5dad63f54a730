"""Main application entry point."""

import logging

import uvicorn
from dotenv import load_dotenv

from src.api.app import create_app
from src.config.settings import get_settings
from src.services.logging import setup_server_logging

# Load environment variables
load_dotenv()

logger = logging.getLogger(__name__)


def main():
    """Main entry point."""
    import argparse

    parser = argparse.ArgumentParser(description="RentDesk API server")
    parser.add_argument("--host", default="0.0.0.0", help="Host to bind to")
    parser.add_argument("--port", type=int, default=8000, help="Port to bind to")
    args = parser.parse_args()

    settings = get_settings()

    # Configure logging (with file logging)
    setup_server_logging(settings.log_file, settings.log_level)

    app = create_app(settings)
    logger.info(f"Starting Uvicorn server on {args.host}:{args.port}...")
    uvicorn.run(app, host=args.host, port=args.port, log_level="info")


if __name__ == "__main__":
    main()
