#!/usr/bin/env python3
"""
Guarantee Tracker Entry Point

Starts the FastAPI server with host, port and logging taken from the
TRACKER_* environment configuration.
"""

import sys

import uvicorn

from guarantee_tracker.api import create_app
from guarantee_tracker.config import get_config
from guarantee_tracker.logging_config import setup_logging


if __name__ == "__main__":
    config = get_config()
    setup_logging(config.log_level, config.log_format, config.log_file)

    print("Starting Guarantee Tracker...")
    print(f"API available at: http://localhost:{config.api_port}")
    print(f"Documentation at: http://localhost:{config.api_port}/docs")
    print()

    try:
        uvicorn.run(
            create_app(),
            host=config.api_host,
            port=config.api_port,
            access_log=False
        )
    except KeyboardInterrupt:
        print("\nShutting down Guarantee Tracker...")
    except Exception as e:
        print(f"Error starting server: {e}")
        sys.exit(1)
