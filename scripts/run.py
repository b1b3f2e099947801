#!/usr/bin/env python3
"""
Serve the check-in API with Uvicorn.

Host, port, reload and log level come from core/config.py (APP_HOST,
APP_PORT, APP_RELOAD, LOG_LEVEL), so a .env file configures both the app and
the server.
"""

import os
import sys

import uvicorn

PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
sys.path.append(PROJECT_ROOT)

from core import config


def main():
    print(
        f"Serving check-in API on http://{config.APP_HOST}:{config.APP_PORT} "
        f"(reload={config.APP_RELOAD}, sites='{config.SITES_COLLECTION}', "
        f"attendance='{config.ATTENDANCE_COLLECTION}')"
    )

    uvicorn.run(
        "main:app",
        host=config.APP_HOST,
        port=config.APP_PORT,
        reload=config.APP_RELOAD,
        log_level=config.LOG_LEVEL.lower(),
        app_dir=PROJECT_ROOT,
    )


if __name__ == "__main__":
    main()
