import os

from dotenv import load_dotenv

# Load environment variables from .env file, if it exists
load_dotenv()

# Firestore collections holding site definitions and check-in records
SITES_COLLECTION = os.getenv("SITES_COLLECTION", "sites")
ATTENDANCE_COLLECTION = os.getenv("ATTENDANCE_COLLECTION", "attendance")

# How many check-ins the history endpoint returns by default / at most
HISTORY_LIMIT = int(os.getenv("HISTORY_LIMIT", "50"))
HISTORY_LIMIT_MAX = 100

# Default values can be provided if the env var is not set
DEV_DOMAIN = os.getenv("DEV_DOMAIN", "http://localhost:5173")
PRODUCTION_DOMAIN = os.getenv("PRODUCTION_DOMAIN")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# Firebase credentials (see core/firebase.py for resolution order)
FIREBASE_SERVICE_ACCOUNT_KEY = os.getenv("FIREBASE_SERVICE_ACCOUNT_KEY")
FIREBASE_SERVICE_ACCOUNT_KEY_PATH = os.getenv("FIREBASE_SERVICE_ACCOUNT_KEY_PATH")
GOOGLE_APPLICATION_CREDENTIALS = os.getenv("GOOGLE_APPLICATION_CREDENTIALS")
FIREBASE_PROJECT_ID = os.getenv("FIREBASE_PROJECT_ID")

# Uvicorn settings used by scripts/run.py
APP_HOST = os.getenv("APP_HOST", "127.0.0.1")
APP_PORT = int(os.getenv("APP_PORT", "8000"))
APP_RELOAD = os.getenv("APP_RELOAD", "False").lower() in ("true", "1", "t")
