import json
import logging
import os
from functools import lru_cache

import firebase_admin
from firebase_admin import credentials, firestore, auth as firebase_auth

from core import config

logger = logging.getLogger(__name__)


def _app_options() -> dict:
    if config.FIREBASE_PROJECT_ID:
        return {"projectId": config.FIREBASE_PROJECT_ID}
    return {}


def initialize_firebase() -> firebase_admin.App:
    """Initialize Firebase Admin SDK with production-ready credential handling"""

    # Already initialized (e.g. by a worker that imported us earlier)
    try:
        return firebase_admin.get_app()
    except ValueError:
        pass

    # Method 1: Service Account Key from Environment Variable (Recommended for production)
    if config.FIREBASE_SERVICE_ACCOUNT_KEY:
        try:
            service_account_info = json.loads(config.FIREBASE_SERVICE_ACCOUNT_KEY)
            cred = credentials.Certificate(service_account_info)
            app = firebase_admin.initialize_app(cred, _app_options())
            logger.info("Firebase Admin SDK initialized with Service Account Key from environment variable.")
            return app
        except ValueError as e:
            logger.error("Error parsing FIREBASE_SERVICE_ACCOUNT_KEY: %s", e)

    # Method 2: Service Account Key File (for local development only)
    key_path = config.FIREBASE_SERVICE_ACCOUNT_KEY_PATH
    if key_path and os.path.exists(key_path):
        cred = credentials.Certificate(key_path)
        app = firebase_admin.initialize_app(cred, _app_options())
        logger.info("Firebase Admin SDK initialized with Service Account Key from file path.")
        return app

    # Method 3: GOOGLE_APPLICATION_CREDENTIALS (Cloud environments)
    if config.GOOGLE_APPLICATION_CREDENTIALS:
        app = firebase_admin.initialize_app(options=_app_options())
        logger.info("Firebase Admin SDK initialized with GOOGLE_APPLICATION_CREDENTIALS.")
        return app

    # Method 4: Default Application Default Credentials (fallback)
    app = firebase_admin.initialize_app(options=_app_options())
    logger.warning("Firebase Admin SDK initialized with default Application Default Credentials.")
    return app


# Initialized on first use so importing the app never needs credentials
@lru_cache(maxsize=1)
def get_db():
    initialize_firebase()
    return firestore.client()


def verify_id_token(token: str) -> dict:
    initialize_firebase()
    return firebase_auth.verify_id_token(token)
