"""
Firestore bootstrap.

Credentials come from FIREBASE_SERVICE_ACCOUNT (inline JSON) or the local
config/service-account.json. Without either, callers fall back to local files.
"""

import json
import logging
from typing import Any, Dict, Optional

import firebase_admin
from firebase_admin import credentials, firestore

from ..config.settings import FirebaseSettings

logger = logging.getLogger(__name__)


def load_service_account(settings: FirebaseSettings) -> Optional[Dict[str, Any]]:
    """Service account dict from the environment or the local file, or None."""
    account = None

    if settings.service_account_json:
        try:
            account = json.loads(settings.service_account_json)
            logger.info("Firebase: using credentials from environment variable")
        except json.JSONDecodeError:
            logger.error(
                "Firebase: failed to parse FIREBASE_SERVICE_ACCOUNT. Ensure it is valid JSON."
            )
            return None
    elif settings.service_account_file.exists():
        try:
            with open(settings.service_account_file, encoding="utf-8") as f:
                account = json.load(f)
        except (OSError, ValueError) as e:
            logger.error(f"Firebase: failed to read {settings.service_account_file}: {e}")
            return None
        logger.info("Firebase: using credentials from local JSON file")

    if not isinstance(account, dict):
        return None

    # Single-line env values carry escaped newlines in the key
    private_key = account.get("private_key")
    if isinstance(private_key, str):
        account["private_key"] = private_key.replace("\\n", "\n")

    return account


def create_firestore_client(settings: FirebaseSettings):
    """
    Initialise the Firebase Admin SDK and return a Firestore client.

    Returns:
        Firestore client, or None when no credentials are configured or
        initialisation fails (local storage is used instead).
    """
    account = load_service_account(settings)
    if account is None:
        logger.info("Firebase credentials not found - using local storage")
        return None

    try:
        try:
            app = firebase_admin.get_app()
        except ValueError:
            app = firebase_admin.initialize_app(credentials.Certificate(account))
        client = firestore.client(app)
    except (ValueError, IOError) as e:
        logger.error(f"Firebase initialization failed: {e}")
        logger.info("Falling back to local storage")
        return None

    logger.info("Firebase Admin SDK initialized - using Firestore")
    return client
