"""
Firebase admin initialization.

Only used when the Firestore backend is selected (STORE_BACKEND=firestore).
The inventory and run log databases then map onto Firestore collections.
"""

import logging
import os

import firebase_admin
from firebase_admin import credentials, firestore

log = logging.getLogger("dinner." + __name__)


def init_firebase(cred_path: str):
    """
    Initialize Firebase Admin SDK if not already initialized and return the
    Firestore client.
    """

    # Prevent re-initialization (important for Uvicorn reload)
    if firebase_admin._apps:
        return firestore.client()

    if not os.path.exists(cred_path):
        raise RuntimeError(
            f"Firebase credentials not found at: {cred_path}\n"
            "Set FIREBASE_CREDENTIALS or place firebase_key.json correctly."
        )

    cred = credentials.Certificate(cred_path)
    firebase_admin.initialize_app(cred)

    log.info("Firebase Admin initialized successfully.")
    return firestore.client()
