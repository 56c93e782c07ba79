"""
Firebase Functions entry point.
All functions must be exported from this file for deployment.
"""

import logging
import os
import firebase_admin
from firebase_admin import initialize_app
from src.util.config import load_env_files

load_env_files(os.path.dirname(os.path.abspath(__file__)))

# Set emulator environment variables if running in emulators
if os.getenv('FUNCTIONS_EMULATOR') == 'true':
    if not os.getenv('FIRESTORE_EMULATOR_HOST'):
        os.environ['FIRESTORE_EMULATOR_HOST'] = 'localhost:8080'
    if not os.getenv('FIREBASE_AUTH_EMULATOR_HOST'):
        os.environ['FIREBASE_AUTH_EMULATOR_HOST'] = 'localhost:9099'
    if not os.getenv('FIREBASE_STORAGE_EMULATOR_HOST'):
        os.environ['FIREBASE_STORAGE_EMULATOR_HOST'] = 'localhost:9199'

# The SDK picks up emulator hosts from the environment
if not firebase_admin._apps:
    initialize_app()

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

# Import callable functions
from src.brokers.callable.update_tag import update_tag_callable

# Import HTTPS functions
from src.brokers.https.health_check import health_check
from src.brokers.https.update_tag import update_tag

# Import triggered functions
from src.brokers.triggered.on_year_updated import on_year_updated
from src.brokers.triggered.on_calendar_deleted import on_calendar_deleted

# Export all functions for Firebase deployment
__all__ = [
    # Callable functions
    'update_tag_callable',

    # HTTPS functions
    'health_check',
    'update_tag',

    # Triggered functions
    'on_year_updated',
    'on_calendar_deleted',
]

logger.info("Firebase Functions initialized successfully")
