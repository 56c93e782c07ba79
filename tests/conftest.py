"""Pytest configuration and fixtures."""

import pytest
import os
import sys
from dotenv import load_dotenv

# Load environment variables from .env.local first, then .env
if os.path.exists('.env.local'):
    load_dotenv('.env.local')
else:
    load_dotenv('.env')

# Add root to path so `src` and `tests` import as packages
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

# Set emulator environment variables before any Firebase imports
os.environ.setdefault("GCLOUD_PROJECT", "test-project")
os.environ.setdefault("FIRESTORE_EMULATOR_HOST", "localhost:8080")
os.environ.setdefault("FIREBASE_AUTH_EMULATOR_HOST", "localhost:9099")
os.environ.setdefault("FIREBASE_STORAGE_EMULATOR_HOST", "localhost:9199")

# Import utilities and fixtures
from tests.util.firebase_emulator import firebase_emulator, setup_emulators  # noqa: E402,F401
from tests.util.calendar_flow_setup import calendar_flow_setup, CalendarFlowSetup  # noqa: E402,F401
from tests.util.memory_db import MemoryDb  # noqa: E402


@pytest.fixture(scope="session")
def firebase_app():
    """Initialize Firebase app against the emulators."""
    import firebase_admin

    if not firebase_admin._apps:
        app = firebase_admin.initialize_app(options={
            "projectId": os.environ["GCLOUD_PROJECT"],
            "storageBucket": f"{os.environ['GCLOUD_PROJECT']}.appspot.com",
        })
    else:
        app = firebase_admin.get_app()

    yield app

    try:
        firebase_admin.delete_app(app)
    except ValueError:
        pass


@pytest.fixture
def db(firebase_app):
    """Get the emulator-backed database instance."""
    from src.apis.Db import Db
    return Db.get_instance()


@pytest.fixture
def memory_db():
    """Fresh in-memory store."""
    return MemoryDb()


@pytest.fixture
def app_config():
    """Default configuration with a small worker pool."""
    from src.models.config_types import AppConfig
    return AppConfig(max_workers=4)


@pytest.fixture
def test_user_id():
    """Get a test user ID."""
    return "test-user-123"
