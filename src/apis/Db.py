"""Project database class with Firebase operations."""

import logging
import os
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple
from datetime import datetime, timezone
from firebase_admin import auth, firestore, storage
from firebase_admin.exceptions import FirebaseError
from src.exceptions import UnauthenticatedError
from src.models.config_types import FIRESTORE_BATCH_LIMIT
from src.models.util_types import StoredDoc

logger = logging.getLogger(__name__)

QueryFilter = Tuple[str, str, Any]


class DbBatch:
    """Write batch addressed by document path."""

    def __init__(self, client):
        self._client = client
        self._batch = client.batch()
        self.size = 0

    def __len__(self):
        return self.size

    def set(self, path: str, data: dict, merge: bool = False):
        self._batch.set(self._client.document(path), data, merge=merge)
        self.size += 1

    def update(self, path: str, data: dict):
        self._batch.update(self._client.document(path), data)
        self.size += 1

    def delete(self, path: str):
        self._batch.delete(self._client.document(path))
        self.size += 1

    def commit(self):
        return self._batch.commit()


class DbTransaction:
    """Transaction handle addressed by document path.

    All reads must happen before the first write, as Firestore requires.
    """

    def __init__(self, client, transaction):
        self._client = client
        self._transaction = transaction

    def get(self, path: str) -> Optional[Dict[str, Any]]:
        snapshot = self._client.document(path).get(transaction=self._transaction)
        return snapshot.to_dict() if snapshot.exists else None

    def set(self, path: str, data: dict, merge: bool = False):
        self._transaction.set(self._client.document(path), data, merge=merge)

    def update(self, path: str, data: dict):
        self._transaction.update(self._client.document(path), data)

    def delete(self, path: str):
        self._transaction.delete(self._client.document(path))


class Db:
    """Database operations class.

    Wraps Firestore, Cloud Storage and Firebase Auth behind a small
    path-based interface. Services receive an instance explicitly, so any
    object exposing the same methods can stand in for it.
    """
    _instances: Dict[str, Any] = {}  # Class registry for singleton instances
    server_timestamp = firestore.SERVER_TIMESTAMP
    max_batch_size = FIRESTORE_BATCH_LIMIT

    def __new__(cls, *args, **kwargs):
        """Ensure only one instance per class exists"""
        if cls.__name__ not in cls._instances:
            cls._instances[cls.__name__] = super().__new__(cls)
        return cls._instances[cls.__name__]

    def __init__(self):
        """Initialize the database - only runs once per class due to singleton"""
        if hasattr(self, "_initialized"):
            return

        self._init_firestore()
        self._initialized = True

    def _init_firestore(self):
        """Initialize Firestore client."""
        self.firestore = firestore.client()
        logger.info("Firestore initialized")

    @classmethod
    def get_instance(cls):
        """Get or create the singleton instance for this class"""
        return cls()

    # Document functions
    def get_doc(self, path: str) -> Optional[Dict[str, Any]]:
        snapshot = self.firestore.document(path).get()
        return snapshot.to_dict() if snapshot.exists else None

    def list_docs(self, collection_path: str) -> List[StoredDoc]:
        snapshots = self.firestore.collection(collection_path).get()
        return [
            StoredDoc(id=snap.id, path=snap.reference.path, data=snap.to_dict() or {})
            for snap in snapshots
        ]

    def query_docs(
        self,
        collection_path: str,
        filters: Sequence[QueryFilter] = (),
        limit: Optional[int] = None,
    ) -> List[StoredDoc]:
        query = self.firestore.collection(collection_path)
        for field, op, value in filters:
            query = query.where(field, op, value)
        if limit:
            query = query.limit(limit)

        return [
            StoredDoc(id=snap.id, path=snap.reference.path, data=snap.to_dict() or {})
            for snap in query.get()
        ]

    def set_doc(self, path: str, data: dict, merge: bool = False):
        self.firestore.document(path).set(data, merge=merge)

    def update_doc(self, path: str, data: dict):
        self.firestore.document(path).update(data)

    def delete_doc(self, path: str):
        self.firestore.document(path).delete()

    def batch(self) -> DbBatch:
        return DbBatch(self.firestore)

    def run_transaction(self, fn: Callable[[DbTransaction], Any], max_attempts: int = 5):
        """Run fn inside a Firestore transaction, retrying on contention."""
        transaction = self.firestore.transaction(max_attempts=max_attempts)

        @firestore.transactional
        def _run(txn):
            return fn(DbTransaction(self.firestore, txn))

        return _run(transaction)

    # Storage functions
    def delete_blob(self, key: str):
        if key.startswith("/"):
            key = key[1:]
        bucket = storage.bucket()
        bucket.blob(key).delete()

    # Auth functions
    def verify_token(self, token: str) -> Dict[str, Any]:
        """Verify a Firebase ID token.

        Raises:
            UnauthenticatedError: If the token is missing, malformed or rejected
        """
        if not token:
            raise UnauthenticatedError("Authentication required", reason="missing-token")
        try:
            decoded = auth.verify_id_token(token)
        except (ValueError, FirebaseError) as e:
            logger.warning(f"ID token verification failed: {e}")
            raise UnauthenticatedError("Invalid authentication token", reason="invalid-token")
        return decoded

    @staticmethod
    def is_development():
        return os.getenv("ENV") == "development"

    # Timestamp functions
    @staticmethod
    def timestamp_now():
        return datetime.now(timezone.utc)
