"""In-memory store implementing the Db surface for unit tests."""

import copy
import threading
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional, Sequence, Set
from google.api_core.exceptions import NotFound, ServiceUnavailable
from src.exceptions import UnauthenticatedError
from src.models.config_types import FIRESTORE_BATCH_LIMIT
from src.models.util_types import StoredDoc

SERVER_TIMESTAMP = "__server_timestamp__"

_OPERATORS: Dict[str, Callable[[Any, Any], bool]] = {
    "==": lambda a, b: a == b,
    "!=": lambda a, b: a != b,
    "in": lambda a, b: a in b,
    "array-contains": lambda a, b: isinstance(a, list) and b in a,
}


def _resolve(value: Any) -> Any:
    if isinstance(value, str) and value == SERVER_TIMESTAMP:
        return datetime.now(timezone.utc)
    if isinstance(value, dict):
        return {k: _resolve(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_resolve(v) for v in value]
    return value


def _set_dotted(target: Dict[str, Any], dotted: str, value: Any):
    parts = dotted.split(".")
    node = target
    for part in parts[:-1]:
        child = node.get(part)
        if not isinstance(child, dict):
            child = {}
            node[part] = child
        node = child
    node[parts[-1]] = value


class MemoryBatch:
    """Write batch that applies its operations on commit."""

    def __init__(self, db: "MemoryDb"):
        self._db = db
        self._ops: List[tuple] = []

    def __len__(self):
        return len(self._ops)

    @property
    def size(self) -> int:
        return len(self._ops)

    def set(self, path: str, data: dict, merge: bool = False):
        self._ops.append(("set", path, data, merge))

    def update(self, path: str, data: dict):
        self._ops.append(("update", path, data, False))

    def delete(self, path: str):
        self._ops.append(("delete", path, None, False))

    def commit(self):
        self._db._commit_ops(self._ops, batch=True)


class MemoryTransaction:
    """Transaction handle that buffers writes until the function returns."""

    def __init__(self, db: "MemoryDb"):
        self._db = db
        self._ops: List[tuple] = []

    def get(self, path: str) -> Optional[Dict[str, Any]]:
        if self._ops:
            raise RuntimeError("Transaction reads must happen before writes")
        return self._db.get_doc(path)

    def set(self, path: str, data: dict, merge: bool = False):
        self._ops.append(("set", path, data, merge))

    def update(self, path: str, data: dict):
        self._ops.append(("update", path, data, False))

    def delete(self, path: str):
        self._ops.append(("delete", path, None, False))


class MemoryDb:
    """Dictionary-backed stand-in for Db.

    Documents are keyed by full path. Blobs are a set of keys. Every commit
    is recorded so tests can check batch sizes.
    """
    server_timestamp = SERVER_TIMESTAMP
    max_batch_size = FIRESTORE_BATCH_LIMIT

    def __init__(self):
        self.docs: Dict[str, Dict[str, Any]] = {}
        self.blobs: Set[str] = set()
        self.deleted_blobs: List[str] = []
        self.tokens: Dict[str, str] = {}
        self.committed_batches: List[int] = []
        self.transactions = 0
        self.reads = 0
        self.writes = 0
        self.failing_blobs: Set[str] = set()
        self.failing_paths: Set[str] = set()
        self._lock = threading.RLock()

    # Seeding helpers
    def seed(self, path: str, data: dict):
        self.docs[path] = copy.deepcopy(data)

    def raw(self, path: str) -> Optional[Dict[str, Any]]:
        return self.docs.get(path)

    # Document functions
    def get_doc(self, path: str) -> Optional[Dict[str, Any]]:
        with self._lock:
            self.reads += 1
            data = self.docs.get(path)
            return copy.deepcopy(data) if data is not None else None

    def list_docs(self, collection_path: str) -> List[StoredDoc]:
        prefix = collection_path.rstrip("/") + "/"
        with self._lock:
            result = []
            for path, data in self.docs.items():
                if not path.startswith(prefix):
                    continue
                doc_id = path[len(prefix):]
                if "/" in doc_id:
                    continue
                self.reads += 1
                result.append(StoredDoc(id=doc_id, path=path, data=copy.deepcopy(data)))
            return result

    def query_docs(self, collection_path: str, filters: Sequence[tuple] = (), limit: Optional[int] = None) -> List[StoredDoc]:
        result = []
        for item in self.list_docs(collection_path):
            if all(_OPERATORS[op](item.data.get(field), value) for field, op, value in filters):
                result.append(item)
            if limit and len(result) >= limit:
                break
        return result

    def set_doc(self, path: str, data: dict, merge: bool = False):
        self._commit_ops([("set", path, data, merge)])

    def update_doc(self, path: str, data: dict):
        self._commit_ops([("update", path, data, False)])

    def delete_doc(self, path: str):
        self._commit_ops([("delete", path, None, False)])

    def batch(self) -> MemoryBatch:
        return MemoryBatch(self)

    def run_transaction(self, fn: Callable[[MemoryTransaction], Any], max_attempts: int = 5):
        with self._lock:
            transaction = MemoryTransaction(self)
            result = fn(transaction)
            self._commit_ops(transaction._ops)
            self.transactions += 1
            return result

    def _commit_ops(self, ops: List[tuple], batch: bool = False):
        with self._lock:
            if batch and len(ops) > FIRESTORE_BATCH_LIMIT:
                raise ValueError(f"Batch of {len(ops)} writes exceeds {FIRESTORE_BATCH_LIMIT}")

            for _, path, _, _ in ops:
                if path in self.failing_paths:
                    raise ServiceUnavailable(f"Write to {path} failed")

            # Validate everything first so a failed commit applies nothing
            for kind, path, _, _ in ops:
                if kind == "update" and path not in self.docs:
                    raise NotFound(f"No document to update: {path}")

            for kind, path, data, merge in ops:
                if kind == "delete":
                    self.docs.pop(path, None)
                elif kind == "set":
                    value = _resolve(copy.deepcopy(data))
                    if merge and path in self.docs:
                        self.docs[path].update(value)
                    else:
                        self.docs[path] = value
                else:
                    for key, value in data.items():
                        _set_dotted(self.docs[path], key, _resolve(copy.deepcopy(value)))
                self.writes += 1

            if batch:
                self.committed_batches.append(len(ops))

    # Storage functions
    def delete_blob(self, key: str):
        if key.startswith("/"):
            key = key[1:]
        with self._lock:
            if key in self.failing_blobs:
                raise ServiceUnavailable(f"Could not delete {key}")
            if key not in self.blobs:
                raise NotFound(f"No such object: {key}")
            self.blobs.discard(key)
            self.deleted_blobs.append(key)

    # Auth functions
    def verify_token(self, token: str) -> Dict[str, Any]:
        if not token:
            raise UnauthenticatedError("Authentication required", reason="missing-token")
        uid = self.tokens.get(token)
        if uid is None:
            raise UnauthenticatedError("Invalid authentication token", reason="invalid-token")
        return {"uid": uid}
