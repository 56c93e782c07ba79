"""Document base class for Firestore operations."""

from typing import Type, Optional, TypeVar, Generic
from pydantic import ValidationError as PydanticValidationError
from src.apis.Db import Db
from src.exceptions import InternalError, NotFoundError
from src.models.firestore_types import BaseDoc
from src.util.logger import get_logger

logger = get_logger(__name__)

DocLike = TypeVar('DocLike', bound=BaseDoc)


def remove_none_values(d):
    """Recursively remove None values from dictionaries."""
    if isinstance(d, dict):
        return {k: remove_none_values(v) for k, v in d.items() if v is not None}
    elif isinstance(d, list):
        return [remove_none_values(v) for v in d if v is not None]
    else:
        return d


class DocumentBase(Generic[DocLike]):
    """Typed wrapper around one stored document.

    Subclasses set ``pydantic_model`` and ``resource_type`` and provide the
    collection path the document lives in.
    """
    collection_path: str = None  # type: ignore
    pydantic_model: Type[DocLike] = None  # type: ignore
    resource_type: str = "Document"
    _doc: Optional[DocLike] = None

    def __init__(self, id: str, doc: dict | None = None, db=None):
        """
        Initialize the document.
        :param id: Id of the document
        :param doc: Raw data already at hand; when falsy the document is fetched
        :param db: Store to use, defaults to the Firestore-backed Db
        """
        self.id = id
        self._db = db

        if doc is None:
            self._init_doc()
        else:
            self._doc = self._validate(doc)

    @property
    def db(self):
        if self._db is None:
            self._db = Db.get_instance()
        return self._db

    @property
    def path(self) -> str:
        return f"{self.collection_path}/{self.id}"

    def _validate(self, data: dict) -> DocLike:
        try:
            return self.pydantic_model(**data)
        except PydanticValidationError as e:
            logger.error(f"Malformed {self.resource_type} {self.path}: {e}")
            raise InternalError(f"Malformed {self.resource_type} document: {self.id}")

    def _init_doc(self):
        if not self.pydantic_model:
            raise InternalError("You forgot to set pydantic_model.")
        if not self.collection_path:
            raise InternalError("You forgot to set collection_path.")

        data = self.db.get_doc(self.path)
        if data is None:
            raise NotFoundError(self.resource_type, self.id)

        self._doc = self._validate(data)

    @property
    def doc(self) -> DocLike:
        if self._doc:
            return self._doc
        else:
            raise InternalError("Document is None")

    def update_doc(self, data: dict):
        """Update fields (dotted paths allowed) and stamp lastModified."""
        data = remove_none_values(data)
        data["lastModified"] = self.db.server_timestamp
        self.db.update_doc(self.path, data)

    def delete(self):
        self.db.delete_doc(self.path)
        self._doc = None
