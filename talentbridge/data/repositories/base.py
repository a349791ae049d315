"""
Base repository class providing common CRUD operations.

All MongoDB-backed repositories inherit from this base class.
"""

from abc import ABC, abstractmethod
from typing import Any, Generic, Optional, TypeVar

from bson import ObjectId
from bson.errors import InvalidId
from pymongo import ReturnDocument
from pymongo.collection import Collection
from pymongo.results import InsertOneResult

from talentbridge.data.database import get_database_manager
from talentbridge.data.models.base import BaseDocument, utc_now
from talentbridge.utils.logger import get_logger

logger = get_logger(__name__)

# Type variable for document models
T = TypeVar("T", bound=BaseDocument)


class BaseRepository(ABC, Generic[T]):
    """
    Abstract base repository providing common database operations.

    Subclasses must define the collection name and model class.
    """

    @property
    @abstractmethod
    def collection_name(self) -> str:
        """Name of the MongoDB collection."""
        pass

    @property
    @abstractmethod
    def model_class(self) -> type[T]:
        """Pydantic model class for this repository."""
        pass

    def __init__(self) -> None:
        """Initialize repository with database connection."""
        self._db_manager = get_database_manager()

    # -------------------------------------------------------------------------
    # Collection Access
    # -------------------------------------------------------------------------

    def _get_sync_collection(self) -> Collection:
        """Get synchronous collection instance."""
        return self._db_manager.get_sync_collection(self.collection_name)

    # -------------------------------------------------------------------------
    # Document Conversion
    # -------------------------------------------------------------------------

    def _to_model(self, document: Optional[dict[str, Any]]) -> Optional[T]:
        """Convert MongoDB document to Pydantic model."""
        if document is None:
            return None
        return self.model_class.model_validate(document)

    def _to_models(self, documents: list[dict[str, Any]]) -> list[T]:
        """Convert list of MongoDB documents to Pydantic models."""
        return [self._to_model(doc) for doc in documents if doc is not None]

    def _to_document(self, model: T) -> dict[str, Any]:
        """Convert Pydantic model to MongoDB document."""
        return model.model_dump_mongo()

    @staticmethod
    def _to_object_id(id_value: str | ObjectId) -> Optional[ObjectId]:
        """Convert string to ObjectId if needed. Invalid ids give None."""
        if isinstance(id_value, ObjectId):
            return id_value
        try:
            return ObjectId(id_value)
        except (InvalidId, TypeError):
            return None

    # -------------------------------------------------------------------------
    # Synchronous CRUD Operations
    # -------------------------------------------------------------------------

    def create(self, model: T) -> T:
        """Create a new document."""
        collection = self._get_sync_collection()
        now = utc_now()
        model.created_at = now
        model.updated_at = now
        document = self._to_document(model)

        result: InsertOneResult = collection.insert_one(document)
        model.id = result.inserted_id
        logger.debug(f"Created {self.collection_name} document: {result.inserted_id}")
        return model

    def get_by_id(self, id_value: str | ObjectId) -> Optional[T]:
        """Get a document by its ID."""
        object_id = self._to_object_id(id_value)
        if object_id is None:
            return None
        document = self._get_sync_collection().find_one({"_id": object_id})
        return self._to_model(document)

    def find(
        self,
        query: dict[str, Any],
        skip: int = 0,
        limit: int = 100,
        sort_by: Optional[str] = None,
        sort_order: int = -1,
    ) -> list[T]:
        """Find documents matching a query."""
        collection = self._get_sync_collection()
        cursor = collection.find(query).skip(skip).limit(limit)
        cursor = cursor.sort(sort_by or "created_at", sort_order)
        return self._to_models(list(cursor))

    def find_one_and_set(
        self,
        query: dict[str, Any],
        update: dict[str, Any],
        extra_operators: Optional[dict[str, Any]] = None,
    ) -> Optional[T]:
        """Apply ``$set`` (plus other operators) to one document and return the new version."""
        update = {**update, "updated_at": utc_now()}
        document = self._get_sync_collection().find_one_and_update(
            query,
            {"$set": update, **(extra_operators or {})},
            return_document=ReturnDocument.AFTER,
        )
        return self._to_model(document)

    def exists(self, query: dict[str, Any]) -> bool:
        """Check if any document matches the query."""
        return self._get_sync_collection().count_documents(query, limit=1) > 0
