"""
Base repository with common CRUD operations.
Follows Single Responsibility Principle - only handles data access.
"""

from typing import Any, Dict, List, Optional, Tuple

from motor.motor_asyncio import AsyncIOMotorCollection

from core.database import MongoDB
from core.logger import logger
from repositories.interfaces import IDocumentRepository
from repositories.interfaces.document_repository_interface import Session
from repositories.objectid_utils import (
    is_valid_objectid,
    serialize_document,
    str_to_objectid,
    to_objectids,
)


class BaseRepository(IDocumentRepository):
    """
    Base repository providing common CRUD operations.
    All repositories should inherit from this class.
    """

    def __init__(self, database: MongoDB, collection_name: str):
        """
        Initialize repository with a connected store handle and collection name.

        Args:
            database: MongoDB connection manager
            collection_name: Name of MongoDB collection
        """
        self.database = database
        self.collection_name = collection_name

    @property
    def collection(self) -> AsyncIOMotorCollection:
        """Get MongoDB collection."""
        return self.database.get_collection(self.collection_name)

    async def insert(self, document: Dict[str, Any], session: Session = None) -> str:
        """
        Insert a document.

        Returns:
            ID of created document
        """
        try:
            result = await self.collection.insert_one(document, session=session)
            logger.debug(
                f"Created document in {self.collection_name}: {result.inserted_id}"
            )
            return str(result.inserted_id)
        except Exception as e:
            logger.error(f"Error creating document in {self.collection_name}: {e}")
            raise

    async def replace_by_id(
        self, document_id: str, document: Dict[str, Any], session: Session = None
    ) -> bool:
        """
        Replace a whole document by ID.

        Returns:
            True if a document matched
        """
        try:
            result = await self.collection.replace_one(
                {"_id": str_to_objectid(document_id)}, document, session=session
            )
            logger.debug(f"Replaced document in {self.collection_name}: {document_id}")
            return result.matched_count > 0
        except Exception as e:
            logger.error(f"Error replacing document in {self.collection_name}: {e}")
            raise

    async def find(
        self,
        filter_dict: Dict[str, Any],
        sort: Optional[List[Tuple[str, int]]] = None,
        projection: Optional[Dict[str, Any]] = None,
        skip: int = 0,
        limit: int = 0,
    ) -> List[Dict[str, Any]]:
        try:
            cursor = self.collection.find(filter_dict, projection or None)
            if sort:
                cursor = cursor.sort(sort)
            if skip:
                cursor = cursor.skip(skip)
            if limit:
                cursor = cursor.limit(limit)

            documents = await cursor.to_list(length=None)
            logger.debug(
                f"Found {len(documents)} documents in {self.collection_name}"
            )
            return [serialize_document(doc) for doc in documents]
        except Exception as e:
            logger.error(f"Error finding documents in {self.collection_name}: {e}")
            raise

    async def count(self, filter_dict: Dict[str, Any]) -> int:
        try:
            return await self.collection.count_documents(filter_dict or {})
        except Exception as e:
            logger.error(f"Error counting documents in {self.collection_name}: {e}")
            raise

    async def find_by_id(
        self, document_id: str, projection: Optional[Dict[str, Any]] = None
    ) -> Optional[Dict[str, Any]]:
        if not is_valid_objectid(document_id):
            return None
        try:
            document = await self.collection.find_one(
                {"_id": str_to_objectid(document_id)}, projection or None
            )
            return serialize_document(document)
        except Exception as e:
            logger.error(f"Error finding document by ID in {self.collection_name}: {e}")
            raise

    async def find_by_ids(
        self, document_ids: List[str], session: Session = None
    ) -> List[Dict[str, Any]]:
        object_ids = to_objectids(document_ids)
        if not object_ids:
            return []
        try:
            cursor = self.collection.find({"_id": {"$in": object_ids}}, session=session)
            documents = await cursor.to_list(length=None)
            return [serialize_document(doc) for doc in documents]
        except Exception as e:
            logger.error(f"Error finding documents by IDs in {self.collection_name}: {e}")
            raise

    async def delete_by_id(self, document_id: str, session: Session = None) -> bool:
        try:
            result = await self.collection.delete_one(
                {"_id": str_to_objectid(document_id)}, session=session
            )
            logger.debug(f"Deleted document in {self.collection_name}: {document_id}")
            return result.deleted_count > 0
        except Exception as e:
            logger.error(f"Error deleting document in {self.collection_name}: {e}")
            raise
