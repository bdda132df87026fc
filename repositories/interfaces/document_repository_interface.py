"""
Interface for the read/delete operations shared by every collection.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Tuple

Session = Any


class IDocumentRepository(ABC):
    """Interface for generic document queries."""

    @abstractmethod
    async def find(
        self,
        filter_dict: Dict[str, Any],
        sort: Optional[List[Tuple[str, int]]] = None,
        projection: Optional[Dict[str, Any]] = None,
        skip: int = 0,
        limit: int = 0,
    ) -> List[Dict[str, Any]]:
        """
        Find documents matching filter.

        Args:
            filter_dict: Query filter (already cast to store types)
            sort: List of (field, direction) pairs
            projection: Field selection mask
            skip: Number of documents to skip
            limit: Maximum number of documents, 0 for no limit

        Returns:
            List of documents with _id as string
        """
        pass

    @abstractmethod
    async def count(self, filter_dict: Dict[str, Any]) -> int:
        """Count documents matching filter."""
        pass

    @abstractmethod
    async def find_by_id(
        self, document_id: str, projection: Optional[Dict[str, Any]] = None
    ) -> Optional[Dict[str, Any]]:
        """Find one document by id, None when missing."""
        pass

    @abstractmethod
    async def find_by_ids(
        self, document_ids: List[str], session: Session = None
    ) -> List[Dict[str, Any]]:
        """Find all documents whose id is in document_ids."""
        pass

    @abstractmethod
    async def delete_by_id(self, document_id: str, session: Session = None) -> bool:
        """Delete one document, True if something was deleted."""
        pass
