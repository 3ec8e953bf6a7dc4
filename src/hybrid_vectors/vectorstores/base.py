"""
Core vector store interfaces.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence


SEARCH_TEXT_FIELD = "searchText"
HAS_EMBEDDING_FIELD = "hasEmbedding"


@dataclass
class VectorDocument:
    """One stored point: caller-assigned id, payload and optional vector."""

    id: str
    payload: Dict[str, Any] = field(default_factory=dict)
    vector: Optional[List[float]] = None


@dataclass
class SearchResult:
    """Result returned by the similarity and keyword searches."""

    id: str
    score: float
    payload: Dict[str, Any] = field(default_factory=dict)


@dataclass
class CollectionStats:
    """Point count and schema summary of a collection."""

    points_count: int
    vector_size: int
    status: str
    exists: bool


class VectorStore(ABC):
    """
    Abstract contract implemented by each backend, bound to one collection.

    Filters are backend-native filter objects or their plain-dict form.
    """

    def __init__(self, collection: str) -> None:
        self.collection = collection

    @abstractmethod
    async def collection_exists(self) -> bool:
        """Return ``True`` when the collection is present."""

    @abstractmethod
    async def initialize_collection(self, vector_size: int) -> None:
        """Create the collection or reconcile it with *vector_size*."""

    @abstractmethod
    async def upsert(self, document: VectorDocument) -> None:
        """Insert or replace *document*."""

    @abstractmethod
    async def get(self, document_id: str) -> Optional[VectorDocument]:
        """Fetch a document, or ``None`` when it does not exist."""

    @abstractmethod
    async def delete(self, document_id: str) -> None:
        """Delete a document. Missing ids are not an error."""

    @abstractmethod
    async def delete_all(self) -> None:
        """Remove every point while keeping the collection and its indexes."""

    @abstractmethod
    async def scroll_with_filter(self, filter: Any, limit: int = 100) -> List[VectorDocument]:
        """Return up to *limit* documents matching *filter*, without vectors."""

    @abstractmethod
    async def list_all(self, limit: Optional[int] = None) -> List[VectorDocument]:
        """Return up to *limit* documents, without vectors."""

    @abstractmethod
    async def search_similar(
        self,
        vector: Sequence[float],
        limit: int = 10,
        score_threshold: float = 0.5,
        filter: Any = None,
    ) -> List[SearchResult]:
        """Nearest-neighbour search by cosine similarity."""

    @abstractmethod
    async def search_by_keywords(
        self,
        keywords: Sequence[str],
        limit: int = 10,
        filter: Any = None,
    ) -> List[SearchResult]:
        """Literal term search scored by keyword overlap."""

    @abstractmethod
    async def collection_stats(self) -> CollectionStats:
        """Return point count and declared vector size."""

    @abstractmethod
    async def health_check(self) -> bool:
        """Return ``True`` when the backend answers."""
