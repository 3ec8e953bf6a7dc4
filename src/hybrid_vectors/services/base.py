"""
Generic hybrid (semantic + keyword) vector service.

Entity families plug in through a :class:`PayloadMapper`; storage, embedding
and ranking logic lives here once.
"""

from __future__ import annotations

import asyncio
import dataclasses
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Generic, List, Optional, Sequence, TypeVar

from hybrid_vectors.config.schema import HybridVectorsSettings
from hybrid_vectors.embeddings import BaseEmbeddingProvider, create_embedding_provider
from hybrid_vectors.exceptions import StoreOperationFailed
from hybrid_vectors.utils import extract_keywords
from hybrid_vectors.vectorstores import (
    HAS_EMBEDDING_FIELD,
    SEARCH_TEXT_FIELD,
    QdrantVectorStore,
    SearchResult,
    VectorDocument,
    VectorStore,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


class MatchType(str, Enum):
    SEMANTIC = "semantic"
    KEYWORD = "keyword"
    HYBRID = "hybrid"


@dataclass
class HybridSearchResult(Generic[T]):
    """Ranked, typed search hit."""

    data: T
    score: float
    match_type: MatchType


@dataclass(frozen=True)
class SearchMode:
    """Whether semantic search is currently possible, and why not."""

    semantic: bool
    provider: Optional[str] = None
    reason: Optional[str] = None


class PayloadMapper(ABC, Generic[T]):
    """
    Two-way mapping between an entity and its stored payload.

    ``payload_to_data(create_payload(e))`` must equal ``e`` except for the id,
    which :meth:`with_id` injects from the document id after retrieval.
    """

    @abstractmethod
    def create_search_text(self, data: T) -> str:
        """Text that is embedded and matched by keyword search."""

    @abstractmethod
    def extract_id(self, data: T) -> str:
        """Storage id (UUID-shaped) of *data*."""

    @abstractmethod
    def create_payload(self, data: T) -> Dict[str, Any]:
        """Project *data* into a JSON-compatible payload."""

    @abstractmethod
    def payload_to_data(self, payload: Dict[str, Any]) -> T:
        """Rebuild the entity from a stored payload."""

    def with_id(self, data: T, doc_id: str) -> T:
        return dataclasses.replace(data, id=doc_id)


class HybridVectorService(Generic[T]):
    """
    CRUD and hybrid search over one collection for one entity type.

    :param collection: Collection name.
    :param mapper: Entity/payload mapping for ``T``.
    :param store: Vector store; a :class:`QdrantVectorStore` is built from
        ``settings`` when omitted.
    :param provider: Embedding provider; resolved from ``settings`` when omitted.
    :param settings: Aggregated settings.
    :param triggers_field: Payload array also matched by keyword search.
    """

    def __init__(
        self,
        collection: str,
        mapper: PayloadMapper[T],
        store: VectorStore | None = None,
        provider: BaseEmbeddingProvider | None = None,
        settings: HybridVectorsSettings | None = None,
        triggers_field: Optional[str] = None,
    ) -> None:
        self.settings = settings or HybridVectorsSettings()
        self.collection = collection
        self.mapper = mapper
        self.vector_store: VectorStore = store or QdrantVectorStore(
            collection,
            self.settings.vector_store,
            triggers_field=triggers_field,
            exact_match_bonus=self.settings.search.exact_match_bonus,
        )
        self.provider: BaseEmbeddingProvider = provider or create_embedding_provider(
            self.settings.embeddings
        )

    # ------------------------------------------------------------------ #
    # Lifecycle
    # ------------------------------------------------------------------ #
    async def initialize(self) -> None:
        """Create or reconcile the collection at the provider's dimensionality."""
        await self.vector_store.initialize_collection(self.provider.get_dimensions())

    async def collection_exists(self) -> bool:
        return await self.vector_store.collection_exists()

    async def health_check(self) -> bool:
        return await self.vector_store.health_check()

    async def close(self) -> None:
        close = getattr(self.vector_store, "close", None)
        if close is not None:
            await close()
        await self.provider.close()

    # ------------------------------------------------------------------ #
    # Writes
    # ------------------------------------------------------------------ #
    async def store(self, data: T) -> None:
        """
        Embed and upsert *data*. Storage without a vector is refused.

        :raises ProviderUnavailable: the embedding provider is not configured.
        :raises EmbeddingGenerationFailed: the embedding call failed.
        :raises StoreOperationFailed: the upsert failed.
        """
        search_text = self.mapper.create_search_text(data)
        doc_id = self.mapper.extract_id(data)
        vector = await self.provider.generate_embedding(search_text)

        payload = self.mapper.create_payload(data)
        payload[SEARCH_TEXT_FIELD] = search_text
        payload[HAS_EMBEDDING_FIELD] = True
        await self.vector_store.upsert(VectorDocument(id=doc_id, payload=payload, vector=vector))

    async def delete(self, doc_id: str) -> None:
        await self.vector_store.delete(doc_id)

    async def delete_all(self) -> None:
        await self.vector_store.delete_all()

    # ------------------------------------------------------------------ #
    # Reads
    # ------------------------------------------------------------------ #
    def _to_data(self, doc_id: str, payload: Dict[str, Any]) -> T:
        return self.mapper.with_id(self.mapper.payload_to_data(payload), doc_id)

    async def get(self, doc_id: str) -> Optional[T]:
        document = await self.vector_store.get(doc_id)
        if document is None:
            return None
        return self._to_data(document.id, document.payload)

    async def list(self, limit: Optional[int] = None) -> List[T]:
        documents = await self.vector_store.list_all(limit)
        return [self._to_data(doc.id, doc.payload) for doc in documents]

    async def query_with_filter(self, filter: Any, limit: int = 100) -> List[T]:
        """Payload-filtered listing without any semantic ranking."""
        documents = await self.vector_store.scroll_with_filter(filter, limit)
        return [self._to_data(doc.id, doc.payload) for doc in documents]

    async def count(self) -> int:
        """Point count from collection stats, or by listing when stats fail."""
        try:
            stats = await self.vector_store.collection_stats()
            return stats.points_count
        except StoreOperationFailed as exc:
            logger.warning(f"Collection stats unavailable for {self.collection}, counting by listing: {exc}")
            return len(await self.list())

    # ------------------------------------------------------------------ #
    # Search
    # ------------------------------------------------------------------ #
    async def search(
        self,
        query: str,
        limit: Optional[int] = None,
        score_threshold: Optional[float] = None,
        filter: Any = None,
    ) -> List[HybridSearchResult[T]]:
        """
        Hybrid search: semantic and keyword retrieval run concurrently and
        their weighted scores are added for points found by both.

        A failure in either retrieval propagates; there is no keyword-only
        fallback once semantic search is attempted.
        """
        options = self.settings.search
        limit = options.default_limit if limit is None else limit
        if limit <= 0:
            return []
        if score_threshold is None:
            score_threshold = options.score_threshold

        keywords = extract_keywords(query, options.min_keyword_length)
        if not keywords:
            return []

        query_vector = await self.provider.generate_embedding(query)
        candidates = limit * options.candidate_multiplier
        semantic, keyword = await asyncio.gather(
            self.vector_store.search_similar(
                query_vector,
                limit=candidates,
                score_threshold=options.semantic_candidate_threshold,
                filter=filter,
            ),
            self.vector_store.search_by_keywords(keywords, limit=candidates, filter=filter),
        )
        return self._combine(semantic, keyword, limit, score_threshold)

    async def keyword_search(
        self,
        query: str,
        limit: Optional[int] = None,
        score_threshold: Optional[float] = None,
        filter: Any = None,
    ) -> List[HybridSearchResult[T]]:
        """Literal-term search only; usable without an embedding provider."""
        options = self.settings.search
        limit = options.default_limit if limit is None else limit
        if limit <= 0:
            return []
        if score_threshold is None:
            score_threshold = options.score_threshold

        keywords = extract_keywords(query, options.min_keyword_length)
        if not keywords:
            return []

        hits = await self.vector_store.search_by_keywords(keywords, limit=limit, filter=filter)
        return self._combine([], hits, limit, score_threshold)

    def _combine(
        self,
        semantic: Sequence[SearchResult],
        keyword: Sequence[SearchResult],
        limit: int,
        score_threshold: float,
    ) -> List[HybridSearchResult[T]]:
        options = self.settings.search
        combined: Dict[str, HybridSearchResult[T]] = {}

        for hit in semantic:
            combined[hit.id] = HybridSearchResult(
                data=self._to_data(hit.id, hit.payload),
                score=hit.score * options.semantic_weight,
                match_type=MatchType.SEMANTIC,
            )

        for hit in keyword:
            weighted = hit.score * options.keyword_weight
            existing = combined.get(hit.id)
            if existing is not None:
                existing.score = min(1.0, existing.score + weighted)
                existing.match_type = MatchType.HYBRID
            else:
                combined[hit.id] = HybridSearchResult(
                    data=self._to_data(hit.id, hit.payload),
                    score=weighted,
                    match_type=MatchType.KEYWORD,
                )

        results = [result for result in combined.values() if result.score >= score_threshold]
        results.sort(key=lambda result: result.score, reverse=True)
        return results[:limit]

    def get_search_mode(self) -> SearchMode:
        status = self.provider.status()
        reason = status.reason or ("Embedding service available" if status.available else None)
        provider = status.provider if status.available else None
        return SearchMode(semantic=status.available, provider=provider, reason=reason)
