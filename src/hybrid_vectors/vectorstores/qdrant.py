"""
Qdrant-backed vector store.
"""

from __future__ import annotations

import asyncio
import logging
from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Optional, Sequence

from qdrant_client import AsyncQdrantClient
from qdrant_client.http import models as rest

from hybrid_vectors.config.schema import VectorStoreSettings
from hybrid_vectors.exceptions import (
    ConfigurationError,
    HybridVectorsError,
    SchemaMismatch,
    StoreOperationFailed,
)
from hybrid_vectors.utils import keyword_relevance
from hybrid_vectors.vectorstores.base import (
    SEARCH_TEXT_FIELD,
    CollectionStats,
    SearchResult,
    VectorDocument,
    VectorStore,
)

logger = logging.getLogger(__name__)

_SCROLL_PAGE = 1000


def _is_conflict(exc: BaseException) -> bool:
    """Detect "collection/index already exists" failures from either client mode."""
    if getattr(exc, "status_code", None) == 409:
        return True
    message = str(exc).lower()
    return "already exists" in message or "conflict" in message


def _index_matches(existing: Any, expected: Any, field_schema: Any) -> bool:
    """True when an existing payload index already has the wanted type and tokenizer."""
    if existing is None or existing.data_type != expected:
        return False
    if not isinstance(field_schema, rest.TextIndexParams):
        return True
    return getattr(existing.params, "tokenizer", None) == field_schema.tokenizer


class QdrantVectorStore(VectorStore):
    """Vector store implementation layered on top of Qdrant, one collection per instance."""

    def __init__(
        self,
        collection: str,
        settings: VectorStoreSettings | None = None,
        client: AsyncQdrantClient | None = None,
        triggers_field: Optional[str] = None,
        exact_match_bonus: float = 0.3,
    ) -> None:
        """
        Create (or adopt) the async Qdrant client.

        :param collection: Collection name, required.
        :param settings: Connection and behaviour settings.
        :param client: Pre-built client, e.g. ``AsyncQdrantClient(location=":memory:")``.
        :param triggers_field: Payload array matched by keyword search in addition
            to ``searchText``.
        :param exact_match_bonus: Bonus added to keyword scores on whole-word hits.
        """
        if not collection or not collection.strip():
            raise ConfigurationError("Collection name is required for the vector store")
        super().__init__(collection)
        self.settings = settings or VectorStoreSettings()
        if client is None:
            if not self.settings.url or not self.settings.url.strip():
                raise ConfigurationError("Qdrant URL is required for vector store integration")
            client = AsyncQdrantClient(
                url=self.settings.url,
                api_key=self.settings.api_key,
                prefer_grpc=self.settings.prefer_grpc,
                timeout=self.settings.timeout,
            )
        self.client = client
        self.triggers_field = triggers_field
        self.exact_match_bonus = exact_match_bonus
        self._bulk_semaphore: asyncio.Semaphore | None = None

    @property
    def bulk_semaphore(self) -> asyncio.Semaphore:
        """Lazy initialization of the bulk-read limiter."""
        if self._bulk_semaphore is None:
            self._bulk_semaphore = asyncio.Semaphore(self.settings.bulk_read_concurrency)
        return self._bulk_semaphore

    @contextmanager
    def _operation(self, name: str) -> Iterator[None]:
        """Wrap backend failures in :class:`StoreOperationFailed`."""
        try:
            yield
        except HybridVectorsError:
            raise
        except Exception as exc:
            raise StoreOperationFailed(name, exc) from exc

    @staticmethod
    def _to_filter(filter: Any) -> Optional[rest.Filter]:
        if filter is None:
            return None
        if isinstance(filter, rest.Filter):
            return filter
        return rest.Filter.model_validate(filter)

    # Collection lifecycle

    async def collection_exists(self) -> bool:
        with self._operation("collection_exists"):
            return await self.client.collection_exists(self.collection)

    async def initialize_collection(self, vector_size: int) -> None:
        """
        Create the collection when missing, otherwise reconcile it.

        A dimension mismatch drops and recreates the collection; existing
        points are lost.
        """
        with self._operation("initialize_collection"):
            if not await self.client.collection_exists(self.collection):
                await self._create_collection(vector_size)
                return

            try:
                self._check_dimensions(await self._existing_vector_size(), vector_size)
            except SchemaMismatch as exc:
                logger.warning(f"Vector dimension mismatch: {exc}. Recreating collection.")
                await self.client.delete_collection(self.collection)
                await self._create_collection(vector_size)
                return

            await self._ensure_payload_indexes()

    def _check_dimensions(self, existing: Optional[int], requested: int) -> None:
        if existing and existing != requested:
            raise SchemaMismatch(self.collection, existing, requested)

    @staticmethod
    def _vector_size(info: rest.CollectionInfo) -> Optional[int]:
        vectors = info.config.params.vectors
        if isinstance(vectors, rest.VectorParams):
            return vectors.size
        if isinstance(vectors, dict) and len(vectors) == 1:
            return next(iter(vectors.values())).size
        return None

    async def _existing_vector_size(self) -> Optional[int]:
        info = await self.client.get_collection(self.collection)
        return self._vector_size(info)

    async def _create_collection(self, vector_size: int) -> None:
        try:
            await self.client.create_collection(
                collection_name=self.collection,
                vectors_config=rest.VectorParams(
                    size=vector_size,
                    distance=rest.Distance.COSINE,
                    on_disk=self.settings.on_disk,
                ),
                optimizers_config=rest.OptimizersConfigDiff(
                    default_segment_number=self.settings.default_segment_number,
                ),
            )
            logger.info(f"Created collection {self.collection} with {vector_size} dimensions")
        except Exception as exc:
            # Created concurrently by another process or a restart.
            if not _is_conflict(exc):
                raise
            logger.debug(f"Collection {self.collection} already exists, skipping creation")
        await self._ensure_payload_indexes()

    def _payload_indexes(self) -> Dict[str, Any]:
        # Prefix tokens let "postgres" reach a document holding "postgresql".
        prefix_text = rest.TextIndexParams(
            type=rest.TextIndexType.TEXT,
            tokenizer=rest.TokenizerType.PREFIX,
            lowercase=True,
        )
        indexes: Dict[str, Any] = {SEARCH_TEXT_FIELD: prefix_text}
        if self.triggers_field:
            indexes[self.triggers_field] = prefix_text
        return indexes

    async def _ensure_payload_indexes(self) -> None:
        """Create missing payload indexes. Failures are logged, not raised."""
        try:
            info = await self.client.get_collection(self.collection)
            schema = info.payload_schema or {}
        except Exception as exc:
            logger.warning(f"Failed to read payload schema of {self.collection}: {exc}")
            return

        for field_name, field_schema in self._payload_indexes().items():
            expected = (
                rest.PayloadSchemaType.TEXT
                if isinstance(field_schema, rest.TextIndexParams)
                else field_schema
            )
            if _index_matches(schema.get(field_name), expected, field_schema):
                continue
            try:
                await self.client.create_payload_index(
                    collection_name=self.collection,
                    field_name=field_name,
                    field_schema=field_schema,
                    wait=True,
                )
            except Exception as exc:
                if not _is_conflict(exc):
                    logger.warning(
                        f"Failed to create {expected} index on {self.collection}.{field_name}: {exc}"
                    )

    # Point CRUD

    async def upsert(self, document: VectorDocument) -> None:
        """Insert or replace a point, waiting for the write to be applied."""
        if not document.vector:
            raise StoreOperationFailed("upsert", "Vector is required for vector database storage")
        with self._operation("upsert"):
            await self.client.upsert(
                collection_name=self.collection,
                points=[
                    rest.PointStruct(
                        id=document.id,
                        vector=list(document.vector),
                        payload=document.payload,
                    )
                ],
                wait=True,
            )

    async def get(self, document_id: str) -> Optional[VectorDocument]:
        with self._operation("get"):
            rows = await self.client.retrieve(
                collection_name=self.collection,
                ids=[document_id],
                with_payload=True,
                with_vectors=True,
            )
        if not rows:
            return None
        row = rows[0]
        vector = row.vector if isinstance(row.vector, list) else None
        return VectorDocument(id=str(row.id), payload=dict(row.payload or {}), vector=vector)

    async def delete(self, document_id: str) -> None:
        """
        Delete a point, then wait ``delete_settle_seconds``.

        Qdrant acknowledges ``wait=True`` writes before every segment serves the
        new state, so an immediate read could still see the point.
        """
        with self._operation("delete"):
            await self.client.delete(
                collection_name=self.collection,
                points_selector=rest.PointIdsList(points=[document_id]),
                wait=True,
            )
        if self.settings.delete_settle_seconds > 0:
            await asyncio.sleep(self.settings.delete_settle_seconds)

    async def delete_all(self) -> None:
        """Delete every point with an empty filter; the collection itself stays."""
        with self._operation("delete_all"):
            if not await self.client.collection_exists(self.collection):
                return
            await self.client.delete(
                collection_name=self.collection,
                points_selector=rest.FilterSelector(filter=rest.Filter(must=[])),
                wait=True,
            )
        logger.warning(
            f"All points deleted from collection {self.collection} (collection structure preserved)"
        )

    # Bulk reads

    async def _scroll(self, scroll_filter: Optional[rest.Filter], limit: int) -> List[VectorDocument]:
        documents: List[VectorDocument] = []
        offset = None
        while len(documents) < limit:
            points, offset = await self.client.scroll(
                collection_name=self.collection,
                scroll_filter=scroll_filter,
                limit=min(limit - len(documents), _SCROLL_PAGE),
                offset=offset,
                with_payload=True,
                with_vectors=False,
            )
            documents.extend(
                VectorDocument(id=str(point.id), payload=dict(point.payload or {}))
                for point in points
            )
            if offset is None or not points:
                break
        return documents

    async def scroll_with_filter(self, filter: Any, limit: int = 100) -> List[VectorDocument]:
        async with self.bulk_semaphore:
            with self._operation("scroll_with_filter"):
                return await self._scroll(self._to_filter(filter), limit)

    async def list_all(self, limit: Optional[int] = None) -> List[VectorDocument]:
        limit = limit or self.settings.list_limit
        async with self.bulk_semaphore:
            with self._operation("list_all"):
                if not await self.client.collection_exists(self.collection):
                    raise StoreOperationFailed(
                        "list_all",
                        f"Collection '{self.collection}' does not exist. No data has been stored yet.",
                    )
                return await self._scroll(None, limit)

    # Search

    async def search_similar(
        self,
        vector: Sequence[float],
        limit: int = 10,
        score_threshold: float = 0.5,
        filter: Any = None,
    ) -> List[SearchResult]:
        with self._operation("search_similar"):
            response = await self.client.query_points(
                collection_name=self.collection,
                query=list(vector),
                limit=limit,
                score_threshold=score_threshold,
                query_filter=self._to_filter(filter),
                with_payload=True,
            )
        return [
            SearchResult(id=str(point.id), score=float(point.score), payload=dict(point.payload or {}))
            for point in response.points
        ]

    def _keyword_filter(self, keywords: List[str], filter: Any) -> rest.Filter:
        fields = [SEARCH_TEXT_FIELD]
        if self.triggers_field:
            fields.append(self.triggers_field)
        conditions: List[Any] = [
            rest.FieldCondition(key=field_name, match=rest.MatchText(text=keyword))
            for field_name in fields
            for keyword in keywords
        ]
        keyword_filter = rest.Filter(should=conditions)
        base = self._to_filter(filter)
        if base is None:
            return keyword_filter
        return rest.Filter(must=[base, keyword_filter])

    async def search_by_keywords(
        self,
        keywords: Sequence[str],
        limit: int = 10,
        filter: Any = None,
    ) -> List[SearchResult]:
        """
        Pull a bounded candidate set matching any keyword, then rank it locally.
        """
        keywords = [keyword.lower() for keyword in keywords if keyword]
        if not keywords:
            return []

        candidate_limit = limit * self.settings.keyword_candidate_multiplier
        with self._operation("search_by_keywords"):
            candidates = await self._scroll(self._keyword_filter(keywords, filter), candidate_limit)

        results: List[SearchResult] = []
        for document in candidates:
            triggers = document.payload.get(self.triggers_field) if self.triggers_field else None
            score = keyword_relevance(
                document.payload.get(SEARCH_TEXT_FIELD, ""),
                triggers if isinstance(triggers, list) else [],
                keywords,
                self.exact_match_bonus,
            )
            if score > 0:
                results.append(SearchResult(id=document.id, score=score, payload=document.payload))

        results.sort(key=lambda result: result.score, reverse=True)
        return results[:limit]

    # Diagnostics

    async def collection_stats(self) -> CollectionStats:
        with self._operation("collection_stats"):
            if not await self.client.collection_exists(self.collection):
                return CollectionStats(points_count=0, vector_size=0, status="not_found", exists=False)
            info = await self.client.get_collection(self.collection)
        status = getattr(info.status, "value", info.status) or "unknown"
        return CollectionStats(
            points_count=info.points_count or 0,
            vector_size=self._vector_size(info) or 0,
            status=str(status),
            exists=True,
        )

    async def health_check(self) -> bool:
        try:
            await self.client.get_collections()
            return True
        except Exception as exc:
            logger.debug(f"Qdrant health check failed: {exc}")
            return False

    async def close(self) -> None:
        """Close the client connection."""
        await self.client.close()
