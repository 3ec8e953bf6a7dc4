"""
Knowledge-base chunks of ingested documents.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List

from hybrid_vectors.config.schema import HybridVectorsSettings
from hybrid_vectors.embeddings import BaseEmbeddingProvider
from hybrid_vectors.services.base import HybridVectorService, PayloadMapper
from hybrid_vectors.utils import compute_uuid5, sha256_hex
from hybrid_vectors.vectorstores import VectorStore

logger = logging.getLogger(__name__)

KNOWLEDGE_COLLECTION = "knowledge-base"

# Upper bound on chunks fetched per document.
_MAX_CHUNKS_PER_URI = 10000


def chunk_id(uri: str, chunk_index: int) -> str:
    """Deterministic UUID5 (URL namespace) of ``uri#chunk_index``."""
    return compute_uuid5(f"{uri}#{chunk_index}")


def content_checksum(content: str) -> str:
    return sha256_hex(content)


@dataclass
class KnowledgeChunk:
    """One chunk of a source document."""

    content: str
    uri: str
    chunk_index: int = 0
    total_chunks: int = 1
    metadata: Dict[str, Any] = field(default_factory=dict)
    checksum: str = ""
    ingested_at: str = ""
    extracted_policy_ids: List[str] = field(default_factory=list)
    id: str = ""


class KnowledgeMapper(PayloadMapper[KnowledgeChunk]):
    def create_search_text(self, chunk: KnowledgeChunk) -> str:
        return chunk.content

    def extract_id(self, chunk: KnowledgeChunk) -> str:
        return chunk.id or chunk_id(chunk.uri, chunk.chunk_index)

    def create_payload(self, chunk: KnowledgeChunk) -> Dict[str, Any]:
        return {
            "content": chunk.content,
            "uri": chunk.uri,
            "chunk_index": chunk.chunk_index,
            "total_chunks": chunk.total_chunks,
            "metadata": dict(chunk.metadata),
            "checksum": chunk.checksum or content_checksum(chunk.content),
            "ingested_at": chunk.ingested_at,
            "extracted_policy_ids": list(chunk.extracted_policy_ids),
        }

    def payload_to_data(self, payload: Dict[str, Any]) -> KnowledgeChunk:
        return KnowledgeChunk(
            content=payload.get("content", ""),
            uri=payload.get("uri", ""),
            chunk_index=payload.get("chunk_index", 0),
            total_chunks=payload.get("total_chunks", 1),
            metadata=dict(payload.get("metadata") or {}),
            checksum=payload.get("checksum", ""),
            ingested_at=payload.get("ingested_at", ""),
            extracted_policy_ids=list(payload.get("extracted_policy_ids") or []),
        )


class KnowledgeVectorService(HybridVectorService[KnowledgeChunk]):
    def __init__(
        self,
        store: VectorStore | None = None,
        provider: BaseEmbeddingProvider | None = None,
        settings: HybridVectorsSettings | None = None,
        collection: str = KNOWLEDGE_COLLECTION,
    ) -> None:
        super().__init__(collection, KnowledgeMapper(), store=store, provider=provider, settings=settings)

    @staticmethod
    def _uri_filter(uri: str) -> Dict[str, Any]:
        return {"must": [{"key": "uri", "match": {"value": uri}}]}

    async def get_chunks_by_uri(self, uri: str) -> List[KnowledgeChunk]:
        """All chunks of one document, ordered by chunk index."""
        chunks = await self.query_with_filter(self._uri_filter(uri), _MAX_CHUNKS_PER_URI)
        return sorted(chunks, key=lambda chunk: chunk.chunk_index)

    async def delete_by_uri(self, uri: str) -> int:
        """Delete every chunk of *uri* and return how many were removed."""
        chunks = await self.query_with_filter(self._uri_filter(uri), _MAX_CHUNKS_PER_URI)
        for chunk in chunks:
            await self.delete(chunk.id)
        logger.info(f"Deleted {len(chunks)} chunks of {uri}")
        return len(chunks)
