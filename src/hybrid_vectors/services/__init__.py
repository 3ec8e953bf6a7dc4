"""
Hybrid vector services, generic and per entity family.
"""

from hybrid_vectors.services.base import (
    HybridSearchResult,
    HybridVectorService,
    MatchType,
    PayloadMapper,
    SearchMode,
)
from hybrid_vectors.services.capabilities import (
    CapabilityVectorService,
    PrinterColumn,
    ResourceCapability,
    capability_id,
)
from hybrid_vectors.services.knowledge import (
    KnowledgeChunk,
    KnowledgeVectorService,
    chunk_id,
    content_checksum,
)
from hybrid_vectors.services.patterns import OrganizationalPattern, PatternVectorService
from hybrid_vectors.services.policies import DeployedPolicyReference, PolicyIntent, PolicyVectorService
from hybrid_vectors.services.resources import (
    ClusterResource,
    DiffSyncResult,
    ResourceVectorService,
    build_embedding_text,
    extract_api_group,
    has_resource_changed,
    resource_key,
    resource_uuid,
)

__all__ = [
    "CapabilityVectorService",
    "ClusterResource",
    "DeployedPolicyReference",
    "DiffSyncResult",
    "HybridSearchResult",
    "HybridVectorService",
    "KnowledgeChunk",
    "KnowledgeVectorService",
    "MatchType",
    "OrganizationalPattern",
    "PatternVectorService",
    "PayloadMapper",
    "PolicyIntent",
    "PolicyVectorService",
    "PrinterColumn",
    "ResourceCapability",
    "ResourceVectorService",
    "SearchMode",
    "build_embedding_text",
    "capability_id",
    "chunk_id",
    "content_checksum",
    "extract_api_group",
    "has_resource_changed",
    "resource_key",
    "resource_uuid",
]
