"""
Resource capability descriptors, one per Kubernetes resource type.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from hybrid_vectors.config.schema import HybridVectorsSettings
from hybrid_vectors.embeddings import BaseEmbeddingProvider
from hybrid_vectors.services.base import HybridSearchResult, HybridVectorService, PayloadMapper
from hybrid_vectors.utils import sha256_uuid
from hybrid_vectors.vectorstores import VectorStore

CAPABILITIES_COLLECTION = "capabilities"

# Scan limit for the kind/apiVersion lookup.
_LOOKUP_LIMIT = 100


def capability_id(resource_name: str) -> str:
    """Deterministic point id for a resource name such as ``deployments.apps``."""
    return sha256_uuid(f"capability-{resource_name}")


@dataclass
class PrinterColumn:
    name: str
    type: str
    json_path: str
    description: str = ""
    priority: int = 0


@dataclass
class ResourceCapability:
    """What a resource type offers, as inferred from its schema."""

    resource_name: str
    api_version: str = ""
    version: str = ""
    group: str = ""
    capabilities: List[str] = field(default_factory=list)
    providers: List[str] = field(default_factory=list)
    abstractions: List[str] = field(default_factory=list)
    complexity: str = "medium"
    description: str = ""
    use_case: str = ""
    printer_columns: List[PrinterColumn] = field(default_factory=list)
    confidence: float = 0.0
    analyzed_at: str = ""
    id: str = ""


class CapabilityMapper(PayloadMapper[ResourceCapability]):
    def create_search_text(self, capability: ResourceCapability) -> str:
        return " ".join(
            [
                capability.resource_name,
                *capability.capabilities,
                *capability.providers,
                *capability.abstractions,
                capability.description,
                capability.use_case,
                capability.complexity,
            ]
        )

    def extract_id(self, capability: ResourceCapability) -> str:
        return capability_id(capability.resource_name)

    def create_payload(self, capability: ResourceCapability) -> Dict[str, Any]:
        return {
            "resource_name": capability.resource_name,
            "api_version": capability.api_version,
            "version": capability.version,
            "group": capability.group,
            "capabilities": list(capability.capabilities),
            "providers": list(capability.providers),
            "abstractions": list(capability.abstractions),
            "complexity": capability.complexity,
            "description": capability.description,
            "use_case": capability.use_case,
            "printer_columns": [
                {
                    "name": column.name,
                    "type": column.type,
                    "json_path": column.json_path,
                    "description": column.description,
                    "priority": column.priority,
                }
                for column in capability.printer_columns
            ],
            "confidence": capability.confidence,
            "analyzed_at": capability.analyzed_at,
        }

    def payload_to_data(self, payload: Dict[str, Any]) -> ResourceCapability:
        return ResourceCapability(
            resource_name=payload.get("resource_name", ""),
            api_version=payload.get("api_version", ""),
            version=payload.get("version", ""),
            group=payload.get("group", ""),
            capabilities=list(payload.get("capabilities") or []),
            providers=list(payload.get("providers") or []),
            abstractions=list(payload.get("abstractions") or []),
            complexity=payload.get("complexity") or "medium",
            description=payload.get("description", ""),
            use_case=payload.get("use_case", ""),
            printer_columns=[PrinterColumn(**column) for column in payload.get("printer_columns") or []],
            confidence=payload.get("confidence") or 0.0,
            analyzed_at=payload.get("analyzed_at", ""),
        )


def _matches_kind(resource_name: str, kind: str) -> bool:
    """
    Match a plural resource name (optionally group-qualified) against a kind.

    ``Deployment`` matches ``deployments`` and ``deployments.apps``;
    ``Ingress`` matches ``ingresses``; ``Policy`` matches ``policies.kyverno.io``.
    """
    name = resource_name.lower()
    kind = kind.lower()
    if name == kind:
        return True
    for plural in (kind + "s", kind + "es"):
        if name == plural or name.startswith(plural + "."):
            return True
    if kind.endswith("y"):
        plural = kind[:-1] + "ies"
        if name == plural or name.startswith(plural + "."):
            return True
    return False


class CapabilityVectorService(HybridVectorService[ResourceCapability]):
    def __init__(
        self,
        store: VectorStore | None = None,
        provider: BaseEmbeddingProvider | None = None,
        settings: HybridVectorsSettings | None = None,
        collection: str = CAPABILITIES_COLLECTION,
    ) -> None:
        super().__init__(collection, CapabilityMapper(), store=store, provider=provider, settings=settings)

    async def search_capabilities(
        self,
        intent: str,
        limit: Optional[int] = None,
        score_threshold: Optional[float] = None,
        complexity_filter: Optional[str] = None,
        provider_filter: Optional[List[str]] = None,
    ) -> List[HybridSearchResult[ResourceCapability]]:
        """
        Hybrid search narrowed by complexity and/or provider.

        Both filters are applied in the store so ``limit`` counts only
        matching capabilities.
        """
        conditions: List[Dict[str, Any]] = []
        if complexity_filter:
            conditions.append({"key": "complexity", "match": {"value": complexity_filter}})
        if provider_filter:
            conditions.append({"key": "providers", "match": {"any": list(provider_filter)}})
        filter = {"must": conditions} if conditions else None
        return await self.search(intent, limit=limit, score_threshold=score_threshold, filter=filter)

    async def get_by_kind_api_version(self, kind: str, api_version: str) -> Optional[ResourceCapability]:
        """Find the capability of ``kind`` served at ``api_version`` (e.g. ``apps/v1``)."""
        candidates = await self.query_with_filter(
            {"must": [{"key": "api_version", "match": {"value": api_version}}]},
            _LOOKUP_LIMIT,
        )
        for capability in candidates:
            if _matches_kind(capability.resource_name, kind):
                return capability
        return None

    async def delete_by_resource_name(self, resource_name: str) -> None:
        await self.delete(capability_id(resource_name))
