"""
Cluster resource inventory with semantic lookup.

Resources are addressed by the human-readable key
``namespace:apiVersion:kind:name``; the service hashes it into a point id.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from hybrid_vectors.config.schema import HybridVectorsSettings
from hybrid_vectors.embeddings import BaseEmbeddingProvider
from hybrid_vectors.exceptions import StoreOperationFailed
from hybrid_vectors.services.base import HybridVectorService, PayloadMapper
from hybrid_vectors.utils import sha256_uuid
from hybrid_vectors.vectorstores import VectorStore

logger = logging.getLogger(__name__)

RESOURCES_COLLECTION = "resources"

_SKIPPED_LABEL_PREFIXES = (
    "app.kubernetes.io/",
    "helm.sh/",
    "kubernetes.io/",
    "k8s.io/",
)


@dataclass
class ClusterResource:
    """Metadata of one live Kubernetes object. Cluster-scoped objects use namespace ``_cluster``."""

    namespace: str
    name: str
    kind: str
    api_version: str
    api_group: str = ""
    labels: Dict[str, str] = field(default_factory=dict)
    annotations: Dict[str, str] = field(default_factory=dict)
    created_at: str = ""
    updated_at: str = ""

    @property
    def resource_id(self) -> str:
        return resource_key(self.namespace, self.api_version, self.kind, self.name)


@dataclass
class DiffSyncResult:
    inserted: int = 0
    updated: int = 0
    deleted: int = 0


def resource_key(namespace: str, api_version: str, kind: str, name: str) -> str:
    return f"{namespace}:{api_version}:{kind}:{name}"


def resource_uuid(resource_id: str) -> str:
    """Point id for a human-readable resource key."""
    return sha256_uuid(f"resource-{resource_id}")


def extract_api_group(api_version: str) -> str:
    """``apps/v1`` -> ``apps``; the core group ``v1`` -> ``""``."""
    parts = api_version.split("/")
    return parts[0] if len(parts) > 1 else ""


def build_embedding_text(resource: ClusterResource) -> str:
    parts = [
        f"{resource.kind} {resource.name}",
        f"namespace: {resource.namespace}",
        f"apiVersion: {resource.api_version}",
    ]

    api_group = resource.api_group or extract_api_group(resource.api_version)
    if api_group:
        parts.append(f"group: {api_group}")

    if resource.labels:
        meaningful = [
            f"{key}={value}"
            for key, value in resource.labels.items()
            if not key.startswith(_SKIPPED_LABEL_PREFIXES)
        ]
        if meaningful:
            parts.append(f"labels: {', '.join(meaningful)}")

        app_name = (
            resource.labels.get("app.kubernetes.io/name")
            or resource.labels.get("app")
            or resource.labels.get("name")
        )
        if app_name:
            parts.append(f"app: {app_name}")

    description = (resource.annotations or {}).get("description")
    if description:
        parts.append(f"description: {description}")

    return " | ".join(parts)


def has_resource_changed(existing: ClusterResource, incoming: ClusterResource) -> bool:
    """Compare update timestamps, labels and annotations; key order is ignored."""
    if existing.updated_at != incoming.updated_at:
        return True
    if sorted((existing.labels or {}).items()) != sorted((incoming.labels or {}).items()):
        return True
    return sorted((existing.annotations or {}).items()) != sorted((incoming.annotations or {}).items())


class ResourceMapper(PayloadMapper[ClusterResource]):
    def create_search_text(self, resource: ClusterResource) -> str:
        return build_embedding_text(resource)

    def extract_id(self, resource: ClusterResource) -> str:
        return resource_uuid(resource.resource_id)

    def create_payload(self, resource: ClusterResource) -> Dict[str, Any]:
        return {
            "resource_id": resource.resource_id,
            "namespace": resource.namespace,
            "name": resource.name,
            "kind": resource.kind,
            "api_version": resource.api_version,
            "api_group": resource.api_group or extract_api_group(resource.api_version),
            "labels": dict(resource.labels or {}),
            "annotations": dict(resource.annotations or {}),
            "created_at": resource.created_at,
            "updated_at": resource.updated_at,
        }

    def payload_to_data(self, payload: Dict[str, Any]) -> ClusterResource:
        return ClusterResource(
            namespace=payload.get("namespace", ""),
            name=payload.get("name", ""),
            kind=payload.get("kind", ""),
            api_version=payload.get("api_version", ""),
            api_group=payload.get("api_group", ""),
            labels=dict(payload.get("labels") or {}),
            annotations=dict(payload.get("annotations") or {}),
            created_at=payload.get("created_at", ""),
            updated_at=payload.get("updated_at", ""),
        )

    def with_id(self, resource: ClusterResource, doc_id: str) -> ClusterResource:
        # The identity is derived from the resource fields.
        return resource


class ResourceVectorService(HybridVectorService[ClusterResource]):
    """
    Resource inventory. ``get_resource``/``delete_resource`` take the
    human-readable key, not the point id.
    """

    def __init__(
        self,
        store: VectorStore | None = None,
        provider: BaseEmbeddingProvider | None = None,
        settings: HybridVectorsSettings | None = None,
        collection: str = RESOURCES_COLLECTION,
    ) -> None:
        super().__init__(collection, ResourceMapper(), store=store, provider=provider, settings=settings)

    async def get_resource(self, resource_id: str) -> Optional[ClusterResource]:
        return await self.get(resource_uuid(resource_id))

    async def delete_resource(self, resource_id: str) -> None:
        """Delete by key; a resource that is already gone is not an error."""
        try:
            await self.delete(resource_uuid(resource_id))
        except StoreOperationFailed as exc:
            if "not found" not in str(exc).lower():
                raise
            logger.debug(f"Resource {resource_id} already absent")

    async def diff_and_sync(self, incoming: List[ClusterResource]) -> DiffSyncResult:
        """
        Reconcile the collection with a full snapshot of the cluster.

        New resources are inserted, changed ones re-embedded and resources
        missing from *incoming* deleted. Unchanged resources are not touched.
        """
        existing = {resource.resource_id: resource for resource in await self.list()}
        incoming_by_id = {resource.resource_id: resource for resource in incoming}

        to_insert: List[ClusterResource] = []
        to_update: List[ClusterResource] = []
        for resource_id, resource in incoming_by_id.items():
            current = existing.get(resource_id)
            if current is None:
                to_insert.append(resource)
            elif has_resource_changed(current, resource):
                to_update.append(resource)
        to_delete = [resource_id for resource_id in existing if resource_id not in incoming_by_id]

        for resource in to_insert + to_update:
            await self.store(resource)
        for resource_id in to_delete:
            await self.delete_resource(resource_id)

        result = DiffSyncResult(inserted=len(to_insert), updated=len(to_update), deleted=len(to_delete))
        logger.info(
            f"Resource sync: {result.inserted} inserted, {result.updated} updated, {result.deleted} deleted"
        )
        return result
