"""
Organizational deployment patterns.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List

from hybrid_vectors.config.schema import HybridVectorsSettings
from hybrid_vectors.embeddings import BaseEmbeddingProvider
from hybrid_vectors.services.base import HybridVectorService, PayloadMapper
from hybrid_vectors.vectorstores import VectorStore

PATTERNS_COLLECTION = "patterns"


@dataclass
class OrganizationalPattern:
    """Recommended resource set for a family of user intents."""

    name: str
    description: str
    triggers: List[str] = field(default_factory=list)
    suggested_resources: List[str] = field(default_factory=list)
    rationale: str = ""
    created_at: str = ""
    created_by: str = ""
    id: str = ""


class PatternMapper(PayloadMapper[OrganizationalPattern]):
    def create_search_text(self, pattern: OrganizationalPattern) -> str:
        return " ".join([pattern.description, *pattern.triggers, pattern.rationale]).strip()

    def extract_id(self, pattern: OrganizationalPattern) -> str:
        return pattern.id

    def create_payload(self, pattern: OrganizationalPattern) -> Dict[str, Any]:
        return {
            "name": pattern.name,
            "description": pattern.description,
            # Lower-cased for trigger matching.
            "triggers": [trigger.lower() for trigger in pattern.triggers],
            "suggested_resources": list(pattern.suggested_resources),
            "rationale": pattern.rationale,
            "created_at": pattern.created_at,
            "created_by": pattern.created_by,
        }

    def payload_to_data(self, payload: Dict[str, Any]) -> OrganizationalPattern:
        return OrganizationalPattern(
            name=payload.get("name", ""),
            description=payload.get("description", ""),
            triggers=list(payload.get("triggers") or []),
            suggested_resources=list(payload.get("suggested_resources") or []),
            rationale=payload.get("rationale", ""),
            created_at=payload.get("created_at", ""),
            created_by=payload.get("created_by", ""),
        )


class PatternVectorService(HybridVectorService[OrganizationalPattern]):
    """Patterns are matched by description and by their trigger terms."""

    def __init__(
        self,
        store: VectorStore | None = None,
        provider: BaseEmbeddingProvider | None = None,
        settings: HybridVectorsSettings | None = None,
        collection: str = PATTERNS_COLLECTION,
    ) -> None:
        super().__init__(
            collection,
            PatternMapper(),
            store=store,
            provider=provider,
            settings=settings,
            triggers_field="triggers",
        )
