"""
Policy intents and the policies deployed from them.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List

from hybrid_vectors.config.schema import HybridVectorsSettings
from hybrid_vectors.embeddings import BaseEmbeddingProvider
from hybrid_vectors.services.base import HybridVectorService, PayloadMapper
from hybrid_vectors.vectorstores import VectorStore

POLICIES_COLLECTION = "policies"


@dataclass
class DeployedPolicyReference:
    name: str
    applied_at: str


@dataclass
class PolicyIntent:
    """Governance rule expressed in natural language."""

    description: str
    triggers: List[str] = field(default_factory=list)
    rationale: str = ""
    created_at: str = ""
    created_by: str = ""
    deployed_policies: List[DeployedPolicyReference] = field(default_factory=list)
    id: str = ""


class PolicyMapper(PayloadMapper[PolicyIntent]):
    def create_search_text(self, policy: PolicyIntent) -> str:
        triggers = " ".join(policy.triggers)
        return f"{policy.description} {triggers} {policy.rationale}".lower()

    def extract_id(self, policy: PolicyIntent) -> str:
        return policy.id

    def create_payload(self, policy: PolicyIntent) -> Dict[str, Any]:
        return {
            "description": policy.description,
            "triggers": [trigger.lower() for trigger in policy.triggers],
            "rationale": policy.rationale,
            "created_at": policy.created_at,
            "created_by": policy.created_by,
            "deployed_policies": [
                {"name": ref.name, "applied_at": ref.applied_at} for ref in policy.deployed_policies
            ],
        }

    def payload_to_data(self, payload: Dict[str, Any]) -> PolicyIntent:
        return PolicyIntent(
            description=payload.get("description", ""),
            triggers=list(payload.get("triggers") or []),
            rationale=payload.get("rationale", ""),
            created_at=payload.get("created_at", ""),
            created_by=payload.get("created_by", ""),
            deployed_policies=[
                DeployedPolicyReference(name=ref["name"], applied_at=ref["applied_at"])
                for ref in payload.get("deployed_policies") or []
            ],
        )


class PolicyVectorService(HybridVectorService[PolicyIntent]):
    def __init__(
        self,
        store: VectorStore | None = None,
        provider: BaseEmbeddingProvider | None = None,
        settings: HybridVectorsSettings | None = None,
        collection: str = POLICIES_COLLECTION,
    ) -> None:
        super().__init__(
            collection,
            PolicyMapper(),
            store=store,
            provider=provider,
            settings=settings,
            triggers_field="triggers",
        )
