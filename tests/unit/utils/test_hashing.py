"""Unit tests for point id helpers."""

import hashlib
import re
import uuid

from hybrid_vectors.utils import compute_uuid5, sha256_hex, sha256_uuid

UUID_SHAPE = re.compile(r"^[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}$")


def test_sha256_uuid_is_deterministic_and_uuid_shaped():
    first = sha256_uuid("resource-default:apps/v1:Deployment:web")
    assert first == sha256_uuid("resource-default:apps/v1:Deployment:web")
    assert UUID_SHAPE.match(first)


def test_sha256_uuid_uses_leading_digest_bits():
    digest = hashlib.sha256(b"capability-deployments.apps").hexdigest()
    assert sha256_uuid("capability-deployments.apps").replace("-", "") == digest[:32]


def test_sha256_uuid_differs_per_namespace():
    assert sha256_uuid("resource-x") != sha256_uuid("capability-x")


def test_compute_uuid5_matches_url_namespace():
    expected = str(uuid.uuid5(uuid.NAMESPACE_URL, "https://example.com/doc.md#0"))
    assert compute_uuid5("https://example.com/doc.md#0") == expected
    assert compute_uuid5("a", prefix="chunk-").startswith("chunk-")


def test_sha256_hex():
    assert sha256_hex("hello") == hashlib.sha256(b"hello").hexdigest()
