"""Deterministic content fingerprint used as the search-index id.

This is not a semantic embedding: the id only changes when the content
prefix or the selected metadata fields change.
"""

import base64
import hashlib
import json

from app.metadata.models import DocumentMetadata

CONTENT_PREFIX_CHARS = 2000
FINGERPRINT_LENGTH = 32
LOCAL_PREFIX = "local-"


class EmbeddingGenerator:
    def embed(self, content: str, metadata: DocumentMetadata) -> str:
        payload = json.dumps(
            {
                "content": content[:CONTENT_PREFIX_CHARS],
                "tags": metadata.tags,
                "category": metadata.category,
                "wordCount": metadata.word_count,
                "readabilityScore": metadata.readability_score,
                "documentType": metadata.document_type,
            },
            sort_keys=True,
            ensure_ascii=False,
        )
        digest = hashlib.sha256(payload.encode("utf-8")).digest()
        encoded = base64.b64encode(digest).decode("ascii")
        return f"{LOCAL_PREFIX}{encoded[:FINGERPRINT_LENGTH]}"
