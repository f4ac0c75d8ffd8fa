from __future__ import annotations

from dataclasses import dataclass
from hashlib import sha256

from memvec.domain.models import Document

Vector = list[float]


@dataclass(frozen=True, slots=True)
class DummyEmbedder:
    """
    Deterministic fake embeddings for wiring tests and offline use.
    Not semantically meaningful, but stable across runs: equal text -> equal vector.
    """
    dim: int = 128
    model: str = "dummy-embedder-v1"

    @property
    def model_name(self) -> str:
        return self.model

    def dimensions(self) -> int:
        return self.dim

    def embed(self, text: str) -> Vector:
        digest = sha256(text.encode("utf-8")).digest()
        # Cycle the digest bytes and map each to [-1, 1]; no byte maps to 0.0, so the norm is never zero
        return [(digest[i % len(digest)] / 127.5) - 1.0 for i in range(self.dim)]

    def embed_document(self, doc: Document) -> Vector:
        return self.embed(doc.content)
