from __future__ import annotations

from dataclasses import dataclass, field

import pytest

from memvec.adapters.vectorstores.simple_store import SimpleVectorStore
from memvec.domain.models import Document

Vector = list[float]


@dataclass
class StubEmbedder:
    """
    Returns `default` for any text unless `vectors` has an entry for it.
    Records every call so tests can assert on embedder traffic.
    """
    default: Vector = field(default_factory=lambda: [0.1, 0.2, 0.3])
    vectors: dict[str, Vector] = field(default_factory=dict)
    fail_on: set[str] = field(default_factory=set)
    calls: list[str] = field(default_factory=list)

    @property
    def model_name(self) -> str:
        return "stub"

    def dimensions(self) -> int:
        return len(self.default)

    def embed(self, text: str) -> Vector:
        self.calls.append(text)
        if text in self.fail_on:
            raise RuntimeError(f"embedding failed for {text!r}")
        return list(self.vectors.get(text, self.default))

    def embed_document(self, doc: Document) -> Vector:
        return self.embed(doc.content)


@pytest.fixture
def embedder() -> StubEmbedder:
    return StubEmbedder()


@pytest.fixture
def store(embedder: StubEmbedder) -> SimpleVectorStore:
    return SimpleVectorStore(embedder)
