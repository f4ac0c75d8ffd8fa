from __future__ import annotations

from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Any, Mapping, Sequence

from memvec.domain.errors import InvalidArgumentError

DEFAULT_TOP_K = 4
SIMILARITY_THRESHOLD_ACCEPT_ALL = 0.0


# -------------------------
# Core content objects
# -------------------------

@dataclass(frozen=True, slots=True)
class Document:
    """
    A unit of text handed to the store, and the view of it returned by search.

    doc_id is the unique key inside a store; re-adding the same doc_id replaces the entry.
    """
    doc_id: str
    content: str
    metadata: Mapping[str, Any] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class StoredEntry:
    """
    A Document plus the embedding computed for it when it was added.

    metadata is a read-only view over a private copy, so entries handed out
    by snapshots cannot be changed behind the store's lock.
    """
    doc_id: str
    content: str
    metadata: Mapping[str, Any]
    embedding: tuple[float, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "metadata", MappingProxyType(dict(self.metadata or {})))

    @classmethod
    def from_document(cls, doc: Document, embedding: Sequence[float]) -> StoredEntry:
        return cls(
            doc_id=doc.doc_id,
            content=doc.content,
            metadata=doc.metadata,
            embedding=tuple(float(x) for x in embedding),
        )

    def to_document(self) -> Document:
        return Document(doc_id=self.doc_id, content=self.content, metadata=dict(self.metadata))


# -------------------------
# Search objects
# -------------------------

@dataclass(frozen=True, slots=True)
class SearchRequest:
    """
    Immutable search parameters. Every construction path validates, including
    the with_* helpers and dataclasses.replace.
    """
    query: str
    similarity_threshold: float = SIMILARITY_THRESHOLD_ACCEPT_ALL
    top_k: int = DEFAULT_TOP_K

    def __post_init__(self) -> None:
        if not 0.0 <= self.similarity_threshold <= 1.0:
            raise InvalidArgumentError("Similarity threshold must be in [0,1] range.")
        if isinstance(self.top_k, bool) or not isinstance(self.top_k, int) or self.top_k <= 0:
            raise InvalidArgumentError("TopK should be positive.")

    @classmethod
    def of(cls, query: str) -> SearchRequest:
        return cls(query=query)

    def with_similarity_threshold(self, threshold: float) -> SearchRequest:
        return replace(self, similarity_threshold=threshold)

    def with_similarity_threshold_all(self) -> SearchRequest:
        return replace(self, similarity_threshold=SIMILARITY_THRESHOLD_ACCEPT_ALL)

    def with_top_k(self, top_k: int) -> SearchRequest:
        return replace(self, top_k=top_k)


@dataclass(frozen=True, slots=True)
class SearchResult:
    """
    A matched document and its cosine similarity to the query (range [-1, 1], not clamped).
    """
    document: Document
    score: float
