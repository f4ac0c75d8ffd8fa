from __future__ import annotations

from typing import Protocol

from memvec.domain.models import Document

Vector = list[float]


class Embedder(Protocol):
    """
    Turns text (or a Document) into a fixed-length dense vector.

    The store uses the output as-is: no caching, no validation.
    """

    @property
    def model_name(self) -> str: ...

    def dimensions(self) -> int:
        ...

    def embed(self, text: str) -> Vector:
        ...

    def embed_document(self, doc: Document) -> Vector:
        ...
