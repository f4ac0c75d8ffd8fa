from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

# Requires: pip install openai, and set OPENAI_API_KEY in env
from openai import OpenAI

from memvec.domain.models import Document

Vector = list[float]

KNOWN_DIMENSIONS: dict[str, int] = {
    "text-embedding-3-small": 1536,
    "text-embedding-3-large": 3072,
    "text-embedding-ada-002": 1536,
}


@dataclass(frozen=True, slots=True)
class OpenAIEmbedder:
    """
    OpenAI embeddings adapter.

    Notes:
      - uses the official OpenAI Python client
      - `dim` is sent as `dimensions` (text-embedding-3 models can shorten vectors);
        when unset, the model's native size is looked up in KNOWN_DIMENSIONS
    """
    api_key: str
    model: str = "text-embedding-3-small"
    dim: Optional[int] = None

    @property
    def model_name(self) -> str:
        return self.model

    def dimensions(self) -> int:
        if self.dim is not None:
            return self.dim
        try:
            return KNOWN_DIMENSIONS[self.model]
        except KeyError:
            raise ValueError(f"Unknown embedding dimensions for model {self.model!r}; set dim explicitly") from None

    def embed(self, text: str) -> Vector:
        client = OpenAI(api_key=self.api_key)
        if self.dim is not None:
            resp = client.embeddings.create(model=self.model, input=[text], dimensions=self.dim)
        else:
            resp = client.embeddings.create(model=self.model, input=[text])
        return list(resp.data[0].embedding)

    def embed_document(self, doc: Document) -> Vector:
        return self.embed(doc.content)
