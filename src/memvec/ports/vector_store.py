from __future__ import annotations

from os import PathLike
from typing import Iterable, Protocol, Sequence, TextIO, Union

from memvec.domain.models import Document, SearchRequest, SearchResult

StorePath = Union[str, PathLike]


class VectorStore(Protocol):
    """
    Holds Documents with their embeddings and supports cosine-similarity search.
    """

    def add(self, documents: Sequence[Document]) -> None:
        ...

    def delete(self, ids: Iterable[str]) -> bool:
        ...

    def similarity_search(self, request: SearchRequest | str) -> list[SearchResult]:
        ...

    def save(self, destination: StorePath) -> None:
        ...

    def load(self, source: StorePath | TextIO) -> None:
        ...

    def count(self) -> int:
        ...
