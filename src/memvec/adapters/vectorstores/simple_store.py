from __future__ import annotations

import logging
from typing import Iterable, Optional, Sequence, TextIO

from memvec.adapters.vectorstores import json_codec
from memvec.adapters.vectorstores.entry_store import EntryStore
from memvec.adapters.vectorstores.search import rank_entries
from memvec.domain.errors import InvalidArgumentError, NullInputError
from memvec.domain.models import Document, SearchRequest, SearchResult, StoredEntry
from memvec.ports import Embedder, StorePath

logger = logging.getLogger(__name__)


class SimpleVectorStore:
    """
    In-memory cosine-similarity vector store with JSON persistence.

    Safe to share between threads: add/delete/search/save all go through a
    single EntryStore lock, and embeddings are computed outside of it.
    Search is a linear scan over a snapshot of every entry.
    """

    def __init__(self, embedder: Embedder) -> None:
        self.embedder = embedder
        self._store = EntryStore()

    def add(self, documents: Optional[Sequence[Document]]) -> None:
        """
        Embed and insert documents; an existing doc_id is replaced wholesale.

        The whole batch is embedded before anything is written, so if the
        embedder raises, the store is left exactly as it was.
        """
        if documents is None:
            raise NullInputError("Documents list cannot be null")
        if len(documents) == 0:
            raise InvalidArgumentError("Documents list cannot be empty")

        entries = [StoredEntry.from_document(doc, self.embedder.embed_document(doc)) for doc in documents]
        self._store.put_all(entries)
        logger.debug("added %d documents", len(entries))

    def delete(self, ids: Optional[Iterable[str]]) -> bool:
        if ids is None:
            raise NullInputError("Document ids cannot be null")
        ids = list(ids)
        removed = self._store.remove_all(ids)
        logger.debug("delete requested for %d ids, %d removed", len(ids), removed)
        return True

    def similarity_search(self, request: SearchRequest | str) -> list[SearchResult]:
        if isinstance(request, str):
            request = SearchRequest.of(request)
        query_vector = self.embedder.embed(request.query)
        return rank_entries(self._store.snapshot(), query_vector, request)

    def snapshot_entries(self) -> list[StoredEntry]:
        return self._store.snapshot()

    def get(self, doc_id: str) -> Optional[StoredEntry]:
        return self._store.get(doc_id)

    def save(self, destination: StorePath) -> None:
        json_codec.save_entries(self._store.snapshot(), destination)

    def load(self, source: StorePath | TextIO) -> None:
        """
        Replace the entire store with the contents of source.

        On failure the current contents are kept.
        """
        self._store.replace_all(json_codec.load_entries(source))

    def count(self) -> int:
        return len(self._store)

    def __len__(self) -> int:
        return len(self._store)
