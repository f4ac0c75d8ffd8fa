from __future__ import annotations

from dataclasses import dataclass
from os import getenv
from typing import Optional

from dotenv import load_dotenv

from memvec.adapters.embedding.dummy_embedder import DummyEmbedder
from memvec.adapters.vectorstores.simple_store import SimpleVectorStore
from memvec.ports import Embedder
from memvec.settings import Settings, load_settings


@dataclass(frozen=True, slots=True)
class Container:
    """
    Lightweight dependency container: resolved settings plus the adapters built from them.
    """
    settings: Settings
    embedder: Embedder
    store: SimpleVectorStore


def build_embedder(settings: Settings) -> Embedder:
    emb = settings.embeddings
    if emb.provider == "dummy":
        return DummyEmbedder(dim=emb.dim or 128, model=emb.model)
    if emb.provider == "openai":
        # Imported lazily so the dummy path works without an API key configured
        from memvec.adapters.embedding.openai_embedder import OpenAIEmbedder

        return OpenAIEmbedder(api_key=getenv("OPENAI_API_KEY", ""), model=emb.model, dim=emb.dim)
    raise ValueError(f"Unknown embeddings provider: {emb.provider!r}")


def build_container(settings: Optional[Settings] = None) -> Container:
    load_dotenv()
    if settings is None:
        settings = load_settings(getenv("MEMVEC_SETTINGS") or None)
    embedder = build_embedder(settings)
    return Container(settings=settings, embedder=embedder, store=SimpleVectorStore(embedder))
