from .embedder import Embedder
from .vector_store import StorePath, VectorStore

__all__ = [
    "Embedder",
    "StorePath",
    "VectorStore",
]
