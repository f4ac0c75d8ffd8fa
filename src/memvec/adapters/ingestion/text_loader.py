from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from hashlib import sha256
from pathlib import Path
from typing import Optional, Sequence

from memvec.domain.models import Document

logger = logging.getLogger(__name__)


def _looks_binary(data: bytes) -> bool:
    """
    Heuristic: NUL bytes, or more than 2% control bytes in the first 4KB.
    """
    if not data:
        return False
    if b"\x00" in data:
        return True
    sample = data[:4096]
    control = sum(1 for b in sample if b < 9 or (13 < b < 32))
    return (control / len(sample)) > 0.02


def _stable_doc_id(uri: str) -> str:
    # Keyed on location only, so re-indexing a changed file replaces its entry.
    return sha256(uri.encode("utf-8")).hexdigest()[:32]


def iter_files(inputs: Sequence[str], *, recursive: bool, extensions: set[str]) -> list[Path]:
    files: set[Path] = set()
    for inp in inputs:
        p = Path(inp).expanduser()
        if p.is_dir():
            it = p.rglob("*") if recursive else p.glob("*")
            files.update(x for x in it if x.is_file())
        elif p.is_file():
            files.add(p)
        else:
            logger.warning("skipping missing input %s", p)

    hits = [f.resolve() for f in files if not extensions or f.suffix.lower() in extensions]
    # Stable, deterministic ordering
    return sorted(set(hits), key=str)


@dataclass(frozen=True, slots=True)
class TextLoader:
    """
    Loads text files from disk as Documents.

    - utf-8 first, latin-1 (with replacement) as a fallback
    - skips empty, binary-looking, and oversized files (returns None)
    """
    max_bytes: int = 2_000_000
    prefer_encoding: str = "utf-8"
    fallback_encoding: str = "latin-1"
    extensions: set[str] = field(default_factory=lambda: {".md", ".txt"})

    def load(self, path: Path) -> Optional[Document]:
        try:
            stat = path.stat()
            if stat.st_size > self.max_bytes:
                logger.info("skipping %s: %d bytes exceeds limit", path, stat.st_size)
                return None
            data = path.read_bytes()
        except OSError as e:
            logger.warning("skipping %s: %s", path, e)
            return None

        if _looks_binary(data):
            logger.info("skipping %s: looks binary", path)
            return None

        try:
            text = data.decode(self.prefer_encoding, errors="strict")
        except UnicodeDecodeError:
            text = data.decode(self.fallback_encoding, errors="replace")

        if not text.strip():
            return None

        uri = str(path)
        return Document(
            doc_id=_stable_doc_id(uri),
            content=text,
            metadata={
                "uri": uri,
                "title": path.name,
                "ext": path.suffix.lower(),
                "size_bytes": stat.st_size,
                "mtime": datetime.fromtimestamp(stat.st_mtime).isoformat(),
                "content_hash": sha256(text.encode("utf-8")).hexdigest(),
            },
        )

    def load_all(self, inputs: Sequence[str], *, recursive: bool = True) -> list[Document]:
        docs: list[Document] = []
        for path in iter_files(inputs, recursive=recursive, extensions=self.extensions):
            doc = self.load(path)
            if doc is not None:
                docs.append(doc)
        return docs
