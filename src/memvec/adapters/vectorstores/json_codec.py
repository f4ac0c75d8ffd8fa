from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any, Mapping, Sequence, TextIO

from memvec.domain.errors import IOFailure
from memvec.domain.models import StoredEntry
from memvec.ports.vector_store import StorePath
from memvec.utils.json_sanitize import sanitize_metadata

logger = logging.getLogger(__name__)


def _entry_to_dict(entry: StoredEntry) -> dict[str, Any]:
    return {
        "id": entry.doc_id,
        "content": entry.content,
        "metadata": sanitize_metadata(entry.metadata),
        "embedding": list(entry.embedding),
    }


def _entry_from_dict(doc_id: str, d: Any) -> StoredEntry:
    if not isinstance(d, Mapping):
        raise ValueError(f"entry {doc_id!r} is not an object")

    content = d["content"]
    if not isinstance(content, str):
        raise ValueError(f"entry {doc_id!r} has non-string content")

    metadata = d.get("metadata") or {}
    if not isinstance(metadata, Mapping):
        raise ValueError(f"entry {doc_id!r} has non-object metadata")

    embedding = d["embedding"]
    if not isinstance(embedding, list) or not all(
        isinstance(x, (int, float)) and not isinstance(x, bool) for x in embedding
    ):
        raise ValueError(f"entry {doc_id!r} has a malformed embedding")

    return StoredEntry(
        doc_id=doc_id,
        content=content,
        metadata=dict(metadata),
        embedding=tuple(float(x) for x in embedding),
    )


def dumps(entries: Sequence[StoredEntry]) -> str:
    """
    Render entries as a pretty-printed JSON object keyed by doc_id.

    json writes floats with repr(), so embeddings survive a round trip bit for bit.
    """
    payload = {e.doc_id: _entry_to_dict(e) for e in entries}
    return json.dumps(payload, indent=2, ensure_ascii=False)


def loads(text: str) -> list[StoredEntry]:
    raw = json.loads(text)
    if not isinstance(raw, Mapping):
        raise ValueError("vector store file must contain a JSON object")
    return [_entry_from_dict(str(doc_id), d) for doc_id, d in raw.items()]


def save_entries(entries: Sequence[StoredEntry], destination: StorePath) -> None:
    """
    Atomically write entries to destination.

    - write to a uniquely named temp file next to the destination, flush and fsync
    - atomic replace onto the destination, so concurrent saves never share a temp file
    - the parent directory must already exist; it is never created here
    """
    path = Path(destination)
    text = dumps(entries)
    tmp_name: str | None = None

    try:
        with tempfile.NamedTemporaryFile(
            "w",
            encoding="utf-8",
            dir=path.parent,
            prefix=f"{path.name}.",
            suffix=".tmp",
            delete=False,
        ) as f:
            tmp_name = f.name
            f.write(text)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp_name, path)
    except OSError as e:
        if tmp_name is not None:
            try:
                Path(tmp_name).unlink(missing_ok=True)
            except OSError:
                logger.warning("could not remove temp file %s", tmp_name)
        raise IOFailure(f"Failed to save vector store to {path}: {e}", kind="save", cause=e) from e

    logger.info("saved %d entries to %s", len(entries), path)


def load_entries(source: StorePath | TextIO) -> list[StoredEntry]:
    """
    Read entries from a path or a readable text stream.

    Unreadable sources and malformed content both surface as IOFailure whose
    message carries the original error text.
    """
    label = getattr(source, "name", "<stream>") if hasattr(source, "read") else source
    try:
        if hasattr(source, "read"):
            text = source.read()
        else:
            text = Path(source).read_text(encoding="utf-8")
        entries = loads(text)
    except (OSError, ValueError, KeyError, TypeError) as e:
        # JSONDecodeError and UnicodeDecodeError are ValueErrors.
        raise IOFailure(f"Failed to load vector store from {label}: {e}", kind="load", cause=e) from e

    logger.info("loaded %d entries from %s", len(entries), label)
    return entries
