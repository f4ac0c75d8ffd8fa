from __future__ import annotations

import os
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping, Optional

from memvec.domain.models import DEFAULT_TOP_K, SIMILARITY_THRESHOLD_ACCEPT_ALL

DEFAULT_SETTINGS_FILE = Path("settings.toml")


@dataclass(frozen=True)
class Store:
    path: Path = Path("vector-store.json")


@dataclass(frozen=True)
class Embeddings:
    provider: str = "dummy"  # "dummy" | "openai"
    model: str = "dummy-embedder-v1"
    dim: Optional[int] = None  # dummy falls back to 128; openai to the model default


@dataclass(frozen=True)
class Search:
    top_k: int = DEFAULT_TOP_K
    similarity_threshold: float = SIMILARITY_THRESHOLD_ACCEPT_ALL


@dataclass(frozen=True)
class Logging:
    level: str = "WARNING"


@dataclass(frozen=True)
class Settings:
    store: Store = field(default_factory=Store)
    embeddings: Embeddings = field(default_factory=Embeddings)
    search: Search = field(default_factory=Search)
    logging: Logging = field(default_factory=Logging)


def _expand(p: str) -> Path:
    return Path(os.path.expandvars(os.path.expanduser(p))).resolve()


def _section(raw: Mapping[str, Any], name: str) -> Mapping[str, Any]:
    value = raw.get(name, {})
    if not isinstance(value, Mapping):
        raise ValueError(f"Config section [{name}] must be a table")
    return value


def parse_settings(raw: Mapping[str, Any]) -> Settings:
    store, emb, search, log = (_section(raw, n) for n in ("store", "embeddings", "search", "logging"))
    defaults = Settings()

    dim = emb.get("dim", defaults.embeddings.dim)
    return Settings(
        store=Store(
            path=_expand(store["path"]) if "path" in store else defaults.store.path,
        ),
        embeddings=Embeddings(
            provider=str(emb.get("provider", defaults.embeddings.provider)),
            model=str(emb.get("model", defaults.embeddings.model)),
            dim=int(dim) if dim is not None else None,
        ),
        search=Search(
            top_k=int(search.get("top_k", defaults.search.top_k)),
            similarity_threshold=float(search.get("similarity_threshold", defaults.search.similarity_threshold)),
        ),
        logging=Logging(
            level=str(log.get("level", defaults.logging.level)).upper(),
        ),
    )


def load_settings(path: str | Path | None = None) -> Settings:
    """
    Read settings from a TOML file.

    An explicit path must exist. Without one, settings.toml in the working
    directory is used if present, otherwise built-in defaults.
    """
    if path is None:
        if not DEFAULT_SETTINGS_FILE.exists():
            return Settings()
        path = DEFAULT_SETTINGS_FILE

    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Missing config file: {path}")

    with path.open("rb") as f:
        raw = tomllib.load(f)

    return parse_settings(raw)
