from __future__ import annotations

import logging
from typing import Sequence

from memvec.domain.models import SearchRequest, SearchResult, StoredEntry
from memvec.similarity import cosine_similarity

logger = logging.getLogger(__name__)


def rank_entries(
    entries: Sequence[StoredEntry],
    query_vector: Sequence[float],
    request: SearchRequest,
) -> list[SearchResult]:
    """
    Score every entry against query_vector, keep those at or above the
    threshold, and return the best request.top_k by descending score.

    Scoring errors (zero norm, dimension mismatch) are not caught: one bad
    entry fails the whole search. list.sort is stable, so ties keep the
    snapshot's insertion order.
    """
    scored: list[SearchResult] = []
    for entry in entries:
        score = cosine_similarity(entry.embedding, query_vector)
        if score < request.similarity_threshold:
            continue
        scored.append(SearchResult(document=entry.to_document(), score=score))

    scored.sort(key=lambda r: r.score, reverse=True)
    logger.debug(
        "scored %d entries, %d passed threshold %.3f, returning %d",
        len(entries),
        len(scored),
        request.similarity_threshold,
        min(len(scored), request.top_k),
    )
    return scored[: request.top_k]
