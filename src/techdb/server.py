"""
Local HTTP server for rank and search queries.

Keeps the corpus, link graph and ranks warm in memory so repeated queries
don't pay the load and ranking cost.

Usage:
    techdb serve                    # Start on localhost:8233
    techdb serve --port 9000        # Custom port
"""

import logging
import time
from typing import Any, Optional

from fastapi import FastAPI, HTTPException, Query
from pydantic import BaseModel

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Request / response models
# ---------------------------------------------------------------------------


class SearchRequest(BaseModel):
    query: str


class SearchResponse(BaseModel):
    query: str
    id: Optional[str] = None
    found: bool = False


# ---------------------------------------------------------------------------
# Globals populated at startup
# ---------------------------------------------------------------------------

_store = None
_corpus_path: Optional[str] = None


def _get_store():
    global _store
    if _store is None:
        from .store import get_store
        _store = get_store(_corpus_path)
    return _store


def _get_entry_or_404(entry_id: str):
    entry = _get_store().get_entry(entry_id)
    if entry is None:
        raise HTTPException(status_code=404, detail=f"No entry '{entry_id}'")
    return entry


# ---------------------------------------------------------------------------
# FastAPI app
# ---------------------------------------------------------------------------

app = FastAPI(
    title="TechDB Rank Server",
    description="Persistent local server for knowledge base ranks and entity search.",
)


@app.get("/")
def health():
    """Health check and status info."""
    result: dict[str, Any] = {
        "status": "ok",
        "corpus_path": _corpus_path,
        "ranks_loaded": False,
    }
    if _store is not None:
        result["entry_count"] = len(_store)
        result["ranks_loaded"] = _store.rank_cache.is_built
    return result


@app.post("/search")
def search_entity(req: SearchRequest) -> SearchResponse:
    """Resolve a name or alias to an entry id."""
    entry_id = _get_store().search_for_entity(req.query)
    logger.info(f"Search: '{req.query}' -> {entry_id or 'not found'}")
    return SearchResponse(query=req.query, id=entry_id, found=entry_id is not None)


@app.get("/entries/{entry_id}")
def get_entry(entry_id: str):
    """Raw entry record."""
    return _get_entry_or_404(entry_id).model_dump()


@app.get("/entries/{entry_id}/rank")
def get_entry_rank(entry_id: str):
    """Rank record, percentile, predictions and inbound links of an entry."""
    store = _get_store()
    entry = _get_entry_or_404(entry_id)
    record = store.get_rank_record(entry)
    return {
        "id": entry.primary_key,
        "title": entry.title,
        "rank": record.rank,
        "language_rank": store.get_language_rank(entry),
        "percentile": store.predict_percentile(entry),
        "record": record.model_dump(),
        "inbound_links": store.inbound_links.referrers(entry.primary_key),
    }


@app.get("/ranking")
def get_ranking(limit: int = Query(25, ge=1), languages: bool = False):
    """Top entries by rank."""
    t0 = time.time()
    rows = _get_store().ranked_entries(languages_only=languages)
    logger.info(f"Ranking ({'languages' if languages else 'all'}) computed in {time.time() - t0:.3f}s")
    return [row.model_dump() for row in rows[:limit]]


@app.get("/rank/{position}")
def get_entry_at_rank(position: int):
    """Entry at a rank position (wraps around at both ends)."""
    entry = _get_store().get_entry_at_rank(position)
    if entry is None:
        raise HTTPException(status_code=404, detail="Corpus is empty")
    return entry.model_dump()


# ---------------------------------------------------------------------------
# Warmup and run
# ---------------------------------------------------------------------------


def warmup(corpus_path: Optional[str] = None):
    """Eagerly load the corpus and compute links, ranks and the search index."""
    global _corpus_path
    if corpus_path:
        _corpus_path = corpus_path

    logger.info("Warming up techdb server...")
    t0 = time.time()

    t1 = time.time()
    store = _get_store()
    logger.info(f"  Corpus loaded ({len(store)} entries) ({time.time() - t1:.1f}s)")

    t1 = time.time()
    broken = len(store.inbound_links.broken_links)
    logger.info(f"  Link graph built ({broken} broken links) ({time.time() - t1:.1f}s)")

    t1 = time.time()
    store.rank_cache.ranks()
    logger.info(f"  Ranks computed ({time.time() - t1:.1f}s)")

    t1 = time.time()
    index = store.search_index
    logger.info(f"  Search index built ({len(index)} names) ({time.time() - t1:.1f}s)")

    logger.info(f"Warmup complete in {time.time() - t0:.1f}s")


def run_server(
    host: str = "127.0.0.1",
    port: int = 8233,
    do_warmup: bool = True,
    corpus_path: Optional[str] = None,
    verbose: bool = False,
):
    """Run the server with uvicorn."""
    import uvicorn

    global _corpus_path
    if corpus_path:
        _corpus_path = corpus_path

    log_level = "debug" if verbose else "info"

    if do_warmup:
        warmup(corpus_path=corpus_path)

    logger.info(f"Starting techdb server on {host}:{port}")
    uvicorn.run(app, host=host, port=port, log_level=log_level)
