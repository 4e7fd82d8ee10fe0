"""
In-memory entry store for the technical knowledge base.

Loads entries from JSON and exposes the derived metrics, ranks, link graph
and search index over them. Derived structures are built lazily on first
use and kept for the lifetime of the store; the loaded corpus is treated
as immutable.
"""

import json
import logging
import os
import threading
import time
from collections import Counter
from pathlib import Path
from typing import Any, Iterator, Optional

from pydantic import ValidationError

from .links import InboundLinkTable, build_inbound_links
from .metrics import predict_jobs, predict_users
from .models import CorpusStats, RankedEntry, RankRecord, TechEntry
from .ranking import RankCache
from .search import SearchIndex

logger = logging.getLogger(__name__)

# Environment variable overriding the default corpus location
CORPUS_ENV_VAR = "TECHDB_CORPUS"

# Default corpus location
DEFAULT_CORPUS_PATH = Path.home() / ".cache" / "techdb" / "entries.json"

# Module-level singleton stores keyed by resolved path
_store_instances: dict[str, "EntityStore"] = {}
_store_instances_lock = threading.Lock()


class CorpusLoadError(ValueError):
    """Raised when a corpus file can't be read into entries."""


def default_corpus_path() -> Path:
    env_path = os.environ.get(CORPUS_ENV_VAR)
    return Path(env_path) if env_path else DEFAULT_CORPUS_PATH


def _record_to_entry(record: Any, origin: str) -> TechEntry:
    """Convert one raw JSON record into a TechEntry.

    Accepts either ``{"id": ..., "facts": {...}}`` or a flat mapping where
    every key other than ``id`` is a fact path.
    """
    if not isinstance(record, dict):
        raise CorpusLoadError(f"{origin}: expected an object, got {type(record).__name__}")
    if not record.get("id"):
        raise CorpusLoadError(f"{origin}: record has no 'id'")
    if "facts" in record:
        data = {"id": record["id"], "facts": record["facts"]}
    else:
        data = {"id": record["id"], "facts": {k: v for k, v in record.items() if k != "id"}}
    try:
        return TechEntry.model_validate(data)
    except ValidationError as e:
        raise CorpusLoadError(f"{origin}: invalid record '{record['id']}': {e}") from e


def _iter_raw_records(path: Path) -> Iterator[tuple[Any, str]]:
    """Yield (record, origin) pairs from a directory, JSON array or JSON lines file."""
    if path.is_dir():
        for file_path in sorted(path.glob("*.json")):
            try:
                record = json.loads(file_path.read_text(encoding="utf-8"))
            except json.JSONDecodeError as e:
                raise CorpusLoadError(f"{file_path}: {e}") from e
            if isinstance(record, dict):
                # File name is the primary key when the record doesn't carry one
                record.setdefault("id", file_path.stem)
            yield record, str(file_path)
        return

    text = path.read_text(encoding="utf-8")
    if path.suffix == ".jsonl":
        for line_no, line in enumerate(text.splitlines(), 1):
            if not line.strip():
                continue
            try:
                yield json.loads(line), f"{path}:{line_no}"
            except json.JSONDecodeError as e:
                raise CorpusLoadError(f"{path}:{line_no}: {e}") from e
        return

    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise CorpusLoadError(f"{path}: {e}") from e
    if isinstance(data, dict):
        data = data.get("entries", [])
    if not isinstance(data, list):
        raise CorpusLoadError(f"{path}: expected a list of entries")
    for i, record in enumerate(data):
        yield record, f"{path}[{i}]"


def load_entries(path: str | Path) -> list[TechEntry]:
    """Read every entry from a corpus path, preserving file order."""
    path = Path(path)
    if not path.exists():
        raise CorpusLoadError(f"Corpus not found: {path}")

    start = time.time()
    entries: list[TechEntry] = []
    seen: set[str] = set()
    for record, origin in _iter_raw_records(path):
        entry = _record_to_entry(record, origin)
        if entry.id in seen:
            raise CorpusLoadError(f"{origin}: duplicate id '{entry.id}'")
        seen.add(entry.id)
        entries.append(entry)

    logger.info(f"Loaded {len(entries)} entries from {path} in {time.time() - start:.2f}s")
    return entries


def get_store(corpus_path: Optional[str | Path] = None) -> "EntityStore":
    """
    Get a singleton EntityStore for the given corpus path.

    Args:
        corpus_path: Corpus file or directory (default: $TECHDB_CORPUS or
                     ~/.cache/techdb/entries.json)

    Returns:
        Shared EntityStore instance
    """
    path = Path(corpus_path) if corpus_path else default_corpus_path()
    path_key = str(path.resolve())
    with _store_instances_lock:
        if path_key not in _store_instances:
            logger.debug(f"Creating new EntityStore instance for {path_key}")
            _store_instances[path_key] = EntityStore.from_path(path)
        return _store_instances[path_key]


class EntityStore:
    """
    Entries of one corpus snapshot plus everything derived from them.

    Link table, ranks and search index are computed on first use and cached;
    ``reset_caches()`` drops them.
    """

    def __init__(self, entries: list[TechEntry], corpus_path: Optional[Path] = None):
        self._entries = list(entries)
        self._by_id: dict[str, TechEntry] = {e.primary_key: e for e in self._entries}
        self._corpus_path = corpus_path
        self._lock = threading.Lock()
        self._inbound_links: Optional[InboundLinkTable] = None
        self._search_index: Optional[SearchIndex] = None
        self._rank_cache: Optional[RankCache] = None

    @classmethod
    def from_path(cls, corpus_path: str | Path) -> "EntityStore":
        path = Path(corpus_path)
        return cls(load_entries(path), corpus_path=path)

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[TechEntry]:
        return iter(self._entries)

    def __contains__(self, entry_id: str) -> bool:
        return entry_id in self._by_id

    @property
    def corpus_path(self) -> Optional[Path]:
        return self._corpus_path

    @property
    def entries(self) -> list[TechEntry]:
        return list(self._entries)

    def get_entry(self, entry_id: str) -> Optional[TechEntry]:
        return self._by_id.get(entry_id)

    def reset_caches(self) -> None:
        with self._lock:
            self._inbound_links = None
            self._search_index = None
            self._rank_cache = None

    # -----------------------------------------------------------------------
    # Lazily built structures
    # -----------------------------------------------------------------------

    @property
    def inbound_links(self) -> InboundLinkTable:
        if self._inbound_links is None:
            with self._lock:
                if self._inbound_links is None:
                    self._inbound_links = build_inbound_links(self._entries)
        return self._inbound_links

    @property
    def search_index(self) -> SearchIndex:
        if self._search_index is None:
            with self._lock:
                if self._search_index is None:
                    self._search_index = SearchIndex.build(self._entries)
        return self._search_index

    @property
    def rank_cache(self) -> RankCache:
        if self._rank_cache is None:
            inbound_links = self.inbound_links
            with self._lock:
                if self._rank_cache is None:
                    self._rank_cache = RankCache(self._entries, inbound_links)
        return self._rank_cache

    # -----------------------------------------------------------------------
    # Metrics and ranks
    # -----------------------------------------------------------------------

    def predict_number_of_users(self, entry: TechEntry) -> int:
        return predict_users(entry)

    def predict_number_of_jobs(self, entry: TechEntry) -> int:
        return predict_jobs(entry)

    def get_rank(self, entry: TechEntry) -> int:
        return self.rank_cache.get_rank(entry.primary_key)

    def get_language_rank(self, entry: TechEntry) -> Optional[int]:
        return self.rank_cache.get_language_rank(entry.primary_key)

    def get_rank_record(self, entry: TechEntry) -> Optional[RankRecord]:
        return self.rank_cache.get_record(entry.primary_key)

    def predict_percentile(self, entry: TechEntry) -> float:
        return self.get_rank(entry) / len(self._entries)

    def get_entry_at_rank(self, rank: int) -> Optional[TechEntry]:
        """Entry at a rank position; -1 wraps to the last, N wraps to the first."""
        entry_id = self.rank_cache.id_at_rank(rank)
        return self._by_id.get(entry_id) if entry_id is not None else None

    def previous_ranked(self, entry: TechEntry) -> Optional[TechEntry]:
        return self.get_entry_at_rank(self.get_rank(entry) - 1)

    def next_ranked(self, entry: TechEntry) -> Optional[TechEntry]:
        return self.get_entry_at_rank(self.get_rank(entry) + 1)

    def ranked_entries(self, languages_only: bool = False) -> list[RankedEntry]:
        """Summaries of all entries sorted by rank (or language rank)."""
        cache = self.rank_cache
        ranks = cache.ranks()
        entry_ids = cache.language_ranks().keys() if languages_only else ranks.keys()
        rows = []
        for entry_id in entry_ids:
            rows.append(RankedEntry.from_record(
                self._by_id[entry_id],
                ranks[entry_id],
                len(ranks),
                language_rank=cache.get_language_rank(entry_id),
            ))
        rows.sort(key=lambda row: row.language_rank if languages_only else row.rank)
        return rows

    # -----------------------------------------------------------------------
    # Links and search
    # -----------------------------------------------------------------------

    def inbound_link_count_for(self, entry_id: str) -> int:
        return self.inbound_links.count_for(entry_id)

    def search_for_entity(self, query: str) -> Optional[str]:
        return self.search_index.lookup(query)

    # -----------------------------------------------------------------------
    # Design patterns
    # -----------------------------------------------------------------------

    def pattern_entries(self) -> list[TechEntry]:
        return [e for e in self._entries if e.type == "pattern"]

    def _languages_with_pattern_researched(self, pattern: TechEntry) -> list[tuple[TechEntry, str]]:
        keyword = pattern.get("patternKeyword")
        if not keyword:
            return []
        path = f"patterns {keyword}"
        return [(e, e.get(path)) for e in self._entries if e.get(path) is not None]

    def languages_with_pattern(self, pattern: TechEntry) -> list[TechEntry]:
        return [e for e, value in self._languages_with_pattern_researched(pattern) if value == "true"]

    def languages_without_pattern(self, pattern: TechEntry) -> list[TechEntry]:
        return [e for e, value in self._languages_with_pattern_researched(pattern) if value == "false"]

    # -----------------------------------------------------------------------
    # Stats
    # -----------------------------------------------------------------------

    def get_stats(self) -> CorpusStats:
        by_type = Counter(e.type or "unknown" for e in self._entries)
        return CorpusStats(
            total_entries=len(self._entries),
            total_languages=sum(1 for e in self._entries if e.is_language),
            by_type=dict(by_type.most_common()),
            broken_links=len(self.inbound_links.broken_links),
            corpus_path=str(self._corpus_path) if self._corpus_path else None,
        )
