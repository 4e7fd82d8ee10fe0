"""
Ranking and search for a knowledge base of technical entities.

Turns raw popularity signals into user and job estimates, fuses them with
fact counts and inbound links into a single rank, and resolves names and
aliases to entry ids.
"""

__version__ = "0.1.0"

from techdb.models import (
    BrokenLink,
    CorpusStats,
    EntityType,
    RankedEntry,
    RankRecord,
    TechEntry,
)
from techdb.accessor import EntryAccessor
from techdb.links import InboundLinkTable, build_inbound_links
from techdb.metrics import most_recent_year_value, predict_jobs, predict_users
from techdb.ranking import RankCache, calc_ranks, fuse_ranks
from techdb.search import SearchIndex, clean_id
from techdb.store import CorpusLoadError, EntityStore, get_store, load_entries

__all__ = [
    # Models
    "TechEntry",
    "EntityType",
    "RankRecord",
    "RankedEntry",
    "BrokenLink",
    "CorpusStats",
    "EntryAccessor",
    # Link graph
    "InboundLinkTable",
    "build_inbound_links",
    # Metrics
    "most_recent_year_value",
    "predict_jobs",
    "predict_users",
    # Ranking
    "RankCache",
    "calc_ranks",
    "fuse_ranks",
    # Search
    "SearchIndex",
    "clean_id",
    # Store
    "EntityStore",
    "CorpusLoadError",
    "get_store",
    "load_entries",
]
