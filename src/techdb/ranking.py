"""
Rank fusion over predicted jobs, predicted users, fact count and inbound links.

Each dimension is ranked independently (0 = highest value), the four ranks
are summed and the sums re-ranked into a dense 0..N-1 ordering. A lower
total means consistently high across all dimensions.

Ties in any dimension keep input iteration order.
"""

import logging
import threading
import time
from typing import Callable, Optional, Sequence

import numpy as np

from .accessor import EntryAccessor
from .links import InboundLinkTable, build_inbound_links
from .metrics import predict_jobs, predict_users
from .models import RankRecord

logger = logging.getLogger(__name__)

# Raw score field -> sub-rank field
RANK_DIMENSIONS: tuple[tuple[str, str], ...] = (
    ("jobs", "job_rank"),
    ("users", "user_rank"),
    ("fact_count", "fact_count_rank"),
    ("inbound_link_count", "inbound_link_rank"),
)


def _descending_ranks(scores: np.ndarray) -> np.ndarray:
    """Rank position of each score, highest first, ties in input order."""
    order = np.argsort(-scores, kind="stable")
    ranks = np.empty(len(scores), dtype=np.int64)
    ranks[order] = np.arange(len(scores))
    return ranks


def fuse_ranks(records: list[RankRecord]) -> dict[str, RankRecord]:
    """Fill in sub-ranks, total and dense rank on records that carry raw scores.

    Records are ranked in list order for tie-breaking. Returns id -> record.
    """
    if not records:
        return {}

    totals = np.zeros(len(records), dtype=np.int64)
    for score_field, rank_field in RANK_DIMENSIONS:
        scores = np.array([getattr(r, score_field) for r in records], dtype=np.int64)
        ranks = _descending_ranks(scores)
        for record, rank in zip(records, ranks):
            setattr(record, rank_field, int(rank))
        totals += ranks

    dense = np.empty(len(records), dtype=np.int64)
    dense[np.argsort(totals, kind="stable")] = np.arange(len(records))
    for record, total, rank in zip(records, totals, dense):
        record.total_rank = int(total)
        record.rank = int(rank)

    return {record.id: record for record in records}


def calc_ranks(
    entries: Sequence[EntryAccessor],
    inbound_links: InboundLinkTable,
    jobs_predictor: Callable[[EntryAccessor], int] = predict_jobs,
    users_predictor: Callable[[EntryAccessor], int] = predict_users,
) -> dict[str, RankRecord]:
    """Compute the fused rank record of every entry.

    An id seen more than once is ranked once, using its last occurrence,
    so ranks stay a dense 0..N-1 over distinct ids.
    """
    unique: dict[str, EntryAccessor] = {}
    for entry in entries:
        if entry.primary_key in unique:
            logger.warning(f"Duplicate entry id '{entry.primary_key}', keeping the last occurrence")
            del unique[entry.primary_key]
        unique[entry.primary_key] = entry

    records = [
        RankRecord(
            id=entry_id,
            jobs=jobs_predictor(entry),
            users=users_predictor(entry),
            fact_count=entry.fact_count,
            inbound_link_count=inbound_links.count_for(entry_id),
        )
        for entry_id, entry in unique.items()
    ]
    return fuse_ranks(records)


class RankCache:
    """Memoized ranks, language-only ranks and the rank -> id inverse.

    Built once on first access and kept until ``reset()``. The entry
    sequence is treated as immutable; if it changes, call ``reset()`` or
    create a new cache.
    """

    def __init__(
        self,
        entries: Sequence[EntryAccessor],
        inbound_links: Optional[InboundLinkTable] = None,
    ):
        self._entries = entries
        self._inbound_links = inbound_links
        self._lock = threading.Lock()
        self._ranks: Optional[dict[str, RankRecord]] = None
        self._language_ranks: Optional[dict[str, RankRecord]] = None
        self._inverse_ranks: Optional[list[str]] = None

    @property
    def is_built(self) -> bool:
        return self._ranks is not None

    def reset(self) -> None:
        with self._lock:
            self._ranks = None
            self._language_ranks = None
            self._inverse_ranks = None

    def _build(self) -> None:
        start = time.time()
        entries = list(self._entries)
        inbound_links = self._inbound_links
        if inbound_links is None:
            inbound_links = build_inbound_links(entries)
            self._inbound_links = inbound_links

        ranks = calc_ranks(entries, inbound_links)
        language_ranks = calc_ranks([e for e in entries if e.is_language], inbound_links)

        inverse = [""] * len(ranks)
        for entry_id, record in ranks.items():
            inverse[record.rank] = entry_id

        self._language_ranks = language_ranks
        self._inverse_ranks = inverse
        # Set last: other threads check _ranks without the lock
        self._ranks = ranks
        logger.debug(
            f"Computed ranks for {len(ranks)} entries ({len(language_ranks)} languages) "
            f"in {time.time() - start:.3f}s"
        )

    def _ensure_built(self) -> None:
        if self._ranks is not None:
            return
        with self._lock:
            if self._ranks is None:
                self._build()

    def ranks(self) -> dict[str, RankRecord]:
        self._ensure_built()
        assert self._ranks is not None
        return self._ranks

    def language_ranks(self) -> dict[str, RankRecord]:
        self._ensure_built()
        assert self._language_ranks is not None
        return self._language_ranks

    def inverse_ranks(self) -> list[str]:
        self._ensure_built()
        assert self._inverse_ranks is not None
        return self._inverse_ranks

    def __len__(self) -> int:
        return len(self.ranks())

    def get_rank(self, entry_id: str) -> int:
        """Dense 0-based rank. Raises KeyError for ids outside the corpus."""
        return self.ranks()[entry_id].rank

    def get_language_rank(self, entry_id: str) -> Optional[int]:
        """Rank among languages only; None for non-language entries."""
        record = self.language_ranks().get(entry_id)
        return record.rank if record is not None else None

    def get_record(self, entry_id: str) -> Optional[RankRecord]:
        return self.ranks().get(entry_id)

    def percentile(self, entry_id: str) -> float:
        return self.get_rank(entry_id) / len(self)

    def id_at_rank(self, rank: int) -> Optional[str]:
        """Entry id at a rank position, wrapping around at both ends."""
        inverse = self.inverse_ranks()
        if not inverse:
            return None
        if rank < 0:
            rank = len(inverse) - 1
        if rank >= len(inverse):
            rank = 0
        return inverse[rank]
