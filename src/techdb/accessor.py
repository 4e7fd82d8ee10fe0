"""
Entry access interface used by the ranking and indexing code.

Any storage backend can feed the link graph, metric predictor, rank fusion
and search index as long as its entries provide these members. ``TechEntry``
from ``techdb.models`` is the in-tree implementation.
"""

from typing import Optional, Protocol, runtime_checkable


@runtime_checkable
class EntryAccessor(Protocol):
    """Read-only view of one knowledge base entry."""

    @property
    def primary_key(self) -> str: ...

    @property
    def title(self) -> str: ...

    @property
    def type(self) -> Optional[str]: ...

    @property
    def is_language(self) -> bool: ...

    @property
    def aliases(self) -> list[str]: ...

    @property
    def wikipedia_title(self) -> str: ...

    @property
    def fact_count(self) -> int: ...

    def get(self, path: str) -> Optional[str]: ...

    def get_node(self, path: str) -> Optional[dict[str, str]]: ...

    def get_all(self, key: str) -> list[str]: ...

    def content(self) -> str:
        """Raw record text, for display. Ranking and indexing never read it."""
        ...

    def links_to_other_entries(self) -> list[str]: ...
