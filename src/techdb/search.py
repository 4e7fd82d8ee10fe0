"""
Name -> entry id search index.

Exact match on id, title, Wikipedia title and aliases, with a fallback
that cleans the query into id form ("C++" -> "cpp", "F#" -> "fsharp").
"""

import logging
import re
from typing import Iterable, Optional

from .accessor import EntryAccessor

logger = logging.getLogger(__name__)

# Applied in order
_ID_REPLACEMENTS: tuple[tuple[str, str], ...] = (
    (r"[/_:\\\[\]]", "-"),
    (r"π", "pi"),
    (r"`", "tick"),
    (r"\$", "dollar-sign"),
    (r"\*$", "-star"),
    (r"^\s+|\s+$", ""),
    (r"\s+", "-"),
    (r"\+", "p"),
    (r"#", "sharp"),
    (r"\.", "dot"),
    (r"[^a-zA-Z0-9\-]", ""),
    (r"--+", "-"),
)
_ID_PATTERNS = tuple((re.compile(pattern), repl) for pattern, repl in _ID_REPLACEMENTS)


def clean_id(name: str) -> str:
    """Convert a display name to the id form used for entry keys."""
    if not name:
        return ""
    result = name
    for pattern, repl in _ID_PATTERNS:
        result = pattern.sub(repl, result)
    return result.lower()


class SearchIndex:
    """Exact-match lookup table from names to entry ids.

    Keys are case-sensitive as registered. When two entries register the same
    name, the later one wins.
    """

    def __init__(self):
        self._index: dict[str, str] = {}

    @classmethod
    def build(cls, entries: Iterable[EntryAccessor]) -> "SearchIndex":
        index = cls()
        count = 0
        for entry in entries:
            index.add(entry)
            count += 1
        logger.debug(f"Built search index: {len(index)} names for {count} entries")
        return index

    def __len__(self) -> int:
        return len(self._index)

    def __contains__(self, name: str) -> bool:
        return name in self._index

    def _register(self, name: str, entry_id: str) -> None:
        previous = self._index.get(name)
        if previous is not None and previous != entry_id:
            logger.debug(f"Search name '{name}' moved from '{previous}' to '{entry_id}'")
        self._index[name] = entry_id

    def add(self, entry: EntryAccessor) -> None:
        entry_id = entry.primary_key
        self._register(entry_id, entry_id)
        self._register(entry.title, entry_id)
        wikipedia_title = entry.wikipedia_title
        if wikipedia_title:
            self._register(wikipedia_title, entry_id)
        for alias in entry.aliases:
            self._register(alias, entry_id)

    def lookup(self, query: str) -> Optional[str]:
        """Entry id for a name, or None if nothing matches."""
        if not query:
            return None
        found = self._index.get(query)
        if found is not None:
            return found
        return self._index.get(clean_id(query))
