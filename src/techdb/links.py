"""
Inbound link graph between entries.

Counts how many permalink references point at each entry. This is a plain
in-degree count, no score propagation.
"""

import logging
from typing import Iterable

from .accessor import EntryAccessor
from .models import BrokenLink

logger = logging.getLogger(__name__)


class InboundLinkTable:
    """Mapping of entry id -> ids of the entries referencing it.

    Every id known when the table was built has a (possibly empty) list.
    A source appears once per reference, so an entry linking twice to the
    same target counts twice.
    """

    def __init__(self, links: dict[str, list[str]], broken_links: list[BrokenLink]):
        self.links = links
        self.broken_links = broken_links

    def __contains__(self, entry_id: str) -> bool:
        return entry_id in self.links

    def __len__(self) -> int:
        return len(self.links)

    def referrers(self, entry_id: str) -> list[str]:
        return list(self.links.get(entry_id, []))

    def count_for(self, entry_id: str) -> int:
        """Inbound reference count; 0 for unknown ids."""
        return len(self.links.get(entry_id, ()))


def build_inbound_links(entries: Iterable[EntryAccessor]) -> InboundLinkTable:
    """Scan every entry's permalinks and build the inbound link table.

    Unresolved references are logged and collected on
    ``InboundLinkTable.broken_links``; they never abort the build.
    """
    entries = list(entries)
    inbound: dict[str, list[str]] = {entry.primary_key: [] for entry in entries}
    broken: list[BrokenLink] = []

    for entry in entries:
        source_id = entry.primary_key
        for target in entry.links_to_other_entries():
            referrers = inbound.get(target)
            if referrers is None:
                logger.warning(f"Broken permalink in '{source_id}': No entry \"{target}\" found")
                broken.append(BrokenLink(source_id=source_id, target=target))
                continue
            referrers.append(source_id)

    total = sum(len(v) for v in inbound.values())
    logger.debug(f"Built inbound link table: {len(inbound)} entries, {total} links, {len(broken)} broken")
    return InboundLinkTable(inbound, broken)
