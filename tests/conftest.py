"""
Shared test fixtures for techdb.

Provides a small hand-built corpus, the same corpus written to disk, and a
store over it. Resets module-level singletons between tests.
"""

import json
from pathlib import Path

import pytest

from techdb.models import TechEntry
from techdb.store import EntityStore


# ---------------------------------------------------------------------------
# Singleton reset (autouse) -- clears module-level caches every test
# ---------------------------------------------------------------------------

@pytest.fixture(autouse=True)
def _reset_module_singletons():
    """Clear all module-level singletons so tests are fully isolated."""
    import techdb.server as _server
    import techdb.store as _store

    yield

    _store._store_instances.clear()
    _server._store = None
    _server._corpus_path = None


# ---------------------------------------------------------------------------
# Corpus
# ---------------------------------------------------------------------------

SAMPLE_RECORDS = [
    {
        "id": "c",
        "facts": {
            "title": "C",
            "type": "pl",
            "wikipedia": "https://en.wikipedia.org/wiki/C_(programming_language)",
            "wikipedia dailyPageViews": "4000",
            "linkedInSkill": {"2018": "100000", "2021": "200000"},
            "indeedJobs": {"2021": "5000"},
            "githubRepo": "https://github.com/c",
            "githubRepo stars": "100",
            "fileExtensions": "c h",
        },
    },
    {
        "id": "python",
        "facts": {
            "title": "Python",
            "type": "pl",
            "aka": ["py", "CPython"],
            "wikipedia": "https://en.wikipedia.org/wiki/Python_(programming_language)",
            "writtenIn": "c",
            "influencedBy": "c abc",
            "linkedInSkill": {"2021": "300000"},
            "indeedJobs": {"2020": "1000", "2021": "8000"},
            "subreddit memberCount": {"2021": "900000"},
            "patterns hasCentralPackageRepository?": "true",
            "patterns gotos": "false",
            "fileExtensions": "py pyc",
            "githubLanguage fileExtensions": "py pyw",
        },
    },
    {
        "id": "cpp",
        "facts": {
            "title": "C++",
            "type": "pl",
            "writtenIn": "c",
            "supersetOf": "c",
            "indeedJobs": {"2021": "3000"},
            "patterns gotos": "true",
        },
    },
    {
        "id": "vim",
        "facts": {
            "title": "Vim",
            "type": "editor",
            "writtenIn": "c zzz",
            "website": "https://www.vim.org",
        },
    },
    {
        "id": "goto",
        "facts": {
            "title": "Gotos",
            "type": "pattern",
            "patternKeyword": "gotos",
        },
    },
]


@pytest.fixture
def sample_entries() -> list[TechEntry]:
    """Fresh TechEntry objects for the sample corpus."""
    return [TechEntry.model_validate(r) for r in SAMPLE_RECORDS]


@pytest.fixture
def store(sample_entries) -> EntityStore:
    return EntityStore(sample_entries)


@pytest.fixture
def corpus_file(tmp_path: Path) -> Path:
    """Sample corpus written as a JSON array file."""
    path = tmp_path / "entries.json"
    path.write_text(json.dumps(SAMPLE_RECORDS))
    return path


def make_entry(entry_id: str, **facts) -> TechEntry:
    """Build an entry from keyword facts; spaces in paths are written as '__'."""
    return TechEntry(id=entry_id, facts={k.replace("__", " "): v for k, v in facts.items()})
