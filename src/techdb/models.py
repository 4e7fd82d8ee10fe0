"""
Pydantic models for knowledge base entries and derived ranking results.
"""

import re
from enum import Enum
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field

# A fact is a plain value, a repeated fact (e.g. several ``aka`` lines)
# or a dated series keyed by year string.
FactValue = Union[str, list[str], dict[str, str]]

WIKIPEDIA_PREFIX = "https://en.wikipedia.org/wiki/"

# Facts whose words are permalinks to other entries
PERMALINK_FIELDS: tuple[str, ...] = (
    "influencedBy",
    "writtenIn",
    "supersetOf",
    "subsetOf",
    "compilesTo",
    "successorOf",
    "renamedFrom",
    "runsOnVm",
    "related",
    "languages",
)

# Paths whose space separated words are joined into ``extensions``
EXTENSION_FIELDS: tuple[str, ...] = (
    "fileExtensions",
    "githubLanguage fileExtensions",
    "wikipedia fileExtensions",
)


class EntityType(str, Enum):
    """Known entry type codes."""
    APPLICATION = "application"
    ASSEMBLY = "assembly"
    BINARY_DATA_FORMAT = "binaryDataFormat"
    BINARY_EXECUTABLE = "binaryExecutable"
    BYTECODE = "bytecode"
    CHARACTER_ENCODING = "characterEncoding"
    CLOUD = "cloud"
    COMPILER = "compiler"
    EDITOR = "editor"
    ESOLANG = "esolang"
    FILESYSTEM = "filesystem"
    FRAMEWORK = "framework"
    GRAMMAR_LANGUAGE = "grammarLanguage"
    IDL = "idl"
    INTERPRETER = "interpreter"
    IR = "ir"
    ISA = "isa"
    JSON_FORMAT = "jsonFormat"
    LIBRARY = "library"
    LINTER = "linter"
    METALANGUAGE = "metalanguage"
    NOTATION = "notation"
    OS = "os"
    PACKAGE_MANAGER = "packageManager"
    PATTERN = "pattern"
    PL = "pl"
    PLZOO = "plzoo"
    PROTOCOL = "protocol"
    QUERY_LANGUAGE = "queryLanguage"
    SCHEMA = "schema"
    STANDARD = "standard"
    STYLESHEET_LANGUAGE = "stylesheetLanguage"
    TEMPLATE = "template"
    TEXT_DATA = "textData"
    TEXT_MARKUP = "textMarkup"
    VISUAL = "visual"
    VM = "vm"
    WEB_API = "webApi"
    XML_FORMAT = "xmlFormat"


# Display names for type codes that don't read well when split on camelCase
TYPE_DISPLAY_NAMES: dict[str, str] = {
    "assembly": "assembly language",
    "binaryExecutable": "binary executable format",
    "bytecode": "bytecode format",
    "cloud": "cloud service",
    "esolang": "esoteric programming language",
    "idl": "interface design language",
    "ir": "intermediate representation language",
    "isa": "instruction set architecture",
    "os": "operating system",
    "pattern": "design pattern",
    "pl": "programming language",
    "plzoo": "minilanguage",
    "template": "template language",
    "textData": "text data format",
    "textMarkup": "text markup language",
    "visual": "visual programming language",
    "vm": "virtual machine",
}

# Everything not listed here counts as a language
NON_LANGUAGE_TYPES: frozenset[str] = frozenset({
    "vm", "linter", "library", "webApi", "characterEncoding", "cloud",
    "editor", "filesystem", "feature", "packageManager", "os",
    "application", "framework", "standard", "isa", "organization",
    "pattern", "binaryExecutable", "binaryDataFormat", "equation",
    "interpreter", "compiler",
})

_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])|(?<=[A-Z])(?=[A-Z][a-z])")


def is_language_type(type_code: Optional[str]) -> bool:
    """Return True if the type code denotes a language of some kind."""
    if not type_code:
        return True
    return type_code not in NON_LANGUAGE_TYPES


def type_display_name(type_code: Optional[str]) -> str:
    """Human readable, lowercase name for a type code."""
    if not type_code:
        return ""
    name = TYPE_DISPLAY_NAMES.get(type_code, type_code)
    words = _CAMEL_BOUNDARY.sub(" ", name).replace("_", " ").replace("-", " ")
    return " ".join(words.split()).lower()


class TechEntry(BaseModel):
    """A single knowledge base entry (language, format, tool, ...).

    Facts are keyed by their space separated path, mirroring the record
    notation: ``"githubRepo stars": "1200"``, ``"linkedInSkill": {"2021": "500"}``.
    """
    # JSON numbers load as strings so numeric facts read like any other value
    model_config = ConfigDict(coerce_numbers_to_str=True)

    id: str = Field(description="Stable primary key (file name without extension)")
    facts: dict[str, FactValue] = Field(default_factory=dict)

    @property
    def primary_key(self) -> str:
        return self.id

    @property
    def title(self) -> str:
        return self.get("title") or self.id

    @property
    def type(self) -> Optional[str]:
        return self.get("type")

    @property
    def type_name(self) -> str:
        return type_display_name(self.type)

    @property
    def is_language(self) -> bool:
        return is_language_type(self.type)

    @property
    def aliases(self) -> list[str]:
        return self.get_all("aka")

    @property
    def wikipedia_title(self) -> str:
        wp = self.get("wikipedia")
        return wp.replace(WIKIPEDIA_PREFIX, "").strip() if wp else ""

    @property
    def extensions(self) -> list[str]:
        seen: dict[str, None] = {}
        for path in EXTENSION_FIELDS:
            value = self.get(path)
            if value:
                for ext in value.split():
                    seen.setdefault(ext, None)
        return list(seen)

    @property
    def fact_count(self) -> int:
        """Number of top level facts; repeated facts count once per value."""
        counts: dict[str, int] = {}
        for path, value in self.facts.items():
            head = path.split(" ", 1)[0]
            if head == path and isinstance(value, list):
                counts[head] = max(len(value), 1)
            else:
                counts.setdefault(head, 1)
        return sum(counts.values())

    def get(self, path: str) -> Optional[str]:
        """Scalar value at path, or the first value of a repeated fact."""
        value = self.facts.get(path)
        if value is None or isinstance(value, dict):
            return None
        if isinstance(value, list):
            return value[0] if value else None
        return value

    def get_node(self, path: str) -> Optional[dict[str, str]]:
        """Dated series at path, or None if the fact isn't a series."""
        value = self.facts.get(path)
        return value if isinstance(value, dict) else None

    def get_all(self, key: str) -> list[str]:
        value = self.facts.get(key)
        if value is None or isinstance(value, dict):
            return []
        if isinstance(value, list):
            return list(value)
        return [value]

    def content(self) -> str:
        """Render facts back to indented ``path value`` lines.

        Display only; references are read through ``links_to_other_entries``.
        """
        lines: list[str] = []
        for path, value in self.facts.items():
            if isinstance(value, dict):
                lines.append(path)
                lines.extend(f" {year} {v}" for year, v in value.items())
            elif isinstance(value, list):
                lines.extend(f"{path} {v}" for v in value)
            else:
                lines.append(f"{path} {value}")
        return "\n".join(lines)

    def links_to_other_entries(self) -> list[str]:
        """Permalink references found in this entry, in fact order."""
        links: list[str] = []
        for path in PERMALINK_FIELDS:
            for value in self.get_all(path):
                links.extend(value.split())
        return links


class BrokenLink(BaseModel):
    """A permalink that doesn't resolve to a known entry."""
    source_id: str
    target: str


class RankRecord(BaseModel):
    """Raw scores, per-dimension ranks and the fused rank of one entry."""
    id: str
    jobs: int = 0
    users: int = 0
    fact_count: int = 0
    inbound_link_count: int = 0
    job_rank: int = 0
    user_rank: int = 0
    fact_count_rank: int = 0
    inbound_link_rank: int = 0
    total_rank: int = 0
    rank: int = 0


class RankedEntry(BaseModel):
    """Summary row for leaderboards."""
    id: str
    title: str
    type: Optional[str] = None
    type_name: str = ""
    rank: int
    language_rank: Optional[int] = None
    percentile: float
    users: int
    jobs: int
    fact_count: int
    inbound_link_count: int

    @classmethod
    def from_record(
        cls,
        entry: TechEntry,
        record: RankRecord,
        total: int,
        language_rank: Optional[int] = None,
    ) -> "RankedEntry":
        return cls(
            id=entry.primary_key,
            title=entry.title,
            type=entry.type,
            type_name=entry.type_name,
            rank=record.rank,
            language_rank=language_rank,
            percentile=record.rank / total if total else 0.0,
            users=record.users,
            jobs=record.jobs,
            fact_count=record.fact_count,
            inbound_link_count=record.inbound_link_count,
        )


class CorpusStats(BaseModel):
    """Corpus statistics."""
    total_entries: int = 0
    total_languages: int = 0
    by_type: dict[str, int] = Field(default_factory=dict)
    broken_links: int = 0
    corpus_path: Optional[str] = None
