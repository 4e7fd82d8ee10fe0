"""
Popularity estimates derived from raw entry signals.

Both predictors are deliberately simple weighted sums over named facts so
every contribution can be inspected. Missing facts contribute 0.

Signal tables:
- MOST_RECENT_SIGNALS: dated series, the latest year's value counts
- DIRECT_SIGNALS: integer facts added as-is
- USER_SIGNAL_TRANSFORMS: fact path -> named function of the raw value
"""

import math
import re
from typing import Callable, Optional

from .accessor import EntryAccessor

_LEADING_INT = re.compile(r"\s*([-+]?\d+)")
_YEAR = re.compile(r"\d+")

# Fraction of skill endorsements that translate into job openings
SKILL_TO_JOBS_RATIO = 0.01

SKILL_ENDORSEMENTS_PATH = "linkedInSkill"
JOB_POSTINGS_PATH = "indeedJobs"

MOST_RECENT_SIGNALS: tuple[str, ...] = (
    "linkedInSkill",
    "subreddit memberCount",
    "projectEuler members",
)

DIRECT_SIGNALS: tuple[str, ...] = (
    "meetup members",
    "githubRepo stars",
)


def parse_int(value: Optional[str]) -> int:
    """Parse the leading integer of a fact value ("1,200" -> 1). 0 if none."""
    if value is None:
        return 0
    match = _LEADING_INT.match(str(value))
    return int(match.group(1)) if match else 0


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def most_recent_year_value(entry: EntryAccessor, path: str) -> int:
    """Value stored under the numerically largest year key of a dated series.

    Returns 0 if the series is missing, empty or has no numeric year keys.
    """
    series = entry.get_node(path)
    if not series:
        return 0
    years: dict[int, str] = {}
    for key, value in series.items():
        key = str(key).strip()
        if _YEAR.fullmatch(key):
            years[int(key)] = value
    if not years:
        return 0
    return parse_int(years[max(years)])


# ---------------------------------------------------------------------------
# User signal transforms: raw fact string -> estimated users
# ---------------------------------------------------------------------------


def wikipedia_presence(value: str) -> float:
    """Having a Wikipedia article: flat 20 users."""
    return 20


def central_package_repository(value: str) -> float:
    """A central package repository implies an established community."""
    return 1000


def wikipedia_page_views(value: str) -> float:
    """Daily page views -> users. Most views are bots, ~1% of users visit daily."""
    return 100 * (parse_int(value) / 20)


def linguist_grammar(value: str) -> float:
    """GitHub Linguist only registers languages with at least 200 users."""
    return 200


def codemirror_mode(value: str) -> float:
    return 50


def website_presence(value: str) -> float:
    return 1


def github_repo_presence(value: str) -> float:
    return 1


def github_forks(value: str) -> float:
    """Each fork stands for a few indirect users."""
    return parse_int(value) * 3


USER_SIGNAL_TRANSFORMS: dict[str, Callable[[str], float]] = {
    "wikipedia": wikipedia_presence,
    "patterns hasCentralPackageRepository?": central_package_repository,
    "wikipedia dailyPageViews": wikipedia_page_views,
    "linguistGrammarRepo": linguist_grammar,
    "codeMirror": codemirror_mode,
    "website": website_presence,
    "githubRepo": github_repo_presence,
    "githubRepo forks": github_forks,
}


def user_signal_contributions(entry: EntryAccessor) -> dict[str, float]:
    """Per-signal breakdown behind ``predict_users``, for inspection."""
    contributions: dict[str, float] = {}
    for path in MOST_RECENT_SIGNALS:
        contributions[path] = most_recent_year_value(entry, path)
    for path in DIRECT_SIGNALS:
        contributions[path] = parse_int(entry.get(path))
    for path, transform in USER_SIGNAL_TRANSFORMS.items():
        value = entry.get(path)
        # Transforms only apply to facts that are present
        contributions[path] = transform(value) if value else 0
    return contributions


def predict_users(entry: EntryAccessor) -> int:
    """Estimated number of users of the entry."""
    return round_half_up(sum(user_signal_contributions(entry).values()))


def predict_jobs(entry: EntryAccessor) -> int:
    """Estimated number of job openings mentioning the entry."""
    endorsements = most_recent_year_value(entry, SKILL_ENDORSEMENTS_PATH)
    return round_half_up(endorsements * SKILL_TO_JOBS_RATIO) + most_recent_year_value(entry, JOB_POSTINGS_PATH)
