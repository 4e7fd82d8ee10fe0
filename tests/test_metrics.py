"""Tests for user and job predictions."""

import pytest

from conftest import make_entry
from techdb.metrics import (
    USER_SIGNAL_TRANSFORMS,
    github_forks,
    most_recent_year_value,
    parse_int,
    predict_jobs,
    predict_users,
    round_half_up,
    user_signal_contributions,
    wikipedia_page_views,
)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


class TestParseInt:
    def test_plain(self):
        assert parse_int("42") == 42

    def test_leading_digits(self):
        assert parse_int("1,200") == 1
        assert parse_int(" 12abc") == 12

    def test_none_and_garbage(self):
        assert parse_int(None) == 0
        assert parse_int("abc") == 0
        assert parse_int("") == 0


class TestRoundHalfUp:
    def test_half_rounds_up(self):
        assert round_half_up(2.5) == 3
        assert round_half_up(0.5) == 1

    def test_below_half(self):
        assert round_half_up(2.49) == 2


# ---------------------------------------------------------------------------
# most_recent_year_value
# ---------------------------------------------------------------------------


class TestMostRecentYearValue:
    def test_uses_latest_year_not_largest_value(self):
        entry = make_entry("x", indeedJobs={"2019": "10", "2021": "5", "2020": "7"})
        assert most_recent_year_value(entry, "indeedJobs") == 5

    def test_missing_series(self):
        assert most_recent_year_value(make_entry("x"), "indeedJobs") == 0

    def test_empty_series(self):
        assert most_recent_year_value(make_entry("x", indeedJobs={}), "indeedJobs") == 0

    def test_scalar_is_not_a_series(self):
        assert most_recent_year_value(make_entry("x", indeedJobs="50"), "indeedJobs") == 0

    def test_non_numeric_years_ignored(self):
        entry = make_entry("x", indeedJobs={"note": "999", "2020": "7"})
        assert most_recent_year_value(entry, "indeedJobs") == 7

    def test_non_numeric_value(self):
        entry = make_entry("x", indeedJobs={"2020": "n/a"})
        assert most_recent_year_value(entry, "indeedJobs") == 0

    def test_years_compared_numerically(self):
        entry = make_entry("x", indeedJobs={"999": "1", "2000": "2"})
        assert most_recent_year_value(entry, "indeedJobs") == 2


# ---------------------------------------------------------------------------
# predict_jobs
# ---------------------------------------------------------------------------


class TestPredictJobs:
    def test_combines_endorsements_and_postings(self):
        entry = make_entry(
            "x",
            linkedInSkill={"2020": "1000", "2021": "250"},
            indeedJobs={"2021": "40"},
        )
        # round(250 * 0.01) + 40
        assert predict_jobs(entry) == 43

    def test_endorsements_round_half_up(self):
        entry = make_entry("x", linkedInSkill={"2021": "150"})
        assert predict_jobs(entry) == 2

    def test_no_signals(self):
        assert predict_jobs(make_entry("x")) == 0


# ---------------------------------------------------------------------------
# predict_users
# ---------------------------------------------------------------------------


class TestPredictUsers:
    def test_no_signals(self):
        assert predict_users(make_entry("x")) == 0

    def test_most_recent_signals(self):
        entry = make_entry(
            "x",
            linkedInSkill={"2021": "100"},
            subreddit__memberCount={"2019": "1", "2020": "50"},
            projectEuler__members={"2022": "7"},
        )
        assert predict_users(entry) == 157

    def test_direct_signals(self):
        entry = make_entry("x", meetup__members="30", githubRepo__stars="12")
        assert predict_users(entry) == 42

    def test_presence_transforms(self):
        entry = make_entry(
            "x",
            wikipedia="https://en.wikipedia.org/wiki/X",
            linguistGrammarRepo="https://github.com/x/grammar",
            codeMirror="x",
            website="https://x.org",
        )
        assert predict_users(entry) == 20 + 200 + 50 + 1

    def test_central_package_repository(self):
        entry = make_entry("x", **{"patterns__hasCentralPackageRepository?": "true"})
        assert predict_users(entry) == 1000

    def test_page_views(self):
        entry = make_entry("x", wikipedia__dailyPageViews="30")
        # 100 * (30 / 20) = 150, no wikipedia presence bonus without the URL fact
        assert predict_users(entry) == 150

    def test_forks_and_repo(self):
        entry = make_entry("x", githubRepo="https://github.com/x/x", githubRepo__forks="5")
        assert predict_users(entry) == 1 + 15

    def test_fractional_total_rounded(self):
        entry = make_entry("x", wikipedia__dailyPageViews="1")
        # 100 * (1 / 20) = 5.0
        assert predict_users(entry) == 5

    def test_sample_entry(self, sample_entries):
        # 200000 linkedIn + 100 stars + 20 wikipedia + 20000 page views + 1 repo
        assert predict_users(sample_entries[0]) == 220121
        assert predict_users(sample_entries[1]) == 1201020


# ---------------------------------------------------------------------------
# Transforms
# ---------------------------------------------------------------------------


class TestTransforms:
    def test_table_is_enumerated(self):
        assert set(USER_SIGNAL_TRANSFORMS) == {
            "wikipedia",
            "patterns hasCentralPackageRepository?",
            "wikipedia dailyPageViews",
            "linguistGrammarRepo",
            "codeMirror",
            "website",
            "githubRepo",
            "githubRepo forks",
        }

    def test_page_views(self):
        assert wikipedia_page_views("2000") == pytest.approx(10000)

    def test_forks(self):
        assert github_forks("4") == 12

    def test_contributions_breakdown(self, sample_entries):
        contributions = user_signal_contributions(sample_entries[0])
        assert contributions["wikipedia dailyPageViews"] == pytest.approx(20000)
        assert contributions["githubRepo stars"] == 100
        assert contributions["codeMirror"] == 0
