"""Tests for the search index and id cleaning."""

from conftest import make_entry
from techdb.search import SearchIndex, clean_id


# ---------------------------------------------------------------------------
# clean_id
# ---------------------------------------------------------------------------


class TestCleanId:
    def test_lowercase(self):
        assert clean_id("Python") == "python"

    def test_plus_and_sharp(self):
        assert clean_id("C++") == "cpp"
        assert clean_id("F#") == "fsharp"

    def test_spaces_and_dots(self):
        assert clean_id("Visual Basic .NET") == "visual-basic-dotnet"

    def test_separators(self):
        assert clean_id("PL/I") == "pl-i"
        assert clean_id("foo_bar") == "foo-bar"

    def test_trimmed(self):
        assert clean_id("  Rust ") == "rust"

    def test_special_symbols(self):
        assert clean_id("π") == "pi"
        assert clean_id("$") == "dollar-sign"

    def test_empty(self):
        assert clean_id("") == ""


# ---------------------------------------------------------------------------
# SearchIndex
# ---------------------------------------------------------------------------


class TestSearchIndex:
    def test_exact_title(self, sample_entries):
        index = SearchIndex.build(sample_entries)
        assert index.lookup("Python") == "python"
        assert index.lookup("C++") == "cpp"

    def test_exact_id(self, sample_entries):
        assert SearchIndex.build(sample_entries).lookup("vim") == "vim"

    def test_alias(self, sample_entries):
        index = SearchIndex.build(sample_entries)
        assert index.lookup("py") == "python"
        assert index.lookup("CPython") == "python"

    def test_wikipedia_title(self, sample_entries):
        index = SearchIndex.build(sample_entries)
        assert index.lookup("C_(programming_language)") == "c"

    def test_not_found(self, sample_entries):
        index = SearchIndex.build(sample_entries)
        assert index.lookup("Brainfudge") is None
        assert index.lookup("") is None

    def test_normalized_fallback(self, sample_entries):
        index = SearchIndex.build(sample_entries)
        assert index.lookup("c++") == "cpp"
        assert index.lookup("PYTHON") == "python"

    def test_keys_case_sensitive(self, sample_entries):
        index = SearchIndex.build(sample_entries)
        assert "Python" in index
        assert "PYTHON" not in index

    def test_last_registration_wins(self):
        index = SearchIndex.build([
            make_entry("first", aka=["shared"]),
            make_entry("second", aka=["shared"]),
        ])
        assert index.lookup("shared") == "second"

    def test_size(self):
        index = SearchIndex.build([make_entry("a", title="A", aka=["x", "y"])])
        assert len(index) == 4
