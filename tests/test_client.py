"""Tests for TechDBClient in techdb.client."""

from unittest.mock import MagicMock, patch

from techdb.client import TechDBClient


def _make_client() -> tuple[TechDBClient, MagicMock]:
    """Create a TechDBClient with a mocked httpx module."""
    mock_httpx = MagicMock()
    with patch("techdb.client._get_httpx", return_value=mock_httpx):
        client = TechDBClient("http://localhost:9999/")
    return client, mock_httpx


class TestTechDBClient:
    def test_health(self):
        client, mock_httpx = _make_client()
        mock_resp = MagicMock()
        mock_resp.json.return_value = {"status": "ok"}
        mock_httpx.get.return_value = mock_resp

        result = client.health()

        assert result == {"status": "ok"}
        mock_httpx.get.assert_called_once_with("http://localhost:9999/", timeout=30)
        mock_resp.raise_for_status.assert_called_once()

    def test_search(self):
        client, mock_httpx = _make_client()
        mock_resp = MagicMock()
        mock_resp.json.return_value = {"query": "C++", "id": "cpp", "found": True}
        mock_httpx.post.return_value = mock_resp

        assert client.search("C++") == "cpp"
        mock_httpx.post.assert_called_once_with(
            "http://localhost:9999/search",
            json={"query": "C++"},
            timeout=30,
        )

    def test_search_not_found(self):
        client, mock_httpx = _make_client()
        mock_resp = MagicMock()
        mock_resp.json.return_value = {"query": "x", "id": None, "found": False}
        mock_httpx.post.return_value = mock_resp

        assert client.search("x") is None

    def test_get_rank(self):
        client, mock_httpx = _make_client()
        mock_resp = MagicMock()
        mock_resp.json.return_value = {"id": "c", "rank": 1}
        mock_httpx.get.return_value = mock_resp

        assert client.get_rank("c")["rank"] == 1
        mock_httpx.get.assert_called_once_with("http://localhost:9999/entries/c/rank", timeout=30)

    def test_ranking(self):
        client, mock_httpx = _make_client()
        mock_resp = MagicMock()
        mock_resp.json.return_value = [{"id": "python"}]
        mock_httpx.get.return_value = mock_resp

        assert client.ranking(limit=1, languages=True) == [{"id": "python"}]
        mock_httpx.get.assert_called_once_with(
            "http://localhost:9999/ranking",
            params={"limit": 1, "languages": True},
            timeout=30,
        )

    def test_entry_at_rank(self):
        client, mock_httpx = _make_client()
        mock_resp = MagicMock()
        mock_resp.json.return_value = {"id": "goto"}
        mock_httpx.get.return_value = mock_resp

        assert client.entry_at_rank(-1) == {"id": "goto"}
        mock_httpx.get.assert_called_once_with("http://localhost:9999/rank/-1", timeout=30)

    def test_get_entry(self):
        client, mock_httpx = _make_client()
        mock_resp = MagicMock()
        mock_resp.json.return_value = {"id": "vim"}
        mock_httpx.get.return_value = mock_resp

        assert client.get_entry("vim") == {"id": "vim"}

    def test_raises_on_http_error(self):
        client, mock_httpx = _make_client()
        mock_resp = MagicMock()
        mock_resp.raise_for_status.side_effect = RuntimeError("404")
        mock_httpx.get.return_value = mock_resp

        try:
            client.get_entry("nope")
        except RuntimeError as e:
            assert "404" in str(e)
        else:
            raise AssertionError("expected raise_for_status to propagate")
