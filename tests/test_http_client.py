"""Tests for the shared HTTP helpers."""

from unittest.mock import patch, MagicMock

import pytest
import requests

from common import http_client


@pytest.fixture(autouse=True)
def _empty_cache():
    http_client.clear_cache()
    yield
    http_client.clear_cache()


def _response(status, text="", headers=None):
    response = MagicMock()
    response.status_code = status
    response.text = text
    response.headers = headers or {}
    return response


class TestRobustGet:
    """Test robust_get retries and caching."""

    @patch('common.http_client.get_session')
    def test_returns_status_headers_and_body(self, mock_session):
        """Test a successful response is returned as a tuple."""
        mock_session.return_value.get.return_value = _response(200, "<metadata/>", {"ETag": "x"})

        status, headers, text = http_client.robust_get("https://repo.example/maven-metadata.xml")

        assert status == 200
        assert headers == {"ETag": "x"}
        assert text == "<metadata/>"

    @patch('common.http_client.get_session')
    def test_caches_responses(self, mock_session):
        """Test a second call for the same URL is served from the cache."""
        mock_session.return_value.get.return_value = _response(404)

        http_client.robust_get("https://repo.example/a.pom")
        http_client.robust_get("https://repo.example/a.pom")

        assert mock_session.return_value.get.call_count == 1

    @patch('common.http_client.time.sleep')
    @patch('common.http_client.get_session')
    def test_retries_server_errors(self, mock_session, mock_sleep):
        """Test 5xx responses are retried and not cached."""
        mock_session.return_value.get.side_effect = [_response(503), _response(200, "ok")]

        status, _, text = http_client.robust_get("https://repo.example/a.pom")

        assert (status, text) == (200, "ok")
        assert mock_sleep.call_count == 1

    @patch('common.http_client.time.sleep')
    @patch('common.http_client.get_session')
    def test_gives_up_after_repeated_exceptions(self, mock_session, mock_sleep):
        """Test connection failures yield status 0 once retries are exhausted."""
        mock_session.return_value.get.side_effect = requests.ConnectionError("refused")

        assert http_client.robust_get("https://repo.example/a.pom") == (0, {}, "")
        assert mock_session.return_value.get.call_count == http_client.Constants.HTTP_RETRY_MAX
        assert mock_sleep.call_count == http_client.Constants.HTTP_RETRY_MAX


class TestSafeHead:
    """Test safe_head error handling."""

    @patch('common.http_client.get_session')
    def test_connection_error_returns_none(self, mock_session):
        """Test connection errors are reported as a missing response."""
        mock_session.return_value.head.side_effect = requests.ConnectionError("refused")

        assert http_client.safe_head("https://repo.example/a.aar", context="maven") is None

    @patch('common.http_client.get_session')
    def test_timeout_returns_none(self, mock_session):
        """Test timeouts never exit the process."""
        mock_session.return_value.head.side_effect = requests.Timeout("slow")

        assert http_client.safe_head("https://repo.example/a.aar", context="maven") is None

    @patch('common.http_client.get_session')
    def test_head_follows_redirects(self, mock_session):
        """Test HEAD requests follow redirects by default."""
        mock_session.return_value.head.return_value = _response(200)

        res = http_client.safe_head("https://repo.example/a.aar", context="maven")

        assert res.status_code == 200
        _, kwargs = mock_session.return_value.head.call_args
        assert kwargs["allow_redirects"] is True


class TestDownload:
    """Test streaming downloads."""

    @patch('common.http_client.get_session')
    def test_writes_target_atomically(self, mock_session, tmp_path):
        """Test chunks are written and renamed onto the target."""
        response = MagicMock()
        response.iter_content.return_value = [b"ab", b"", b"cd"]
        mock_session.return_value.get.return_value.__enter__.return_value = response
        target = tmp_path / "nested" / "foo.aar"

        assert http_client.download("https://repo.example/foo.aar", target, context="transfer") == target

        assert target.read_bytes() == b"abcd"
        assert [p.name for p in target.parent.iterdir()] == ["foo.aar"]

    @patch('common.http_client.get_session')
    def test_http_error_leaves_no_file(self, mock_session, tmp_path):
        """Test a non-2xx response raises and writes nothing."""
        response = MagicMock()
        response.raise_for_status.side_effect = requests.HTTPError("404")
        mock_session.return_value.get.return_value.__enter__.return_value = response
        target = tmp_path / "foo.aar"

        with pytest.raises(requests.HTTPError):
            http_client.download("https://repo.example/foo.aar", target, context="transfer")
        assert not target.exists()
        assert list(tmp_path.iterdir()) == []
