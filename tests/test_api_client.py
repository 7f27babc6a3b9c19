"""Tests for the HTTP client."""

import pytest
import requests

from api_client import APIClient, is_success
from config import HTML_HEADERS, JSON_HEADERS
from models import TransportError
from tests.conftest import FakeResponse, FakeSession, json_response

URL = "https://pubchem.test/doc"


class TestGetJson:
    """Tests for APIClient.get_json."""

    def test_decodes_body(self, fake_session, client) -> None:
        fake_session.routes[URL] = json_response({'Record': {}})
        assert client.get_json(URL) == {'Record': {}}
        assert fake_session.calls[0]['headers'] == JSON_HEADERS
        assert fake_session.calls[0]['timeout'] == 5

    def test_client_error_is_not_retried(self, fake_session, client) -> None:
        fake_session.routes[URL] = FakeResponse(404, "missing")
        with pytest.raises(TransportError) as exc_info:
            client.get_json(URL)
        assert exc_info.value.status_code == 404
        assert len(fake_session.calls) == 1

    def test_server_error_is_retried(self, fake_session, client) -> None:
        fake_session.routes[URL] = [FakeResponse(503), json_response({'ok': True})]
        assert client.get_json(URL) == {'ok': True}
        assert len(fake_session.calls) == 2

    def test_server_error_on_last_attempt(self, fake_session, client) -> None:
        fake_session.routes[URL] = FakeResponse(500)
        with pytest.raises(TransportError) as exc_info:
            client.get_json(URL)
        assert exc_info.value.status_code == 500
        assert len(fake_session.calls) == 2

    def test_malformed_json(self, fake_session, client) -> None:
        fake_session.routes[URL] = FakeResponse(200, "<html>oops</html>")
        with pytest.raises(TransportError, match="Malformed JSON"):
            client.get_json(URL)

    def test_connection_failure_after_retries(self, fake_session, client) -> None:
        fake_session.routes[URL] = requests.ConnectionError("refused")
        with pytest.raises(TransportError) as exc_info:
            client.get_json(URL)
        assert exc_info.value.url == URL
        assert len(fake_session.calls) == 2

    def test_timeout_then_success(self, fake_session, client) -> None:
        fake_session.routes[URL] = [requests.Timeout("slow"), json_response([1, 2])]
        assert client.get_json(URL) == [1, 2]


class TestGetText:
    """Tests for APIClient.get_text."""

    def test_returns_status_and_body(self, fake_session, client) -> None:
        fake_session.routes[URL] = FakeResponse(404, "gone")
        assert client.get_text(URL) == (404, "gone")
        assert fake_session.calls[0]['headers'] == HTML_HEADERS

    def test_custom_pause_between_attempts(self) -> None:
        session = FakeSession({URL: [requests.ConnectionError("reset"), FakeResponse(200, "ok")]})
        client = APIClient(session=session, max_retries=3, retry_delay=100)
        attempts = []
        assert client.get_text(URL, pause=attempts.append) == (200, "ok")
        assert attempts == [1]


class TestClientLifecycle:

    def test_context_manager_closes_session(self, fake_session) -> None:
        with APIClient(session=fake_session):
            pass
        assert fake_session.closed

    def test_default_session_has_user_agent(self) -> None:
        client = APIClient()
        assert "PubChemExtractor" in client.session.headers['User-Agent']
        client.close()


@pytest.mark.parametrize("status,expected", [(199, False), (200, True), (201, True), (299, True), (301, False), (404, False)])
def test_is_success(status, expected) -> None:
    assert is_success(status) is expected


class TestDeeplyNestedBody:

    def test_nesting_beyond_decoder_limit(self, fake_session, client) -> None:
        """A body too deep for the JSON decoder is reported as a TransportError."""
        depth = 100000
        fake_session.routes[URL] = FakeResponse(200, '{"Record": ' + '[' * depth + ']' * depth + '}')
        with pytest.raises(TransportError, match="Malformed JSON") as exc_info:
            client.get_json(URL)
        assert exc_info.value.url == URL
