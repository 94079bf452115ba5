import httpx
import pytest

from agent_chat.domain.exceptions import ApiError, NetworkError, RateLimitError
from agent_chat.domain.models import OutgoingRequest
from agent_chat.transport.http_client import EndpointClient


class SettingsStub:
    http_timeout = 1.0
    read_chunk_size = None


REQ = OutgoingRequest(
    method="POST",
    url="https://example.test/chat",
    headers={"Content-Type": "application/json"},
    json_body={"input": "hi", "messages": []},
)


def test_fetch_returns_body(monkeypatch):
    captured = {}

    class Resp:
        status_code = 200
        headers = {"content-type": "application/json"}
        text = '{"reply": "ok"}'

    class Client:
        def __init__(self, *a, **kw):
            captured["init"] = kw

        def __enter__(self):
            return self

        def __exit__(self, *a):
            return False

        def request(self, method, url, headers=None, json=None):
            captured["call"] = (method, url, headers, json)
            return Resp()

    monkeypatch.setattr("httpx.Client", Client)
    reply = EndpointClient(SettingsStub()).fetch(REQ)
    assert reply.status_code == 200
    assert reply.content_type == "application/json"
    assert reply.text == '{"reply": "ok"}'
    assert captured["call"][0] == "POST"
    assert captured["call"][3] == {"input": "hi", "messages": []}
    assert captured["init"] == {"timeout": 1.0, "trust_env": False}


@pytest.mark.parametrize("status,exc", [(500, ApiError), (429, RateLimitError)])
def test_fetch_error_status(monkeypatch, status, exc):
    class Resp:
        status_code = status
        headers = {}
        text = "boom"

    class Client:
        def __init__(self, *a, **kw):
            pass

        def __enter__(self):
            return self

        def __exit__(self, *a):
            return False

        def request(self, *a, **kw):
            return Resp()

    monkeypatch.setattr("httpx.Client", Client)
    with pytest.raises(exc) as info:
        EndpointClient(SettingsStub()).fetch(REQ)
    assert info.value.http_status == status


def test_fetch_network_error(monkeypatch):
    class Client:
        def __init__(self, *a, **kw):
            pass

        def __enter__(self):
            return self

        def __exit__(self, *a):
            return False

        def request(self, *a, **kw):
            raise httpx.ConnectError("refused")

    monkeypatch.setattr("httpx.Client", Client)
    with pytest.raises(NetworkError) as info:
        EndpointClient(SettingsStub()).fetch(REQ)
    assert info.value.code == "NETWORK_ERROR"


def test_stream_read_error_is_wrapped():
    class BrokenResponse:
        def iter_bytes(self, chunk_size=None):
            yield b"data: a"
            raise httpx.ReadError("reset")

    chunks = EndpointClient(SettingsStub()).iter_chunks(BrokenResponse())
    assert next(chunks) == b"data: a"
    with pytest.raises(NetworkError) as info:
        next(chunks)
    assert info.value.code == "STREAM_READ_ERROR"


def test_has_stream_body():
    class Streaming:
        is_stream_consumed = False

        def iter_bytes(self, chunk_size=None):
            yield b""

    class Consumed(Streaming):
        is_stream_consumed = True

    assert EndpointClient.has_stream_body(Streaming())
    assert not EndpointClient.has_stream_body(Consumed())
    assert not EndpointClient.has_stream_body(object())


@pytest.mark.parametrize("error", [httpx.InvalidURL("bad url"), UnicodeEncodeError("ascii", "你", 0, 1, "no")])
def test_stream_setup_errors_are_wrapped(monkeypatch, error):
    class Client:
        def __init__(self, *a, **kw):
            pass

        def __enter__(self):
            return self

        def __exit__(self, *a):
            return False

        def stream(self, *a, **kw):
            raise error

    monkeypatch.setattr("httpx.Client", Client)
    with pytest.raises(NetworkError) as info:
        with EndpointClient(SettingsStub()).stream(REQ):
            pass
    assert info.value.code == "NETWORK_ERROR"
