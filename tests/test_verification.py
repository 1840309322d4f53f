import asyncio

import pytest
import requests

from llm_workbench.errors import TRANSPORT_FALLBACK_MESSAGE, VerificationTransportError
from llm_workbench.services.verification import HttpVerificationService


class _Response:
    def __init__(self, status_code=200, body=None, text=""):
        self.status_code = status_code
        self._body = body
        self.text = text

    def json(self):
        if self._body is None:
            raise ValueError("no json")
        return self._body

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error", response=self)


class _Session:
    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.calls = []

    def post(self, url, json=None, headers=None, timeout=None):
        self.calls.append((url, json, timeout))
        if self.error is not None:
            raise self.error
        return self.response


def test_success_payload():
    session = _Session(_Response(body={"status": "success"}))
    service = HttpVerificationService("http://backend/", timeout=5, session=session)
    result = asyncio.run(service.verify("openai", "gpt-4"))
    assert result.ok
    assert session.calls == [("http://backend/llm/verify", {"provider": "openai", "model": "gpt-4"}, 5)]


def test_non_success_status_is_not_an_error():
    service = HttpVerificationService("http://backend", session=_Session(_Response(body={"status": "failure", "message": "bad key"})))
    result = asyncio.run(service.verify("openai", "gpt-4"))
    assert not result.ok
    assert result.message == "bad key"


def test_http_error_passes_backend_message():
    response = _Response(status_code=502, body={"message": "provider unreachable"})
    service = HttpVerificationService("http://backend", session=_Session(response))
    with pytest.raises(VerificationTransportError) as excinfo:
        asyncio.run(service.verify("openai", "gpt-4"))
    assert excinfo.value.message == "provider unreachable"


def test_network_error_uses_fallback():
    service = HttpVerificationService("http://backend", session=_Session(error=requests.ConnectionError("refused")))
    with pytest.raises(VerificationTransportError) as excinfo:
        asyncio.run(service.verify("openai", "gpt-4"))
    assert excinfo.value.message == TRANSPORT_FALLBACK_MESSAGE


def test_malformed_body_uses_fallback():
    service = HttpVerificationService("http://backend", session=_Session(_Response(body={"unexpected": True})))
    with pytest.raises(VerificationTransportError) as excinfo:
        asyncio.run(service.verify("openai", "gpt-4"))
    assert excinfo.value.message == TRANSPORT_FALLBACK_MESSAGE


@pytest.mark.parametrize("status", [None, 0])
def test_odd_status_values_are_not_success(status):
    service = HttpVerificationService("http://backend", session=_Session(_Response(body={"status": status})))
    result = asyncio.run(service.verify("openai", "gpt-4"))
    assert not result.ok
