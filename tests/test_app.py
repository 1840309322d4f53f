from fastapi.testclient import TestClient

from llm_workbench.app import create_app
from llm_workbench.errors import REJECTED_MESSAGE
from llm_workbench.llm.catalog import ProviderModelCatalog
from llm_workbench.settings import RuntimeSettings

from tests.fakes import CATALOG, FakeVerifier, RecordingStore


def _client(verifier=None, store=None):
    app = create_app(
        settings=RuntimeSettings(provider="openai", landing_route="/apps"),
        store=store if store is not None else RecordingStore(),
        verifier=verifier or FakeVerifier(),
        catalog=ProviderModelCatalog(CATALOG),
    )
    return TestClient(app)


def test_catalog_routes():
    client = _client()
    assert client.get("/providers").json() == ["openai", "anthropic", "empty"]
    assert client.get("/models", params={"provider": "anthropic"}).json() == ["claude-3"]
    assert client.get("/models", params={"provider": "nope"}).json() == []


def test_settings_session_commit_flow():
    client = _client()
    assert client.get("/settings").json() == {"provider": "openai", "model": "gpt-4"}

    opened = client.post("/settings/session").json()
    assert opened["has_pending_changes"] is False
    assert client.post("/settings/session").status_code == 409

    patched = client.patch("/settings/session", json={"provider": "anthropic"}).json()
    assert patched["selected_model"] == "claude-3"
    assert patched["has_pending_changes"] is True

    committed = client.post("/settings/session/commit").json()
    assert committed["result"] == "committed"
    assert client.get("/settings").json()["provider"] == "anthropic"
    # committing closes the session
    assert client.get("/settings/session").status_code == 404


def test_rejected_commit_keeps_session_open():
    client = _client(verifier=FakeVerifier(status="failure"))
    client.post("/settings/session")
    client.patch("/settings/session", json={"model": "gpt-3.5"})
    body = client.post("/settings/session/commit").json()
    assert body["result"] == "rejected"
    assert body["session"]["error_message"] == REJECTED_MESSAGE
    assert client.get("/settings").json()["model"] == "gpt-4"

    reverted = client.delete("/settings/session").json()
    assert reverted == {"provider": "openai", "model": "gpt-4"}
    assert client.get("/settings/session").status_code == 404


def test_directory_route():
    store = RecordingStore({"APP_CONFIG": {"theme": "dark"}})
    client = _client(store=store)

    resp = client.post("/directory", json={"paths": ["/work"], "location": "/apps"})
    assert resp.json() == {"outcome": "applied", "path": "/work", "action": "reload"}
    assert store.snapshot()["APP_CONFIG"] == {"theme": "dark", "directoryPath": "/work"}

    resp = client.post("/directory", json={"paths": ["/other"], "location": "/settings"})
    assert resp.json()["action"] == "navigate"

    resp = client.post("/directory", json={"paths": []})
    assert resp.json() == {"outcome": "cancelled", "path": None, "action": None}


def test_directory_route_persistence_failure():
    client = _client(store=RecordingStore(fail_on={"APP_CONFIG"}))
    resp = client.post("/directory", json={"paths": ["/work"], "location": "/apps"})
    assert resp.status_code == 500
