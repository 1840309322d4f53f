import asyncio

import pytest

from llm_workbench.core.directory_flow import (
    DirectoryOutcomeStatus,
    DirectorySelectionFlow,
    merge_app_config,
)
from llm_workbench.errors import PersistenceError

from tests.fakes import FakeNavigation, FakePicker, RecordingStore


def _flow(paths, location="/", initial=None, fail_on=None):
    store = RecordingStore(initial, fail_on=fail_on)
    nav = FakeNavigation(location)
    picker = FakePicker(paths)
    return DirectorySelectionFlow(picker, store, nav, landing_route="/apps"), store, nav, picker


def test_merge_keeps_existing_keys():
    assert merge_app_config({"a": 1}, "/x") == {"a": 1, "directoryPath": "/x"}
    assert merge_app_config(None, "/x") == {"directoryPath": "/x"}


def test_selection_merges_into_app_config():
    flow, store, _, _ = _flow(["/x"], initial={"APP_CONFIG": {"a": 1, "directoryPath": "/old"}})
    outcome = asyncio.run(flow.select_directory())
    assert outcome.status is DirectoryOutcomeStatus.APPLIED
    assert outcome.path == "/x"
    snapshot = store.snapshot()
    assert snapshot["APP_CONFIG"] == {"a": 1, "directoryPath": "/x"}
    assert snapshot["WORKING_DIR"] == "/x"


def test_missing_app_config_defaults_to_empty_object():
    flow, store, _, _ = _flow(["/data/project"])
    asyncio.run(flow.select_directory())
    assert store.snapshot()["APP_CONFIG"] == {"directoryPath": "/data/project"}


def test_first_path_wins():
    flow, store, _, _ = _flow(["/first", "/second"])
    outcome = asyncio.run(flow.select_directory())
    assert outcome.path == "/first"
    assert store.snapshot()["WORKING_DIR"] == "/first"


def test_empty_pick_is_a_no_op():
    flow, store, nav, _ = _flow([], location="/apps")
    outcome = asyncio.run(flow.select_directory())
    assert outcome.status is DirectoryOutcomeStatus.CANCELLED
    assert outcome.path is None
    assert store.writes == []
    assert nav.navigated == []
    assert nav.reloads == 0


def test_reload_when_already_on_landing_route():
    flow, _, nav, _ = _flow(["/x"], location="/apps")
    outcome = asyncio.run(flow.select_directory())
    assert outcome.action == "reload"
    assert nav.reloads == 1
    assert nav.navigated == []


def test_navigate_from_elsewhere():
    flow, _, nav, _ = _flow(["/x"], location="/settings")
    outcome = asyncio.run(flow.select_directory())
    assert outcome.action == "navigate"
    assert nav.navigated == ["/apps"]
    assert nav.reloads == 0


def test_prompt_declined_never_opens_picker():
    flow, store, nav, picker = _flow(["/x"])
    outcome = asyncio.run(flow.on_prompt_closed(False))
    assert outcome.status is DirectoryOutcomeStatus.CANCELLED
    assert picker.opened == 0
    assert store.writes == []


def test_prompt_accepted_runs_selection():
    flow, _, _, picker = _flow(["/x"])
    outcome = asyncio.run(flow.on_prompt_closed(True))
    assert outcome.applied
    assert picker.opened == 1


def test_working_dir_write_failure_is_surfaced():
    flow, store, nav, _ = _flow(["/x"], fail_on={"WORKING_DIR"})
    with pytest.raises(PersistenceError) as excinfo:
        asyncio.run(flow.select_directory())
    assert excinfo.value.partial is False
    assert store.writes == []
    assert nav.navigated == []


def test_app_config_failure_leaves_known_inconsistency(caplog):
    flow, store, nav, _ = _flow(["/x"], initial={"APP_CONFIG": {"directoryPath": "/old"}}, fail_on={"APP_CONFIG"})
    with caplog.at_level("WARNING"):
        with pytest.raises(PersistenceError) as excinfo:
            asyncio.run(flow.select_directory())
    assert excinfo.value.partial is True
    snapshot = store.snapshot()
    assert snapshot["WORKING_DIR"] == "/x"
    assert snapshot["APP_CONFIG"] == {"directoryPath": "/old"}
    assert "out of sync" in caplog.text
    assert nav.navigated == [] and nav.reloads == 0
