from __future__ import annotations

import asyncio

from dotenv import load_dotenv

from llm_workbench.core.directory_flow import DirectorySelectionFlow
from llm_workbench.core.reconciler import CommitResult, SettingsReconciler
from llm_workbench.errors import PersistenceError
from llm_workbench.llm.catalog import default_catalog
from llm_workbench.services.verification import HttpVerificationService
from llm_workbench.settings import RuntimeSettings
from llm_workbench.shell.console import ConsoleDirectoryPicker, ConsoleNavigation, ConsoleNotifier
from llm_workbench.state.config_state import ConfigStateStore
from llm_workbench.storage.persistent_store import JsonFileStore
from llm_workbench.utils.logger import setup_logger


async def run():
    load_dotenv(".env", override=False)
    settings = RuntimeSettings.from_env()
    setup_logger(level=settings.log_level)
    store = JsonFileStore(settings.store_path)
    catalog = default_catalog()
    config_store = await ConfigStateStore.load(store, settings, catalog)
    config_store.subscribe(lambda cfg: print(f"config> {cfg.provider} / {cfg.model}"))

    reconciler = SettingsReconciler(
        config_store,
        catalog,
        HttpVerificationService(settings.backend_url, timeout=settings.verify_timeout),
        ConsoleNotifier(),
    )
    navigation = ConsoleNavigation(location=settings.landing_route)
    flow = DirectorySelectionFlow(ConsoleDirectoryPicker(), store, navigation, settings.landing_route)

    session = reconciler.open()
    print("Settings ready. Commands: /provider X, /model Y, /save, /cancel, /dir, /quit")
    print("providers:", ", ".join(catalog.providers()))

    while True:
        user_input = input("settings> ").strip()
        if user_input.lower() in {"/quit", "quit", "exit"}:
            if session.is_open:
                await reconciler.cancel(session)
            break

        if not session.is_open:
            session = reconciler.open()

        if user_input.startswith("/provider "):
            reconciler.on_provider_changed(session, user_input[10:].strip())
        elif user_input.startswith("/model "):
            reconciler.on_model_changed(session, user_input[7:].strip())
        elif user_input == "/save":
            result = await reconciler.commit(session)
            if result is CommitResult.COMMITTED:
                reconciler.close(session)
                continue
        elif user_input == "/cancel":
            await reconciler.cancel(session)
            continue
        elif user_input == "/dir":
            try:
                outcome = await flow.select_directory()
                print("directory>", outcome.to_dict())
            except PersistenceError as exc:
                print(f"Error: {exc}")
            continue

        print(
            f"selected {session.selected_provider} / {session.selected_model}"
            f" (models: {', '.join(session.filtered_models) or 'none'})"
            f"{' *' if session.has_pending_changes else ''}"
        )
        if session.error_message:
            print("error:", session.error_message)


def main():
    asyncio.run(run())


if __name__ == "__main__":
    main()
