"""Working-directory selection.

Picking a directory writes it twice: once as the plain ``WORKING_DIR`` value
and once merged into the ``APP_CONFIG`` object as ``directoryPath``. The two
writes are independent; when the second fails the first is left in place and
the mismatch is logged.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional

from ..errors import PersistenceError
from ..settings import APP_CONFIG_KEY, WORKING_DIR_KEY
from ..shell.interfaces import DirectoryPicker, Navigation
from ..storage.persistent_store import PersistentStore

logger = logging.getLogger(__name__)

DEFAULT_LANDING_ROUTE = "/apps"


class DirectoryOutcomeStatus(str, Enum):
    APPLIED = "applied"
    CANCELLED = "cancelled"


@dataclass
class DirectoryOutcome:
    status: DirectoryOutcomeStatus
    path: Optional[str] = None
    action: Optional[str] = None  # "reload" | "navigate"

    @classmethod
    def cancelled(cls) -> "DirectoryOutcome":
        return cls(DirectoryOutcomeStatus.CANCELLED)

    @property
    def applied(self) -> bool:
        return self.status is DirectoryOutcomeStatus.APPLIED

    def to_dict(self) -> Dict[str, Any]:
        return {"outcome": self.status.value, "path": self.path, "action": self.action}


def merge_app_config(current: Any, path: str) -> Dict[str, Any]:
    """Return ``current`` with ``directoryPath`` set; unknown keys are kept."""
    base = dict(current) if isinstance(current, dict) else {}
    base["directoryPath"] = path
    return base


class DirectorySelectionFlow:
    def __init__(
        self,
        picker: DirectoryPicker,
        store: PersistentStore,
        navigation: Navigation,
        landing_route: str = DEFAULT_LANDING_ROUTE,
    ):
        self.picker = picker
        self.store = store
        self.navigation = navigation
        self.landing_route = landing_route

    async def on_prompt_closed(self, confirmed: bool) -> DirectoryOutcome:
        """Continue to the picker only if the confirmation prompt was accepted."""
        if confirmed is not True:
            return DirectoryOutcome.cancelled()
        return await self.select_directory()

    async def select_directory(self) -> DirectoryOutcome:
        paths = await self.picker.open_directory()
        logger.debug("[directory] picker returned %s", paths)
        if not paths:
            return DirectoryOutcome.cancelled()

        path = paths[0]
        await self._persist(path)

        location = self.navigation.current_location()
        logger.debug("[directory] current location %s", location)
        if location == self.landing_route:
            # navigating to the current route would not re-initialise anything
            await self.navigation.reload()
            action = "reload"
        else:
            await self.navigation.navigate(self.landing_route)
            action = "navigate"

        logger.info("[directory] applied %s (%s)", path, action)
        return DirectoryOutcome(DirectoryOutcomeStatus.APPLIED, path=path, action=action)

    # ------------------------------------------------------------------
    async def _persist(self, path: str) -> None:
        try:
            await self.store.set(WORKING_DIR_KEY, path)
        except Exception as exc:
            raise PersistenceError(f"Could not save working directory: {exc}") from exc

        try:
            current = await self.store.get(APP_CONFIG_KEY)
            await self.store.set(APP_CONFIG_KEY, merge_app_config(current or {}, path))
        except Exception as exc:
            logger.warning(
                "[directory] %s saved as %s but %s was not updated; values are out of sync",
                path,
                WORKING_DIR_KEY,
                APP_CONFIG_KEY,
            )
            raise PersistenceError(f"Could not update {APP_CONFIG_KEY}: {exc}", partial=True) from exc
