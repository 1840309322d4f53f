"""Collaborators the workflows drive but do not own: picker, router, toaster."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import List


class DirectoryPicker(ABC):
    @abstractmethod
    async def open_directory(self) -> List[str]:
        """Prompt for a directory; an empty list means the user dismissed it."""
        ...


class Navigation(ABC):
    @abstractmethod
    def current_location(self) -> str:
        ...

    @abstractmethod
    async def navigate(self, path: str) -> None:
        ...

    @abstractmethod
    async def reload(self) -> None:
        ...


class Notifier(ABC):
    @abstractmethod
    def success(self, message: str) -> None:
        ...

    @abstractmethod
    def error(self, message: str) -> None:
        ...


class LogNotifier(Notifier):
    """Notifier that only writes to the log."""

    def __init__(self, logger: logging.Logger | None = None):
        self.logger = logger or logging.getLogger("llm_workbench.notify")

    def success(self, message: str) -> None:
        self.logger.info("[notify] %s", message)

    def error(self, message: str) -> None:
        self.logger.error("[notify] %s", message)
