"""HTTP-side collaborators.

In the web shell the browser owns both the folder dialog and the router, so
the picker replays what the client sent and navigation records the decision
for the response instead of acting on it.
"""

from __future__ import annotations

from typing import List, Optional, Sequence

from .interfaces import DirectoryPicker, Navigation


class RequestDirectoryPicker(DirectoryPicker):
    def __init__(self, paths: Sequence[str]):
        self.paths = [p for p in paths if p]

    async def open_directory(self) -> List[str]:
        return list(self.paths)


class RecordingNavigation(Navigation):
    def __init__(self, location: str):
        self.location = location
        self.action: Optional[str] = None
        self.target: Optional[str] = None

    def current_location(self) -> str:
        return self.location

    async def navigate(self, path: str) -> None:
        self.action = "navigate"
        self.target = path
        self.location = path

    async def reload(self) -> None:
        self.action = "reload"
        self.target = self.location
