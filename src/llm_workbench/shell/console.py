"""Terminal implementations used by the interactive settings CLI."""

from __future__ import annotations

from typing import Callable, List

from .interfaces import DirectoryPicker, Navigation, Notifier


class ConsoleDirectoryPicker(DirectoryPicker):
    """Reads a directory path from the prompt; blank input cancels."""

    def __init__(self, prompt: Callable[[str], str] = input):
        self.prompt = prompt

    async def open_directory(self) -> List[str]:
        answer = self.prompt("directory> ").strip()
        return [answer] if answer else []


class ConsoleNavigation(Navigation):
    def __init__(self, location: str = "/", out: Callable[[str], None] = print):
        self.location = location
        self.out = out
        self.reloads = 0

    def current_location(self) -> str:
        return self.location

    async def navigate(self, path: str) -> None:
        self.location = path
        self.out(f"-> {path}")

    async def reload(self) -> None:
        self.reloads += 1
        self.out(f"(reloaded {self.location})")


class ConsoleNotifier(Notifier):
    def __init__(self, out: Callable[[str], None] = print):
        self.out = out

    def success(self, message: str) -> None:
        self.out(f"[ok] {message}")

    def error(self, message: str) -> None:
        self.out(f"[error] {message}")
