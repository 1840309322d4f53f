from __future__ import annotations

import os
from dataclasses import dataclass, asdict, field
from pathlib import Path
from typing import Any, Dict

from pydantic import BaseModel, ConfigDict

APP_CONFIG_KEY = "APP_CONFIG"
WORKING_DIR_KEY = "WORKING_DIR"
LLM_CONFIG_KEY = "LLM_CONFIG"


class LLMConfiguration(BaseModel):
    """Committed provider/model pair plus any passthrough fields."""

    model_config = ConfigDict(extra="allow")

    provider: str
    model: str

    def with_selection(self, provider: str, model: str) -> "LLMConfiguration":
        """Return a copy with provider/model replaced and extra fields kept."""
        return self.model_copy(update={"provider": provider, "model": model})

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump()


def _default_store_path() -> Path:
    return Path.home() / ".llm_workbench" / "config.json"


@dataclass
class RuntimeSettings:
    """Runtime config read from the environment (and `.env`)."""

    backend_url: str = "http://localhost:8000"
    store_path: Path = field(default_factory=_default_store_path)
    landing_route: str = "/apps"
    verify_timeout: float = 30.0
    provider: str = "openai"  # default provider only; user can change via UI
    model: str | None = None  # determined from the catalog when unset
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "RuntimeSettings":
        defaults = cls()
        store_path = os.getenv("WORKBENCH_STORE_PATH")
        return cls(
            backend_url=os.getenv("WORKBENCH_BACKEND_URL", defaults.backend_url),
            store_path=Path(store_path).expanduser() if store_path else defaults.store_path,
            landing_route=os.getenv("WORKBENCH_LANDING_ROUTE", defaults.landing_route),
            verify_timeout=float(os.getenv("WORKBENCH_VERIFY_TIMEOUT", defaults.verify_timeout)),
            provider=os.getenv("LLM_PROVIDER", defaults.provider).lower(),
            model=os.getenv("LLM_MODEL") or None,
            log_level=os.getenv("LOG_LEVEL", defaults.log_level).upper(),
        )

    def to_dict(self):
        data = asdict(self)
        data["store_path"] = str(self.store_path)
        return data
