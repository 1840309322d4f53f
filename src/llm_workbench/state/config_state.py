"""Owner of the committed LLM configuration.

Only ``dispatch`` changes the committed value. When a persistent store is
attached the new value is written under ``LLM_CONFIG`` first; the in-memory
value only changes once that write succeeded, and subscribers are notified
over the message bus last.
"""

from __future__ import annotations

import logging
from typing import Callable

from ..communication.message_bus import MessageBus
from ..errors import PersistenceError
from ..llm.catalog import ProviderModelCatalog
from ..settings import LLM_CONFIG_KEY, LLMConfiguration, RuntimeSettings
from ..storage.persistent_store import PersistentStore

logger = logging.getLogger(__name__)

CONFIG_CHANGED_TOPIC = "llm-config:changed"


class ConfigStateStore:
    def __init__(
        self,
        initial: LLMConfiguration,
        bus: MessageBus | None = None,
        persistent: PersistentStore | None = None,
    ):
        self._config = initial
        self.bus = bus or MessageBus()
        self.persistent = persistent

    @classmethod
    async def load(
        cls,
        persistent: PersistentStore,
        settings: RuntimeSettings,
        catalog: ProviderModelCatalog,
        bus: MessageBus | None = None,
    ) -> "ConfigStateStore":
        """Hydrate from ``LLM_CONFIG``; fall back to the runtime defaults."""
        try:
            raw = await persistent.get(LLM_CONFIG_KEY)
        except Exception as exc:
            raise PersistenceError(f"Could not read {LLM_CONFIG_KEY}: {exc}") from exc

        if isinstance(raw, dict) and raw.get("provider") and raw.get("model"):
            initial = LLMConfiguration(**raw)
        else:
            provider = settings.provider
            model = settings.model or catalog.first_model(provider) or ""
            initial = LLMConfiguration(provider=provider, model=model)
        logger.debug("[config] loaded provider=%s model=%s", initial.provider, initial.model)
        return cls(initial, bus=bus, persistent=persistent)

    # ------------------------------------------------------------------
    def snapshot(self) -> LLMConfiguration:
        return self._config.model_copy()

    def subscribe(self, cb: Callable[[LLMConfiguration], None]) -> Callable[[], None]:
        return self.bus.subscribe(CONFIG_CHANGED_TOPIC, cb)

    async def dispatch(self, config: LLMConfiguration) -> None:
        """Replace the committed configuration and notify subscribers."""
        if self.persistent is not None:
            try:
                await self.persistent.set(LLM_CONFIG_KEY, config.to_dict())
            except Exception as exc:
                raise PersistenceError(f"Could not write {LLM_CONFIG_KEY}: {exc}") from exc
        self._config = config.model_copy()
        self.bus.publish(CONFIG_CHANGED_TOPIC, self.snapshot())
