"""Static mapping from provider identifier to its ordered list of models.

The first model of each list is the one selected when the user switches to
that provider, so keep the preferred default at index 0.
"""

from __future__ import annotations

from typing import Dict, Iterable, List, Mapping, Sequence

PROVIDER_MODEL_MAP: Dict[str, List[str]] = {
    "openai": ["gpt-4o", "gpt-4o-mini", "gpt-4.1", "gpt-4.1-mini", "o3-mini"],
    "anthropic": [
        "claude-3-5-sonnet-latest",
        "claude-3-5-haiku-latest",
        "claude-3-opus-latest",
    ],
    "gemini": ["gemini-1.5-pro", "gemini-1.5-flash"],
    "deepseek": ["deepseek-chat", "deepseek-reasoner"],
}


class ProviderModelCatalog:
    """Read-only view over a provider -> models mapping."""

    def __init__(self, mapping: Mapping[str, Sequence[str]] | None = None):
        source = PROVIDER_MODEL_MAP if mapping is None else mapping
        # copy so later edits to the source mapping never leak in
        self._map: Dict[str, tuple] = {p: tuple(models) for p, models in source.items()}

    def providers(self) -> List[str]:
        return list(self._map.keys())

    def models_for(self, provider: str | None) -> List[str]:
        """Return the models of ``provider``; empty when the provider is unknown."""
        if provider is None:
            return []
        return list(self._map.get(provider, ()))

    def first_model(self, provider: str | None) -> str | None:
        models = self.models_for(provider)
        return models[0] if models else None

    def is_valid(self, provider: str | None, model: str | None) -> bool:
        return model is not None and model in self.models_for(provider)

    def __contains__(self, provider: object) -> bool:
        return provider in self._map

    def __iter__(self) -> Iterable[str]:
        return iter(self._map)

    def __len__(self) -> int:
        return len(self._map)


def default_catalog() -> ProviderModelCatalog:
    return ProviderModelCatalog(PROVIDER_MODEL_MAP)
