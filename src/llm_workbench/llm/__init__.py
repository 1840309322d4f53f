"""Provider/model catalog helpers."""

from __future__ import annotations

from .catalog import PROVIDER_MODEL_MAP, ProviderModelCatalog, default_catalog

__all__ = [
    "PROVIDER_MODEL_MAP",
    "ProviderModelCatalog",
    "default_catalog",
]
