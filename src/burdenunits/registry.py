"""Provider registry: maps run-config provider names to provider classes."""

from __future__ import annotations

import importlib
import inspect
import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any

from burdenunits.profiles import AggregationProfile
from burdenunits.providers import (
    AggregateUnitProvider,
    AnnotatedGeneProvider,
    TranscriptRegionProvider,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProviderPluginSpec:
    """Import location of a provider class declared in a run config.

    ``name`` defaults to the class's own ``name`` attribute.
    """

    module: str
    class_name: str
    name: str | None = None

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> ProviderPluginSpec:
        try:
            return cls(module=raw["module"], class_name=raw["class_name"], name=raw.get("name"))
        except KeyError as exc:
            raise ValueError(f"Provider plugin entry is missing {exc.args[0]!r}: {dict(raw)}") from exc


def _key(name: str) -> str:
    key = name.strip().lower()
    if not key:
        raise ValueError("Provider name cannot be empty")
    return key


class ProviderRegistry:
    """Registry of aggregate unit provider classes.

    Every provider is built against an ``AggregationProfile``; ``create``
    supplies the profile and checks the remaining parameters against the
    provider's constructor before instantiating it.
    """

    def __init__(self) -> None:
        self._providers: dict[str, type[AggregateUnitProvider]] = {}

    def register(self, provider_cls: type[AggregateUnitProvider], name: str | None = None) -> None:
        if not (isinstance(provider_cls, type) and issubclass(provider_cls, AggregateUnitProvider)):
            raise TypeError(f"{provider_cls!r} is not an AggregateUnitProvider subclass")

        label = name or getattr(provider_cls, "name", None)
        if not label:
            raise ValueError(f"{provider_cls.__name__} has no provider name")

        key = _key(label)
        if key in self._providers:
            raise ValueError(f"Provider already registered: {label}")
        self._providers[key] = provider_cls

    def register_plugin(self, plugin: ProviderPluginSpec) -> None:
        module = importlib.import_module(plugin.module)
        try:
            provider_cls = getattr(module, plugin.class_name)
        except AttributeError as exc:
            raise ValueError(
                f"Module '{plugin.module}' has no provider class '{plugin.class_name}'"
            ) from exc
        self.register(provider_cls, plugin.name)

    def create(
        self,
        name: str,
        profile: AggregationProfile,
        **params: Any,
    ) -> AggregateUnitProvider:
        """Instantiate provider ``name`` for ``profile`` with its source parameters."""

        key = _key(name)
        if key not in self._providers:
            raise KeyError(
                f"Unknown provider '{name}'. Available: {', '.join(self.available())}"
            )

        provider_cls = self._providers[key]
        try:
            inspect.signature(provider_cls).bind(profile=profile, **params)
        except TypeError as exc:
            raise ValueError(f"Invalid parameters for provider '{key}': {exc}") from exc

        logger.info("Creating provider %s for profile %s", key, profile.name)
        return provider_cls(profile=profile, **params)

    def available(self) -> list[str]:
        return sorted(self._providers)


def build_default_provider_registry(
    plugins: Iterable[ProviderPluginSpec | Mapping[str, Any]] = (),
) -> ProviderRegistry:
    """Create a registry with the built-in providers plus any configured plugins."""

    registry = ProviderRegistry()
    registry.register(AnnotatedGeneProvider)
    registry.register(TranscriptRegionProvider)
    for plugin in plugins:
        if not isinstance(plugin, ProviderPluginSpec):
            plugin = ProviderPluginSpec.from_dict(plugin)
        registry.register_plugin(plugin)
    return registry
