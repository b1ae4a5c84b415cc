"""The single place substrates are constructed, by string id."""

from __future__ import annotations

from typing import Callable, ClassVar, Optional

from a3index.access_path import AdaptiveAccessPath, SubstrateConfig
from a3index.adaptive_kd import AdaptiveKdAccessPath
from a3index.static_kd import StaticKdAccessPath

Builder = Callable[[SubstrateConfig], AdaptiveAccessPath]


class SubstrateFactory:
    """A registry of substrate builders keyed by id."""

    _instance: ClassVar[Optional["SubstrateFactory"]] = None

    def __init__(self) -> None:
        self._builders: dict[str, Builder] = {}

    @classmethod
    def instance(cls) -> "SubstrateFactory":
        """The process-wide registry, holding the built-in substrates."""
        if cls._instance is None:
            factory = cls()
            factory.register_substrate("adaptive_kd", AdaptiveKdAccessPath)
            factory.register_substrate("static_kd", StaticKdAccessPath)
            cls._instance = factory
        return cls._instance

    def register_substrate(self, substrate_id: str, builder: Builder) -> None:
        """Register ``builder`` under ``substrate_id``; duplicates are rejected."""
        if substrate_id in self._builders:
            raise ValueError(
                f"SubstrateFactory: substrate already registered: {substrate_id}"
            )
        self._builders[substrate_id] = builder

    def create(self, substrate_id: str, config: SubstrateConfig) -> AdaptiveAccessPath:
        """Construct the substrate registered under ``substrate_id``."""
        try:
            builder = self._builders[substrate_id]
        except KeyError:
            raise ValueError(
                f"SubstrateFactory: unknown substrate: {substrate_id}"
            ) from None
        return builder(config)

    def is_registered(self, substrate_id: str) -> bool:
        return substrate_id in self._builders

    def registered_ids(self) -> list[str]:
        """All registered ids, sorted."""
        return sorted(self._builders)