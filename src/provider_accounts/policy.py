"""Impersonation eligibility rules."""

from __future__ import annotations

from .accounts import AccountRegistry
from .config import ImpersonationConfig
from .types import ImpersonationMode, Impersonator


class ImpersonationPolicy:
    """Decide whether an address may be impersonated.

    Address comparisons ignore case, both against the registry and against
    the configured allow-list.
    """

    def __init__(self, config: ImpersonationConfig | None, registry: AccountRegistry):
        self._config = config
        self._registry = registry

    @property
    def configured(self) -> bool:
        return self._config is not None

    @property
    def impersonator(self) -> Impersonator | None:
        return self._config.impersonator if self._config is not None else None

    @property
    def forces_impersonation(self) -> bool:
        """True when every send goes through impersonation, local keys or not."""
        return self._config is not None and self._config.mode is ImpersonationMode.ALWAYS

    def should_impersonate(self, address: str) -> bool:
        config = self._config
        if config is None:
            return False
        if config.mode is ImpersonationMode.ALWAYS:
            return True
        if config.mode is ImpersonationMode.UNKNOWN:
            return self._registry.find(address) is None
        if config.mode is ImpersonationMode.LIST:
            return address.lower() in config.addresses
        return False
