"""Per-request choice between local signing, impersonation and rejection."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import ClassVar

from .accounts import AccountRegistry, SigningAccount
from .exceptions import AccountUnavailableError, SigningUnavailableError
from .policy import ImpersonationPolicy
from .types import Impersonator

logger = logging.getLogger(__name__)


class SendPath(Enum):
    LOCAL = "local"
    IMPERSONATE = "impersonate"


@dataclass(frozen=True)
class LocalSend:
    address: str
    account: SigningAccount

    path: ClassVar[SendPath] = SendPath.LOCAL


@dataclass(frozen=True)
class ImpersonatedSend:
    address: str
    impersonator: Impersonator

    path: ClassVar[SendPath] = SendPath.IMPERSONATE


SendPlan = LocalSend | ImpersonatedSend


class SigningResolver:
    """Combine the account registry and impersonation policy."""

    def __init__(self, registry: AccountRegistry, policy: ImpersonationPolicy):
        self._registry = registry
        self._policy = policy

    def resolve_send(self, address: str | None) -> SendPlan:
        """Pick the execution path for ``eth_sendTransaction`` from ``address``."""

        if not address:
            raise AccountUnavailableError(
                "Transaction has no 'from' address",
                impersonation_configured=self._policy.configured,
            )

        if not self._policy.forces_impersonation:
            account = self._registry.find(address)
            if account is not None:
                logger.debug("Signing transaction from %s locally", address)
                return LocalSend(address, account)

        impersonator = self._policy.impersonator
        if impersonator is None:
            raise AccountUnavailableError(
                f"Account {address} not available",
                address=address,
                impersonation_configured=False,
            )

        if not self._policy.should_impersonate(address):
            raise AccountUnavailableError(
                f"Account {address} not available, not even as impersonation",
                address=address,
                impersonation_configured=True,
            )

        logger.debug("Routing transaction from %s through impersonation", address)
        return ImpersonatedSend(address, impersonator)

    def require_account(self, address: str | None, method: str) -> SigningAccount:
        """Return the local account for a signing method; never impersonates."""

        account = self._registry.find(address)
        if account is None:
            raise SigningUnavailableError(
                f"Account {address} not available for signing",
                address=address,
                method=method,
            )
        return account
