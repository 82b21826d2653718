"""Configuration containers for the account-augmented provider."""

from __future__ import annotations

import os
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field

from .exceptions import ValidationError
from .types import BroadcastStrategy, Handler, ImpersonationMode, Impersonator

DEFAULT_NUM_ACCOUNTS = 10

ENV_PRIVATE_KEYS = "PROVIDER_PRIVATE_KEYS"
ENV_MNEMONIC = "PROVIDER_MNEMONIC"
ENV_NUM_ACCOUNTS = "PROVIDER_NUM_ACCOUNTS"


@dataclass(frozen=True)
class AccountsConfig:
    """Key material for the locally controlled accounts.

    Private keys win over a mnemonic when both are supplied.
    """

    private_keys: tuple[str, ...] = ()
    mnemonic: str | None = None
    num_accounts: int = DEFAULT_NUM_ACCOUNTS
    passphrase: str = ""

    def __post_init__(self) -> None:
        object.__setattr__(self, "private_keys", tuple(self.private_keys))
        if self.num_accounts < 0:
            raise ValidationError(
                "num_accounts cannot be negative", field="num_accounts", value=self.num_accounts
            )

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> AccountsConfig:
        """Build the key material from ``PROVIDER_*`` environment variables."""

        env = os.environ if environ is None else environ

        raw_keys = env.get(ENV_PRIVATE_KEYS, "")
        private_keys = tuple(key.strip() for key in raw_keys.split(",") if key.strip())

        raw_count = env.get(ENV_NUM_ACCOUNTS)
        try:
            num_accounts = int(raw_count) if raw_count else DEFAULT_NUM_ACCOUNTS
        except ValueError as exc:
            raise ValidationError(
                f"{ENV_NUM_ACCOUNTS} must be an integer", field="num_accounts", value=raw_count
            ) from exc

        return cls(
            private_keys=private_keys,
            mnemonic=env.get(ENV_MNEMONIC) or None,
            num_accounts=num_accounts,
        )


@dataclass(frozen=True)
class ImpersonationConfig:
    """Impersonation mode plus the authority that performs it."""

    impersonator: Impersonator
    mode: ImpersonationMode = ImpersonationMode.UNKNOWN
    addresses: frozenset[str] = field(default_factory=frozenset)

    def __post_init__(self) -> None:
        try:
            mode = ImpersonationMode(self.mode)
        except ValueError as exc:
            raise ValidationError(
                f"Invalid impersonation mode: {self.mode}", field="mode", value=self.mode
            ) from exc
        object.__setattr__(self, "mode", mode)
        object.__setattr__(self, "addresses", _lowercase_set(self.addresses))

        if mode is not ImpersonationMode.LIST and self.addresses:
            raise ValidationError(
                "An address list is only meaningful in 'list' mode",
                field="addresses",
                value=sorted(self.addresses),
            )


@dataclass(frozen=True)
class FixesConfig:
    """Workarounds for providers with known quirks."""

    pending_nonce: bool = False


@dataclass(frozen=True)
class ProviderConfig:
    """Aggregated configuration used to construct ``AccountsProvider``."""

    accounts: AccountsConfig | None = None
    impersonation: ImpersonationConfig | None = None
    fixes: FixesConfig = FixesConfig()
    broadcast: BroadcastStrategy = BroadcastStrategy.RAW
    strict_fields: bool = False
    sign_transaction_enabled: bool = True
    handlers: Mapping[str, Handler] = field(default_factory=dict)

    def __post_init__(self) -> None:
        try:
            broadcast = BroadcastStrategy(self.broadcast)
        except ValueError as exc:
            raise ValidationError(
                f"Invalid broadcast strategy: {self.broadcast}",
                field="broadcast",
                value=self.broadcast,
            ) from exc
        object.__setattr__(self, "broadcast", broadcast)
        object.__setattr__(self, "handlers", dict(self.handlers))


def _lowercase_set(addresses: Iterable[str]) -> frozenset[str]:
    return frozenset(address.lower() for address in addresses)
