"""Registry of locally controlled signing accounts."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator, Sequence
from dataclasses import dataclass
from typing import cast

from eth_account import Account
from eth_account.signers.local import LocalAccount

from .config import DEFAULT_NUM_ACCOUNTS, AccountsConfig
from .exceptions import ValidationError
from .signer import LocalSigner, Signer

logger = logging.getLogger(__name__)

HD_PATH_TEMPLATE = "m/44'/60'/{index}'/0/0"


@dataclass(frozen=True)
class SigningAccount:
    """An address together with the capability to sign for it."""

    address: str
    signer: Signer

    def matches(self, address: str | None) -> bool:
        return address is not None and self.address.lower() == address.lower()


class AccountRegistry:
    """Ordered, immutable collection of ``SigningAccount`` entries.

    Duplicates are kept; lookups return the first match.
    """

    def __init__(self, accounts: Iterable[SigningAccount] = ()):
        self._accounts: tuple[SigningAccount, ...] = tuple(accounts)

    @classmethod
    def from_private_keys(cls, private_keys: Sequence[str | bytes]) -> AccountRegistry:
        accounts = []
        for index, key in enumerate(private_keys):
            try:
                local = cast(LocalAccount, Account.from_key(key))
            except Exception as exc:  # noqa: BLE001
                raise ValidationError(
                    "Failed to derive account from private key",
                    field="private_keys",
                    value=index,
                    details={"error": str(exc)},
                ) from exc
            accounts.append(SigningAccount(address=local.address, signer=LocalSigner(local)))

        logger.info("Loaded %s account(s) from private keys", len(accounts))
        return cls(accounts)

    @classmethod
    def from_mnemonic(
        cls,
        mnemonic: str,
        num_accounts: int = DEFAULT_NUM_ACCOUNTS,
        passphrase: str = "",
    ) -> AccountRegistry:
        if num_accounts < 0:
            raise ValidationError(
                "num_accounts cannot be negative", field="num_accounts", value=num_accounts
            )

        Account.enable_unaudited_hdwallet_features()
        accounts = []
        for index in range(num_accounts):
            try:
                local = cast(
                    LocalAccount,
                    Account.from_mnemonic(
                        mnemonic,
                        passphrase=passphrase,
                        account_path=HD_PATH_TEMPLATE.format(index=index),
                    ),
                )
            except Exception as exc:  # noqa: BLE001
                raise ValidationError(
                    "Failed to derive account from mnemonic",
                    field="mnemonic",
                    details={"index": index, "error": str(exc)},
                ) from exc
            accounts.append(SigningAccount(address=local.address, signer=LocalSigner(local)))

        logger.info("Derived %s account(s) from mnemonic", len(accounts))
        return cls(accounts)

    @classmethod
    def from_config(cls, config: AccountsConfig | None) -> AccountRegistry:
        if config is None:
            return cls()
        if config.private_keys:
            return cls.from_private_keys(config.private_keys)
        if config.mnemonic:
            return cls.from_mnemonic(config.mnemonic, config.num_accounts, config.passphrase)
        return cls()

    def find(self, address: str | None) -> SigningAccount | None:
        """Return the first account whose address matches, ignoring case."""
        for account in self._accounts:
            if account.matches(address):
                return account
        return None

    @property
    def addresses(self) -> list[str]:
        return [account.address for account in self._accounts]

    def __contains__(self, address: object) -> bool:
        return isinstance(address, str) and self.find(address) is not None

    def __iter__(self) -> Iterator[SigningAccount]:
        return iter(self._accounts)

    def __len__(self) -> int:
        return len(self._accounts)
