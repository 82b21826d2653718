"""Tests for the account registry."""

import pytest
from eth_account import Account

from fakes import PRIVATE_KEY_0, PRIVATE_KEY_1, TEST_MNEMONIC, UNKNOWN_ADDRESS
from provider_accounts.accounts import AccountRegistry
from provider_accounts.config import AccountsConfig
from provider_accounts.exceptions import ValidationError


def _address(key: str) -> str:
    return Account.from_key(key).address


def test_private_keys_keep_input_order() -> None:
    registry = AccountRegistry.from_private_keys([PRIVATE_KEY_1, PRIVATE_KEY_0])

    assert registry.addresses == [_address(PRIVATE_KEY_1), _address(PRIVATE_KEY_0)]


def test_duplicate_private_keys_are_not_deduplicated() -> None:
    registry = AccountRegistry.from_private_keys([PRIVATE_KEY_0, PRIVATE_KEY_0])

    assert len(registry) == 2
    assert registry.addresses[0] == registry.addresses[1]


def test_invalid_private_key_raises_validation_error() -> None:
    with pytest.raises(ValidationError) as excinfo:
        AccountRegistry.from_private_keys([PRIVATE_KEY_0, "0x1234"])

    assert excinfo.value.field == "private_keys"
    assert excinfo.value.value == 1


def test_mnemonic_derives_sequential_account_indices() -> None:
    registry = AccountRegistry.from_mnemonic(TEST_MNEMONIC, num_accounts=3)

    Account.enable_unaudited_hdwallet_features()
    expected = [
        Account.from_mnemonic(TEST_MNEMONIC, account_path=f"m/44'/60'/{index}'/0/0").address
        for index in range(3)
    ]
    assert registry.addresses == expected
    assert len(set(registry.addresses)) == 3


def test_mnemonic_defaults_to_ten_accounts() -> None:
    registry = AccountRegistry.from_config(AccountsConfig(mnemonic=TEST_MNEMONIC))

    assert len(registry) == 10


def test_mnemonic_zero_accounts_is_empty() -> None:
    assert len(AccountRegistry.from_mnemonic(TEST_MNEMONIC, num_accounts=0)) == 0


def test_private_keys_take_precedence_over_mnemonic() -> None:
    config = AccountsConfig(private_keys=(PRIVATE_KEY_1,), mnemonic=TEST_MNEMONIC)

    registry = AccountRegistry.from_config(config)

    assert registry.addresses == [_address(PRIVATE_KEY_1)]


def test_missing_key_material_gives_empty_registry() -> None:
    assert len(AccountRegistry.from_config(None)) == 0
    assert len(AccountRegistry.from_config(AccountsConfig())) == 0


class TestLookup:
    """Address lookups ignore case."""

    def setup_method(self) -> None:
        self.registry = AccountRegistry.from_private_keys([PRIVATE_KEY_0, PRIVATE_KEY_1])
        self.address = _address(PRIVATE_KEY_0)

    def test_find_checksum_address(self):
        account = self.registry.find(self.address)
        assert account is not None
        assert account.address == self.address

    def test_find_lowercase_address(self):
        account = self.registry.find(self.address.lower())
        assert account is not None
        assert account.address == self.address

    def test_find_uppercase_hex(self):
        assert self.registry.find("0x" + self.address[2:].upper()) is not None

    def test_unknown_address(self):
        assert self.registry.find(UNKNOWN_ADDRESS) is None
        assert UNKNOWN_ADDRESS not in self.registry

    def test_none_address(self):
        assert self.registry.find(None) is None

    def test_contains(self):
        assert self.address.lower() in self.registry

    def test_first_match_wins(self):
        registry = AccountRegistry.from_private_keys([PRIVATE_KEY_0, PRIVATE_KEY_0])
        accounts = list(registry)
        assert registry.find(self.address) is accounts[0]
