"""Signing capability used by registry accounts."""

from __future__ import annotations

import json
from collections.abc import Mapping
from typing import Any, Protocol, runtime_checkable

from eth_account.messages import SignableMessage, encode_defunct
from eth_account.signers.local import LocalAccount
from eth_utils import is_0x_prefixed, is_hexstr
from web3 import Web3

from .exceptions import ValidationError


@runtime_checkable
class Signer(Protocol):
    @property
    def address(self) -> str:  # EIP-55
        ...

    def sign_transaction(self, transaction: Mapping[str, Any]) -> bytes: ...

    def sign_message(self, message: str | bytes) -> bytes:
        """Sign ``message`` under the EIP-191 personal-message prefix."""

    def sign_typed_data(self, typed_data: Mapping[str, Any] | str) -> bytes: ...


class LocalSigner:
    """``Signer`` backed by an in-memory ``eth_account`` key."""

    def __init__(self, account: LocalAccount):
        self._account = account

    @property
    def address(self) -> str:
        return self._account.address

    def sign_transaction(self, transaction: Mapping[str, Any]) -> bytes:
        tx = dict(transaction)
        if tx.get("to"):
            tx["to"] = Web3.to_checksum_address(tx["to"])
        return bytes(self._account.sign_transaction(tx).raw_transaction)

    def sign_message(self, message: str | bytes) -> bytes:
        return bytes(self._account.sign_message(personal_message(message)).signature)

    def sign_typed_data(self, typed_data: Mapping[str, Any] | str) -> bytes:
        if isinstance(typed_data, str):
            try:
                typed_data = json.loads(typed_data)
            except ValueError as exc:
                raise ValidationError(
                    "Typed data must be a JSON object", field="typedData", value=typed_data
                ) from exc
        if not isinstance(typed_data, Mapping):
            raise ValidationError(
                "Typed data must be a JSON object", field="typedData", value=typed_data
            )
        signed = self._account.sign_typed_data(full_message=dict(typed_data))
        return bytes(signed.signature)


def personal_message(message: str | bytes) -> SignableMessage:
    """Wrap ``message`` in the EIP-191 ``\\x19Ethereum Signed Message`` envelope.

    This is the only place the prefix is applied. Even-length ``0x`` hex
    strings are treated as raw bytes, following the wallet convention for
    ``personal_sign``; any other string, odd-length hex included, is signed
    as UTF-8 text.
    """

    if isinstance(message, bytes | bytearray):
        return encode_defunct(primitive=bytes(message))
    if is_0x_prefixed(message) and is_hexstr(message) and len(message) % 2 == 0:
        return encode_defunct(hexstr=message)
    return encode_defunct(text=message)
