"""Conversion of wire-format transactions into typed, signable transactions."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, fields
from typing import Any, ClassVar

from .exceptions import (
    MissingMandatoryFieldsError,
    UnsupportedTransactionTypeError,
    ValidationError,
)
from .types import TransactionFormat

# dataclass attribute -> wire / eth_account key
_WIRE_KEYS = {
    "to": "to",
    "data": "data",
    "gas": "gas",
    "nonce": "nonce",
    "chain_id": "chainId",
    "value": "value",
    "gas_price": "gasPrice",
    "max_fee_per_gas": "maxFeePerGas",
    "max_priority_fee_per_gas": "maxPriorityFeePerGas",
    "access_list": "accessList",
}

_FEE_FIELDS = {
    TransactionFormat.LEGACY: ("gasPrice",),
    TransactionFormat.ACCESS_LIST: ("gasPrice",),
    TransactionFormat.FEE_MARKET: ("maxFeePerGas", "maxPriorityFeePerGas"),
}


@dataclass(frozen=True)
class _TransactionFields:
    to: str | None = None
    data: str | None = None
    gas: int | None = None
    nonce: int | None = None
    chain_id: int | None = None
    value: int | None = None

    format: ClassVar[TransactionFormat]
    type_id: ClassVar[int | None] = None

    def as_signable(self) -> dict[str, Any]:
        """Return the ``eth_account`` transaction dict, omitting absent fields."""

        signable: dict[str, Any] = {}
        if self.type_id is not None:
            signable["type"] = self.type_id
        for item in fields(self):
            value = getattr(self, item.name)
            if value is not None:
                signable[_WIRE_KEYS[item.name]] = value
        return signable


@dataclass(frozen=True)
class LegacyTransaction(_TransactionFields):
    gas_price: int | None = None

    format: ClassVar[TransactionFormat] = TransactionFormat.LEGACY


@dataclass(frozen=True)
class AccessListTransaction(_TransactionFields):
    gas_price: int | None = None
    access_list: list[Any] | None = None

    format: ClassVar[TransactionFormat] = TransactionFormat.ACCESS_LIST
    type_id: ClassVar[int | None] = 1


@dataclass(frozen=True)
class FeeMarketTransaction(_TransactionFields):
    max_fee_per_gas: int | None = None
    max_priority_fee_per_gas: int | None = None
    access_list: list[Any] | None = None

    format: ClassVar[TransactionFormat] = TransactionFormat.FEE_MARKET
    type_id: ClassVar[int | None] = 2


NormalizedTransaction = LegacyTransaction | AccessListTransaction | FeeMarketTransaction


def transaction_format(raw: Mapping[str, Any]) -> TransactionFormat:
    """Select the transaction format from the wire ``type`` tag."""

    tx_type = raw.get("type")
    if tx_type is None:
        return TransactionFormat.LEGACY

    try:
        if isinstance(tx_type, str):
            tag = hex(int(tx_type, 16))
        elif isinstance(tx_type, int) and not isinstance(tx_type, bool):
            tag = hex(tx_type)
        else:
            raise UnsupportedTransactionTypeError(tx_type)
        return TransactionFormat(tag)
    except ValueError as exc:
        raise UnsupportedTransactionTypeError(tx_type) from exc


def missing_mandatory_fields(raw: Mapping[str, Any]) -> list[str]:
    """List every field a fully specified transaction would still need."""

    required = ("from", "gas", "nonce") + _FEE_FIELDS[transaction_format(raw)]
    return [name for name in required if raw.get(name) is None]


def normalize_transaction(
    raw: Mapping[str, Any], *, strict: bool = False
) -> NormalizedTransaction:
    """Decode a hex-encoded JSON-RPC transaction into its typed form.

    Fields absent from ``raw`` stay ``None`` so that omission and zero remain
    distinguishable. With ``strict`` every mandatory field must be present.
    """

    tx_format = transaction_format(raw)

    if strict:
        missing = missing_mandatory_fields(raw)
        if missing:
            raise MissingMandatoryFieldsError(missing, details={"from": raw.get("from")})

    common: dict[str, Any] = {
        "to": raw.get("to"),
        "data": raw.get("data"),
        "gas": _decode_int(raw, "gas"),
        "nonce": _decode_int(raw, "nonce"),
        "chain_id": _decode_int(raw, "chainId"),
        "value": _decode_int(raw, "value"),
    }

    if tx_format is TransactionFormat.FEE_MARKET:
        return FeeMarketTransaction(
            **common,
            max_fee_per_gas=_decode_int(raw, "maxFeePerGas"),
            max_priority_fee_per_gas=_decode_int(raw, "maxPriorityFeePerGas"),
            access_list=raw.get("accessList"),
        )
    if tx_format is TransactionFormat.ACCESS_LIST:
        return AccessListTransaction(
            **common,
            gas_price=_decode_int(raw, "gasPrice"),
            access_list=raw.get("accessList"),
        )
    return LegacyTransaction(**common, gas_price=_decode_int(raw, "gasPrice"))


def _decode_int(raw: Mapping[str, Any], key: str) -> int | None:
    value = raw.get(key)
    if value is None:
        return None
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    if isinstance(value, str):
        try:
            return int(value, 16)
        except ValueError:
            pass
    raise ValidationError(f"Field '{key}' must be a hex quantity", field=key, value=value)
