"""Type definitions shared across the provider layer."""

from collections.abc import Awaitable, Callable
from enum import Enum
from typing import Any, Protocol, runtime_checkable


class RPCMethod(str, Enum):
    """JSON-RPC methods handled by this layer rather than the transport."""

    ETH_SEND_TRANSACTION = "eth_sendTransaction"
    ETH_ACCOUNTS = "eth_accounts"
    ETH_REQUEST_ACCOUNTS = "eth_requestAccounts"
    PERSONAL_SIGN = "personal_sign"
    ETH_SIGN = "eth_sign"
    ETH_SIGN_TRANSACTION = "eth_signTransaction"
    ETH_SIGN_TYPED_DATA = "eth_signTypedData"
    ETH_SIGN_TYPED_DATA_V4 = "eth_signTypedData_v4"
    ETH_GET_TRANSACTION_COUNT = "eth_getTransactionCount"

    # Issued by this layer towards the transport
    ETH_SEND_RAW_TRANSACTION = "eth_sendRawTransaction"
    ETH_CHAIN_ID = "eth_chainId"


class TransactionFormat(Enum):
    """Fee-pricing formats, keyed by their wire ``type`` tag."""

    LEGACY = "0x0"
    ACCESS_LIST = "0x1"
    FEE_MARKET = "0x2"


class ImpersonationMode(str, Enum):
    """Which senders may be impersonated."""

    ALWAYS = "always"
    UNKNOWN = "unknown"
    LIST = "list"


class BroadcastStrategy(str, Enum):
    """How locally signed transactions reach the network."""

    RAW = "raw"  # eth_sendRawTransaction straight on the transport
    CLIENT = "client"  # through the cached chain client


@runtime_checkable
class Transport(Protocol):
    """EIP-1193 style request interface."""

    async def request(self, method: str, params: list[Any] | None = None) -> Any: ...


@runtime_checkable
class Impersonator(Protocol):
    """Something able to unlock an address on the target node."""

    async def impersonate_account(self, address: str) -> None: ...


Handler = Callable[[list[Any]], Awaitable[Any]]
