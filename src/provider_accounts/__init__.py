"""Local accounts and impersonation for EIP-1193 Ethereum providers.

This library wraps any JSON-RPC transport so that account and signing
methods are served from in-memory keys or dev-node impersonation, while
every other method is forwarded untouched.
"""

from .accounts import AccountRegistry, SigningAccount
from .chain import ChainClient, ChainClientCache, ChainDescriptor
from .config import (
    AccountsConfig,
    FixesConfig,
    ImpersonationConfig,
    ProviderConfig,
)
from .dispatch import HandlerTable
from .exceptions import (
    AccountUnavailableError,
    MethodNotImplementedError,
    MissingMandatoryFieldsError,
    ProviderAccountsError,
    SigningUnavailableError,
    UnsupportedTransactionTypeError,
    ValidationError,
)
from .policy import ImpersonationPolicy
from .provider import AccountsProvider, extend_provider_with_accounts
from .resolver import (
    ImpersonatedSend,
    LocalSend,
    SendPath,
    SendPlan,
    SigningResolver,
)
from .signer import LocalSigner, Signer
from .transactions import (
    AccessListTransaction,
    FeeMarketTransaction,
    LegacyTransaction,
    NormalizedTransaction,
    missing_mandatory_fields,
    normalize_transaction,
    transaction_format,
)
from .transport import ProviderTransport, RPCImpersonator, TransportProvider
from .types import (
    BroadcastStrategy,
    Handler,
    ImpersonationMode,
    Impersonator,
    RPCMethod,
    TransactionFormat,
    Transport,
)

__version__ = "0.1.0"

__all__ = [
    # Entry points
    "AccountsProvider",
    "extend_provider_with_accounts",
    # Configuration
    "AccountsConfig",
    "FixesConfig",
    "ImpersonationConfig",
    "ProviderConfig",
    # Components
    "AccountRegistry",
    "SigningAccount",
    "ImpersonationPolicy",
    "SigningResolver",
    "SendPath",
    "SendPlan",
    "LocalSend",
    "ImpersonatedSend",
    "HandlerTable",
    "ChainClient",
    "ChainClientCache",
    "ChainDescriptor",
    "LocalSigner",
    "Signer",
    # Transactions
    "LegacyTransaction",
    "AccessListTransaction",
    "FeeMarketTransaction",
    "NormalizedTransaction",
    "normalize_transaction",
    "missing_mandatory_fields",
    "transaction_format",
    # Transports
    "ProviderTransport",
    "TransportProvider",
    "RPCImpersonator",
    # Types and enums
    "BroadcastStrategy",
    "Handler",
    "ImpersonationMode",
    "Impersonator",
    "RPCMethod",
    "TransactionFormat",
    "Transport",
    # Exceptions
    "ProviderAccountsError",
    "AccountUnavailableError",
    "SigningUnavailableError",
    "UnsupportedTransactionTypeError",
    "MissingMandatoryFieldsError",
    "MethodNotImplementedError",
    "ValidationError",
]
