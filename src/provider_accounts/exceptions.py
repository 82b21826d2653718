"""Exception hierarchy for the account-augmented provider."""

from collections.abc import Sequence
from typing import Any


class ProviderAccountsError(Exception):
    """Base exception for all errors raised by this layer."""

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class AccountUnavailableError(ProviderAccountsError):
    """Raised when a transaction sender is neither local nor impersonable."""

    def __init__(
        self,
        message: str,
        address: str | None = None,
        impersonation_configured: bool = False,
        details: dict | None = None,
    ):
        super().__init__(message, details)
        self.address = address
        self.impersonation_configured = impersonation_configured


class SigningUnavailableError(ProviderAccountsError):
    """Raised when a signing method targets an address with no local account."""

    def __init__(
        self,
        message: str,
        address: str | None = None,
        method: str | None = None,
        details: dict | None = None,
    ):
        super().__init__(message, details)
        self.address = address
        self.method = method


class UnsupportedTransactionTypeError(ProviderAccountsError):
    """Raised when a transaction carries an unknown ``type`` tag."""

    def __init__(self, tx_type: Any, details: dict | None = None):
        super().__init__(f"Unsupported transaction type: {tx_type!r}", details)
        self.tx_type = tx_type


class MissingMandatoryFieldsError(ProviderAccountsError):
    """Raised in strict mode when required transaction fields are absent."""

    def __init__(self, fields: Sequence[str], details: dict | None = None):
        self.fields = tuple(fields)
        super().__init__(
            f"Transaction is missing mandatory fields: {', '.join(self.fields)}", details
        )


class ValidationError(ProviderAccountsError):
    """Raised when configuration or request parameters are invalid."""

    def __init__(
        self,
        message: str,
        field: str | None = None,
        value: Any | None = None,
        details: dict | None = None,
    ):
        super().__init__(message, details)
        self.field = field
        self.value = value


class MethodNotImplementedError(ProviderAccountsError):
    """Raised when a method has been deliberately disabled."""

    def __init__(self, method_name: str):
        super().__init__(f"Method '{method_name}' is not implemented")
        self.method_name = method_name
