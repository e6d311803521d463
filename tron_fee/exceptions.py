"""TRON Fee Estimator Exceptions.

Custom exceptions raised while estimating transaction fees.
"""

from __future__ import annotations

from typing import Any


class TronFeeError(Exception):
    """Base exception for all fee estimator errors."""

    pass


class InvalidAddressError(TronFeeError):
    """Raised when an address is neither a valid T-address nor 41.. hex.

    Attributes:
        label: Which input the address came from (e.g., "from", "token").
        address: The rejected value.
    """

    def __init__(self, label: str, address: Any) -> None:
        self.label = label
        self.address = address
        super().__init__(
            f"Invalid {label} address: {address} (expect T-address or 41.. hex)"
        )


class ConfigurationError(TronFeeError):
    """Raised when an environment setting has an unusable value.

    Attributes:
        variable: Name of the offending environment variable.
        value: The rejected value.
    """

    def __init__(self, variable: str, value: Any, expected: str) -> None:
        self.variable = variable
        self.value = value
        super().__init__(f"Bad {variable}={value!r} (expect {expected})")


class MissingChainParameterError(TronFeeError):
    """Raised when the node does not report a required chain parameter."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Missing chain parameter {name}")


class InvalidPriceValueError(TronFeeError):
    """Raised when a price value is not a finite number."""

    def __init__(self, value: Any, source: str = "price") -> None:
        self.value = value
        self.source = source
        super().__init__(f"Bad {source} value: {value!r}")


class InvalidParameterError(TronFeeError):
    """Raised when caller-supplied call parameters are malformed."""

    pass


class MissingArgumentError(TronFeeError):
    """Raised when a required command argument is absent.

    Attributes:
        names: Option names that were missing, in declaration order.
    """

    def __init__(self, names: list[str]) -> None:
        self.names = names
        super().__init__("Missing " + " ".join(f"--{n}" for n in names))


class UnknownCommandError(TronFeeError):
    """Raised when the CLI receives a command it does not know."""

    def __init__(self, command: str) -> None:
        self.command = command
        super().__init__(f"Unknown command: {command}")


class RemoteServiceError(TronFeeError):
    """Raised when the TRON node cannot be reached or returns an error.

    Attributes:
        message: Human-readable error message.
        status_code: HTTP status code, if a response was received.
        details: Raw error payload from the node, if any.
    """

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        details: Any = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.details = details

    def __str__(self) -> str:
        if self.status_code is not None:
            return f"[{self.status_code}] {self.message}"
        return self.message

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(message={self.message!r}, "
            f"status_code={self.status_code})"
        )


class RemoteAuthenticationError(RemoteServiceError):
    """Raised when the node provider rejects or requires an API key.

    Attributes:
        provider: Provider name the hint refers to (e.g., "TronQL").
        hint: What to configure to fix the problem.
    """

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        provider: str | None = None,
        hint: str | None = None,
    ) -> None:
        super().__init__(message, status_code=status_code)
        self.provider = provider
        self.hint = hint

    def __str__(self) -> str:
        text = self.message
        if self.provider:
            text = f"{self.provider}: {text}"
        if self.hint:
            text = f"{text}\n{self.hint}"
        return text


class RemoteTimeoutError(RemoteServiceError):
    """Raised when a request to the node times out."""

    def __init__(self, message: str = "Request timed out") -> None:
        super().__init__(message)
