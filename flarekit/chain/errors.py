"""
Error types for chain and ledger operations.

This module provides the exception hierarchy every command raises into, and
an ErrorHandler that classifies raw library exceptions so they can be
logged and wrapped consistently. Nothing here retries: a failed call is
terminal for the command that made it.
"""

from typing import Optional, Dict, Any
import logging

logger = logging.getLogger(__name__)


class FlareKitError(Exception):
    """Base exception for flarekit operations."""
    pass


class UsageError(FlareKitError):
    """Raised when command arguments are missing or malformed."""
    pass


class ValidationError(FlareKitError):
    """Raised when input validation fails."""
    pass


class NetworkError(FlareKitError):
    """Raised when network-related errors occur."""
    pass


class ContractError(FlareKitError):
    """Raised when contract-related errors occur."""
    pass


class InsufficientFundsError(FlareKitError):
    """Raised when a local balance check shows a transaction would fail."""
    pass


class CredentialError(FlareKitError):
    """Raised when a keystore, password or wallet file cannot be used."""
    pass


class LedgerError(FlareKitError):
    """Raised when an XRPL request or payment fails."""

    def __init__(self, message: str, result_code: Optional[str] = None):
        super().__init__(message)
        self.result_code = result_code


class AccountNotActivatedError(LedgerError):
    """Raised when the sending XRPL account does not exist on ledger."""
    pass


class DestinationNotActivatedError(LedgerError):
    """Raised when a payment is too small to create the destination account."""
    pass


class ErrorHandler:
    """
    Centralized error classification for chain calls.

    Maps library exceptions onto categories for logging, and wraps them
    into the flarekit hierarchy at the call site.
    """

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger or logging.getLogger(__name__)

    def classify_error(self, error: Exception) -> str:
        """
        Classify an error into a category for appropriate handling.

        Args:
            error: Exception to classify

        Returns:
            Error category string
        """
        error_str = str(error).lower()

        # Rate limiting errors
        if any(keyword in error_str for keyword in ['rate limit', 'too many requests', '429']):
            return 'rate_limit'

        # Contract execution errors
        if any(keyword in error_str for keyword in ['revert', 'execution reverted', 'out of gas']):
            return 'contract'

        # Network connectivity errors
        if any(keyword in error_str for keyword in ['connection', 'timeout', 'timed out', 'network', 'dns']):
            return 'network'

        # Validation errors
        if any(keyword in error_str for keyword in ['invalid', 'bad request', '400']):
            return 'validation'

        return 'unknown'

    def wrap(self, error: Exception, label: str) -> FlareKitError:
        """
        Convert a raw exception into the flarekit hierarchy.

        Args:
            error: Exception raised by web3 or the transport
            label: Short description of the failed operation

        Returns:
            FlareKitError subclass carrying the original message
        """
        if isinstance(error, FlareKitError):
            return error

        category = self.classify_error(error)
        message = f"{label} failed: {error}"
        if category in ('network', 'rate_limit'):
            return NetworkError(message)
        if category == 'validation':
            return ValidationError(message)
        return ContractError(message)

    def log_error(self, error: Exception, context: Dict[str, Any]):
        """
        Log error with appropriate level and context.

        Args:
            error: Exception to log
            context: Additional context for logging
        """
        error_category = self.classify_error(error)

        log_data = {
            'error_type': type(error).__name__,
            'error_category': error_category,
            'error_message': str(error),
            **context
        }

        if error_category == 'validation':
            self.logger.warning("Validation error occurred", extra=log_data)
        elif error_category == 'contract':
            self.logger.error("Contract execution failed", extra=log_data)
        elif error_category == 'rate_limit':
            self.logger.info("Rate limit encountered", extra=log_data)
        else:
            self.logger.warning("Chain call error", extra=log_data)
