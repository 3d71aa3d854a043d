"""
User-facing text for ledger errors.

Pure lookups keyed by ErrorKind; every kind has a message and at least
one suggested action so callers never have to show a raw exception.
"""

from typing import Dict, List, Tuple

from .core.recovery.errors import ErrorKind, LedgerError

GENERIC_MESSAGE = "An unexpected error occurred. Please try again."
GENERIC_ACTIONS: Tuple[str, ...] = ("Try again", "Contact support if the problem persists")

_NETWORK_MESSAGE = "Network connection failed. Please check your internet connection and try again."
_WALLET_MESSAGE = "Please connect your wallet to continue."

USER_MESSAGES: Dict[ErrorKind, str] = {
    ErrorKind.NETWORK_ERROR: _NETWORK_MESSAGE,
    ErrorKind.CONNECTION_TIMEOUT: _NETWORK_MESSAGE,
    ErrorKind.RPC_ERROR: "The ledger node returned an error. Please try again shortly.",
    ErrorKind.AUTHENTICATION_FAILED: _WALLET_MESSAGE,
    ErrorKind.WALLET_NOT_CONNECTED: _WALLET_MESSAGE,
    ErrorKind.INSUFFICIENT_PERMISSIONS: "Your account is not allowed to perform this action.",
    ErrorKind.TRANSACTION_FAILED: "Transaction failed. Please try again or contact support if the problem persists.",
    ErrorKind.TRANSACTION_REJECTED: "Transaction was rejected. Please try again.",
    ErrorKind.INSUFFICIENT_FUNDS: "Insufficient funds. Please add more tokens to your wallet.",
    ErrorKind.GAS_LIMIT_EXCEEDED: "The transaction ran out of gas. Please try again with a higher limit.",
    ErrorKind.TRANSACTION_TIMEOUT: "The transaction is taking longer than expected. Please check its status before retrying.",
    ErrorKind.CONTRACT_ERROR: "The contract rejected this request.",
    ErrorKind.INVALID_ENTITY_ID: "The asset ID is not valid.",
    ErrorKind.ENTITY_NOT_FOUND: "Asset not found. It may have been removed or the ID is incorrect.",
    ErrorKind.ENTITY_ALREADY_LISTED: "This asset is already listed for sale.",
    ErrorKind.ENTITY_NOT_OWNED: "You do not own this asset.",
    ErrorKind.VALIDATION_ERROR: "Some of the information provided is invalid.",
    ErrorKind.INVALID_INPUT: "Some of the information provided is invalid.",
    ErrorKind.MISSING_REQUIRED_FIELD: "A required field is missing.",
    ErrorKind.RATE_LIMITED: "Too many requests. Please wait a moment before trying again.",
    ErrorKind.SERVICE_UNAVAILABLE: "Service temporarily unavailable. Please try again later.",
    ErrorKind.CANCELLED: "The request was cancelled.",
}

SUGGESTED_ACTIONS: Dict[ErrorKind, Tuple[str, ...]] = {
    ErrorKind.NETWORK_ERROR: ("Check your internet connection", "Try again in a moment"),
    ErrorKind.CONNECTION_TIMEOUT: ("Check your internet connection", "Try again in a moment"),
    ErrorKind.RPC_ERROR: ("Try again in a moment", "Check service status"),
    ErrorKind.AUTHENTICATION_FAILED: ("Connect your wallet", "Refresh the page"),
    ErrorKind.WALLET_NOT_CONNECTED: ("Connect your wallet", "Refresh the page"),
    ErrorKind.INSUFFICIENT_PERMISSIONS: ("Switch to an authorized account",),
    ErrorKind.TRANSACTION_FAILED: ("Try again", "Check transaction details"),
    ErrorKind.TRANSACTION_REJECTED: ("Try again", "Check transaction details"),
    ErrorKind.INSUFFICIENT_FUNDS: ("Add tokens to your wallet", "Check your balance"),
    ErrorKind.GAS_LIMIT_EXCEEDED: ("Increase the gas limit", "Try again"),
    ErrorKind.TRANSACTION_TIMEOUT: ("Check the transaction status", "Try again in a moment"),
    ErrorKind.CONTRACT_ERROR: ("Check transaction details", "Contact support if the problem persists"),
    ErrorKind.INVALID_ENTITY_ID: ("Verify the asset ID",),
    ErrorKind.ENTITY_NOT_FOUND: ("Verify the asset ID", "Refresh the marketplace"),
    ErrorKind.ENTITY_ALREADY_LISTED: ("View the existing listing",),
    ErrorKind.ENTITY_NOT_OWNED: ("Check which wallet is connected",),
    ErrorKind.VALIDATION_ERROR: ("Review the form and correct any errors",),
    ErrorKind.INVALID_INPUT: ("Review the form and correct any errors",),
    ErrorKind.MISSING_REQUIRED_FIELD: ("Fill in all required fields",),
    ErrorKind.RATE_LIMITED: ("Wait a moment before trying again", "Reduce request frequency"),
    ErrorKind.SERVICE_UNAVAILABLE: ("Try again later", "Check service status"),
    ErrorKind.CANCELLED: ("Try again",),
    ErrorKind.UNKNOWN_ERROR: GENERIC_ACTIONS,
}


def user_message(error: LedgerError) -> str:
    """Human-readable sentence for an error."""
    message = USER_MESSAGES.get(error.kind)
    if message:
        return message
    return error.message or GENERIC_MESSAGE


def suggested_actions(kind: ErrorKind) -> List[str]:
    """Things the user can do about an error of this kind."""
    return list(SUGGESTED_ACTIONS.get(kind, GENERIC_ACTIONS))
