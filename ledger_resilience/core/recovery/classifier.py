"""
Error Normalization

Turns anything an operation raised into a LedgerError. Already tagged
errors pass through untouched; everything else is classified from its
message first and its exception type second.
"""

from typing import Any, Dict, Optional, Tuple

import httpx

from .errors import DEFAULT_RETRYABLE_KINDS, ErrorKind, LedgerError

OPERATION_KINDS = ("query", "transaction")

# Checked in order; the first group with a matching substring wins.
NETWORK_PATTERNS = ("network", "connection")
TIMEOUT_PATTERNS = ("timeout", "timed out")
AUTH_PATTERNS = ("authentication", "wallet")
TRANSACTION_PATTERNS = ("transaction",)
FUNDS_PATTERNS = ("insufficient funds",)
GAS_PATTERNS = ("gas limit",)
RATE_LIMIT_PATTERNS = ("rate limit", "too many requests")
UNAVAILABLE_PATTERNS = ("service unavailable",)
DOMAIN_PATTERNS = ("property",)
VALIDATION_PATTERNS = ("validation",)


def _timeout_kind(op_kind: str) -> ErrorKind:
    if op_kind == "transaction":
        return ErrorKind.TRANSACTION_TIMEOUT
    return ErrorKind.CONNECTION_TIMEOUT


def classify_message(message: str, op_kind: str = "query") -> Optional[ErrorKind]:
    """Map a message to a kind via substring cues, or None if nothing matches."""
    text = message.lower()

    rules: Tuple[Tuple[Tuple[str, ...], ErrorKind], ...] = (
        (NETWORK_PATTERNS, ErrorKind.NETWORK_ERROR),
        (TIMEOUT_PATTERNS, _timeout_kind(op_kind)),
        (AUTH_PATTERNS, ErrorKind.AUTHENTICATION_FAILED),
        (TRANSACTION_PATTERNS, ErrorKind.TRANSACTION_FAILED),
        (FUNDS_PATTERNS, ErrorKind.INSUFFICIENT_FUNDS),
        (GAS_PATTERNS, ErrorKind.GAS_LIMIT_EXCEEDED),
        (RATE_LIMIT_PATTERNS, ErrorKind.RATE_LIMITED),
        (UNAVAILABLE_PATTERNS, ErrorKind.SERVICE_UNAVAILABLE),
        (DOMAIN_PATTERNS, ErrorKind.CONTRACT_ERROR),
        (VALIDATION_PATTERNS, ErrorKind.VALIDATION_ERROR),
    )
    for patterns, kind in rules:
        if any(p in text for p in patterns):
            return kind
    return None


def _parse_retry_after(response: httpx.Response) -> Optional[float]:
    value = response.headers.get("retry-after")
    if value is None:
        return None
    try:
        seconds = float(value)
    except ValueError:
        # HTTP-date form is not honoured
        return None
    return seconds if seconds >= 0 else None


def _classify_status(status: int, op_kind: str) -> ErrorKind:
    if status == 429:
        return ErrorKind.RATE_LIMITED
    if status in (502, 503, 504):
        return ErrorKind.SERVICE_UNAVAILABLE
    if status in (401, 403):
        return ErrorKind.AUTHENTICATION_FAILED
    if status == 408:
        return _timeout_kind(op_kind)
    if status == 404:
        return ErrorKind.ENTITY_NOT_FOUND
    if status in (400, 422):
        return ErrorKind.INVALID_INPUT
    if status >= 500:
        return ErrorKind.RPC_ERROR
    return ErrorKind.UNKNOWN_ERROR


def classify_http_status(
    error: httpx.HTTPStatusError, op_kind: str = "query"
) -> Tuple[ErrorKind, Dict[str, Any]]:
    """
    Classify an HTTP error response by its status code.

    Returns the kind plus the LedgerError fields taken from the response
    (status code, Retry-After on 429).
    """
    status = error.response.status_code
    extra: Dict[str, Any] = {"code": status}
    if status == 429:
        retry_after = _parse_retry_after(error.response)
        if retry_after is not None:
            extra["retry_after_seconds"] = retry_after
    return _classify_status(status, op_kind), extra


def classify_exception_type(error: BaseException, op_kind: str = "query") -> ErrorKind:
    """Classify by exception type when the message carried no cue."""
    # httpx.TimeoutException is a TransportError, so it goes first
    if isinstance(error, (httpx.TimeoutException, TimeoutError)):
        return _timeout_kind(op_kind)

    if isinstance(error, (httpx.TransportError, ConnectionError)):
        return ErrorKind.NETWORK_ERROR

    if isinstance(error, (ValueError, TypeError)):
        return ErrorKind.INVALID_INPUT

    return ErrorKind.UNKNOWN_ERROR


def normalize(raw: Any, op_kind: str = "query") -> LedgerError:
    """
    Convert a raised value into a LedgerError.

    Args:
        raw: Whatever the wrapped operation raised
        op_kind: "query" or "transaction"; decides how timeouts are tagged

    Returns:
        `raw` itself if it is already a LedgerError, otherwise a new one
        with the original kept as its cause
    """
    if op_kind not in OPERATION_KINDS:
        raise ValueError(f"op_kind must be one of {OPERATION_KINDS}, got {op_kind!r}")

    if isinstance(raw, LedgerError):
        return raw

    message = str(raw)
    extra: Dict[str, Any] = {}

    # Status codes are authoritative; the message embeds the request URL
    if isinstance(raw, httpx.HTTPStatusError):
        kind, extra = classify_http_status(raw, op_kind)
    else:
        kind = classify_message(message, op_kind)
        if kind is None:
            if isinstance(raw, BaseException):
                kind = classify_exception_type(raw, op_kind)
            else:
                kind = ErrorKind.UNKNOWN_ERROR

    if not message:
        message = type(raw).__name__

    return LedgerError(
        kind,
        message,
        code=extra.get("code"),
        retryable=kind in DEFAULT_RETRYABLE_KINDS,
        retry_after_seconds=extra.get("retry_after_seconds"),
        context={"operation_kind": op_kind},
        cause=raw if isinstance(raw, BaseException) else None,
    )
