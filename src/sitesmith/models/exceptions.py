"""
Exceptions raised by the completion client.

Each error class maps to one way a generation request can fail so the
project store can roll back and show the user a readable reason while the
log keeps the underlying cause.
"""
from __future__ import annotations

from typing import Optional


class CompletionError(Exception):
    """
    Base exception for failures talking to the chat-completion endpoint.

    Args:
        message: Human-readable description of the error.
        status_code: HTTP status returned by the endpoint, when there was one.
        cause: Optional underlying exception that triggered the failure.
    """

    def __init__(
        self,
        message: str,
        *,
        status_code: Optional[int] = None,
        cause: Optional[Exception] = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.__cause__ = cause


class AuthError(CompletionError):
    """
    Raised when the API key is missing, invalid or expired (HTTP 401).
    """


class RequestError(CompletionError):
    """
    Raised for any other non-success HTTP status. The message is the one the
    endpoint reported, or a generic one built from the status code.
    """


class EmptyResponseError(CompletionError):
    """
    Raised when the endpoint answered successfully but without usable content.
    """


class TransportError(CompletionError):
    """
    Raised when the request never completed, e.g. a connection failure.
    """
