"""Custom exception classes for log2trello.

This module defines the exception hierarchy for transport failures against
the Trello API and for misuse of the board → list → card selection flow.
"""

from __future__ import annotations


class Log2TrelloError(Exception):
    """Base exception for all log2trello errors"""

    pass


class TransportError(Log2TrelloError):
    """Raised when an HTTP request to Trello fails.

    Covers connection errors, timeouts and non-2xx responses. Never retried.

    Attributes:
        status_code: HTTP status code, or None when no response was received
        response_text: Raw response body (if any) for debugging
    """

    def __init__(
        self, message: str, status_code: int | None = None, response_text: str | None = None
    ):
        self.status_code = status_code
        self.response_text = response_text
        super().__init__(message)


class TrelloAuthenticationError(TransportError):
    """Raised when API credentials are invalid or lack access (401/403)"""

    pass


class TrelloServerError(TransportError):
    """Raised when Trello's servers return an error (500/502/503/504)"""

    pass


class MalformedResponseError(Log2TrelloError):
    """Raised when a Trello response cannot be parsed.

    This can occur when:
    - The body is not valid JSON
    - A required field (``boards``, ``id``, ``name``...) is missing
    - A field has an unexpected type
    """

    pass


class NotFoundError(Log2TrelloError):
    """Raised when a board, list or card lookup finds no matching entry"""

    pass


class PreconditionError(Log2TrelloError):
    """Raised when an operation is invoked before a required prior step.

    Resolution:
        Follow the selection order: populate_boards() → set_current_board()
        → populate_lists() → set_current_list() → new_card() / upload_card().
    """

    pass
