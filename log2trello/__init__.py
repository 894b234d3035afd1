"""File bug reports and logged exceptions as Trello cards."""

from __future__ import annotations

# Import configuration from extracted module
from log2trello.config import TrelloSettings

# Import exception hook from extracted module
from log2trello.exception_hook import (
    ExceptionHandlingRegistration,
    ExceptionReporter,
    LogEvent,
    LogEventKind,
    TrelloExceptionHandler,
    initialize_exception_handling,
)

# Import exceptions from extracted module
from log2trello.exceptions import (
    Log2TrelloError,
    MalformedResponseError,
    NotFoundError,
    PreconditionError,
    TransportError,
    TrelloAuthenticationError,
    TrelloServerError,
)

# Import issue categories
from log2trello.issues import IssueDept, IssueType, format_card_title

# Import logging configuration
from log2trello.logging_config import setup_logging

# Import record types
from log2trello.models import Attachment, Board, Card, CardSummary, Label, TrelloList

# Import system information
from log2trello.system_info import SystemInformation

# Import Trello session from extracted module
from log2trello.trello_client import TrelloSession

# Import transport
from log2trello.transport import TrelloTransport

__version__ = "0.1.0"

__all__ = [
    # Core classes
    "TrelloSession",
    "TrelloTransport",
    "TrelloSettings",
    "ExceptionReporter",
    "TrelloExceptionHandler",
    "ExceptionHandlingRegistration",
    "initialize_exception_handling",
    "setup_logging",
    # Records
    "Board",
    "TrelloList",
    "CardSummary",
    "Card",
    "Label",
    "Attachment",
    "SystemInformation",
    "IssueType",
    "IssueDept",
    "format_card_title",
    "LogEvent",
    "LogEventKind",
    # Exceptions
    "Log2TrelloError",
    "TransportError",
    "TrelloAuthenticationError",
    "TrelloServerError",
    "MalformedResponseError",
    "NotFoundError",
    "PreconditionError",
]
