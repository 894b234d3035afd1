"""Report logged exceptions as Trello cards.

The host application's log stream is Python's ``logging`` module (and,
optionally, ``sys.excepthook`` for exceptions nobody caught). Every log event
is classified into a ``LogEventKind``; only ``EXCEPTION`` events create a card.

    >>> session.set_current_list("Crashes")
    >>> registration = session.initialize_exception_handling()
    >>> try:
    ...     1 / 0
    ... except ZeroDivisionError:
    ...     logging.exception("Level load failed")   # → new card in "Crashes"
    >>> registration.unsubscribe()
"""

from __future__ import annotations

import logging
import sys
import traceback
from dataclasses import dataclass
from enum import Enum
from types import TracebackType
from typing import Any, Callable

from log2trello.config import TrelloSettings
from log2trello.exceptions import PreconditionError
from log2trello.logging_config import is_own_record
from log2trello.models import Card
from log2trello.system_info import SystemInformation
from log2trello.transport import TrelloTransport
from log2trello.trello_client import TrelloSession

logger = logging.getLogger("log2trello.exception_hook")

ExceptHook = Callable[..., Any]


class LogEventKind(Enum):
    """Class of a log event"""

    LOG = "log"
    WARNING = "warning"
    ERROR = "error"
    ASSERT = "assert"
    EXCEPTION = "exception"


@dataclass(frozen=True)
class LogEvent:
    message: str
    stack_trace: str
    kind: LogEventKind


def log_event_from_record(record: logging.LogRecord) -> LogEvent:
    """Classify a ``LogRecord``

    Records carrying exception info are EXCEPTION events: the condition is the
    formatted exception line and the stack trace is the formatted traceback.
    Everything else is classified by level.
    """
    if record.exc_info and record.exc_info[1] is not None:
        exc_type, exc_value, exc_tb = record.exc_info
        condition = "".join(traceback.format_exception_only(exc_type, exc_value)).strip()
        message = record.getMessage()
        if message and message != condition:
            condition = f"{condition} ({message})"
        return LogEvent(condition, "".join(traceback.format_tb(exc_tb)), LogEventKind.EXCEPTION)

    if record.levelno >= logging.ERROR:
        kind = LogEventKind.ERROR
    elif record.levelno >= logging.WARNING:
        kind = LogEventKind.WARNING
    else:
        kind = LogEventKind.LOG
    return LogEvent(record.getMessage(), record.stack_info or "", kind)


class ExceptionReporter:
    """Turn exception events into cards on a fixed list

    A fresh ``TrelloSession`` is created for each event so reports never share
    selection state with any other flow. Events are not de-duplicated.
    """

    def __init__(
        self,
        api_key: str,
        token: str,
        list_id: str,
        transport: TrelloTransport | None = None,
        system_info: SystemInformation | None = None,
        device_info: bool = True,
        graphics_info: bool = True,
        processor_info: bool = True,
    ):
        if not list_id:
            raise PreconditionError(
                "Cannot report exceptions without a target list, select a list first."
            )
        self.api_key = api_key
        self.token = token
        self.list_id = list_id
        self.transport = transport
        self.system_info = system_info
        self.device_info = device_info
        self.graphics_info = graphics_info
        self.processor_info = processor_info

    @classmethod
    def from_session(cls, session: TrelloSession, **kwargs: Any) -> ExceptionReporter:
        """Report into the list currently selected on ``session``"""
        kwargs.setdefault("transport", session.transport)
        kwargs.setdefault("system_info", session.system_info)
        return cls(session.api_key, session.token, session.current_list_id, **kwargs)

    @classmethod
    def from_settings(cls, settings: TrelloSettings, **kwargs: Any) -> ExceptionReporter:
        """Resolve ``settings.board_name``/``list_name`` once and report into that list

        Raises:
            PreconditionError: If the settings name no board or list
            NotFoundError: If the board or list does not exist
            TransportError: If the lookups fail
        """
        if not settings.board_name or not settings.list_name:
            raise PreconditionError(
                "Exception reporting needs TRELLO_BOARD_NAME and TRELLO_LIST_NAME."
            )
        session = TrelloSession(
            settings.api_key,
            settings.token,
            transport=kwargs.get("transport"),
            timeout=settings.timeout,
        )
        session.populate_boards()
        session.set_current_board(settings.board_name)
        session.populate_lists()
        session.set_current_list(settings.list_name)
        return cls.from_session(session, **kwargs)

    def new_session(self) -> TrelloSession:
        session = TrelloSession(
            self.api_key, self.token, transport=self.transport, system_info=self.system_info
        )
        session.current_list_id = self.list_id
        return session

    def handle_log_event(
        self, message: str, stack_trace: str, kind: LogEventKind
    ) -> Card | None:
        """Upload an exception card for EXCEPTION events; ignore the rest

        Returns:
            The uploaded card, or None if the event was ignored

        Raises:
            TransportError: If the upload fails
        """
        if kind is not LogEventKind.EXCEPTION:
            return None
        logger.debug(f"Reporting exception to Trello: {message}")
        return self.new_session().upload_exception_card(
            message,
            stack_trace,
            device_info=self.device_info,
            graphics_info=self.graphics_info,
            processor_info=self.processor_info,
        )

    def handle_uncaught(
        self,
        exc_type: type[BaseException],
        exc_value: BaseException,
        exc_tb: TracebackType | None,
    ) -> Card | None:
        condition = "".join(traceback.format_exception_only(exc_type, exc_value)).strip()
        return self.handle_log_event(
            condition, "".join(traceback.format_tb(exc_tb)), LogEventKind.EXCEPTION
        )


class TrelloExceptionHandler(logging.Handler):
    """``logging`` handler forwarding every record to an ``ExceptionReporter``

    Records from the log2trello loggers are skipped so a failing upload can
    never report itself. Upload errors go through ``Handler.handleError``.
    """

    def __init__(self, reporter: ExceptionReporter, level: int = logging.NOTSET):
        super().__init__(level)
        self.reporter = reporter

    def emit(self, record: logging.LogRecord) -> None:
        if is_own_record(record):
            return
        event = log_event_from_record(record)
        try:
            self.reporter.handle_log_event(event.message, event.stack_trace, event.kind)
        except Exception:
            self.handleError(record)


class ExceptionHandlingRegistration:
    """Handle returned by ``initialize_exception_handling``

    Call ``unsubscribe()`` (or leave the ``with`` block) to detach the handler
    and restore the previous ``sys.excepthook``.
    """

    def __init__(
        self,
        handler: TrelloExceptionHandler,
        target_logger: logging.Logger,
        previous_excepthook: ExceptHook | None = None,
        excepthook: ExceptHook | None = None,
    ):
        self.handler = handler
        self.target_logger = target_logger
        self.previous_excepthook = previous_excepthook
        self.excepthook = excepthook
        self.active = True

    def unsubscribe(self) -> None:
        if not self.active:
            return
        self.target_logger.removeHandler(self.handler)
        # Only restore if nobody replaced our hook in the meantime
        if self.excepthook is not None and sys.excepthook is self.excepthook:
            sys.excepthook = self.previous_excepthook or sys.__excepthook__
        self.active = False
        logger.info("Exception handling disabled")

    def __enter__(self) -> ExceptionHandlingRegistration:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.unsubscribe()


def initialize_exception_handling(
    reporter: ExceptionReporter,
    target_logger: logging.Logger | None = None,
    install_excepthook: bool = False,
) -> ExceptionHandlingRegistration:
    """Start reporting exceptions logged to ``target_logger`` (root logger by default)

    Args:
        reporter: Where exception events are sent
        target_logger: Logger to attach the handler to
        install_excepthook: Also report exceptions that reach ``sys.excepthook``;
            the previous hook still runs afterwards
    """
    target = target_logger or logging.getLogger()
    handler = TrelloExceptionHandler(reporter)
    target.addHandler(handler)

    previous_hook: ExceptHook | None = None
    hook: ExceptHook | None = None
    if install_excepthook:
        previous_hook = sys.excepthook

        def report_uncaught(
            exc_type: type[BaseException],
            exc_value: BaseException,
            exc_tb: TracebackType | None,
        ) -> None:
            # Ctrl-C and sys.exit() are not crashes
            if not issubclass(exc_type, Exception):
                previous_hook(exc_type, exc_value, exc_tb)
                return
            try:
                reporter.handle_uncaught(exc_type, exc_value, exc_tb)
            finally:
                previous_hook(exc_type, exc_value, exc_tb)

        hook = report_uncaught
        sys.excepthook = hook

    logger.info("Initialized exception handling")
    return ExceptionHandlingRegistration(handler, target, previous_hook, hook)
