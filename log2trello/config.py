"""Environment-based settings for log2trello."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping

from log2trello.exceptions import PreconditionError

DEFAULT_TIMEOUT = 30.0


@dataclass(frozen=True)
class TrelloSettings:
    """Credentials and target list for reporting.

    Attributes:
        api_key: Trello API key
        token: Trello API token (pre-obtained, no auth flow is performed)
        board_name: Board to file cards on (optional)
        list_name: List on that board to file cards in (optional)
        timeout: Per-request timeout in seconds
    """

    api_key: str
    token: str
    board_name: str | None = None
    list_name: str | None = None
    timeout: float = DEFAULT_TIMEOUT

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> TrelloSettings:
        """Read settings from TRELLO_* environment variables.

        Raises:
            PreconditionError: If TRELLO_API_KEY or TRELLO_TOKEN is missing,
                or TRELLO_TIMEOUT is not a positive number
        """
        env = os.environ if environ is None else environ

        api_key = env.get("TRELLO_API_KEY", "")
        token = env.get("TRELLO_TOKEN", "")
        if not api_key or not token:
            raise PreconditionError(
                "Missing Trello credentials: set TRELLO_API_KEY and TRELLO_TOKEN"
            )

        raw_timeout = env.get("TRELLO_TIMEOUT", "")
        timeout = DEFAULT_TIMEOUT
        if raw_timeout:
            try:
                timeout = float(raw_timeout)
            except ValueError as e:
                raise PreconditionError(
                    f"Invalid TRELLO_TIMEOUT: '{raw_timeout}'. Must be a number of seconds."
                ) from e
            if timeout <= 0:
                raise PreconditionError(
                    f"Invalid TRELLO_TIMEOUT: '{raw_timeout}'. Must be greater than zero."
                )

        return cls(
            api_key=api_key,
            token=token,
            board_name=env.get("TRELLO_BOARD_NAME") or None,
            list_name=env.get("TRELLO_LIST_NAME") or None,
            timeout=timeout,
        )
