"""Blocking HTTP/JSON transport for the Trello REST API."""

from __future__ import annotations

import logging
from typing import Any, cast

import requests

from log2trello.config import DEFAULT_TIMEOUT
from log2trello.exceptions import (
    MalformedResponseError,
    TransportError,
    TrelloAuthenticationError,
    TrelloServerError,
)

logger = logging.getLogger("log2trello.transport")

TRELLO_API_URL = "https://api.trello.com/1"

# Multipart parts: form field name -> (filename, raw bytes)
FileParts = dict[str, tuple[str, bytes]]


class TrelloTransport:
    """Issue authenticated GET/POST requests and decode the JSON body

    Every request carries ``key`` and ``token`` as query parameters. Each call
    blocks until the response arrives (or the timeout expires) and either
    returns the decoded body or raises. Nothing is retried.
    """

    def __init__(
        self,
        api_key: str,
        token: str,
        base_url: str = TRELLO_API_URL,
        timeout: float = DEFAULT_TIMEOUT,
        verify_ssl: bool = True,
    ):
        self.api_key = api_key
        self.token = token
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.verify_ssl = verify_ssl

    def get(self, endpoint: str, params: dict | None = None, action: str = "Request failed") -> Any:
        """GET ``endpoint`` and return the decoded JSON body"""
        return self._request("GET", endpoint, action, params=params)

    def post(
        self,
        endpoint: str,
        data: dict[str, str],
        files: FileParts | None = None,
        action: str = "Request failed",
    ) -> Any:
        """POST a form body to ``endpoint`` and return the decoded JSON body

        The object already exists remotely once Trello answers 2xx, so a body
        that is empty or not JSON yields None instead of an error.

        Args:
            endpoint: Path below the API root, e.g. ``cards``
            data: Form fields
            files: Binary parts; when given the body is sent as multipart/form-data
            action: Prefix for error messages, e.g. "Could not upload Trello card"
        """
        return self._request("POST", endpoint, action, data=data, files=files or None)

    def _request(self, method: str, endpoint: str, action: str, **kwargs: Any) -> Any:
        url = f"{self.base_url}/{endpoint}"
        params = {"key": self.api_key, "token": self.token}
        extra_params = kwargs.pop("params", None)
        if extra_params:
            params.update(extra_params)

        logger.debug(f"Trello {method} {url}")

        try:
            if method == "GET":
                response = requests.get(
                    url, params=params, timeout=self.timeout, verify=self.verify_ssl
                )
            else:
                response = requests.post(
                    url, params=params, timeout=self.timeout, verify=self.verify_ssl, **kwargs
                )
            response.raise_for_status()
        except requests.HTTPError as e:
            raise self._http_error(action, endpoint, e) from e
        except requests.RequestException as e:
            # Connection refused, DNS failure, timeout...
            raise TransportError(f"{action}: {e}") from e

        try:
            return cast(Any, response.json())
        except ValueError as e:
            if method == "POST":
                logger.debug(f"Trello {method} {url} returned a non-JSON body")
                return None
            raise MalformedResponseError(
                f"{action}: response from {endpoint} is not valid JSON"
            ) from e

    @staticmethod
    def _http_error(action: str, endpoint: str, error: requests.HTTPError) -> TransportError:
        response = error.response
        status_code = response.status_code if response is not None else 0
        response_text = response.text if response is not None else ""

        if status_code in (401, 403):
            return TrelloAuthenticationError(
                f"{action}: HTTP {status_code} for {endpoint}. "
                "Check your Trello API key and token.",
                status_code=status_code,
                response_text=response_text,
            )
        if status_code >= 500:
            return TrelloServerError(
                f"{action}: Trello server error (HTTP {status_code}) for {endpoint}",
                status_code=status_code,
                response_text=response_text,
            )
        return TransportError(
            f"{action}: HTTP {status_code} for {endpoint}: {response_text[:200]}",
            status_code=status_code,
            response_text=response_text,
        )
