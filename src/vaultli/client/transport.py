"""Synchronous HTTP transport with token injection, retry, and error mapping.

This module provides :class:`Transport`, the blocking HTTP layer underneath
:class:`~vaultli.api.logical.Logical`. It wraps :class:`httpx.Client` and
layers on:

- **Token injection** -- ``X-Vault-Token`` (and ``X-Vault-Namespace``) are
  merged into every outgoing request. :meth:`Transport.with_token` swaps the
  token for the duration of a ``with`` block.
- **Path encoding** -- each segment of a path is percent-encoded before the
  request goes out, so secret names may contain ``:``, ``@``, ``%`` or spaces.
- **Retry with backoff** -- retries on 5xx and network errors with
  exponential delay (1 s, 2 s, 4 s, ...).
- **Error mapping** -- non-2xx responses become
  :class:`~vaultli.exceptions.HTTPClientError` or
  :class:`~vaultli.exceptions.HTTPServerError` carrying the status code and
  the server's ``errors`` list.

Every request method returns the decoded JSON body, or ``None`` when the
server sent no content (e.g. ``204`` on a write or delete).
"""

from __future__ import annotations

import contextlib
import time
from typing import Any, Iterator, Optional
from urllib.parse import quote

import httpx

from vaultli.exceptions import HTTPClientError, HTTPConnectionError, HTTPServerError
from vaultli.models import ClientConfig
from vaultli.output import get_output

TOKEN_HEADER = "X-Vault-Token"
NAMESPACE_HEADER = "X-Vault-Namespace"


def encode_path(path: str) -> str:
    """Percent-encode every ``/``-separated segment of *path*."""
    return "/".join(quote(segment, safe="") for segment in path.split("/"))


class Transport:
    """Synchronous HTTP transport for the Vault REST API.

    Must be used as a context manager so that the underlying
    :class:`httpx.Client` is properly opened and closed.

    Args:
        config: Connection settings (``address``, ``token``, ``namespace``,
            ``timeout``, ``verify_ssl``, ``max_retries``, ``headers``).

    Example::

        with Transport(config) as transport:
            body = transport.get("/v1/secret/app")
    """

    def __init__(self, config: ClientConfig) -> None:
        self._config = config
        self.token: Optional[str] = config.token
        self._client: Optional[httpx.Client] = None

    @property
    def address(self) -> str:
        return self._config.address

    # ------------------------------------------------------------------ #
    # Context manager
    # ------------------------------------------------------------------ #

    def __enter__(self) -> Transport:
        self.open()
        return self

    def __exit__(self, *args: object) -> None:
        self.close()

    def open(self) -> None:
        if self._client is None:
            self._client = httpx.Client(
                base_url=self._config.address,
                timeout=self._config.timeout,
                verify=self._config.verify_ssl,
                follow_redirects=True,
            )

    def close(self) -> None:
        if self._client:
            self._client.close()
            self._client = None

    # ------------------------------------------------------------------ #
    # Scoped credentials
    # ------------------------------------------------------------------ #

    @contextlib.contextmanager
    def with_token(self, token: Optional[str]) -> Iterator[Transport]:
        """Use *token* for requests made inside the block.

        The previous token is restored on exit, including when the block
        raises.
        """
        previous = self.token
        self.token = token
        try:
            yield self
        finally:
            self.token = previous

    # ------------------------------------------------------------------ #
    # Public request methods
    # ------------------------------------------------------------------ #

    def get(
        self,
        path: str,
        params: Optional[dict[str, Any]] = None,
        headers: Optional[dict[str, str]] = None,
    ) -> Any:
        """Send a GET request and return the decoded body."""
        return self.request("GET", path, params=params, headers=headers)

    def list(
        self,
        path: str,
        params: Optional[dict[str, Any]] = None,
        headers: Optional[dict[str, str]] = None,
    ) -> Any:
        """Send a listing request (GET with ``list=true``)."""
        merged_params = {**(params or {}), "list": "true"}
        return self.request("GET", path, params=merged_params, headers=headers)

    def put(
        self,
        path: str,
        body: Optional[str] = None,
        headers: Optional[dict[str, str]] = None,
    ) -> Any:
        """Send a PUT request with a pre-serialised JSON *body*."""
        return self.request("PUT", path, body=body, headers=headers)

    def delete(
        self,
        path: str,
        headers: Optional[dict[str, str]] = None,
    ) -> Any:
        """Send a DELETE request."""
        return self.request("DELETE", path, headers=headers)

    def request(
        self,
        method: str,
        path: str,
        params: Optional[dict[str, Any]] = None,
        headers: Optional[dict[str, str]] = None,
        body: Optional[str] = None,
    ) -> Any:
        """Make an HTTP request with token injection, retry, and error mapping.

        Args:
            method: HTTP method (GET, PUT, DELETE).
            path: Unencoded URL path, e.g. ``/v1/secret/b:@c``.
            params: Query parameters.
            headers: Extra request headers; they override configured ones.
            body: Raw JSON string body.

        Returns:
            The decoded JSON body, or ``None`` if the response was empty.

        Raises:
            HTTPClientError: On 4xx.
            HTTPServerError: On 5xx after all retries are exhausted.
            HTTPConnectionError: On network / timeout errors after all retries.
        """
        merged_headers: dict[str, str] = {"Accept": "application/json"}
        merged_headers.update(self._auth_headers())
        merged_headers.update(self._config.headers)
        merged_headers.update(headers or {})
        if body is not None:
            merged_headers.setdefault("Content-Type", "application/json")

        response = self._execute_with_retry(
            method, encode_path(path), merged_headers, params or {}, body,
        )
        self._map_response_error(response)
        return _decode_body(response)

    # ------------------------------------------------------------------ #
    # Private helpers
    # ------------------------------------------------------------------ #

    def _auth_headers(self) -> dict[str, str]:
        headers: dict[str, str] = {}
        if self.token:
            headers[TOKEN_HEADER] = self.token
        if self._config.namespace:
            headers[NAMESPACE_HEADER] = self._config.namespace
        return headers

    def _execute_with_retry(
        self,
        method: str,
        path: str,
        headers: dict[str, str],
        params: dict[str, Any],
        body: str | None,
    ) -> httpx.Response:
        """Execute the HTTP request with exponential-backoff retry.

        Retries on 5xx status codes and connection / timeout errors up to
        ``max_retries`` times. The delay doubles each attempt: 1 s, 2 s, 4 s, ...
        """
        self.open()
        assert self._client is not None

        max_retries = self._config.max_retries
        output = get_output()

        for attempt in range(max_retries + 1):
            try:
                response = self._client.request(
                    method=method,
                    url=path,
                    headers=headers,
                    params=params,
                    content=body,
                )
            except (httpx.ConnectError, httpx.TimeoutException, httpx.NetworkError) as exc:
                if attempt < max_retries:
                    delay = 2 ** attempt
                    output.debug(
                        f"Connection error: {exc}, retrying in {delay}s "
                        f"(attempt {attempt + 1}/{max_retries})"
                    )
                    time.sleep(delay)
                    continue
                raise HTTPConnectionError(self.address, str(exc)) from exc

            if response.status_code >= 500 and attempt < max_retries:
                delay = 2 ** attempt
                output.debug(
                    f"Server error {response.status_code}, retrying in {delay}s "
                    f"(attempt {attempt + 1}/{max_retries})"
                )
                time.sleep(delay)
                continue

            output.debug(f"{method} {path} -> {response.status_code}")
            return response

        raise AssertionError("unreachable")  # pragma: no cover

    def _map_response_error(self, response: httpx.Response) -> None:
        """Raise a typed exception for error HTTP status codes."""
        status = response.status_code
        if status < 400:
            return

        errors: list[str] = []
        try:
            detail = response.json()
            if isinstance(detail, dict) and isinstance(detail.get("errors"), list):
                errors = [str(e) for e in detail["errors"]]
        except ValueError:
            if response.text:
                errors = [response.text[:200]]

        if status >= 500:
            raise HTTPServerError(self.address, status, errors)
        raise HTTPClientError(self.address, status, errors)


def _decode_body(response: httpx.Response) -> Any:
    """Return the JSON-decoded body, or ``None`` for an empty one."""
    if not response.content:
        return None
    return response.json()
