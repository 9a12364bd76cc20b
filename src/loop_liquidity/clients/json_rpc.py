"""JSON-RPC 2.0 client used for both the Starknet node and the wallet bridge."""

from __future__ import annotations

import asyncio
import itertools
from typing import Any

import backoff
import requests

from ..errors import ProviderCallError
from ..logger import TRACE, get_logger

logger = get_logger(__name__)

RETRYABLE_STATUS_CODES = {429, 500, 502, 503, 504}


def is_permanent_http_error(e: Exception) -> bool:
    """True for HTTP errors whose status will not change on retry."""
    return (
        isinstance(e, requests.exceptions.HTTPError)
        and e.response is not None
        and e.response.status_code not in RETRYABLE_STATUS_CODES
    )


class JsonRpcClient:
    """Minimal async JSON-RPC client over ``requests``.

    Transport failures (connection errors, timeouts, 429/5xx) of idempotent
    requests are retried with exponential backoff. Requests sent with
    ``retry=False`` go out exactly once, since a timeout does not tell whether
    the remote side acted on them. A JSON-RPC ``error`` member is not a
    transport failure and is raised immediately as :class:`ProviderCallError`.
    """

    def __init__(
        self,
        url: str,
        *,
        token: str | None = None,
        request_timeout: float = 10.0,
    ):
        self.url = url
        self._request_timeout = request_timeout
        self._ids = itertools.count(1)
        self._session = requests.Session()
        self._session.headers["Content-Type"] = "application/json"
        if token:
            self._session.headers["Authorization"] = f"Bearer {token}"

    async def _post(self, payload: dict[str, Any]) -> requests.Response:
        response = await asyncio.to_thread(
            self._session.post,
            self.url,
            json=payload,
            timeout=self._request_timeout,
        )
        response.raise_for_status()
        return response

    @backoff.on_exception(
        backoff.expo,
        requests.exceptions.RequestException,
        max_tries=5,
        giveup=is_permanent_http_error,
        jitter=backoff.full_jitter,
    )
    async def _post_with_retry(self, payload: dict[str, Any]) -> requests.Response:
        return await self._post(payload)

    async def request(
        self, method: str, params: Any = None, *, retry: bool = True
    ) -> Any:
        """Call ``method`` and return its ``result`` member.

        Args:
            method: JSON-RPC method name
            params: Positional or named parameters, omitted when None
            retry: Retry transport failures; pass False for requests that
                must not be sent twice, such as transaction submissions

        Raises:
            ProviderCallError: If the response carries a JSON-RPC error
            requests.exceptions.RequestException: If the transport fails
        """
        payload: dict[str, Any] = {
            "jsonrpc": "2.0",
            "id": next(self._ids),
            "method": method,
        }
        if params is not None:
            payload["params"] = params

        logger.log(TRACE, "-> %s %s", method, params)
        if retry:
            response = await self._post_with_retry(payload)
        else:
            response = await self._post(payload)
        try:
            body = response.json()
        except ValueError as e:
            raise ProviderCallError(None, f"Invalid JSON-RPC response to {method}") from e

        if not isinstance(body, dict):
            raise ProviderCallError(None, f"Unexpected JSON-RPC response to {method}")

        error = body.get("error")
        if error is not None:
            if isinstance(error, dict):
                raise ProviderCallError(
                    error.get("code"),
                    str(error.get("message", "Unknown error")),
                    error.get("data"),
                )
            raise ProviderCallError(None, str(error))

        logger.log(TRACE, "<- %s %s", method, body.get("result"))
        return body.get("result")

    def close(self) -> None:
        self._session.close()
