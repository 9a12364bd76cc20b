"""Client for the dashboard HTTP API."""

from __future__ import annotations

import asyncio
from typing import Any

import backoff
import requests

from ..clients.json_rpc import is_permanent_http_error
from ..logger import get_logger

logger = get_logger(__name__)

DASHBOARD_PATH = "/api/dashboard"


@backoff.on_exception(
    backoff.expo,
    requests.exceptions.RequestException,
    max_tries=5,
    giveup=is_permanent_http_error,
    jitter=backoff.full_jitter,
)
async def _get_with_retry(url: str, params: dict[str, str], timeout: float):
    response = await asyncio.to_thread(
        requests.get, url, params=params, timeout=timeout
    )
    response.raise_for_status()
    return response


async def fetch_dashboard_data(
    base_url: str,
    wallet_id: str | None,
    *,
    timeout: float = 10.0,
) -> dict[str, Any] | None:
    """Fetch the dashboard payload for ``wallet_id``.

    Returns None without issuing a request when no wallet id is known.

    Raises:
        requests.exceptions.RequestException: If the API keeps failing
    """
    if not wallet_id:
        logger.debug("No wallet id; skipping dashboard fetch")
        return None

    url = f"{base_url.rstrip('/')}{DASHBOARD_PATH}"
    try:
        response = await _get_with_retry(url, {"wallet_id": wallet_id}, timeout)
    except requests.exceptions.RequestException as e:
        logger.error("Error during getting the data from API: %s", e)
        raise
    return response.json()
