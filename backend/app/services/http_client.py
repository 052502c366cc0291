"""
Long-lived httpx.AsyncClient for the hosted inference services, opened in the
app lifespan and shared by all requests.
"""
from __future__ import annotations

import logging
from typing import Any

import httpx

from app.core.errors import UpstreamServiceError

logger = logging.getLogger(__name__)

_http_client: httpx.AsyncClient | None = None


def get_http_client() -> httpx.AsyncClient:
    if _http_client is None:
        raise RuntimeError("HTTP client not initialized; ensure app lifespan has run init_http_client().")
    return _http_client


def init_http_client(timeout: float = 30.0) -> httpx.AsyncClient:
    global _http_client
    if _http_client is None:
        _http_client = httpx.AsyncClient(timeout=timeout)
    return _http_client


async def close_http_client() -> None:
    global _http_client
    if _http_client is not None:
        await _http_client.aclose()
        _http_client = None


async def post_json(url: str, payload: dict, *, timeout: float, headers: dict | None = None) -> Any:
    """POST JSON and return the decoded body; transport errors, non-2xx and bad JSON raise UpstreamServiceError."""
    if not url:
        raise UpstreamServiceError("Inference endpoint is not configured")
    try:
        resp = await get_http_client().post(url, json=payload, headers=headers, timeout=timeout)
        resp.raise_for_status()
        return resp.json()
    except httpx.TimeoutException as e:
        raise UpstreamServiceError(f"Request to {url} timed out") from e
    except httpx.HTTPStatusError as e:
        raise UpstreamServiceError(f"{url} answered {e.response.status_code}") from e
    except (httpx.HTTPError, ValueError) as e:
        raise UpstreamServiceError(f"Request to {url} failed: {e}") from e
