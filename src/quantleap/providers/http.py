"""Shared aiohttp GET helper mapping transport problems onto provider errors."""

import asyncio
from typing import Any, Dict

import aiohttp

from .errors import DataShapeError, ProviderRejectedError, TransportError


async def fetch_json(
    provider: str,
    url: str,
    params: Dict[str, Any],
    timeout_seconds: float = 10.0,
) -> Any:
    """
    GET a JSON document.

    Args:
        provider: Provider name used in error messages
        url: Endpoint URL
        params: Query parameters
        timeout_seconds: Total request timeout

    Returns:
        Decoded JSON body

    Raises:
        TransportError: Connection failure or timeout
        ProviderRejectedError: Non-2xx status
        DataShapeError: Body is not valid JSON
    """
    timeout = aiohttp.ClientTimeout(total=timeout_seconds)

    try:
        async with aiohttp.ClientSession(timeout=timeout) as session:
            async with session.get(url, params=params) as response:
                if not 200 <= response.status < 300:
                    error_text = await response.text(errors="replace")
                    raise ProviderRejectedError(
                        provider,
                        f"HTTP {response.status}: {error_text[:200]}",
                        status=response.status,
                    )
                try:
                    return await response.json(content_type=None)
                except ValueError as e:
                    raise DataShapeError(provider, f"Invalid JSON body: {e}")
    except (aiohttp.ClientError, asyncio.TimeoutError) as e:
        raise TransportError(provider, f"{type(e).__name__}: {e}")
