"""
Flow API Client

Fetches traces, flow graphs, stats and explanations from the tracing backend.

PRINCIPLES:
===========
1. Returns raw JSON; normalization belongs to the mapper
2. A missing flow is FlowNotFoundError, every other failure TransientFetchError
3. No retries, no caching
4. Timeouts are the transport's unless configured
"""

from __future__ import annotations
from typing import Any, Dict, Optional
import logging

import httpx

from flowview.config import FlowViewConfig
from flowview.errors import FlowNotFoundError, TransientFetchError

logger = logging.getLogger(__name__)

DEFAULT_LOOKBACK_MS = 3_600_000


class FlowApiClient:
    """
    Async client for the `/flows` REST endpoints.

    Use as an async context manager, or pass a shared httpx.AsyncClient.
    """

    def __init__(
        self,
        config: Optional[FlowViewConfig] = None,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        self._config = config or FlowViewConfig()
        self._owns_client = http_client is None
        if http_client is None:
            kwargs: Dict[str, Any] = {'base_url': self._config.api_base_url}
            if self._config.request_timeout is not None:
                kwargs['timeout'] = self._config.request_timeout
            http_client = httpx.AsyncClient(**kwargs)
        self._http = http_client

    async def __aenter__(self) -> "FlowApiClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._http.aclose()

    # =========================================================================
    # ENDPOINTS
    # =========================================================================

    async def fetch_traces(
        self,
        service_name: Optional[str] = None,
        limit: int = 50,
        lookback_ms: int = DEFAULT_LOOKBACK_MS,
    ) -> Any:
        """Recent trace summaries, optionally filtered by root service."""
        params: Dict[str, Any] = {'limit': limit, 'lookbackMs': lookback_ms}
        if service_name:
            params['serviceName'] = service_name
        return await self._request('GET', '/flows/traces', params=params)

    async def fetch_services(self) -> Any:
        return await self._request('GET', '/flows/services')

    async def fetch_stats(self, lookback_ms: int = DEFAULT_LOOKBACK_MS) -> Any:
        return await self._request('GET', '/flows/stats', params={'lookbackMs': lookback_ms})

    async def fetch_bottleneck_flows(
        self,
        limit: int = 20,
        lookback_ms: int = DEFAULT_LOOKBACK_MS,
    ) -> Any:
        """Trace summaries flagged with a bottleneck."""
        return await self._request(
            'GET', '/flows/bottlenecks',
            params={'limit': limit, 'lookbackMs': lookback_ms},
        )

    async def fetch_flow(self, trace_id: str) -> Any:
        """Raw `{nodes, edges}` graph of one trace."""
        return await self._request('GET', f'/flows/{trace_id}', trace_id=trace_id)

    async def explain_flow(self, trace_id: str) -> Any:
        """
        Trigger AI analysis of a flow and return its explanation record.

        The endpoint returns the full analysis result; only the
        `explanation` member is surfaced.
        """
        result = await self._request('POST', f'/flows/{trace_id}/explain', trace_id=trace_id)
        if isinstance(result, dict) and 'explanation' in result:
            return result['explanation']
        return result

    # =========================================================================
    # TRANSPORT
    # =========================================================================

    async def _request(
        self,
        method: str,
        path: str,
        params: Optional[Dict[str, Any]] = None,
        trace_id: Optional[str] = None,
    ) -> Any:
        try:
            response = await self._http.request(method, path, params=params)
        except httpx.TimeoutException as e:
            logger.warning("Timeout on %s %s", method, path)
            raise TransientFetchError(f"Timeout on {method} {path}") from e
        except httpx.HTTPError as e:
            logger.warning("Request failed on %s %s: %s", method, path, e)
            raise TransientFetchError(f"Request failed on {method} {path}: {e}") from e

        if response.status_code == 404 and trace_id is not None:
            raise FlowNotFoundError(trace_id)
        if response.status_code >= 400:
            logger.warning("HTTP %d on %s %s", response.status_code, method, path)
            raise TransientFetchError(
                f"HTTP {response.status_code} on {method} {path}",
                status_code=response.status_code,
            )

        try:
            return response.json()
        except ValueError as e:
            raise TransientFetchError(f"Invalid JSON from {method} {path}") from e
