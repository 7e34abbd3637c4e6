"""Shared aiohttp plumbing for JSON market data providers"""

import asyncio
import json
import logging
from typing import Any, Dict, Optional, Tuple

import aiohttp

from ..config import HTTPConfig
from ..exceptions import UpstreamError


class JSONProviderClient:
    """Issues single GET requests against a JSON API and normalizes failures.

    Every request opens its own ClientSession. Transport errors, timeouts and
    undecodable bodies surface as UpstreamError; nothing is retried here.
    """

    provider_name = "provider"

    def __init__(self, base_url: str, http_config: Optional[HTTPConfig] = None,
                 logger: Optional[logging.Logger] = None):
        self.base_url = base_url.rstrip('/')
        self.http_config = http_config or HTTPConfig()
        self.logger = logger or logging.getLogger(__name__)

    def _headers(self) -> Dict[str, str]:
        return {'User-Agent': self.http_config.user_agent}

    async def _request_json(self, path: str, params: Optional[Dict[str, str]] = None) -> Tuple[int, Any]:
        """Return (status, decoded body); body is None when it is not UTF-8 JSON"""
        url = f"{self.base_url}{path}"
        self.logger.debug(f"GET {url} params={_redact(params)}")

        try:
            async with aiohttp.ClientSession() as session:
                async with session.get(
                    url,
                    params=params,
                    headers=self._headers(),
                    timeout=aiohttp.ClientTimeout(total=self.http_config.request_timeout_seconds)
                ) as response:
                    body = await response.read()
                    try:
                        data = json.loads(body.decode('utf-8')) if body else None
                    except (UnicodeDecodeError, json.JSONDecodeError):
                        data = None
                    return response.status, data

        except asyncio.TimeoutError as e:
            raise UpstreamError(f"{self.provider_name} request timed out: {url}") from e
        except aiohttp.ClientError as e:
            raise UpstreamError(f"{self.provider_name} request failed: {e}") from e

    async def _get_json(self, path: str, params: Optional[Dict[str, str]] = None) -> Any:
        """GET path and return the decoded body, raising on any non-200 response"""
        status, data = await self._request_json(path, params)

        if status != 200:
            raise UpstreamError(f"HTTP {status}")

        if data is None:
            raise UpstreamError(f"Invalid JSON response from {self.provider_name}")

        return data


def _redact(params: Optional[Dict[str, str]]) -> Optional[Dict[str, str]]:
    if not params or 'token' not in params:
        return params
    return {**params, 'token': '***'}
