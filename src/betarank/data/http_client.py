"""Shared JSON-over-HTTP client with bounded retries."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from time import sleep
from typing import Any

import requests

from betarank.errors import ProviderNetworkError, ProviderResponseError

logger = logging.getLogger(__name__)


class JsonHttpClient:
    """GET JSON payloads from one provider base URL."""

    def __init__(
        self,
        base_url: str,
        provider_name: str,
        timeout: float = 20.0,
        max_retries: int = 3,
        headers: Mapping[str, str] | None = None,
        session: requests.Session | None = None,
    ) -> None:
        if max_retries <= 0:
            raise ValueError("max_retries must be positive")
        self.base_url = base_url.rstrip("/")
        self.provider_name = provider_name
        self.timeout = timeout
        self.max_retries = max_retries
        self.session = session or requests.Session()
        if headers:
            self.session.headers.update(dict(headers))

    def get_json(self, path: str, params: Mapping[str, Any] | None = None) -> Any:
        url = f"{self.base_url}{path}"
        for attempt in range(1, self.max_retries + 1):
            try:
                response = self.session.get(url, params=params, timeout=self.timeout)
            except requests.RequestException as exc:
                if attempt == self.max_retries:
                    raise ProviderNetworkError(
                        f"{self.provider_name} request failed: {exc}"
                    ) from exc
                logger.debug("%s request error, retry %s: %s", self.provider_name, attempt, exc)
                sleep(float(attempt))
                continue
            if response.status_code == 429:
                if attempt == self.max_retries:
                    raise ProviderNetworkError(f"{self.provider_name} rate limit exceeded")
                logger.debug("%s rate limited, retry %s", self.provider_name, attempt)
                sleep(float(attempt))
                continue
            if response.status_code >= 500:
                if attempt == self.max_retries:
                    raise ProviderNetworkError(
                        f"{self.provider_name} server error: {response.status_code}"
                    )
                sleep(float(attempt))
                continue
            if response.status_code >= 400:
                detail = response.text.strip() or "No response body"
                raise ProviderResponseError(
                    f"{self.provider_name} error {response.status_code}: {detail}"
                )
            try:
                return response.json()
            except ValueError as exc:
                raise ProviderResponseError(
                    f"{self.provider_name} returned a non-JSON body"
                ) from exc
        raise ProviderNetworkError(f"{self.provider_name} request exhausted retries")
