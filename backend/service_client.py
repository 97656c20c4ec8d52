"""HTTP JSON clients for the execution and explanation services.

Both talk to the forwarding layer (``main.py``), which passes payloads to the
real services untouched.
"""

import logging
from typing import Any, Optional

import httpx

from exceptions import ServiceUnavailableError
from trace_model import Step

logger = logging.getLogger(__name__)


class _JsonServiceClient:
    path = ""

    def __init__(self, base_url: str, client: Optional[httpx.AsyncClient] = None, timeout: float = 30.0):
        self.base_url = base_url.rstrip("/")
        self._client = client
        self._timeout = timeout

    @property
    def url(self) -> str:
        return f"{self.base_url}/{self.path}"

    async def _post(self, body: dict) -> Any:
        try:
            if self._client is not None:
                response = await self._client.post(self.url, json=body, timeout=self._timeout)
            else:
                async with httpx.AsyncClient(timeout=self._timeout) as client:
                    response = await client.post(self.url, json=body)
            response.raise_for_status()
            return response.json()
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            logger.warning("Request to %s failed: %s", self.url, e)
            raise ServiceUnavailableError(f"{self.url}: {e}") from e
        except ValueError as e:
            # body was not JSON
            logger.warning("Non-JSON response from %s: %s", self.url, e)
            raise ServiceUnavailableError(f"{self.url}: invalid JSON response") from e


class ExecutionClient(_JsonServiceClient):
    path = "send-data"

    async def run(self, code: str) -> Any:
        """Submit ``code`` and return the raw payload; classification is the reconciler's job."""
        return await self._post({"code": code})


class ExplanationClient(_JsonServiceClient):
    path = "explain"

    async def explain(self, code: str, step: Optional[Step]) -> str:
        payload = await self._post({"code": code, "step": step.to_payload() if step else None})
        if not isinstance(payload, dict):
            return ""
        explanation = payload.get("explanation")
        return explanation if isinstance(explanation, str) else ""
