"""Backend check that a provider/model pair is usable.

The backend exposes ``POST {base_url}/llm/verify`` taking
``{"provider": ..., "model": ...}`` and answering
``{"status": "success" | <anything else>, "message": <optional str>}``.
Non-2xx answers and network errors surface as
:class:`VerificationTransportError`, carrying the backend's ``message`` when
the error body has one.
"""

from __future__ import annotations

import asyncio
import logging
from abc import ABC, abstractmethod
from typing import Any, Optional

import requests
from pydantic import BaseModel, ConfigDict, ValidationError

from ..errors import VerificationTransportError

logger = logging.getLogger(__name__)

SUCCESS_STATUS = "success"


class VerificationResult(BaseModel):
    model_config = ConfigDict(extra="allow")

    status: Any
    message: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.status == SUCCESS_STATUS


class VerificationService(ABC):
    """Abstract verifier; implementations must not impose their own retries."""

    @abstractmethod
    async def verify(self, provider: str, model: str) -> VerificationResult:
        """Return the backend verdict or raise VerificationTransportError."""
        ...


def _error_message(resp: requests.Response | None) -> str | None:
    if resp is None:
        return None
    try:
        body = resp.json()
    except ValueError:
        return None
    if isinstance(body, dict):
        msg = body.get("message") or body.get("detail")
        if isinstance(msg, str) and msg:
            return msg
    return None


class HttpVerificationService(VerificationService):
    """Calls the backend verification endpoint with plain `requests`."""

    def __init__(self, base_url: str, timeout: float = 30.0, session: requests.Session | None = None):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()

    def _verify_sync(self, provider: str, model: str) -> VerificationResult:
        url = f"{self.base_url}/llm/verify"
        try:
            resp = self.session.post(
                url,
                json={"provider": provider, "model": model},
                headers={"Content-Type": "application/json"},
                timeout=self.timeout,
            )
            resp.raise_for_status()
            return VerificationResult(**resp.json())
        except requests.RequestException as exc:
            response = getattr(exc, "response", None)
            if response is not None:
                logger.error("[verify] %s failed %s: %s", url, response.status_code, response.text)
            else:
                logger.error("[verify] %s failed: %s", url, exc)
            raise VerificationTransportError(_error_message(response)) from exc
        except (ValueError, TypeError, ValidationError) as exc:
            # body was not JSON or not a verification payload
            logger.error("[verify] unexpected response from %s: %s", url, exc)
            raise VerificationTransportError() from exc

    async def verify(self, provider: str, model: str) -> VerificationResult:
        return await asyncio.to_thread(self._verify_sync, provider, model)
