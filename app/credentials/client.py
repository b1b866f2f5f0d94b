"""Primary service HTTP client.

One POST per call, no retries. Transport problems are returned as
TransportFailed values instead of raised, so the orchestrator decides
what each failure means.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional, Union

import httpx

from app.core.config import DEFAULT_REQUEST_TIMEOUT_MS

log = logging.getLogger(__name__)

JSON_HEADERS = {
    "Content-Type": "application/json",
    "Accept": "application/json",
}


class TransportFailure(str, Enum):
    TIMEOUT = "Timeout"
    CONNECTION_REFUSED = "ConnectionRefused"
    OTHER = "Other"


@dataclass
class Delivered:
    """2xx response with a JSON object body."""

    body: Dict[str, Any]


@dataclass
class RejectedByServer:
    """Non-2xx response. Body is the parsed JSON object, or {} if unparsable."""

    status_code: int
    body: Dict[str, Any] = field(default_factory=dict)


@dataclass
class TransportFailed:
    """The call never produced a usable response."""

    reason: TransportFailure
    message: str = ""


RemoteOutcome = Union[Delivered, RejectedByServer, TransportFailed]


def _json_object(response: httpx.Response) -> Optional[Dict[str, Any]]:
    """Response body as a dict, or None if it isn't a JSON object."""
    try:
        data = response.json()
    except ValueError:
        return None
    return data if isinstance(data, dict) else None


class RemoteClient:
    """HTTP client for the issuance and verification services.

    Creates a new httpx.AsyncClient per call, which avoids binding a
    session to a particular event loop.
    """

    def __init__(self, transport: Optional[httpx.AsyncBaseTransport] = None):
        """Initialize the client.

        Args:
            transport: Optional httpx transport, used by tests to stub the network.
        """
        self._transport = transport

    def _get_client(self, timeout_ms: int) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            timeout=timeout_ms / 1000,
            headers=JSON_HEADERS,
            transport=self._transport,
        )

    async def send(
        self,
        base_url: str,
        path: str,
        payload: Dict[str, Any],
        timeout_ms: int = DEFAULT_REQUEST_TIMEOUT_MS,
    ) -> RemoteOutcome:
        """POST a JSON payload to ``base_url + path``.

        Args:
            base_url: Service base URL (trailing slash ignored).
            path: Endpoint path, e.g. "/issue".
            payload: JSON-serializable request body.
            timeout_ms: Timeout for the whole call, in milliseconds. httpx
                applies its timeout per phase, so the POST is also bounded
                as a whole.

        Returns:
            Delivered, RejectedByServer or TransportFailed.
        """
        url = f"{base_url.rstrip('/')}{path}"
        log.debug(f"POST {url} timeout_ms={timeout_ms}")

        try:
            async with self._get_client(timeout_ms) as client:
                response = await asyncio.wait_for(
                    client.post(url, json=payload), timeout=timeout_ms / 1000
                )
        except (httpx.TimeoutException, asyncio.TimeoutError) as e:
            log.warning(f"Timeout after {timeout_ms}ms calling {url}")
            return TransportFailed(TransportFailure.TIMEOUT, str(e) or "timeout")
        except httpx.InvalidURL as e:
            log.warning(f"Invalid URL {url!r}: {e}")
            return TransportFailed(TransportFailure.OTHER, f"invalid URL: {e}")
        except httpx.ConnectError as e:
            log.warning(f"Connection failed calling {url}: {e}")
            return TransportFailed(TransportFailure.CONNECTION_REFUSED, str(e))
        except httpx.RequestError as e:
            log.warning(f"Request failed calling {url}: {e}")
            return TransportFailed(TransportFailure.OTHER, str(e) or type(e).__name__)
        except (TypeError, ValueError) as e:
            log.warning(f"Payload for {url} is not serializable as JSON: {e}")
            return TransportFailed(TransportFailure.OTHER, f"payload not serializable: {e}")

        body = _json_object(response)
        if response.is_success:
            if body is None:
                log.warning(f"{url} returned {response.status_code} without a JSON object body")
                return TransportFailed(TransportFailure.OTHER, "invalid JSON in response")
            return Delivered(body)

        log.warning(f"{url} returned {response.status_code}: {response.text[:200]}")
        return RejectedByServer(response.status_code, body or {})
