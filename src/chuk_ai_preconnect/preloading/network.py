# chuk_ai_preconnect/preloading/network.py
"""
Network collaborators for preloading.

- NetworkProbe: touches a URL or host with a header-only request
- NetworkQualitySensor: best-effort view of the active connection

Both are treated as unreliable; the preloader guards every call.
"""

from __future__ import annotations

import logging
import time
from typing import Protocol, runtime_checkable

import httpx
from pydantic import BaseModel

from chuk_ai_preconnect.exceptions import ProbeError, ProbeTimeoutError

from .cancellation import CancellationToken
from .models import ProbeMethod, ProbeResult

logger = logging.getLogger(__name__)

METERED_EFFECTIVE_TYPES = frozenset({"slow-2g", "2g"})

# =============================================================================
# Protocols
# =============================================================================


@runtime_checkable
class NetworkProbe(Protocol):
    """
    Protocol for network probes.

    Implementations must honour the token: stop promptly once it fires and
    raise ProbeTimeoutError. Any other failure raises ProbeError.
    """

    async def probe(
        self,
        target: str,
        *,
        method: ProbeMethod,
        token: CancellationToken,
    ) -> ProbeResult: ...


@runtime_checkable
class NetworkQualitySensor(Protocol):
    """Protocol for reading the active network's quality."""

    def is_metered(self) -> bool: ...

    def is_unrestricted(self) -> bool: ...

    def is_mobile(self) -> bool: ...


# =============================================================================
# Implementations
# =============================================================================


class HttpxProbe:
    """
    Probe built on an ``httpx.AsyncClient``.

    Any HTTP response, whatever its status, means the name resolved and
    the transport (and TLS for https) handshake completed.
    """

    def __init__(
        self,
        client: httpx.AsyncClient | None = None,
        follow_redirects: bool = False,
    ):
        self._client = client
        self._owns_client = client is None
        self._follow_redirects = follow_redirects

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                follow_redirects=self._follow_redirects,
                headers={"Cache-Control": "no-cache"},
            )
        return self._client

    async def probe(
        self,
        target: str,
        *,
        method: ProbeMethod = ProbeMethod.HEAD,
        token: CancellationToken,
    ) -> ProbeResult:
        if token.cancelled:
            raise ProbeTimeoutError(target)

        client = self._get_client()
        start = time.perf_counter()
        try:
            response = await token.run(client.request(method.value, target, timeout=token.remaining()))
        except httpx.TimeoutException as e:
            raise ProbeTimeoutError(target) from e
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise ProbeError(target, f"{type(e).__name__}: {e}") from e

        elapsed_ms = (time.perf_counter() - start) * 1000
        logger.debug("Probe %s %s -> %s in %.1fms", method.value, target, response.status_code, elapsed_ms)
        return ProbeResult(target=target, status_code=response.status_code, elapsed_ms=elapsed_ms)

    async def aclose(self) -> None:
        if self._client is not None and self._owns_client:
            await self._client.aclose()
        self._client = None

    async def __aenter__(self) -> HttpxProbe:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()


class StaticNetworkQuality(BaseModel):
    """
    Fixed network quality, e.g. read once from the host OS.

    The defaults describe an unmetered, unrestricted desktop connection,
    which is also what an absent sensor is assumed to report.
    """

    metered: bool = False
    unrestricted: bool = True
    mobile: bool = False

    @classmethod
    def from_connection_info(
        cls,
        save_data: bool = False,
        effective_type: str | None = None,
        connection_type: str | None = None,
        mobile: bool = False,
    ) -> StaticNetworkQuality:
        """
        Build from Network-Information-style fields.

        Save-data mode or a 2G-class effective type counts as metered. An
        unknown connection type counts as unrestricted.
        """
        metered = save_data or (effective_type or "").lower() in METERED_EFFECTIVE_TYPES
        unrestricted = connection_type is None or connection_type.lower() == "wifi"
        return cls(metered=metered, unrestricted=unrestricted, mobile=mobile)

    def is_metered(self) -> bool:
        return self.metered

    def is_unrestricted(self) -> bool:
        return self.unrestricted

    def is_mobile(self) -> bool:
        return self.mobile
