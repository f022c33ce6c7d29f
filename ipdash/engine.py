"""Latency measurement engine for ipdash.

Each measurement is a single GET of the resolver's canned DoH query.
The round trip, including reading the full response body, is timed
with time.perf_counter() for monotonic, high-resolution measurements.

Public API:
    build_client    -- construct the shared httpx.AsyncClient
    measure_target  -- time one request to a single resolver
    measure_all     -- measure every resolver concurrently
"""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Iterable, Optional

import httpx

from ipdash.config import DEFAULT_TIMEOUT, PING_UNREACHABLE, USER_AGENT
from ipdash.models import PingResult
from ipdash.targets import list_targets
from ipdash.targets.base import PingTarget

logger = logging.getLogger(__name__)


def build_client(
    timeout: float = DEFAULT_TIMEOUT,
    http2: bool = True,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> httpx.AsyncClient:
    """Build the client shared by the ping and IP lookup paths.

    Redirects are not followed so the measured latency always covers
    exactly one upstream round trip.
    """
    return httpx.AsyncClient(
        http2=http2,
        transport=transport,
        timeout=httpx.Timeout(timeout),
        follow_redirects=False,
        headers={"User-Agent": USER_AGENT},
    )


async def measure_target(
    target: PingTarget,
    client: httpx.AsyncClient,
    timeout: float = DEFAULT_TIMEOUT,
) -> PingResult:
    """Issue one timed request to *target* and normalize the outcome.

    Any HTTP response counts as a measurement, including non-2xx ones;
    ``ok`` is only true for 2xx.  Transport-level failures produce
    ``ok=False`` with an error and no latency.
    """
    try:
        t0 = time.perf_counter()
        response = await client.get(
            target.probe_url,
            headers=target.extra_headers,
            timeout=timeout,
        )
        # client.get() has already consumed the body; aread() is a no-op then.
        await response.aread()
        latency_ms = (time.perf_counter() - t0) * 1000.0
    except (httpx.HTTPError, httpx.InvalidURL) as exc:
        logger.error("Ping to %s failed: %r", target.slug, exc)
        return PingResult(
            target_id=target.slug,
            name=target.name,
            host=target.host,
            ok=False,
            error=PING_UNREACHABLE,
        )

    logger.debug(
        "Ping to %s: HTTP %d in %.1fms", target.slug, response.status_code, latency_ms,
    )
    return PingResult(
        target_id=target.slug,
        name=target.name,
        host=target.host,
        ok=response.is_success,
        latency_ms=latency_ms,
        http_status=response.status_code,
    )


async def measure_all(
    client: httpx.AsyncClient,
    timeout: float = DEFAULT_TIMEOUT,
    targets: Optional[Iterable[PingTarget]] = None,
) -> list[PingResult]:
    """Measure every target concurrently.

    If *targets* is omitted, every registered target is measured.
    Targets are measured concurrently via ``asyncio.gather``; results come
    back in the same order as the target list regardless of which
    resolver answered first.
    """
    selected = list(targets) if targets is not None else list_targets()
    tasks = [measure_target(t, client, timeout) for t in selected]
    results = await asyncio.gather(*tasks)
    return list(results)
