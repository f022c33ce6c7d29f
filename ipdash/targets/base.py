"""Abstract base class for ping targets."""

from __future__ import annotations

import abc

from ipdash.config import DOH_ACCEPT_HEADER, DOH_QUERY


class PingTarget(abc.ABC):
    """Base class that each DNS-over-HTTPS resolver must implement."""

    @property
    @abc.abstractmethod
    def name(self) -> str:
        """Human-readable resolver name (e.g. 'Google DNS')."""

    @property
    @abc.abstractmethod
    def slug(self) -> str:
        """Short identifier (e.g. 'google')."""

    @property
    @abc.abstractmethod
    def host(self) -> str:
        """Well-known anycast address shown next to the name."""

    @property
    @abc.abstractmethod
    def endpoint(self) -> str:
        """DoH JSON API endpoint, without query string."""

    @property
    def probe_url(self) -> str:
        """URL used for latency probing: the endpoint plus a canned A query."""
        return f"{self.endpoint}?{DOH_QUERY}"

    @property
    def extra_headers(self) -> dict[str, str]:
        """Extra headers to send with the probe request."""
        return {"accept": DOH_ACCEPT_HEADER}

    def describe(self) -> dict[str, str]:
        return {"id": self.slug, "name": self.name, "host": self.host}
