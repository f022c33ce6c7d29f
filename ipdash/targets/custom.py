"""Custom target for ad-hoc resolver URLs (``ipdash ping --url``)."""

from __future__ import annotations

from urllib.parse import urlparse

from ipdash.targets.base import PingTarget


class CustomTarget(PingTarget):
    """A resolver that is not one of the built-in targets.

    The URL is probed exactly as given, so it should already carry a
    query string.  The host column shows the URL's hostname.
    """

    def __init__(self, url: str) -> None:
        self._url = url

    @property
    def name(self) -> str:
        return "Custom"

    @property
    def slug(self) -> str:
        return "custom"

    @property
    def host(self) -> str:
        return urlparse(self._url).hostname or self._url

    @property
    def endpoint(self) -> str:
        return self._url

    @property
    def probe_url(self) -> str:
        return self._url
