"""Google Public DNS resolver."""

from __future__ import annotations

from ipdash.targets.base import PingTarget


class GoogleTarget(PingTarget):
    """Google Public DNS via its JSON API.

    Google serves the JSON API under ``/resolve`` rather than the
    ``/dns-query`` path the other resolvers use.
    """

    @property
    def name(self) -> str:
        return "Google DNS"

    @property
    def slug(self) -> str:
        return "google"

    @property
    def host(self) -> str:
        return "8.8.8.8"

    @property
    def endpoint(self) -> str:
        return "https://dns.google/resolve"
