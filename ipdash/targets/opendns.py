"""Cisco OpenDNS resolver."""

from __future__ import annotations

from ipdash.targets.base import PingTarget


class OpenDNSTarget(PingTarget):

    @property
    def name(self) -> str:
        return "OpenDNS"

    @property
    def slug(self) -> str:
        return "opendns"

    @property
    def host(self) -> str:
        return "208.67.222.222"

    @property
    def endpoint(self) -> str:
        return "https://doh.opendns.com/dns-query"
