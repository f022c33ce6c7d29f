"""Quad9 resolver."""

from __future__ import annotations

from ipdash.targets.base import PingTarget


class Quad9Target(PingTarget):
    """Quad9's filtering resolver on 9.9.9.9."""

    @property
    def name(self) -> str:
        return "Quad9 DNS"

    @property
    def slug(self) -> str:
        return "quad9"

    @property
    def host(self) -> str:
        return "9.9.9.9"

    @property
    def endpoint(self) -> str:
        return "https://dns.quad9.net/dns-query"
