"""Cloudflare 1.1.1.1 resolver."""

from __future__ import annotations

from ipdash.targets.base import PingTarget


class CloudflareTarget(PingTarget):

    @property
    def name(self) -> str:
        return "Cloudflare DNS"

    @property
    def slug(self) -> str:
        return "cloudflare"

    @property
    def host(self) -> str:
        return "1.1.1.1"

    @property
    def endpoint(self) -> str:
        return "https://cloudflare-dns.com/dns-query"
