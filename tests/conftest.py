"""
Pytest configuration and fixtures
"""
from typing import Callable

import httpx
import pytest

DOH_HOSTS = {
    "dns.google": "google",
    "cloudflare-dns.com": "cloudflare",
    "doh.opendns.com": "opendns",
    "dns.quad9.net": "quad9",
}

IPREGISTRY_HOST = "api.ipregistry.co"


@pytest.fixture
def ip_document() -> dict:
    """A trimmed ipregistry response for a residential address."""
    return {
        "ip": "203.0.113.7",
        "type": "IPv4",
        "hostname": "host-203-0-113-7.example.net",
        "carrier": {"name": None, "mcc": None, "mnc": None},
        "company": {"domain": "example.net", "name": "Example Broadband", "type": "isp"},
        "connection": {
            "asn": 64500,
            "domain": "example.net",
            "organization": "Example Broadband Ltd",
            "route": "203.0.113.0/24",
            "type": "isp",
        },
        "location": {
            "city": "Lisbon",
            "region": {"code": "PT-11", "name": "Lisbon"},
            "country": {
                "code": "PT",
                "name": "Portugal",
                "capital": "Lisbon",
                "calling_code": "351",
                "flag": {"emoji": "🇵🇹", "twemoji": None},
                "languages": [{"code": "pt", "name": "Portuguese", "native": "Português"}],
            },
            "postal": "1000-001",
            "latitude": 38.71667,
            "longitude": -9.13333,
            "continent": {"code": "EU", "name": "Europe"},
            "in_eu": True,
        },
        "security": {
            "is_abuser": False,
            "is_attacker": False,
            "is_bogon": False,
            "is_cloud_provider": False,
            "is_proxy": False,
            "is_relay": False,
            "is_tor": False,
            "is_tor_exit": False,
            "is_vpn": True,
            "is_anonymous": True,
            "is_threat": False,
        },
        "time_zone": {
            "id": "Europe/Lisbon",
            "abbreviation": "WEST",
            "current_time": "2026-10-17T08:30:00+01:00",
            "offset": 3600,
            "in_daylight_saving": True,
        },
        "user_agent": {
            "name": "Firefox",
            "version": "131.0",
            "type": "browser",
            "os": {"name": "Linux", "version": None},
            "device": {"name": "Linux Desktop", "type": "desktop"},
        },
    }


@pytest.fixture
def upstream(ip_document) -> Callable[..., httpx.MockTransport]:
    """Build a MockTransport standing in for ipregistry and the DoH resolvers.

    ``doh_status`` maps resolver id to the status it answers with;
    ids in ``unreachable`` raise a connect error instead.
    ``seen`` collects every request for assertions.
    """

    def factory(
        doh_status: dict | None = None,
        unreachable: set | None = None,
        ip_status: int = 200,
        ip_error: bool = False,
        seen: list | None = None,
    ) -> httpx.MockTransport:
        doh_status = doh_status or {}
        unreachable = unreachable or set()

        def handler(request: httpx.Request) -> httpx.Response:
            if seen is not None:
                seen.append(request)
            host = request.url.host
            if host == IPREGISTRY_HOST:
                if ip_error:
                    raise httpx.ConnectError("connection refused", request=request)
                if ip_status != 200:
                    return httpx.Response(ip_status, json={"code": "INSUFFICIENT_CREDITS"})
                return httpx.Response(200, json=ip_document)
            target_id = DOH_HOSTS.get(host)
            if target_id is None:
                raise httpx.ConnectError(f"unexpected host {host}", request=request)
            if target_id in unreachable:
                raise httpx.ConnectError("name resolution failed", request=request)
            status = doh_status.get(target_id, 200)
            return httpx.Response(status, json={"Status": 0, "Answer": [{"name": "example.com.", "data": "93.184.215.14"}]})

        return httpx.MockTransport(handler)

    return factory
