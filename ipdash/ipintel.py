"""Visitor IP intelligence via the ipregistry API."""

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional
from urllib.parse import quote

import httpx

from ipdash.config import (
    CLIENT_ADDRESS_HEADERS,
    IP_FETCH_FAILED,
    IP_UPSTREAM_FAILED,
    IPREGISTRY_ENDPOINT,
    IPREGISTRY_KEY,
)
from ipdash.models import (
    Company,
    Connection,
    IpRecord,
    Location,
    Security,
    TimeZone,
    UserAgent,
)

logger = logging.getLogger(__name__)


class IpLookupError(Exception):
    """The upstream lookup failed; *status* is the HTTP status to relay.

    *from_upstream* is set when the status came from the upstream response
    rather than from a transport failure.
    """

    def __init__(self, status: int, message: str, from_upstream: bool = False) -> None:
        super().__init__(message)
        self.status = status
        self.message = message
        self.from_upstream = from_upstream


def _sanitize(value: Optional[str]) -> Optional[str]:
    """Return the first entry of a comma-separated header value, trimmed."""
    if not value:
        return None
    first = value.split(",")[0].strip()
    return first or None


def client_address(headers: Mapping[str, str]) -> Optional[str]:
    """Pick the visitor's apparent address from proxy headers.

    ``x-forwarded-for`` wins, then ``x-real-ip``, then ``x-client-ip``.
    *headers* must look up names case-insensitively (Starlette and httpx
    header objects both do).
    """
    for name in CLIENT_ADDRESS_HEADERS:
        address = _sanitize(headers.get(name))
        if address:
            return address
    return None


def build_lookup_url(
    address: Optional[str],
    endpoint: str = IPREGISTRY_ENDPOINT,
    key: str = IPREGISTRY_KEY,
) -> str:
    """Without an address the upstream reports on the caller itself."""
    path = f"/{quote(address, safe='')}" if address else "/"
    return f"{endpoint.rstrip('/')}{path}?key={quote(key, safe='')}"


async def lookup(
    client: httpx.AsyncClient,
    address: Optional[str],
    endpoint: str = IPREGISTRY_ENDPOINT,
    key: str = IPREGISTRY_KEY,
) -> dict[str, Any]:
    """Fetch the raw intelligence document for *address*.

    Raises
    ------
    IpLookupError
        With the upstream status when it answered non-2xx, or 500 when it
        could not be reached or returned something other than a JSON object.
    """
    url = build_lookup_url(address, endpoint, key)
    try:
        resp = await client.get(url, headers={"accept": "application/json"}, follow_redirects=True)
    except httpx.HTTPError as exc:
        logger.error("IP lookup for %s failed: %r", address or "<caller>", exc)
        raise IpLookupError(500, IP_FETCH_FAILED) from exc

    if not resp.is_success:
        logger.error(
            "IP lookup for %s returned HTTP %d", address or "<caller>", resp.status_code,
        )
        raise IpLookupError(resp.status_code, IP_UPSTREAM_FAILED, from_upstream=True)

    try:
        data = resp.json()
    except ValueError as exc:
        logger.error("IP lookup for %s returned invalid JSON: %s", address or "<caller>", exc)
        raise IpLookupError(500, IP_FETCH_FAILED) from exc

    if not isinstance(data, dict):
        logger.error("IP lookup for %s returned %s, not an object", address or "<caller>", type(data).__name__)
        raise IpLookupError(500, IP_FETCH_FAILED)

    return data


def _section(data: Mapping[str, Any], key: str) -> dict[str, Any]:
    value = data.get(key)
    return value if isinstance(value, dict) else {}


def parse_record(data: Mapping[str, Any]) -> IpRecord:
    """Parse an ipregistry response into an :class:`IpRecord`."""
    company = _section(data, "company")
    connection = _section(data, "connection")
    location = _section(data, "location")
    country = _section(location, "country")
    region = _section(location, "region")
    continent = _section(location, "continent")
    flag = _section(country, "flag")

    languages = []
    for lang in country.get("languages") or []:
        if isinstance(lang, dict) and lang.get("name"):
            languages.append(lang["name"])

    asn = connection.get("asn")
    if not isinstance(asn, int):
        try:
            asn = int(asn) if asn is not None else None
        except (TypeError, ValueError):
            asn = None

    record = IpRecord(
        ip=data.get("ip"),
        type=data.get("type"),
        hostname=data.get("hostname"),
        carrier_name=_section(data, "carrier").get("name"),
        company=Company(
            domain=company.get("domain"),
            name=company.get("name"),
            type=company.get("type"),
        ),
        connection=Connection(
            asn=asn,
            domain=connection.get("domain"),
            organization=connection.get("organization"),
            route=connection.get("route"),
            type=connection.get("type"),
        ),
        location=Location(
            city=location.get("city"),
            region_code=region.get("code"),
            region_name=region.get("name"),
            country_code=country.get("code"),
            country_name=country.get("name"),
            capital=country.get("capital"),
            calling_code=country.get("calling_code"),
            flag_emoji=flag.get("emoji"),
            languages=languages,
            postal=location.get("postal"),
            latitude=location.get("latitude"),
            longitude=location.get("longitude"),
            continent_code=continent.get("code"),
            continent_name=continent.get("name"),
            in_eu=bool(location.get("in_eu")),
        ),
        raw=dict(data),
    )

    security = data.get("security")
    if isinstance(security, dict):
        record.security = Security(
            **{name: bool(security.get(name)) for name in Security().flags()}
        )

    tz = data.get("time_zone")
    if isinstance(tz, dict):
        record.time_zone = TimeZone(
            id=tz.get("id"),
            abbreviation=tz.get("abbreviation"),
            current_time=tz.get("current_time"),
            offset=tz.get("offset"),
            in_daylight_saving=tz.get("in_daylight_saving"),
        )

    ua = data.get("user_agent")
    if isinstance(ua, dict):
        os_info = _section(ua, "os")
        device = _section(ua, "device")
        record.user_agent = UserAgent(
            name=ua.get("name"),
            version=ua.get("version"),
            type=ua.get("type"),
            os_name=os_info.get("name"),
            os_version=os_info.get("version"),
            device_name=device.get("name"),
            device_type=device.get("type"),
        )

    return record
