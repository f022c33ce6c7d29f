"""Turn IP records and ping results into labelled display rows.

Shared by the HTML dashboard and the rich terminal output so both
surfaces label and format fields identically.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ipdash.config import HEADLINE_SECURITY_FLAGS
from ipdash.models import IpRecord, PingResult

UNKNOWN = "Unknown"


@dataclass
class DetailRow:
    label: str
    value: Optional[str] = None
    link: Optional[str] = None

    @property
    def display(self) -> str:
        return self.value if self.value not in (None, "") else UNKNOWN


@dataclass
class Badge:
    label: str
    active: bool


def _join(*parts: Optional[str], sep: str = " · ") -> Optional[str]:
    """Join the truthy parts, or None if there are none."""
    return sep.join(p for p in parts if p) or None


def _yes_no(value: Optional[bool]) -> Optional[str]:
    if value is None:
        return None
    return "Yes" if value else "No"


def format_number(value: object, digits: int = 2) -> str:
    """Format a number with grouping and a fixed number of decimals."""
    if isinstance(value, bool) or not isinstance(value, (int, float)) or math.isnan(value):
        return UNKNOWN
    return f"{value:,.{digits}f}"


def format_utc_offset(seconds: Optional[int]) -> Optional[str]:
    """``-18000`` -> ``-5.0h``, ``3600`` -> ``+1.0h``."""
    if isinstance(seconds, bool) or not isinstance(seconds, (int, float)):
        return None
    sign = "+" if seconds >= 0 else ""
    return f"{sign}{seconds / 3600:.1f}h"


def format_local_time(value: Optional[str]) -> str:
    if not value:
        return UNKNOWN
    try:
        moment = datetime.fromisoformat(value)
    except ValueError:
        return value
    return moment.strftime("%b %d, %Y, %I:%M:%S %p")


def network_details(record: IpRecord) -> list[DetailRow]:
    company = record.company
    return [
        DetailRow("Hostname", record.hostname),
        DetailRow("Company", company.name),
        DetailRow("Company Domain", company.domain),
        DetailRow("Company Type", company.type),
        DetailRow("Carrier", record.carrier_name),
    ]


def location_details(record: IpRecord) -> list[DetailRow]:
    loc = record.location

    coordinates = None
    map_link = None
    if loc.has_coordinates:
        map_link = f"https://www.google.com/maps?q={loc.latitude},{loc.longitude}"
        coordinates = f"{format_number(loc.latitude, 4)}, {format_number(loc.longitude, 4)}"

    return [
        DetailRow("Country", _join(loc.country_name, loc.country_code)),
        DetailRow("Region", _join(loc.region_name, loc.region_code)),
        DetailRow("City", loc.city),
        DetailRow("Postal Code", loc.postal),
        DetailRow("Coordinates", coordinates, link=map_link),
        DetailRow("Continent", _join(loc.continent_name, loc.continent_code)),
        DetailRow("In European Union", _yes_no(loc.in_eu)),
        DetailRow("Flag", loc.flag_emoji),
    ]


def connection_details(record: IpRecord) -> list[DetailRow]:
    conn = record.connection
    return [
        DetailRow("ASN", f"AS{conn.asn}" if conn.asn else None),
        DetailRow("Provider", conn.organization),
        DetailRow("Route", conn.route),
        DetailRow("Domain", conn.domain),
        DetailRow("Type", conn.type),
    ]


def timezone_details(record: IpRecord) -> list[DetailRow]:
    tz = record.time_zone
    if tz is None:
        return []
    return [
        DetailRow("Timezone", tz.id),
        DetailRow("Abbreviation", tz.abbreviation),
        DetailRow("UTC Offset", format_utc_offset(tz.offset)),
        DetailRow("Daylight Saving", _yes_no(tz.in_daylight_saving)),
        DetailRow("Local Time", format_local_time(tz.current_time)),
    ]


def user_agent_details(record: IpRecord) -> list[DetailRow]:
    ua = record.user_agent
    if ua is None or not ua.name:
        return []
    return [
        DetailRow("User Agent", f"{ua.name} {ua.version or ''}".strip()),
        DetailRow("Operating System", _join(ua.os_name, ua.os_version, sep=" ")),
        DetailRow("Device", _join(ua.device_name, ua.device_type, sep=" ")),
    ]


def security_badges(record: IpRecord, all_flags: bool = False) -> list[Badge]:
    """Headline badges (VPN, Proxy, ...) or, with *all_flags*, every flag."""
    if record.security is None:
        return []
    flags = record.security.flags()
    if all_flags:
        return [Badge(name.replace("_", " ").title(), active) for name, active in flags.items()]
    return [Badge(label, flags[name]) for name, label in HEADLINE_SECURITY_FLAGS.items()]


def is_hosting(record: IpRecord) -> bool:
    # Hosting ranges usually mean VPN or cloud egress.
    return record.company.type == "hosting"


def ping_status_text(result: PingResult) -> str:
    if result.ok and result.latency_ms is not None:
        return f"{result.latency_ms:.1f} ms"
    return result.error or "Unavailable"
