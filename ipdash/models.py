"""Data models for ipdash."""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from typing import Any, Optional

from ipdash.config import (
    DEFAULT_HOST,
    DEFAULT_LOG_LEVEL,
    DEFAULT_PORT,
    DEFAULT_TIMEOUT,
    IPREGISTRY_ENDPOINT,
    IPREGISTRY_KEY,
)


@dataclass
class PingResult:
    """Outcome of one timed request to a resolver."""

    target_id: str
    name: str
    host: str
    ok: bool = False
    latency_ms: Optional[float] = None  # None if the upstream was never reached
    http_status: Optional[int] = None
    error: Optional[str] = None

    @property
    def is_reachable(self) -> bool:
        return self.http_status is not None


@dataclass
class Company:
    domain: Optional[str] = None
    name: Optional[str] = None
    type: Optional[str] = None


@dataclass
class Connection:
    asn: Optional[int] = None
    domain: Optional[str] = None
    organization: Optional[str] = None
    route: Optional[str] = None
    type: Optional[str] = None


@dataclass
class Location:
    city: Optional[str] = None
    region_code: Optional[str] = None
    region_name: Optional[str] = None
    country_code: Optional[str] = None
    country_name: Optional[str] = None
    capital: Optional[str] = None
    calling_code: Optional[str] = None
    flag_emoji: Optional[str] = None
    languages: list[str] = field(default_factory=list)
    postal: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    continent_code: Optional[str] = None
    continent_name: Optional[str] = None
    in_eu: bool = False

    @property
    def has_coordinates(self) -> bool:
        return isinstance(self.latitude, (int, float)) and isinstance(self.longitude, (int, float))


@dataclass
class Security:
    """Threat and anonymity flags reported for an address."""

    is_abuser: bool = False
    is_attacker: bool = False
    is_bogon: bool = False
    is_cloud_provider: bool = False
    is_proxy: bool = False
    is_relay: bool = False
    is_tor: bool = False
    is_tor_exit: bool = False
    is_vpn: bool = False
    is_anonymous: bool = False
    is_threat: bool = False

    def flags(self) -> dict[str, bool]:
        """Return every flag in declaration order."""
        return {f.name: getattr(self, f.name) for f in fields(self)}


@dataclass
class TimeZone:
    id: Optional[str] = None
    abbreviation: Optional[str] = None
    current_time: Optional[str] = None  # ISO 8601 with offset
    offset: Optional[int] = None  # seconds east of UTC
    in_daylight_saving: Optional[bool] = None


@dataclass
class UserAgent:
    name: Optional[str] = None
    version: Optional[str] = None
    type: Optional[str] = None
    os_name: Optional[str] = None
    os_version: Optional[str] = None
    device_name: Optional[str] = None
    device_type: Optional[str] = None


@dataclass
class IpRecord:
    """IP intelligence record for one address."""

    ip: Optional[str] = None
    type: Optional[str] = None  # IPv4 | IPv6
    hostname: Optional[str] = None
    carrier_name: Optional[str] = None
    company: Company = field(default_factory=Company)
    connection: Connection = field(default_factory=Connection)
    location: Location = field(default_factory=Location)
    security: Optional[Security] = None
    time_zone: Optional[TimeZone] = None
    user_agent: Optional[UserAgent] = None
    raw: dict[str, Any] = field(default_factory=dict)


@dataclass
class DashboardConfig:
    """Runtime configuration for the dashboard server and CLI."""

    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    timeout: float = DEFAULT_TIMEOUT
    ipregistry_endpoint: str = IPREGISTRY_ENDPOINT
    ipregistry_key: str = IPREGISTRY_KEY
    http2: bool = True
    log_level: str = DEFAULT_LOG_LEVEL
