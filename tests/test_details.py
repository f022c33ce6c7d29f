"""
Tests for display row formatting
"""
import math

import pytest

from ipdash import details
from ipdash.ipintel import parse_record
from ipdash.models import PingResult


def _by_label(rows):
    return {row.label: row for row in rows}


@pytest.fixture
def record(ip_document):
    return parse_record(ip_document)


@pytest.mark.parametrize(
    "value, digits, expected",
    [
        (38.71667, 4, "38.7167"),
        (1234.5, 2, "1,234.50"),
        (None, 2, "Unknown"),
        (math.nan, 2, "Unknown"),
        (True, 2, "Unknown"),
        ("12", 2, "Unknown"),
    ],
)
def test_format_number(value, digits, expected):
    assert details.format_number(value, digits) == expected


@pytest.mark.parametrize(
    "seconds, expected",
    [(3600, "+1.0h"), (0, "+0.0h"), (-18000, "-5.0h"), (19800, "+5.5h"), (None, None)],
)
def test_format_utc_offset(seconds, expected):
    assert details.format_utc_offset(seconds) == expected


def test_format_local_time():
    assert details.format_local_time("2026-10-17T08:30:00+01:00") == "Oct 17, 2026, 08:30:00 AM"
    assert details.format_local_time(None) == "Unknown"
    assert details.format_local_time("not a time") == "not a time"


def test_location_details(record):
    rows = _by_label(details.location_details(record))

    assert rows["Country"].value == "Portugal · PT"
    assert rows["Region"].value == "Lisbon · PT-11"
    assert rows["Coordinates"].value == "38.7167, -9.1333"
    assert rows["Coordinates"].link == "https://www.google.com/maps?q=38.71667,-9.13333"
    assert rows["Continent"].value == "Europe · EU"
    assert rows["In European Union"].value == "Yes"
    assert rows["Flag"].value == "🇵🇹"


def test_location_details_without_data():
    rows = _by_label(details.location_details(parse_record({})))

    assert rows["Country"].display == "Unknown"
    assert rows["Coordinates"].link is None
    assert rows["In European Union"].value == "No"


def test_connection_and_network_details(record):
    conn = _by_label(details.connection_details(record))
    assert conn["ASN"].value == "AS64500"
    assert conn["Provider"].value == "Example Broadband Ltd"
    assert conn["Route"].value == "203.0.113.0/24"

    net = _by_label(details.network_details(record))
    assert net["Company"].value == "Example Broadband"
    assert net["Carrier"].display == "Unknown"


def test_timezone_and_user_agent_details(record):
    tz = _by_label(details.timezone_details(record))
    assert tz["Timezone"].value == "Europe/Lisbon"
    assert tz["UTC Offset"].value == "+1.0h"
    assert tz["Daylight Saving"].value == "Yes"

    ua = _by_label(details.user_agent_details(record))
    assert ua["User Agent"].value == "Firefox 131.0"
    assert ua["Operating System"].value == "Linux"
    assert ua["Device"].value == "Linux Desktop desktop"


def test_user_agent_details_need_a_name(record):
    record.user_agent.name = None
    assert details.user_agent_details(record) == []


def test_security_badges(record):
    headline = details.security_badges(record)
    assert [(b.label, b.active) for b in headline] == [
        ("VPN", True),
        ("Proxy", False),
        ("Tor", False),
        ("Cloud Provider", False),
        ("Threat", False),
    ]

    every = details.security_badges(record, all_flags=True)
    assert len(every) == 11
    assert every[0].label == "Is Abuser"
    assert ("Is Tor Exit", False) in [(b.label, b.active) for b in every]

    record.security = None
    assert details.security_badges(record) == []


def test_is_hosting(record):
    assert not details.is_hosting(record)
    record.company.type = "hosting"
    assert details.is_hosting(record)


def test_ping_status_text():
    ok = PingResult("google", "Google DNS", "8.8.8.8", ok=True, latency_ms=12.345, http_status=200)
    failed = PingResult("quad9", "Quad9 DNS", "9.9.9.9", error="Failed to reach DNS endpoint")
    refused = PingResult("opendns", "OpenDNS", "208.67.222.222", latency_ms=40.0, http_status=403)

    assert details.ping_status_text(ok) == "12.3 ms"
    assert details.ping_status_text(failed) == "Failed to reach DNS endpoint"
    assert details.ping_status_text(refused) == "Unavailable"
