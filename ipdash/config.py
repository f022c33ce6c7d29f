"""Constants and configuration for ipdash."""

from ipdash import __version__

# Latency color thresholds (milliseconds)
FAST_THRESHOLD_MS = 50.0     # Green: <= 50ms
MEDIUM_THRESHOLD_MS = 150.0  # Yellow: <= 150ms
# Red: > 150ms

# Default measurement settings
DEFAULT_TIMEOUT = 10.0

# Web server defaults
DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 8000
DEFAULT_LOG_LEVEL = "info"

# IP intelligence upstream
IPREGISTRY_ENDPOINT = "https://api.ipregistry.co"
IPREGISTRY_KEY = "tryout"

# Headers checked, in order, for the visitor's apparent address
CLIENT_ADDRESS_HEADERS = ("x-forwarded-for", "x-real-ip", "x-client-ip")

# DNS-over-HTTPS JSON API
DOH_ACCEPT_HEADER = "application/dns-json"
DOH_QUERY = "name=example.com&type=A"

# User agent for HTTP requests
USER_AGENT = f"ipdash/{__version__}"

# Error messages relayed to API clients
PING_INVALID_TARGET = "Invalid or missing ping target id"
PING_UNREACHABLE = "Failed to reach DNS endpoint"
IP_UPSTREAM_FAILED = "Failed to query upstream IP service"
IP_FETCH_FAILED = "Unable to fetch IP details"

# Security flags shown as headline badges
HEADLINE_SECURITY_FLAGS = {
    "is_vpn": "VPN",
    "is_proxy": "Proxy",
    "is_tor": "Tor",
    "is_cloud_provider": "Cloud Provider",
    "is_threat": "Threat",
}

# Environment variable prefix for CLI options
ENV_PREFIX = "IPDASH"
