"""
URL helpers shared by the engine and the HTTP layer.
"""
import ipaddress
import re
from typing import Optional
from urllib.parse import urlparse, unquote

ALLOWED_SCHEMES = ("http", "https")

BLOCKED_HOSTNAMES = {"localhost", "127.0.0.1", "::1"}

_PRIVATE_IPV4_NETWORKS = [
    ipaddress.ip_network("10.0.0.0/8"),
    ipaddress.ip_network("127.0.0.0/8"),
    ipaddress.ip_network("169.254.0.0/16"),
    ipaddress.ip_network("172.16.0.0/12"),
    ipaddress.ip_network("192.168.0.0/16"),
]


def parse_http_url(url: str) -> Optional[str]:
    """Return the hostname of an absolute http/https URL, or None."""
    try:
        parsed = urlparse(url)
        hostname = parsed.hostname
    except ValueError:
        return None

    if parsed.scheme.lower() not in ALLOWED_SCHEMES or not hostname:
        return None
    return hostname


def fallback_title_from_url(url: str) -> str:
    """
    Derive a title from the URL itself.

    Uses the last non-empty path segment, URL-decoded, with runs of ``-``/``_``
    turned into spaces. Falls back to the hostname when the path is empty.
    """
    try:
        parsed = urlparse(url)
        hostname = parsed.hostname or ""
    except ValueError:
        return url

    segments = [segment for segment in parsed.path.split("/") if segment]
    if segments:
        title = unquote(segments[-1])
        title = re.sub(r"[-_]+", " ", title)
        title = re.sub(r"\s+", " ", title).strip()
        if title:
            return title

    return hostname or url


def is_blocked_host(hostname: str) -> bool:
    """Check whether a hostname points at loopback, link-local or private space."""
    normalized = hostname.strip().lower().strip("[]")
    if normalized in BLOCKED_HOSTNAMES:
        return True
    if normalized.endswith(".localhost"):
        return True

    try:
        address = ipaddress.ip_address(normalized)
    except ValueError:
        return False

    if address.version == 4:
        return any(address in network for network in _PRIVATE_IPV4_NETWORKS)
    return normalized == "::1" or normalized.startswith(("fc", "fd"))
