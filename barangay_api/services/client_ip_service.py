"""Client IP Extraction and IP access lists.

Extracts the client IP address of a request and answers allow/deny list
questions for it.

Extraction order:
1. First entry of X-Forwarded-For (when proxy headers are enabled)
2. Transport-level remote address (``request.client.host``)
3. Platform-provided X-Real-IP header
4. The literal ``"unknown"``

Security Warning:
    X-Forwarded-For can be spoofed by clients. Only enable proxy headers
    (ENABLE_PROXY_HEADERS) when the service runs behind a proxy that
    overwrites the header. Header values with control characters are
    discarded rather than parsed.

Author: Barangay Platform Team
Version: 1.0.0
"""

from collections.abc import Iterable
from ipaddress import IPv4Address, IPv4Network, IPv6Address, IPv6Network, ip_address, ip_network

from fastapi import Request

from barangay_api.utils.logging import get_logger

logger = get_logger(__name__)

IPAddressType = IPv4Address | IPv6Address
IPNetworkType = IPv4Network | IPv6Network

UNKNOWN_IP = "unknown"
MAX_HEADER_LENGTH = 1000


def _sanitize_header_value(header_value: str | None) -> str | None:
    """Reject header values that could enable header injection.

    SECURITY (CWE-113): values containing CR, LF, NUL or other control
    characters (tab excepted), or abnormally long values, are discarded.
    """
    if not header_value:
        return None

    for char in header_value:
        if ord(char) < 0x20 and char != "\t":
            logger.warning(f"Header injection attempt detected: contains {repr(char)}")
            return None

    if len(header_value) > MAX_HEADER_LENGTH:
        logger.warning(f"Abnormally long header value rejected (len={len(header_value)})")
        return None

    return header_value


def _validate_ip(ip_str: str) -> bool:
    try:
        ip_address(ip_str)
        return True
    except ValueError:
        return False


class ClientIPExtractor:
    """Extract client IP addresses from HTTP requests.

    Each app builds its own extractor from its settings (``create_app``
    stores it on ``app.state.client_ip_extractor``) and hands it to the
    middlewares that need it, so two apps never share proxy configuration.

    Examples:
        >>> extractor = ClientIPExtractor()
        >>> ip = extractor.get_client_ip(request)

    Attributes:
        enable_proxy_headers: Whether X-Forwarded-For is honoured
    """

    def __init__(self, enable_proxy_headers: bool = True):
        self.enable_proxy_headers = enable_proxy_headers

    def get_client_ip(self, request: Request) -> str:
        """Extract the client IP address, falling back to ``"unknown"``.

        Args:
            request: FastAPI Request object.

        Returns:
            Client IP address as string.
        """
        if self.enable_proxy_headers:
            forwarded = self._extract_from_forwarded_for(request.headers.get("X-Forwarded-For"))
            if forwarded:
                return forwarded

        if request.client and request.client.host:
            return request.client.host

        real_ip = _sanitize_header_value(request.headers.get("X-Real-IP"))
        if real_ip and _validate_ip(real_ip.strip()):
            return real_ip.strip()

        return UNKNOWN_IP

    def _extract_from_forwarded_for(self, forwarded_for: str | None) -> str | None:
        """Return the leftmost (originating client) entry of X-Forwarded-For."""
        sanitized = _sanitize_header_value(forwarded_for)
        if not sanitized:
            return None

        client_ip = sanitized.split(",")[0].strip()
        if _validate_ip(client_ip):
            return client_ip

        logger.warning(f"Invalid IP in X-Forwarded-For: {client_ip[:64]}")
        return None


def parse_ip_list(entries: Iterable[str]) -> list[IPNetworkType]:
    """Parse IP addresses and CIDR ranges into network objects.

    Invalid entries are logged and skipped.
    """
    networks: list[IPNetworkType] = []

    for entry in entries:
        try:
            networks.append(ip_network(entry.strip(), strict=False))
        except ValueError as e:
            logger.warning(f"Invalid IP list entry '{entry}': {e}")

    return networks


def _ip_in_list(ip_str: str, entries: Iterable[str]) -> bool:
    try:
        ip = ip_address(ip_str)
    except ValueError:
        return False
    return any(ip in network for network in parse_ip_list(entries))


def is_ip_whitelisted(
    ip_str: str, whitelist: Iterable[str], allow_when_empty: bool = False
) -> bool:
    """Check ``ip_str`` against an allow-list of addresses/CIDR ranges.

    An empty whitelist allows everyone only when ``allow_when_empty`` is set.
    """
    entries = list(whitelist)
    if not entries:
        return allow_when_empty
    return _ip_in_list(ip_str, entries)


def is_ip_blocked(ip_str: str, blocklist: Iterable[str]) -> bool:
    return _ip_in_list(ip_str, blocklist)

