"""IP address range parsing and inclusive membership checks.

Supported range notations:
- single address: ``149.154.167.200``
- inclusive span: ``149.154.167.197-149.154.167.233``
- CIDR network: ``149.154.160.0/20``
- IPv4 wildcard octets: ``149.154.167.*``

Membership is numeric, never string-prefix based. Addresses of different IP
versions never match each other.
"""

from __future__ import annotations

import ipaddress
from dataclasses import dataclass

IPAddress = ipaddress.IPv4Address | ipaddress.IPv6Address


@dataclass(frozen=True)
class IpRange:
    """Inclusive numeric address span for one IP version."""

    first: IPAddress
    last: IPAddress

    def __contains__(self, ip: object) -> bool:
        if not isinstance(ip, (ipaddress.IPv4Address, ipaddress.IPv6Address)):
            return False
        if ip.version != self.first.version:
            return False
        return int(self.first) <= int(ip) <= int(self.last)


def parse_ip(value: str | None) -> IPAddress | None:
    """Return parsed address for one stripped value, or ``None`` when invalid."""
    if value is None:
        return None
    try:
        return ipaddress.ip_address(value.strip())
    except ValueError:
        return None


def parse_ip_range(notation: str) -> IpRange:
    """Parse one range notation into an inclusive span.

    Raises:
        ValueError: When ``notation`` is not a recognized range notation.
    """
    text = notation.strip()
    if text == "":
        raise ValueError("IP range must be non-empty")

    if "-" in text:
        raw_first, _, raw_last = text.partition("-")
        first = ipaddress.ip_address(raw_first.strip())
        last = ipaddress.ip_address(raw_last.strip())
        if first.version != last.version:
            raise ValueError(f"IP range mixes address versions: {notation}")
        if int(first) > int(last):
            first, last = last, first
        return IpRange(first=first, last=last)

    if "/" in text:
        network = ipaddress.ip_network(text, strict=False)
        return IpRange(first=network.network_address, last=network.broadcast_address)

    if "*" in text:
        octets = text.split(".")
        if len(octets) != 4:
            raise ValueError(f"Wildcard range must have four octets: {notation}")
        first = ipaddress.IPv4Address(
            ".".join("0" if octet == "*" else octet for octet in octets)
        )
        last = ipaddress.IPv4Address(
            ".".join("255" if octet == "*" else octet for octet in octets)
        )
        return IpRange(first=first, last=last)

    address = ipaddress.ip_address(text)
    return IpRange(first=address, last=address)


def ip_in_range(ip: str | IPAddress | None, notation: str) -> bool:
    """Return True when ``ip`` parses and falls inside range ``notation``."""
    address = parse_ip(ip) if isinstance(ip, str) or ip is None else ip
    if address is None:
        return False
    return address in parse_ip_range(notation)
