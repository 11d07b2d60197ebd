"""
Input validation functions.
"""

import ipaddress
from typing import Iterable, List, Optional

from vpn_ipam.exceptions import PrefixParseError
from vpn_ipam.net.prefix import IPAddress, PrefixBlock


def validate_prefix(text: str, version: Optional[int] = None) -> PrefixBlock:
    """
    Validate CIDR text for an address pool.

    Args:
        text: CIDR text (e.g., "10.8.0.1/24")
        version: Required address family (4 or 6), or None for either

    Returns:
        Parsed PrefixBlock

    Raises:
        ValueError: If the prefix is invalid or of the wrong family
    """
    try:
        block = PrefixBlock.parse(text)
    except PrefixParseError as e:
        raise ValueError(f"Invalid prefix: {e}")

    if block.is_empty:
        raise ValueError("Prefix cannot be empty")

    if version is not None and block.version != version:
        raise ValueError(f"Expected an IPv{version} prefix, got IPv{block.version} in '{text}'")

    return block


def validate_address_list(values: Iterable[str]) -> List[IPAddress]:
    """
    Validate a list of address strings.

    Raises:
        ValueError: If any address is invalid
    """
    addresses = []
    for value in values:
        try:
            addresses.append(ipaddress.ip_address(value))
        except ValueError as e:
            raise ValueError(f"Invalid address: {e}")
    return addresses

