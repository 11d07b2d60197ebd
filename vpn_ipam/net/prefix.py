"""
Network prefix blocks.

A PrefixBlock keeps the address it was parsed from (host bits included) next to
the prefix length, so "10.8.0.1/24" remembers both the interface address
10.8.0.1 and the network 10.8.0.0/24.
"""

from __future__ import annotations

import ipaddress
from dataclasses import dataclass
from typing import List, Optional, Union

from vpn_ipam.exceptions import BroadcastUnsupported, PrefixParseError, PrefixTooLarge

IPAddress = Union[ipaddress.IPv4Address, ipaddress.IPv6Address]
IPInterface = Union[ipaddress.IPv4Interface, ipaddress.IPv6Interface]

# Upper bound on the number of addresses a block may materialize at once.
MAX_PREFIX_SIZE = 1 << 16


def to_address(value: Union[str, IPAddress]) -> IPAddress:
    """
    Coerce an address or its text form to an ipaddress object.

    Raises:
        PrefixParseError: If the text is not a valid IPv4/IPv6 address
    """
    if isinstance(value, (ipaddress.IPv4Address, ipaddress.IPv6Address)):
        return value
    try:
        return ipaddress.ip_address(value)
    except ValueError as e:
        raise PrefixParseError(text=value, details=str(e))


@dataclass(frozen=True)
class PrefixBlock:
    """Immutable network prefix. An empty block stands for an unconfigured family."""

    interface: Optional[IPInterface] = None
    max_size: int = MAX_PREFIX_SIZE

    @classmethod
    def parse(cls, text: str, max_size: int = MAX_PREFIX_SIZE, strict: bool = False) -> "PrefixBlock":
        """
        Parse CIDR text such as "10.8.0.1/24" or "fd00::1/120".

        An empty string yields an empty block.

        Args:
            text: CIDR text
            max_size: Enumeration cap for the block
            strict: Also enforce the size cap at parse time

        Raises:
            PrefixParseError: If the text is malformed
            PrefixTooLarge: If strict and the block exceeds max_size
        """
        if text == "":
            return cls(None, max_size)

        if not isinstance(text, str) or "/" not in text:
            raise PrefixParseError(text=text, details="expected <address>/<prefix length>")

        try:
            interface = ipaddress.ip_interface(text)
        except ValueError as e:
            raise PrefixParseError(text=text, details=str(e))

        block = cls(interface, max_size)
        if strict:
            block.validate()
        return block

    @property
    def is_empty(self) -> bool:
        return self.interface is None

    @property
    def address(self) -> Optional[IPAddress]:
        """The address the block was parsed from, host bits kept."""
        return None if self.interface is None else self.interface.ip

    @property
    def prefixlen(self) -> int:
        return 0 if self.interface is None else self.interface.network.prefixlen

    @property
    def version(self) -> Optional[int]:
        return None if self.interface is None else self.interface.version

    @property
    def bit_length(self) -> int:
        return 0 if self.interface is None else self.interface.max_prefixlen

    def length(self) -> int:
        """Number of addresses in the block."""
        if self.interface is None:
            return 0
        diff = self.bit_length - self.prefixlen
        if diff < 0:
            return 0
        return 1 << diff

    def contains(self, addr: Union[str, IPAddress]) -> bool:
        if self.interface is None:
            return False
        addr = to_address(addr)
        if addr.version != self.version:
            return False
        return addr in self.interface.network

    def __contains__(self, addr: Union[str, IPAddress]) -> bool:
        return self.contains(addr)

    def network_address(self) -> Optional[IPAddress]:
        """Base address with all host bits cleared."""
        if self.interface is None:
            return None
        return self.interface.network.network_address

    def broadcast_address(self) -> IPAddress:
        """
        Base address with all host bits set, IPv4 only.

        A single-address block has no host bits and answers with its own address.

        Raises:
            BroadcastUnsupported: For IPv6 and empty blocks
        """
        if self.interface is None or self.version != 4:
            raise BroadcastUnsupported(prefix=str(self) or "<empty>")

        if self.length() - 1 == 0:
            return self.interface.ip
        return self.interface.network.broadcast_address

    def validate(self) -> None:
        """
        Check that the block is small enough to enumerate.

        Raises:
            PrefixTooLarge: If the block holds more than max_size addresses
        """
        size = self.length()
        if size > self.max_size:
            raise PrefixTooLarge(size=size, limit=self.max_size)

    def addresses(self) -> List[IPAddress]:
        """
        Every address of the block in ascending order.

        Raises:
            PrefixTooLarge: If the block holds more than max_size addresses
        """
        self.validate()
        first = self.network_address()
        if first is None:
            return []
        return [first + offset for offset in range(self.length())]

    def __str__(self) -> str:
        if self.interface is None:
            return ""
        return self.interface.with_prefixlen
