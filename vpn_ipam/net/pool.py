"""
Single-prefix address pool.

Leasing prefers recycled addresses (FIFO) and only advances the cursor into
never-visited addresses once the recycled queue is empty.

Thread Safety Model:
--------------------
Every public method takes the pool's own lock for its whole critical section.
Calls on the same pool are strictly ordered; different pools share nothing.
Nothing blocks waiting for capacity: get() fails fast with PoolExhausted.
"""

from __future__ import annotations

import contextlib
import threading
from collections import deque
from typing import Deque, Optional, Set, Union

from oslo_log import log as logging

from vpn_ipam.exceptions import AddressInUse, AddressNotAssigned, AddressOutOfRange, PoolExhausted
from vpn_ipam.net.prefix import MAX_PREFIX_SIZE, IPAddress, PrefixBlock, to_address

LOG = logging.getLogger(__name__)


class AddressPool:
    """Leases individual addresses out of one PrefixBlock."""

    def __init__(self, prefix: PrefixBlock):
        """
        Initialize the pool and reserve the structural addresses.

        The prefix's own address, the network address and, for IPv4, the
        broadcast address are reserved and can never be leased.

        Args:
            prefix: Block to allocate from (an empty block yields an empty pool)
        """
        self._prefix = prefix
        self._assigned: Set[IPAddress] = set()
        self._reserved: Set[IPAddress] = set()
        self._recycled: Deque[IPAddress] = deque()
        self._lock = threading.Lock()

        network = prefix.network_address()
        if network is None:
            self._cursor: Optional[int] = None
            self._end = 0
            return

        self._address_class = type(network)
        self._cursor = int(network)
        self._end = self._cursor + prefix.length()

        structural = [prefix.address, network]
        if prefix.version == 4:
            structural.append(prefix.broadcast_address())

        for addr in structural:
            # The three may coincide, e.g. "10.8.0.0/24" or any /32.
            with contextlib.suppress(AddressInUse):
                self.reserve(addr)

        LOG.info(
            "Address pool %s initialized: %d addresses, %d reserved",
            prefix,
            prefix.length(),
            len(self._reserved),
        )

    @classmethod
    def from_prefix(cls, text: str, max_size: int = MAX_PREFIX_SIZE) -> "AddressPool":
        """
        Build a pool from CIDR text, e.g. "10.8.0.1/24".

        Raises:
            PrefixParseError: If the text is malformed
        """
        return cls(PrefixBlock.parse(text, max_size=max_size))

    @property
    def prefix(self) -> PrefixBlock:
        return self._prefix

    def reserve(self, addr: Union[str, IPAddress]) -> None:
        """
        Permanently exclude an address from leasing.

        Raises:
            AddressOutOfRange: If the address is outside the prefix
            AddressInUse: If the address is already assigned or reserved
        """
        addr = to_address(addr)
        with self._lock:
            if not self._prefix.contains(addr):
                raise AddressOutOfRange(address=addr, prefix=str(self._prefix) or "<empty>")
            if addr in self._assigned or addr in self._reserved:
                raise AddressInUse(address=addr)

            self._reserved.add(addr)
            # A free address waiting for reuse must not come back out of the queue.
            if addr in self._recycled:
                self._recycled.remove(addr)

        LOG.debug("Reserved %s in pool %s", addr, self._prefix)

    def get(self) -> IPAddress:
        """
        Lease one address.

        Returns:
            The leased address

        Raises:
            PoolExhausted: If no recycled address is queued and the cursor left the prefix
        """
        with self._lock:
            if self._recycled:
                addr = self._recycled.popleft()
            else:
                while True:
                    if self._cursor is None or self._cursor >= self._end:
                        LOG.warning("Address pool %s exhausted", str(self._prefix) or "<empty>")
                        raise PoolExhausted(prefix=str(self._prefix) or "<empty>")

                    addr = self._address_class(self._cursor)
                    self._cursor += 1
                    if addr not in self._reserved:
                        break

            self._assigned.add(addr)

        LOG.debug("Leased %s from pool %s", addr, self._prefix)
        return addr

    def put(self, addr: Union[str, IPAddress]) -> None:
        """
        Return a leased address to the pool.

        Raises:
            AddressNotAssigned: If the address is not currently leased from this pool
        """
        addr = to_address(addr)
        with self._lock:
            if addr not in self._assigned:
                raise AddressNotAssigned(address=addr)

            self._assigned.discard(addr)
            self._recycled.append(addr)

        LOG.debug("Returned %s to pool %s", addr, self._prefix)

    def is_assigned(self, addr: Union[str, IPAddress]) -> bool:
        addr = to_address(addr)
        with self._lock:
            return addr in self._assigned

    def is_reserved(self, addr: Union[str, IPAddress]) -> bool:
        addr = to_address(addr)
        with self._lock:
            return addr in self._reserved

    def assigned_count(self) -> int:
        with self._lock:
            return len(self._assigned)

    def reserved_count(self) -> int:
        with self._lock:
            return len(self._reserved)

    def recycled_count(self) -> int:
        with self._lock:
            return len(self._recycled)

    def capacity(self) -> int:
        """Number of leasable addresses: block length minus reservations."""
        with self._lock:
            return self._prefix.length() - len(self._reserved)

    def available(self) -> int:
        """Number of addresses that can still be leased right now."""
        with self._lock:
            return self._prefix.length() - len(self._reserved) - len(self._assigned)

    def __repr__(self) -> str:
        return f"AddressPool({str(self._prefix)!r})"
