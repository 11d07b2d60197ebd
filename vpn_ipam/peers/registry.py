"""
Peer registry.

Maps an opaque peer identity to one leased address per configured pool.

Thread Safety Model:
--------------------
acquire() and release() run under the registry write lock; lookup(), count()
and for_each() share the read lock. Pools keep their own locks, so the
multi-pool acquire is not a cross-pool transaction: a failed get() is
repaired by putting back every address already taken in the same call.
Locks are always taken registry first, pool second.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Tuple, Union

from oslo_concurrency import lockutils
from oslo_log import log as logging

from vpn_ipam.exceptions import (
    AddressBookkeepingError,
    InvalidPeerKey,
    IpamConfigurationError,
    PeerAlreadyExists,
    VpnIpamException,
)
from vpn_ipam.net.pool import AddressPool
from vpn_ipam.net.prefix import IPAddress

LOG = logging.getLogger(__name__)

PeerKey = Union[str, bytes]


@dataclass(frozen=True)
class Peer:
    """Registered peer.

    Attributes:
        peer_id: Opaque identity (public key, UUID, ...)
        addresses: One address per pool, in pool order
    """

    peer_id: PeerKey
    addresses: Tuple[IPAddress, ...]

    @property
    def key(self) -> PeerKey:
        return self.peer_id


class PeerRegistry:
    """Leases addresses from an ordered list of pools to peers as one unit."""

    def __init__(self, *pools: AddressPool):
        if not pools:
            raise IpamConfigurationError(details="at least one address pool is required")

        self._pools: Tuple[AddressPool, ...] = tuple(pools)
        self._peers: Dict[PeerKey, Peer] = {}
        self._rwlock = lockutils.ReaderWriterLock()

    @property
    def pools(self) -> Tuple[AddressPool, ...]:
        return self._pools

    def acquire(self, peer_id: PeerKey) -> List[IPAddress]:
        """
        Register a peer and lease one address from every pool.

        If any pool fails, the addresses already leased in this call are put
        back before the error propagates.

        Args:
            peer_id: Opaque, non-empty peer identity

        Returns:
            Leased addresses, in pool order

        Raises:
            InvalidPeerKey: If peer_id is empty
            PeerAlreadyExists: If peer_id is already registered
            PoolExhausted: If any pool has no free address
            AddressBookkeepingError: If a rollback put() is refused (fatal)
        """
        if not peer_id:
            raise InvalidPeerKey(details="peer id is empty")

        with self._rwlock.write_lock():
            if peer_id in self._peers:
                raise PeerAlreadyExists(peer_id=peer_id)

            addresses: List[IPAddress] = []
            try:
                for pool in self._pools:
                    addresses.append(pool.get())
            except Exception as e:
                LOG.warning(
                    "Failed to acquire addresses for peer %s from pool %d: %s",
                    peer_id,
                    len(addresses),
                    e,
                )
                self._put_back(peer_id, addresses)
                raise

            self._peers[peer_id] = Peer(peer_id=peer_id, addresses=tuple(addresses))

        LOG.info(
            "Registered peer %s with addresses %s",
            peer_id,
            ", ".join(str(a) for a in addresses),
        )
        return list(addresses)

    def release(self, peer_id: PeerKey) -> None:
        """
        Unregister a peer and return its addresses. Unknown peers are ignored.

        Raises:
            AddressBookkeepingError: If a pool refuses one of the peer's addresses (fatal)
        """
        with self._rwlock.write_lock():
            peer = self._peers.get(peer_id)
            if peer is None:
                return

            self._put_back(peer_id, peer.addresses)
            del self._peers[peer_id]

        LOG.info("Released peer %s", peer_id)

    def _put_back(self, peer_id: PeerKey, addresses) -> None:
        """Return addresses to the pools at matching positions. Caller holds the write lock."""
        for index, addr in enumerate(addresses):
            try:
                self._pools[index].put(addr)
            except VpnIpamException as e:
                LOG.critical(
                    "Address bookkeeping violated: peer=%s pool_index=%d address=%s: %s",
                    peer_id,
                    index,
                    addr,
                    e,
                )
                raise AddressBookkeepingError(peer_id, index, addr, e) from e

    def lookup(self, peer_id: PeerKey) -> Optional[Peer]:
        with self._rwlock.read_lock():
            return self._peers.get(peer_id)

    def count(self) -> int:
        with self._rwlock.read_lock():
            return len(self._peers)

    def __len__(self) -> int:
        return self.count()

    def __contains__(self, peer_id: PeerKey) -> bool:
        return self.lookup(peer_id) is not None

    def for_each(self, fn: Callable[[PeerKey, Peer], bool]) -> None:
        """
        Apply fn(peer_id, peer) to every registered peer under the read lock.

        Iteration stops early when fn returns True. An exception raised by fn
        aborts the iteration and propagates to the caller. fn must not call
        acquire() or release() on this registry.
        """
        with self._rwlock.read_lock():
            for peer_id, peer in self._peers.items():
                if fn(peer_id, peer):
                    return
