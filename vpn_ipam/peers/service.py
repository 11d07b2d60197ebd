"""
Peer service layer.

Bridges validated requests to the registry and shapes the results for the
component that programs the VPN interface.
"""

from typing import List, Optional

from vpn_ipam.peers.models import (
    AddPeerRequest,
    HasPeerRequest,
    PeerListResponse,
    PeerResponse,
    RemovePeerRequest,
    allowed_ips,
)
from vpn_ipam.peers.registry import Peer, PeerRegistry


def _to_response(peer: Peer) -> PeerResponse:
    key = peer.peer_id
    if isinstance(key, bytes):
        key = key.hex()
    return PeerResponse(
        peer_id=key,
        addresses=[str(a) for a in peer.addresses],
        allowed_ips=allowed_ips(peer.addresses),
    )


class PeerService:
    """Peer add/has/remove operations on top of a PeerRegistry."""

    def __init__(self, registry: PeerRegistry):
        self.registry = registry

    def add_peer(self, request: AddPeerRequest) -> PeerResponse:
        """
        Register a peer and lease its addresses.

        Args:
            request: Validated add request

        Returns:
            PeerResponse with addresses and allowed IPs

        Raises:
            PeerAlreadyExists: Peer is already registered
            PoolExhausted: A pool has no free address
        """
        identity = request.key()
        addresses = self.registry.acquire(identity)
        return _to_response(Peer(peer_id=identity, addresses=tuple(addresses)))

    def has_peer(self, request: HasPeerRequest) -> bool:
        return self.registry.lookup(request.key()) is not None

    def remove_peer(self, request: RemovePeerRequest) -> None:
        self.registry.release(request.key())

    def get_peer(self, peer_id: str) -> Optional[PeerResponse]:
        peer = self.registry.lookup(peer_id)
        if peer is None:
            return None
        return _to_response(peer)

    def list_peers(self) -> PeerListResponse:
        peers: List[Peer] = []

        def _collect(_key, peer):
            peers.append(peer)
            return False

        self.registry.for_each(_collect)
        items = sorted((_to_response(p) for p in peers), key=lambda r: r.peer_id)
        return PeerListResponse(count=len(items), peers=items)

    def peer_count(self) -> int:
        return self.registry.count()
