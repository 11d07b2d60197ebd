"""
Pydantic models for peer requests and responses.
"""

from typing import List, Sequence

from pydantic import BaseModel, Field, field_validator

from vpn_ipam.net.prefix import IPAddress


def allowed_ips(addresses: Sequence[IPAddress]) -> List[str]:
    """Render addresses as host routes: /32 for IPv4, /128 for IPv6."""
    return [f"{addr}/{addr.max_prefixlen}" for addr in addresses]


class AddPeerRequest(BaseModel):
    """Request model for registering a peer."""

    peer_id: str = Field(..., description="Opaque peer identity (e.g., public key)", min_length=1)

    @field_validator("peer_id")
    def validate_peer_id(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("peer id cannot be blank")
        return v

    def key(self) -> str:
        return self.peer_id


class RemovePeerRequest(AddPeerRequest):
    """Request model for removing a peer."""


class HasPeerRequest(AddPeerRequest):
    """Request model for checking whether a peer is registered."""


class PeerResponse(BaseModel):
    """Peer response model."""

    peer_id: str
    addresses: List[str]
    allowed_ips: List[str]


class PeerListResponse(BaseModel):
    """Response model for listing peers."""

    count: int
    peers: List[PeerResponse]
