"""Peer registry and service layer."""

from .registry import Peer, PeerRegistry

__all__ = ["Peer", "PeerRegistry"]
