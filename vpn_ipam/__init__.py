"""
VPN IPAM - address pools and peer lifecycle management for VPN nodes.

This package carves configured prefixes into leasable addresses and hands one
address per family to each tunnel peer, reclaiming them when the peer leaves.
"""

__version__ = "0.1.0"
__all__ = ["cli", "exceptions", "factory", "lib", "net", "peers"]
