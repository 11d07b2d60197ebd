"""
Builds address pools and the peer registry from configuration.
"""

from typing import List

from oslo_log import log as logging

from vpn_ipam.exceptions import AddressInUse
from vpn_ipam.lib.config import IpamConfig, validate_config
from vpn_ipam.net.pool import AddressPool
from vpn_ipam.peers.registry import PeerRegistry

LOG = logging.getLogger(__name__)


def build_pools(cfg: IpamConfig) -> List[AddressPool]:
    """
    Create one pool per configured family, IPv4 first, and apply extra reservations.

    Unconfigured (empty) families are left out.

    Raises:
        IpamConfigurationError: Invalid configuration
    """
    validate_config(cfg)

    pools = []
    for text in (cfg.ipv4_addr, cfg.ipv6_addr):
        if text:
            pools.append(AddressPool.from_prefix(text, max_size=cfg.max_prefix_size))

    for addr in cfg.reserved:
        pool = next(p for p in pools if p.prefix.contains(addr))
        try:
            pool.reserve(addr)
        except AddressInUse:
            LOG.debug("Address %s already reserved in pool %s", addr, pool.prefix)

    LOG.info("Built %d address pools: %s", len(pools), ", ".join(str(p.prefix) for p in pools))
    return pools


def build_registry(cfg: IpamConfig) -> PeerRegistry:
    """Create a PeerRegistry over the configured pools."""
    return PeerRegistry(*build_pools(cfg))
