"""
Configuration loader for VPN IPAM.

Prefixes and extra reservations come from an INI file rather than being
hardcoded, so each node can carve its own address space.
"""

from __future__ import annotations

import configparser
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Tuple

from vpn_ipam.exceptions import IpamConfigurationError
from vpn_ipam.lib.validators import validate_address_list, validate_prefix
from vpn_ipam.net.prefix import MAX_PREFIX_SIZE


DEFAULT_CONFIG_PATH = Path("/etc/vpn-ipam/ipam.conf")
CONFIG_SECTION = "ipam"


@dataclass(frozen=True)
class IpamConfig:
    ipv4_addr: str = "10.8.0.1/24"
    ipv6_addr: str = ""
    reserved: Tuple[str, ...] = ()
    max_prefix_size: int = MAX_PREFIX_SIZE


def _config_path() -> Path:
    env = os.environ.get("VPN_IPAM_CONFIG_PATH")
    if env:
        return Path(env)
    return DEFAULT_CONFIG_PATH


def _read_ini(path: Path) -> configparser.ConfigParser:
    parser = configparser.ConfigParser()
    if path.exists():
        parser.read(path, encoding="utf-8")
    return parser


def load_config(path: Optional[Path] = None) -> IpamConfig:
    """
    Load config from `path`, `VPN_IPAM_CONFIG_PATH` or `/etc/vpn-ipam/ipam.conf`.

    Missing files are not an error; defaults are returned.
    """
    parser = _read_ini(Path(path) if path else _config_path())
    section = parser[CONFIG_SECTION] if parser.has_section(CONFIG_SECTION) else {}

    def _get(key: str, default: str) -> str:
        if isinstance(section, dict):
            return str(section.get(key, default)).strip()
        return str(section.get(key, fallback=default)).strip()

    def _get_int(key: str, default: int) -> int:
        raw = _get(key, str(default))
        try:
            return int(raw)
        except ValueError:
            return default

    reserved = tuple(t.strip() for t in _get("reserved", "").split(",") if t.strip())

    return IpamConfig(
        ipv4_addr=_get("ipv4_addr", "10.8.0.1/24"),
        ipv6_addr=_get("ipv6_addr", ""),
        reserved=reserved,
        max_prefix_size=_get_int("max_prefix_size", MAX_PREFIX_SIZE),
    )


def validate_config(cfg: IpamConfig) -> None:
    """
    Check that the configured prefixes can back a peer registry.

    Raises:
        IpamConfigurationError: Invalid configuration
    """
    if not cfg.ipv4_addr and not cfg.ipv6_addr:
        raise IpamConfigurationError(details="at least one of ipv4_addr or ipv6_addr is required")
    if cfg.max_prefix_size < 1:
        raise IpamConfigurationError(details="max_prefix_size must be positive")

    try:
        blocks = []
        if cfg.ipv4_addr:
            blocks.append(validate_prefix(cfg.ipv4_addr, version=4))
        if cfg.ipv6_addr:
            blocks.append(validate_prefix(cfg.ipv6_addr, version=6))

        for addr in validate_address_list(cfg.reserved):
            if not any(block.contains(addr) for block in blocks):
                raise ValueError(f"reserved address {addr} is outside of every configured prefix")
    except ValueError as e:
        raise IpamConfigurationError(details=str(e))
