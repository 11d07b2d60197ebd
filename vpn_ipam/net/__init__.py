"""Prefix blocks and single-prefix address pools."""

from .pool import AddressPool
from .prefix import MAX_PREFIX_SIZE, PrefixBlock

__all__ = ["AddressPool", "MAX_PREFIX_SIZE", "PrefixBlock"]
