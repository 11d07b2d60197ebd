"""
Pytest configuration and fixtures.
"""

import shutil
import tempfile
from pathlib import Path

import pytest

from vpn_ipam.net.pool import AddressPool


@pytest.fixture
def temp_dir():
    """Create a temporary directory for tests."""
    temp_path = tempfile.mkdtemp()
    yield Path(temp_path)
    shutil.rmtree(temp_path)


@pytest.fixture
def v4_pool():
    """IPv4 pool with 253 leasable addresses (10.8.0.2 - 10.8.0.254)."""
    return AddressPool.from_prefix("10.8.0.1/24")


@pytest.fixture
def v6_pool():
    """IPv6 pool with 254 leasable addresses (fd00:8::2 - fd00:8::ff)."""
    return AddressPool.from_prefix("fd00:8::1/120")


@pytest.fixture
def write_config(temp_dir):
    """Write an [ipam] config file and return its path."""

    def _write(**values):
        path = temp_dir / "ipam.conf"
        lines = ["[ipam]"] + [f"{key} = {value}" for key, value in values.items()] + [""]
        path.write_text("\n".join(lines), encoding="utf-8")
        return path

    return _write
