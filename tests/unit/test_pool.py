"""
Unit tests for AddressPool.
"""

import ipaddress

import pytest

from vpn_ipam.exceptions import (
    AddressInUse,
    AddressNotAssigned,
    AddressOutOfRange,
    PoolExhausted,
    PrefixParseError,
)
from vpn_ipam.net.pool import AddressPool

ip = ipaddress.ip_address


class TestConstruction:
    """Tests for pool construction and structural reservations."""

    @pytest.mark.unit
    def test_reserves_structural_addresses(self, v4_pool):
        """Test prefix, network and broadcast addresses are reserved."""
        assert v4_pool.is_reserved("10.8.0.1")
        assert v4_pool.is_reserved("10.8.0.0")
        assert v4_pool.is_reserved("10.8.0.255")
        assert v4_pool.reserved_count() == 3
        assert v4_pool.capacity() == 253

    @pytest.mark.unit
    def test_network_equals_prefix_address(self):
        """Test a prefix given by its network address reserves it once."""
        pool = AddressPool.from_prefix("10.0.0.0/29")
        assert pool.reserved_count() == 2
        assert pool.capacity() == 6

    @pytest.mark.unit
    def test_ipv6_has_no_broadcast_reservation(self, v6_pool):
        """Test IPv6 pools only reserve the prefix and network addresses."""
        assert v6_pool.is_reserved("fd00:8::1")
        assert v6_pool.is_reserved("fd00:8::")
        assert not v6_pool.is_reserved("fd00:8::ff")
        assert v6_pool.capacity() == 254

    @pytest.mark.unit
    @pytest.mark.parametrize("text", ["10.0.0.5/32", "10.0.0.0/31"])
    def test_tiny_prefixes_have_no_capacity(self, text):
        """Test /32 and /31 pools have nothing to lease."""
        pool = AddressPool.from_prefix(text)
        assert pool.capacity() == 0
        with pytest.raises(PoolExhausted):
            pool.get()

    @pytest.mark.unit
    def test_empty_prefix(self):
        """Test an unconfigured family yields an empty pool."""
        pool = AddressPool.from_prefix("")
        assert pool.prefix.is_empty
        assert pool.capacity() == 0
        with pytest.raises(PoolExhausted, match="<empty>"):
            pool.get()
        with pytest.raises(AddressOutOfRange):
            pool.reserve("10.0.0.1")

    @pytest.mark.unit
    def test_invalid_prefix(self):
        """Test construction fails on malformed prefixes."""
        with pytest.raises(PrefixParseError):
            AddressPool.from_prefix("10.8.0.1")


class TestGet:
    """Tests for AddressPool.get."""

    @pytest.mark.unit
    def test_first_lease_skips_reserved(self, v4_pool):
        """Test the cursor skips the network and prefix addresses."""
        assert v4_pool.get() == ip("10.8.0.2")
        assert v4_pool.get() == ip("10.8.0.3")
        assert v4_pool.is_assigned("10.8.0.2")
        assert v4_pool.assigned_count() == 2

    @pytest.mark.unit
    def test_ipv6_leases(self, v6_pool):
        """Test IPv6 pools hand out IPv6 addresses."""
        addr = v6_pool.get()
        assert addr == ip("fd00:8::2")
        assert addr.version == 6

    @pytest.mark.unit
    def test_low_ipv6_prefix_stays_ipv6(self):
        """Test addresses near :: are not mistaken for IPv4."""
        pool = AddressPool.from_prefix("::1/126")
        assert pool.get() == ipaddress.IPv6Address("::2")

    @pytest.mark.unit
    def test_exhaustion(self):
        """Test exactly capacity addresses are leased before exhaustion."""
        pool = AddressPool.from_prefix("10.0.0.0/29")
        leased = [pool.get() for _ in range(6)]

        assert len(set(leased)) == 6
        assert [str(a) for a in leased] == [f"10.0.0.{i}" for i in range(1, 7)]
        with pytest.raises(PoolExhausted, match="10.0.0.0/29"):
            pool.get()
        assert pool.available() == 0

    @pytest.mark.unit
    def test_never_returns_reserved(self):
        """Test explicitly reserved addresses are never leased."""
        pool = AddressPool.from_prefix("10.8.0.1/24")
        pool.reserve("10.8.0.5")

        leased = []
        while True:
            try:
                leased.append(pool.get())
            except PoolExhausted:
                break

        assert ip("10.8.0.5") not in leased
        assert ip("10.8.0.0") not in leased
        assert ip("10.8.0.1") not in leased
        assert ip("10.8.0.255") not in leased
        assert len(leased) == 252

    @pytest.mark.unit
    def test_recycled_preferred(self, v4_pool):
        """Test a returned address is handed out again before new ones."""
        addr = v4_pool.get()
        v4_pool.put(addr)
        assert v4_pool.get() == addr

    @pytest.mark.unit
    def test_recycled_fifo(self, v4_pool):
        """Test recycled addresses are reused in return order."""
        first, second, third = v4_pool.get(), v4_pool.get(), v4_pool.get()
        v4_pool.put(third)
        v4_pool.put(first)

        assert v4_pool.recycled_count() == 2
        assert v4_pool.get() == third
        assert v4_pool.get() == first
        assert v4_pool.get() == ip("10.8.0.5")
        assert second == ip("10.8.0.3")

    @pytest.mark.unit
    def test_recycled_after_exhaustion(self):
        """Test an exhausted pool recovers once an address is returned."""
        pool = AddressPool.from_prefix("10.0.0.1/30")
        addr = pool.get()
        with pytest.raises(PoolExhausted):
            pool.get()

        pool.put(addr)
        assert pool.get() == addr


class TestPut:
    """Tests for AddressPool.put."""

    @pytest.mark.unit
    def test_put_once(self, v4_pool):
        """Test a leased address can be returned exactly once."""
        addr = v4_pool.get()
        v4_pool.put(addr)
        assert not v4_pool.is_assigned(addr)

        with pytest.raises(AddressNotAssigned, match="10.8.0.2 is not assigned"):
            v4_pool.put(addr)

    @pytest.mark.unit
    def test_put_text(self, v4_pool):
        """Test addresses can be returned as text."""
        v4_pool.get()
        v4_pool.put("10.8.0.2")
        assert v4_pool.assigned_count() == 0

    @pytest.mark.unit
    def test_put_never_leased(self, v4_pool):
        """Test returning an address that was never leased."""
        with pytest.raises(AddressNotAssigned):
            v4_pool.put("10.8.0.100")

    @pytest.mark.unit
    def test_put_reserved(self, v4_pool):
        """Test reserved addresses can never be released."""
        with pytest.raises(AddressNotAssigned):
            v4_pool.put("10.8.0.0")
        assert v4_pool.is_reserved("10.8.0.0")

    @pytest.mark.unit
    def test_put_foreign_address(self, v4_pool):
        """Test returning an address from another prefix."""
        with pytest.raises(AddressNotAssigned):
            v4_pool.put("192.168.0.1")


class TestReserve:
    """Tests for AddressPool.reserve."""

    @pytest.mark.unit
    def test_reserve_out_of_range(self, v4_pool):
        """Test reserving an address outside the prefix."""
        with pytest.raises(AddressOutOfRange, match="outside of prefix 10.8.0.1/24"):
            v4_pool.reserve("10.9.0.1")

    @pytest.mark.unit
    def test_reserve_twice(self, v4_pool):
        """Test reserving an already reserved address."""
        v4_pool.reserve("10.8.0.10")
        with pytest.raises(AddressInUse):
            v4_pool.reserve("10.8.0.10")

    @pytest.mark.unit
    def test_reserve_structural(self, v4_pool):
        """Test structural addresses cannot be reserved again."""
        with pytest.raises(AddressInUse):
            v4_pool.reserve("10.8.0.255")

    @pytest.mark.unit
    def test_reserve_assigned(self, v4_pool):
        """Test an assigned address cannot become reserved."""
        addr = v4_pool.get()
        with pytest.raises(AddressInUse):
            v4_pool.reserve(addr)
        assert v4_pool.is_assigned(addr)
        assert not v4_pool.is_reserved(addr)

    @pytest.mark.unit
    def test_reserve_recycled(self, v4_pool):
        """Test reserving a recycled address removes it from reuse."""
        addr = v4_pool.get()
        v4_pool.put(addr)
        v4_pool.reserve(addr)

        assert v4_pool.recycled_count() == 0
        assert v4_pool.get() == ip("10.8.0.3")

    @pytest.mark.unit
    def test_reserve_reduces_capacity(self, v4_pool):
        """Test capacity accounting after reservations and leases."""
        v4_pool.reserve("10.8.0.200")
        v4_pool.get()
        assert v4_pool.capacity() == 252
        assert v4_pool.available() == 251
