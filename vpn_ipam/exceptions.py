"""VPN IPAM exceptions."""


class VpnIpamException(Exception):
    """Base exception for address pool and peer registry errors."""

    message = "An unknown exception occurred."

    def __init__(self, message=None, **kwargs):
        """Initialize exception with optional custom message."""
        self.kwargs = kwargs
        if message:
            self.message = message
        super(VpnIpamException, self).__init__(self.message % kwargs)


class PrefixParseError(VpnIpamException):
    """Malformed CIDR or address text."""

    message = "Failed to parse '%(text)s': %(details)s"


class PrefixTooLarge(VpnIpamException):
    """Enumeration requested on a block above the configured size cap."""

    message = "Prefix block size %(size)d exceeds the limit of %(limit)d addresses"


class BroadcastUnsupported(VpnIpamException):
    """Broadcast address requested for a family without broadcast."""

    message = "Broadcast address is not applicable to %(prefix)s"


class AddressOutOfRange(VpnIpamException):
    """Address does not belong to the pool prefix."""

    message = "Address %(address)s is outside of prefix %(prefix)s"


class AddressInUse(VpnIpamException):
    """Address is already assigned or reserved."""

    message = "Address %(address)s is already assigned or reserved"


class PoolExhausted(VpnIpamException):
    """No free address left in the pool.

    This is a non-retryable error for the current pool state. Addresses only
    become available again when peers are released.
    """

    message = "Address pool %(prefix)s is exhausted"


class AddressNotAssigned(VpnIpamException):
    """Address returned to a pool that does not show it as assigned."""

    message = "Address %(address)s is not assigned"


class InvalidPeerKey(VpnIpamException):
    """Peer identity is empty or otherwise unusable."""

    message = "Invalid peer key: %(details)s"


class PeerAlreadyExists(VpnIpamException):
    """Peer identity is already registered."""

    message = "Peer %(peer_id)s already exists"


class IpamConfigurationError(VpnIpamException):
    """Address pool configuration error.

    Raised while loading or validating the configured prefixes. Retry will
    not help, the operator must fix the configuration.
    """

    message = "IPAM configuration error: %(details)s"


class AddressBookkeepingError(RuntimeError):
    """Pool and registry bookkeeping disagree.

    Raised when an address the registry holds for a peer is refused by its
    pool. Not a VpnIpamException on purpose: it signals corrupted in-memory
    state and must not be handled like an ordinary allocation failure.
    """

    def __init__(self, peer_id, pool_index, address, cause):
        self.peer_id = peer_id
        self.pool_index = pool_index
        self.address = address
        self.cause = cause
        super(AddressBookkeepingError, self).__init__(
            f"Failed to put addr {address} back to pool {pool_index} "
            f"for peer {peer_id}: {cause}"
        )


ParseError = PrefixParseError
TooLargeError = PrefixTooLarge
UnsupportedError = BroadcastUnsupported
OutOfRangeError = AddressOutOfRange
AlreadyInUseError = AddressInUse
PoolExhaustedError = PoolExhausted
NotAssignedError = AddressNotAssigned
InvalidKeyError = InvalidPeerKey
AlreadyExistsError = PeerAlreadyExists
