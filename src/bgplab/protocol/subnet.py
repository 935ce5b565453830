"""Subnet calculation, containment and VLSM sizing."""

from bgplab.protocol.types import BinaryBreakdown, SubnetDescriptor
from bgplab.utils.address import (
    ADDRESS_BITS,
    MAX_ADDRESS,
    address_value,
    format_address,
    mask_for_prefix,
    prefix_to_binary_mask,
    to_binary,
)

MIN_SUBNET_PREFIX = 1
MAX_SUBNET_PREFIX = 30
DEFAULT_HOST_PREVIEW_LIMIT = 256

# Upper bound of each size band and its typical use
_PREFIX_USE_CASES: tuple[tuple[int, str], ...] = (
    (
        8,
        "Massive Enterprise/ISP Backbone (e.g., /8): This allocation provides "
        "over 16 million usable addresses. It is typically used for entire "
        "continents, global ISPs, or very large legacy networks.",
    ),
    (
        12,
        "Major Regional Network (e.g., /12): Providing over 1 million hosts, "
        "these blocks are suitable for major regional ISPs or large private "
        "campus networks spanning multiple states or countries.",
    ),
    (
        16,
        "Large Campus or Metro Network (e.g., /16): With 65,534 usable hosts, "
        "this is common for large corporate campuses, universities, or "
        "metropolitan area networks. Useful for VLSM distribution.",
    ),
    (
        24,
        "Standard Enterprise LAN (e.g., /24): The most common network size, "
        "providing 254 usable hosts. Perfect for a standard office, a floor "
        "in a building, or a small business data center.",
    ),
    (
        26,
        "Medium Subnet / VLSM (e.g., /26): Provides 62 usable hosts. Excellent "
        "for subnetting a larger network into smaller, manageable departments "
        "or server racks to improve efficiency and reduce broadcast traffic.",
    ),
    (
        28,
        "Small Subnet (e.g., /28): Provides 14 usable hosts. Often used for "
        "critical services like management VLANs, specific hardware like "
        "firewalls, or small remote branch offices.",
    ),
    (
        30,
        "Point-to-Point Link (e.g., /30): Provides only 2 usable hosts. This "
        "is the standard, most efficient size for connecting two routers "
        "directly, such as an eBGP peering link.",
    ),
)


def _valid_prefix(prefix: object) -> bool:
    return (
        isinstance(prefix, int)
        and not isinstance(prefix, bool)
        and MIN_SUBNET_PREFIX <= prefix <= MAX_SUBNET_PREFIX
    )


def compute_subnet(
    address: int | str,
    prefix: int,
    host_preview_limit: int = DEFAULT_HOST_PREVIEW_LIMIT,
) -> SubnetDescriptor | None:
    """
    Derive network boundaries for an address and prefix length.

    The host preview lists at most host_preview_limit usable addresses;
    it never decides whether a subnet is large enough.

    Args:
        address: 32-bit integer or dotted-decimal text
        prefix: Prefix length (1-30)
        host_preview_limit: Maximum number of hosts to enumerate

    Returns:
        SubnetDescriptor, or None if the address or prefix is invalid
    """
    value = address_value(address)
    if value is None or not _valid_prefix(prefix):
        return None

    mask = mask_for_prefix(prefix)
    network = value & mask
    broadcast = (network | ~mask) & MAX_ADDRESS

    usable_start = network + 1
    usable_end = broadcast - 1
    usable_hosts = max(0, usable_end - usable_start + 1)

    preview = min(usable_hosts, max(0, host_preview_limit))
    hosts = tuple(format_address(usable_start + i) for i in range(preview))

    return SubnetDescriptor(
        network_address=format_address(network),
        broadcast_address=format_address(broadcast),
        first_host=format_address(usable_start),
        last_host=format_address(usable_end),
        usable_hosts=usable_hosts,
        prefix=prefix,
        network_value=network,
        broadcast_value=broadcast,
        hosts=hosts,
    )


def is_contained(
    address: int | str,
    network_address: int | str,
    prefix: int,
) -> bool:
    """
    Check whether an address falls inside a network.

    Both sides are masked with the prefix before comparison, so the
    network address need not be the exact network ID.

    Args:
        address: Candidate address (integer or text)
        network_address: Network address (integer or text)
        prefix: Prefix length of the network (0-32)

    Returns:
        True if the address is inside the network
    """
    candidate = address_value(address)
    network = address_value(network_address)
    if candidate is None or network is None:
        return False
    if isinstance(prefix, bool) or not isinstance(prefix, int):
        return False
    if not 0 <= prefix <= ADDRESS_BITS:
        return False

    mask = mask_for_prefix(prefix)
    return (candidate & mask) == (network & mask)


def binary_breakdown(address: int | str, prefix: int) -> BinaryBreakdown | None:
    """
    Bit-level view of an address, its mask, network and broadcast.

    Args:
        address: 32-bit integer or dotted-decimal text
        prefix: Prefix length (1-30)

    Returns:
        BinaryBreakdown, or None if the inputs are invalid
    """
    subnet = compute_subnet(address, prefix, host_preview_limit=0)
    if subnet is None:
        return None
    return BinaryBreakdown(
        address=to_binary(address),
        mask=prefix_to_binary_mask(prefix),
        network=to_binary(subnet.network_value),
        broadcast=to_binary(subnet.broadcast_value),
    )


def describe_prefix(prefix: int) -> str:
    """Describe the typical use of a network of the given size."""
    if not _valid_prefix(prefix):
        return "Please enter a valid CIDR (1-30)."
    for upper_bound, description in _PREFIX_USE_CASES:
        if prefix <= upper_bound:
            return description
    return "Please enter a valid CIDR (1-30)."


def usable_hosts_for_prefix(prefix: int) -> int:
    """Number of assignable host addresses in a subnet of this size."""
    if not _valid_prefix(prefix):
        raise ValueError(f"Prefix out of range: {prefix} (valid: 1-30)")
    return max(0, (1 << (ADDRESS_BITS - prefix)) - 2)


def smallest_prefix_for_hosts(required_hosts: int) -> int | None:
    """
    Find the longest prefix whose usable hosts cover a requirement.

    Args:
        required_hosts: Number of hosts that must fit

    Returns:
        Prefix length (1-30), or None if no subnet is large enough
    """
    if required_hosts < 1:
        return MAX_SUBNET_PREFIX
    for prefix in range(MAX_SUBNET_PREFIX, MIN_SUBNET_PREFIX - 1, -1):
        if usable_hosts_for_prefix(prefix) >= required_hosts:
            return prefix
    return None


def is_efficient_fit(usable_hosts: int, required_hosts: int) -> bool:
    """Whether a subnet wastes less than half of its capacity."""
    if required_hosts < 1:
        return False
    return usable_hosts // required_hosts < 2
