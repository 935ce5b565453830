"""Customer zone (VLSM) allocation validation."""

import random

from bgplab.models.bgp_session import EBGPLink, IBGPSession
from bgplab.models.isp import ISPId, ISPProfile
from bgplab.models.zone import CustomerZone
from bgplab.protocol.subnet import DEFAULT_HOST_PREVIEW_LIMIT, compute_subnet, is_contained
from bgplab.protocol.types import ErrorCode, Outcome, ValidationError, ZoneState
from bgplab.utils.address import has_address_format

BGP_OFFLINE_MESSAGE = (
    "BGP is offline! Configure iBGP for both ISPs and eBGP Peering first."
)
INVALID_FORMAT_MESSAGE = "Invalid IP Format"
INVALID_CIDR_MESSAGE = "Invalid CIDR or IP Range."

DEFAULT_ZONE_COUNT = 30
MIN_REQUIRED_HOSTS = 10
MAX_REQUIRED_HOSTS = 250


def is_bgp_ready(local: IBGPSession, remote: IBGPSession, link: EBGPLink) -> bool:
    """Whether both iBGP sessions and the eBGP link are configured."""
    return local.is_configured and remote.is_configured and link.is_configured


def _reject(zone: CustomerZone, code: ErrorCode, message: str) -> Outcome[CustomerZone]:
    failed = zone.model_copy(update={"state": ZoneState.ERROR, "message": message})
    return Outcome(entity=failed, error=ValidationError(code, message))


def allocate_zone(
    zone: CustomerZone,
    address: str,
    prefix: int,
    source: ISPProfile,
    bgp_ready: bool,
    local_preference: int,
    host_preview_limit: int = DEFAULT_HOST_PREVIEW_LIMIT,
) -> Outcome[CustomerZone]:
    """
    Validate a subnet allocation for a customer zone.

    Checks run in order and stop at the first failure:
        1. BGP plane is ready
        2. Address has dotted-quad format
        3. Address and prefix yield a subnet
        4. Address lies inside the owning ISP's block
        5. Address is the subnet's network ID
        6. Subnet holds the required number of hosts

    The requested address and prefix are recorded on every attempt;
    the assigned block only changes on success.

    Args:
        zone: Zone being connected
        address: Requested network address
        prefix: Requested prefix length
        source: Owning ISP profile
        bgp_ready: Whether iBGP (both sides) and eBGP are configured
        local_preference: Owning ISP's LOCAL_PREF (reported only)
        host_preview_limit: Maximum hosts enumerated in the assigned block

    Returns:
        Outcome with the online zone, or the zone in ERROR state
    """
    zone = zone.model_copy(
        update={"requested_address": address, "requested_prefix": prefix}
    )

    if not bgp_ready:
        return _reject(zone, ErrorCode.BGP_OFFLINE, BGP_OFFLINE_MESSAGE)

    if not has_address_format(address):
        return _reject(zone, ErrorCode.INVALID_FORMAT, INVALID_FORMAT_MESSAGE)

    subnet = compute_subnet(address, prefix, host_preview_limit)
    if subnet is None:
        return _reject(zone, ErrorCode.INVALID_CIDR, INVALID_CIDR_MESSAGE)

    if not is_contained(address, source.block, source.prefix):
        return _reject(
            zone,
            ErrorCode.OUT_OF_SOURCE_BLOCK,
            f"Invalid ISP Source! IP must be from the {source.range_label} "
            f"block for {source.name}.",
        )

    if subnet.network_address != address:
        return _reject(
            zone,
            ErrorCode.NOT_NETWORK_ID,
            f"Invalid Network ID. Use: {subnet.network_address}",
        )

    if subnet.usable_hosts < zone.required_hosts:
        return _reject(
            zone,
            ErrorCode.INSUFFICIENT_HOSTS,
            f"Insufficient Hosts! Need {zone.required_hosts}, "
            f"got {subnet.usable_hosts}.",
        )

    online = zone.model_copy(
        update={
            "state": ZoneState.ONLINE,
            "assigned_block": subnet,
            "message": (
                f"Connected via {source.name}. Route advertised via BGP "
                f"(AS {source.as_number}). LOCAL_PREF: {local_preference}"
            ),
        }
    )
    return Outcome(entity=online)


def generate_zones(
    count: int = DEFAULT_ZONE_COUNT,
    rng: random.Random | None = None,
) -> list[CustomerZone]:
    """
    Build the customer zone catalogue.

    The first half of the zones belongs to ISP A and the rest to ISP B.
    Host requirements are drawn uniformly from 10-250.

    Args:
        count: Number of zones
        rng: Random source (pass a seeded instance for repeatable zones)

    Returns:
        Offline zones numbered from 1
    """
    rng = rng or random.Random()
    split = (count + 1) // 2
    zones = []
    for zone_id in range(1, count + 1):
        isp_id: ISPId = "A" if zone_id <= split else "B"
        zones.append(
            CustomerZone(
                zone_id=zone_id,
                name=f"Sector {zone_id:02d}",
                required_hosts=rng.randint(MIN_REQUIRED_HOSTS, MAX_REQUIRED_HOSTS),
                isp_id=isp_id,
            )
        )
    return zones
