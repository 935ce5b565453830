"""eBGP peering link validation."""

from bgplab.models.bgp_session import DEFAULT_LINK_PREFIX, EBGPLink, IBGPSession
from bgplab.protocol.asn import parse_as_number
from bgplab.protocol.subnet import compute_subnet, is_contained
from bgplab.protocol.types import ErrorCode, Outcome, SessionState, ValidationError
from bgplab.utils.address import has_address_format

IBGP_NOT_READY_MESSAGE = (
    "iBGP must be established in both Autonomous Systems before eBGP peering."
)
INVALID_LINK_FORMAT_MESSAGE = "Invalid IP Format for Link."
PEERING_CHANGED_MESSAGE = "Ready to configure..."


def _reject(link: EBGPLink, code: ErrorCode, message: str) -> Outcome[EBGPLink]:
    failed = link.model_copy(update={"state": SessionState.ERROR, "message": message})
    return Outcome(entity=failed, error=ValidationError(code, message))


def establish_ebgp(
    local: IBGPSession,
    remote: IBGPSession,
    link: EBGPLink,
    peering_block: str,
    peering_prefix: int,
    link_prefix: int = DEFAULT_LINK_PREFIX,
    local_name: str = "ISP A",
) -> Outcome[EBGPLink]:
    """
    Validate an eBGP peering link between two configured ASes.

    Checks run in order and stop at the first failure:
        1. Both iBGP sessions are configured
        2. Link address has dotted-quad format
        3. Link is a /link_prefix inside the reserved peering block
        4. Remote AS matches the remote session's AS
        5. Remote AS differs from the local AS

    Overlap with other links or zones is not checked.

    Args:
        local: Local iBGP session
        remote: Remote iBGP session
        link: Link candidate
        peering_block: Reserved peering block network address
        peering_prefix: Reserved peering block prefix length
        link_prefix: Required link prefix length
        local_name: Local ISP name used in diagnostics

    Returns:
        Outcome with the configured link, or the link in ERROR state
    """
    if not (local.is_configured and remote.is_configured):
        return _reject(link, ErrorCode.IBGP_NOT_READY, IBGP_NOT_READY_MESSAGE)

    if not has_address_format(link.link_address):
        return _reject(link, ErrorCode.INVALID_FORMAT, INVALID_LINK_FORMAT_MESSAGE)

    subnet = compute_subnet(link.link_address, link.link_prefix)
    if (
        subnet is None
        or link.link_prefix != link_prefix
        or not is_contained(link.link_address, peering_block, peering_prefix)
    ):
        return _reject(
            link,
            ErrorCode.OUT_OF_RESERVED_RANGE,
            f"eBGP link must be a /{link_prefix} subnet from the "
            f"{peering_block}/{peering_prefix} private range.",
        )

    if link.remote_as is None or link.remote_as != remote.as_number:
        return _reject(
            link,
            ErrorCode.REMOTE_AS_MISMATCH,
            f"Invalid Remote AS. {local_name} must peer with Remote AS "
            f"{remote.as_number}.",
        )

    if link.remote_as == local.as_number:
        return _reject(
            link,
            ErrorCode.SELF_PEERING_FORBIDDEN,
            f"Error: Cannot use Local AS ({local.as_number}) as Remote AS in "
            f"eBGP peering.",
        )

    configured = link.model_copy(
        update={
            "local_as": local.as_number,
            "state": SessionState.CONFIGURED,
            "subnet": subnet,
            "message": (
                f"eBGP Peering established between AS {local.as_number} and "
                f"Remote AS {link.remote_as}. Routes exchanged."
            ),
        }
    )
    return Outcome(entity=configured)


def change_peering(
    link: EBGPLink,
    address: str | None = None,
    prefix: int | None = None,
    remote_as: object = None,
) -> EBGPLink:
    """
    Apply an edit to the peering link candidate.

    Any edit returns the link to PENDING and drops the subnet computed by
    the last successful validation. Arguments left as None are unchanged.

    Args:
        link: Current link
        address: Link subnet address as entered
        prefix: Link prefix length
        remote_as: Remote AS as entered (unparsable input clears it)

    Returns:
        Updated link
    """
    update: dict[str, object] = {}
    if address is not None:
        update["link_address"] = address
    if prefix is not None:
        update["link_prefix"] = prefix
    if remote_as is not None:
        update["remote_as"] = parse_as_number(remote_as)
    if not update:
        return link

    update.update(
        {
            "state": SessionState.PENDING,
            "message": PEERING_CHANGED_MESSAGE,
            "subnet": None,
        }
    )
    return link.model_copy(update=update)
