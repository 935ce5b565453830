"""iBGP session validation and edit transitions."""

from bgplab.models.bgp_session import DEFAULT_LOCAL_PREFERENCE, IBGPSession
from bgplab.models.isp import ISPProfile
from bgplab.protocol.asn import classify, is_usable, parse_as_number
from bgplab.protocol.types import ErrorCode, Outcome, SessionState, ValidationError
from bgplab.utils.address import ValidAddress, has_address_format, parse_address

INVALID_AS_MESSAGE = "Invalid or Reserved AS number."
INVALID_ROUTER_ID_MESSAGE = "Router ID must be a valid IP address (often a Loopback)."
AS_CHANGED_MESSAGE = "AS changed. Re-configure iBGP."
ROUTER_ID_CHANGED_MESSAGE = "Ready to configure..."


def _reject(session: IBGPSession, code: ErrorCode, message: str) -> Outcome[IBGPSession]:
    failed = session.model_copy(update={"state": SessionState.ERROR, "message": message})
    return Outcome(entity=failed, error=ValidationError(code, message))


def establish_ibgp(session: IBGPSession, profile: ISPProfile) -> Outcome[IBGPSession]:
    """
    Validate an iBGP session candidate.

    Checks run in order and stop at the first failure:
        1. AS number present and neither invalid nor reserved
        2. Router ID is a well-formed IPv4 address

    Args:
        session: Session candidate
        profile: Owning ISP profile (AS number shown in the success message)

    Returns:
        Outcome with the configured session, or the session in ERROR state
    """
    as_class = classify(session.as_number)
    if session.as_number is None or not is_usable(as_class):
        return _reject(session, ErrorCode.INVALID_AS_NUMBER, INVALID_AS_MESSAGE)

    if not has_address_format(session.router_id) or not isinstance(
        parse_address(session.router_id), ValidAddress
    ):
        return _reject(session, ErrorCode.INVALID_ROUTER_ID, INVALID_ROUTER_ID_MESSAGE)

    message = (
        f"iBGP established. LOCAL_PREF set to {session.local_preference}. "
        f"(AS {profile.as_number})."
    )
    configured = session.model_copy(
        update={
            "as_class": as_class,
            "state": SessionState.CONFIGURED,
            "message": message,
        }
    )
    return Outcome(entity=configured)


def change_as_number(session: IBGPSession, value: object) -> IBGPSession:
    """
    Apply an AS number edit.

    Unparsable input clears the AS number. The session always returns
    to PENDING.

    Args:
        session: Current session
        value: New AS number as entered

    Returns:
        Updated session
    """
    as_number = parse_as_number(value)
    return session.model_copy(
        update={
            "as_number": as_number,
            "as_class": classify(as_number),
            "state": SessionState.PENDING,
            "message": AS_CHANGED_MESSAGE,
        }
    )


def change_router_id(session: IBGPSession, router_id: str) -> IBGPSession:
    """Apply a router ID edit; the session returns to PENDING."""
    return session.model_copy(
        update={
            "router_id": router_id,
            "state": SessionState.PENDING,
            "message": ROUTER_ID_CHANGED_MESSAGE,
        }
    )


def parse_local_preference(value: object, default: int = DEFAULT_LOCAL_PREFERENCE) -> int:
    """
    Parse a LOCAL_PREF value, falling back to the default.

    Args:
        value: Integer or decimal text
        default: Value used for empty, non-numeric or non-positive input

    Returns:
        Positive LOCAL_PREF value
    """
    if isinstance(value, bool):
        return default
    if isinstance(value, str):
        text = value.strip()
        if not text.isascii() or not text.isdigit():
            return default
        value = int(text)
    if not isinstance(value, int) or value < 1:
        return default
    return value


def change_local_preference(
    session: IBGPSession,
    value: object,
    default: int = DEFAULT_LOCAL_PREFERENCE,
) -> IBGPSession:
    """
    Apply a LOCAL_PREF edit.

    A configured session stays configured so policy can be tuned live;
    otherwise state and message are left as they were.

    Args:
        session: Current session
        value: New LOCAL_PREF as entered
        default: Fallback for invalid input

    Returns:
        Updated session
    """
    local_preference = parse_local_preference(value, default)
    update: dict[str, object] = {"local_preference": local_preference}
    if session.is_configured:
        update["message"] = f"Policy updated to {local_preference}"
    return session.model_copy(update=update)
