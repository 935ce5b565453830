"""Engine type definitions: states, AS classes, subnets and validation outcomes."""

from dataclasses import dataclass
from enum import Enum
from typing import Generic, NamedTuple, TypeVar


class SessionState(str, Enum):
    """State of an iBGP session or eBGP link."""

    PENDING = "pending"
    CONFIGURED = "configured"
    ERROR = "error"


class ZoneState(str, Enum):
    """State of a customer zone."""

    OFFLINE = "offline"
    ONLINE = "online"
    ERROR = "error"


class ASClass(str, Enum):
    """AS number classification (RFC6996, RFC7300, RFC6793)."""

    PUBLIC_16 = "Public (16-bit)"
    PRIVATE_16 = "Private (16-bit)"
    RESERVED = "Reserved"
    FOUR_BYTE = "32-bit (4-byte)"
    INVALID = "Invalid"

    @property
    def label(self) -> str:
        """Human-readable class name."""
        return self.value


class ErrorKind(str, Enum):
    """Category of a validation failure."""

    PARSE = "ParseError"
    RANGE = "RangeError"
    CONTAINMENT = "ContainmentError"
    EXACTNESS = "ExactnessError"
    CAPACITY = "CapacityError"
    READINESS = "ReadinessError"
    MISMATCH = "MismatchError"
    SELF_REFERENCE = "SelfReferenceError"


class ErrorCode(str, Enum):
    """Specific validation failure reported by a validator."""

    INVALID_AS_NUMBER = "InvalidASNumber"
    INVALID_ROUTER_ID = "InvalidRouterId"
    IBGP_NOT_READY = "iBGPNotReady"
    INVALID_FORMAT = "InvalidFormat"
    OUT_OF_RESERVED_RANGE = "OutOfReservedRange"
    REMOTE_AS_MISMATCH = "RemoteASMismatch"
    SELF_PEERING_FORBIDDEN = "SelfPeeringForbidden"
    BGP_OFFLINE = "BGPOffline"
    INVALID_CIDR = "InvalidCidr"
    OUT_OF_SOURCE_BLOCK = "OutOfSourceBlock"
    NOT_NETWORK_ID = "NotNetworkId"
    INSUFFICIENT_HOSTS = "InsufficientHosts"

    @property
    def kind(self) -> ErrorKind:
        """Taxonomy category for this code."""
        return _ERROR_KINDS[self]


_ERROR_KINDS = {
    ErrorCode.INVALID_AS_NUMBER: ErrorKind.RANGE,
    ErrorCode.INVALID_ROUTER_ID: ErrorKind.PARSE,
    ErrorCode.IBGP_NOT_READY: ErrorKind.READINESS,
    ErrorCode.INVALID_FORMAT: ErrorKind.PARSE,
    ErrorCode.OUT_OF_RESERVED_RANGE: ErrorKind.CONTAINMENT,
    ErrorCode.REMOTE_AS_MISMATCH: ErrorKind.MISMATCH,
    ErrorCode.SELF_PEERING_FORBIDDEN: ErrorKind.SELF_REFERENCE,
    ErrorCode.BGP_OFFLINE: ErrorKind.READINESS,
    ErrorCode.INVALID_CIDR: ErrorKind.RANGE,
    ErrorCode.OUT_OF_SOURCE_BLOCK: ErrorKind.CONTAINMENT,
    ErrorCode.NOT_NETWORK_ID: ErrorKind.EXACTNESS,
    ErrorCode.INSUFFICIENT_HOSTS: ErrorKind.CAPACITY,
}


class SubnetDescriptor(NamedTuple):
    """Derived boundaries of an IPv4 subnet."""

    network_address: str
    broadcast_address: str
    first_host: str
    last_host: str
    usable_hosts: int
    prefix: int
    network_value: int  # 32-bit unsigned
    broadcast_value: int  # 32-bit unsigned
    hosts: tuple[str, ...]  # Bounded preview, not the full range

    @property
    def cidr(self) -> str:
        """Network in CIDR notation."""
        return f"{self.network_address}/{self.prefix}"


class BinaryBreakdown(NamedTuple):
    """Bit-level view of an address and its subnet."""

    address: str
    mask: str
    network: str
    broadcast: str


class ValidationError(NamedTuple):
    """First failing check reported by a validator."""

    code: ErrorCode
    message: str

    @property
    def kind(self) -> ErrorKind:
        """Taxonomy category of the failure."""
        return self.code.kind


EntityT = TypeVar("EntityT")


@dataclass(frozen=True)
class Outcome(Generic[EntityT]):
    """
    Result of a validator call.

    The entity is always the updated record: configured/online on success,
    or the prior record with an error state and diagnostic on failure.
    """

    entity: EntityT
    error: ValidationError | None = None

    @property
    def ok(self) -> bool:
        """Whether every check passed."""
        return self.error is None

    @property
    def message(self) -> str:
        """User-facing message carried by the entity."""
        return self.entity.message  # type: ignore[attr-defined, no-any-return]
