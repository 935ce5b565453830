"""Pydantic models for customer zones."""

from pydantic import BaseModel, ConfigDict, Field

from bgplab.models.isp import ISPId
from bgplab.protocol.types import SubnetDescriptor, ZoneState

DEFAULT_ZONE_PREFIX = 24
ZONE_WAITING = "Waiting for connection..."


class CustomerZone(BaseModel):
    """
    Customer segment that needs a subnet from its ISP's block.

    Tracks the last requested address/prefix separately from the
    assigned block, which only changes on a successful allocation.
    """

    model_config = ConfigDict(frozen=True)

    zone_id: int = Field(..., ge=1, description="Zone number")
    name: str = Field(..., description="Display name, e.g. 'Sector 01'")
    required_hosts: int = Field(..., ge=1, description="Hosts the subnet must hold")
    isp_id: ISPId = Field(..., description="ISP whose block serves this zone")
    requested_address: str = Field("", description="Last requested network address")
    requested_prefix: int = Field(
        DEFAULT_ZONE_PREFIX, description="Last requested prefix length"
    )
    assigned_block: SubnetDescriptor | None = Field(
        None, description="Subnet assigned by the last successful allocation"
    )
    state: ZoneState = Field(ZoneState.OFFLINE, description="Zone state")
    message: str = Field(ZONE_WAITING, description="Last status or diagnostic message")

    @property
    def is_online(self) -> bool:
        """Whether the zone has a validated allocation."""
        return self.state is ZoneState.ONLINE
