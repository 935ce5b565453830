"""Pydantic models for iBGP sessions and the eBGP peering link."""

from pydantic import BaseModel, ConfigDict, Field

from bgplab.models.isp import ISPId
from bgplab.protocol.asn import classify
from bgplab.protocol.types import ASClass, SessionState, SubnetDescriptor

DEFAULT_LOCAL_PREFERENCE = 100
DEFAULT_LINK_PREFIX = 30
EBGP_WELCOME = "Enter Peering IP and Remote AS to establish the link."


class IBGPSession(BaseModel):
    """
    iBGP session state for one AS.

    Editing the AS number or router ID returns the session to PENDING;
    LOCAL_PREF can be tuned while CONFIGURED.
    """

    model_config = ConfigDict(frozen=True)

    isp_id: ISPId = Field(..., description="Owning ISP")
    as_number: int | None = Field(None, description="AS number of the owning ISP")
    as_class: ASClass = Field(ASClass.INVALID, description="Classification of as_number")
    router_id: str = Field("", description="Router ID as entered (dotted quad)")
    local_preference: int = Field(
        DEFAULT_LOCAL_PREFERENCE, ge=1, description="LOCAL_PREF policy value"
    )
    state: SessionState = Field(SessionState.PENDING, description="Session state")
    message: str = Field("", description="Last status or diagnostic message")

    @classmethod
    def for_as(
        cls,
        isp_id: ISPId,
        as_number: int | None,
        local_preference: int = DEFAULT_LOCAL_PREFERENCE,
    ) -> "IBGPSession":
        """Create a pending session for an AS number."""
        return cls(
            isp_id=isp_id,
            as_number=as_number,
            as_class=classify(as_number),
            local_preference=local_preference,
        )

    @property
    def is_configured(self) -> bool:
        """Whether the session is established."""
        return self.state is SessionState.CONFIGURED


class EBGPLink(BaseModel):
    """
    eBGP peering link between the two ASes.

    The link address must be a /30 out of the reserved peering block.
    """

    model_config = ConfigDict(frozen=True)

    local_as: int | None = Field(None, description="Local AS number")
    remote_as: int | None = Field(None, description="Remote AS number as entered")
    link_address: str = Field("", description="Link subnet address as entered")
    link_prefix: int = Field(DEFAULT_LINK_PREFIX, description="Link prefix length")
    state: SessionState = Field(SessionState.PENDING, description="Link state")
    message: str = Field(EBGP_WELCOME, description="Last status or diagnostic message")
    subnet: SubnetDescriptor | None = Field(
        None, description="Computed link subnet once configured"
    )

    @property
    def is_configured(self) -> bool:
        """Whether the link is established."""
        return self.state is SessionState.CONFIGURED
