"""Pydantic models for ISP address-space profiles."""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from bgplab.utils.address import ValidAddress, parse_address

ISPId = Literal["A", "B"]


class ISPProfile(BaseModel):
    """
    Address block and AS number assigned to one ISP.

    Customer zones owned by the ISP must be carved out of this block.
    """

    model_config = ConfigDict(frozen=True)

    isp_id: ISPId = Field(..., description="ISP identifier")
    name: str = Field(..., description="Display name, e.g. 'ISP A'")
    block: str = Field(..., description="Assigned address block network address")
    prefix: int = Field(..., ge=1, le=32, description="Assigned block prefix length")
    as_number: int | None = Field(None, description="AS number, None when cleared")
    range_label: str = Field(..., description="Short block label, e.g. '10.x.x.x'")

    @field_validator("block")
    @classmethod
    def _check_block(cls, value: str) -> str:
        if not isinstance(parse_address(value), ValidAddress):
            raise ValueError(f"Invalid block address: {value!r}")
        return value
