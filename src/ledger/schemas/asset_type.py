"""Asset type schemas."""

from pydantic import BaseModel


class AssetTypeResponse(BaseModel):
    """Schema for an active asset type as listed by the catalog."""

    id: int
    name: str
    description: str

    model_config = {"from_attributes": True}
