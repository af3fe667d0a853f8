"""
Response models for the quota API.
"""

from pydantic import BaseModel, ConfigDict, Field


class UploadTokenResponse(BaseModel):
    """Signed upload token."""

    token: str = Field(..., description="Signed artifact carrying callerId, storageLeftInBytes and path")


class StorageLeftResponse(BaseModel):
    """Remaining quota for the caller."""

    model_config = ConfigDict(populate_by_name=True)

    storage_left_in_bytes: int = Field(
        ...,
        alias="storageLeftInBytes",
        description="Ceiling minus usage; negative when the caller is over quota",
    )
