"""Pydantic models for the single image upload response."""

from pydantic import BaseModel, Field


class ImageUploadResponse(BaseModel):
    """Response model for a successful image upload."""

    message: str = Field(..., description="Success message")
    image_url: str = Field(..., description="Public URL of the stored image")
    image_id: str = Field(..., description="Store identifier used for deletion")
    file_name: str = Field(..., description="Original file name")
    file_size: int = Field(..., description="Size in bytes")
