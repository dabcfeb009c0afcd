from pydantic import BaseModel, Field


class StatusResponse(BaseModel):
    """Schema for write-endpoint acknowledgements."""
    status: str = Field(..., description="'ok' or 'no changes'")


class HealthResponse(BaseModel):
    """Schema for the health check."""
    message: str = Field(..., description="Service status message")
