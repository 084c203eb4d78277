"""Response models for top-level endpoints."""

from pydantic import Field

from ._strict_base import StrictModel


class RootResponse(StrictModel):
    """Response for root endpoint."""

    message: str = Field(description="Service status line")
    version: str = Field(description="API version")
    docs: str = Field(description="Documentation URL")
    environment: str = Field(description="Environment name")
