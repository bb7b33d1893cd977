"""
Pydantic Schemas for Request/Response Validation

Covers the JSON endpoints of the service. The Twilio webhooks themselves
are form-encoded in and TwiML out, and are not modelled here.

Author: Café Pickup Bot Team
Version: 3.0.0
"""

from pydantic import BaseModel, ConfigDict, Field


# =============================================================================
# SIMULATION SCHEMAS
# =============================================================================

class SimulationMessage(BaseModel):
    """One inbound message for the development simulation endpoint."""
    model_config = ConfigDict(populate_by_name=True)

    sender: str = Field(
        ...,
        alias="from",
        min_length=1,
        examples=["whatsapp:+4915112345678"],
    )
    body: str = Field(default="", examples=["08:00"])


class SimulationReply(BaseModel):
    """Reply segments the customer would receive."""
    replies: list[str]


# =============================================================================
# GENERAL SCHEMAS
# =============================================================================

class ServiceInfo(BaseModel):
    """API root response."""
    message: str
    version: str
    environment: str
    documentation: str = "/docs"
    health: str = "/healthz"


class ErrorResponse(BaseModel):
    """Standard error response."""
    success: bool = False
    error: str
    detail: str
