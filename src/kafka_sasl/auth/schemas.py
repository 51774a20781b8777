"""
Wire schemas for the AWS_MSK_IAM handshake.

Contains Pydantic models for messages received from the broker.
"""

from pydantic import BaseModel, ConfigDict, Field


class ServerResponse(BaseModel):
    """Schema for the broker's step-two challenge.

    Attributes:
        version: Protocol version spoken by the broker
        request_id: Opaque broker-side request identifier, not validated

    Example:
        >>> ServerResponse.model_validate_json('{"version": "2020_10_22", "request-id": "abc"}')
        ServerResponse(version='2020_10_22', request_id='abc')
    """

    model_config = ConfigDict(extra="ignore", frozen=True, populate_by_name=True)

    version: str | None = Field(default=None, description="Handshake protocol version")
    request_id: str = Field(
        default="",
        alias="request-id",
        description="Broker request identifier",
    )


__all__ = ["ServerResponse"]
