"""Configuration models for the request engine."""

from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field


class ClientConfig(BaseModel):
    """Configuration for the request engine.

    No deadline is applied unless timeout_seconds is set; a stalled peer
    then blocks the caller indefinitely.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    timeout_seconds: Annotated[float, Field(gt=0.0, le=3600.0)] | None = Field(
        default=None, description="Socket deadline for connect, send and receive"
    )
