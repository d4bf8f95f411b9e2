"""Data models for HTTP requests."""

import re
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from httpget.protocol.constants import (
    DEFAULT_MAX_REDIRECTIONS,
    DEFAULT_METHOD,
    UNLIMITED_REDIRECTIONS,
)


TOKEN_PATTERN = re.compile(r"^[!#$%&'*+\-.^_`|~0-9A-Za-z]+$")


class RequestInfo(BaseModel):
    """Definition of a request to send.

    The redirect engine never mutates an instance; each hop derives a new
    working copy with model_copy(update=...).
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    host: Annotated[str, Field(min_length=1, description="Server host name")]
    port: Annotated[int, Field(ge=-1, le=65535)] = -1
    method: str = Field(default=DEFAULT_METHOD, description="Request method token")
    path: Annotated[str, Field(pattern=r"^/")] = "/"
    range_first: Annotated[int, Field(ge=0)] | None = Field(
        default=None, description="First byte of the requested range"
    )
    range_last: Annotated[int, Field(ge=0)] | None = Field(
        default=None, description="Last byte of the requested range; None for end"
    )
    credentials: str | None = Field(
        default=None, description="Basic auth credentials in user:password form"
    )
    trust_location: bool = Field(
        default=False,
        description="Keep credentials when redirected to another host",
    )
    max_redirections: Annotated[int, Field(ge=UNLIMITED_REDIRECTIONS)] = (
        DEFAULT_MAX_REDIRECTIONS
    )

    @field_validator("method")
    @classmethod
    def validate_method(cls, v: str) -> str:
        """Ensure the method is a valid HTTP token."""
        if not TOKEN_PATTERN.match(v):
            msg = f"Invalid method token: {v!r}"
            raise ValueError(msg)
        return v

    @model_validator(mode="after")
    def validate_range(self) -> "RequestInfo":
        """Ensure the range bounds are consistent."""
        if self.range_last is not None:
            if self.range_first is None:
                msg = "range_last requires range_first"
                raise ValueError(msg)
            if self.range_last < self.range_first:
                msg = "range_last must not precede range_first"
                raise ValueError(msg)
        return self

    @property
    def want_range(self) -> bool:
        """Check if a byte range is requested."""
        return self.range_first is not None

    @property
    def range_spec(self) -> str | None:
        """Range header value, e.g. `bytes=100-' or `bytes=0-99'."""
        if self.range_first is None:
            return None
        last = "" if self.range_last is None else str(self.range_last)
        return f"bytes={self.range_first}-{last}"
