"""URL data model."""

from pydantic import BaseModel, ConfigDict, Field, model_validator

from httpget.url.constants import DEFAULT_PATH, PORT_MAX, PORT_UNSPECIFIED


class Url(BaseModel):
    """A parsed `[[scheme://]host[:port]][path]' URL.

    Invariants: a URL without a host has no scheme and no port, and the
    path always starts with `/'.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    scheme: str | None = Field(default=None, description="Lowercased scheme")
    host: str | None = Field(default=None, description="Host name")
    port: int = Field(
        default=PORT_UNSPECIFIED,
        ge=PORT_UNSPECIFIED,
        le=PORT_MAX,
        description="Port number, -1 if not specified",
    )
    path: str = Field(default=DEFAULT_PATH, pattern=r"^/")

    @model_validator(mode="after")
    def validate_host_invariants(self) -> "Url":
        """Ensure scheme and port only appear together with a host."""
        if self.host is None:
            if self.scheme is not None:
                msg = "scheme requires a host"
                raise ValueError(msg)
            if self.port != PORT_UNSPECIFIED:
                msg = "port requires a host"
                raise ValueError(msg)
        return self

    @property
    def name(self) -> str:
        """Last path component; empty if the path ends with `/'."""
        return self.path.rsplit("/", 1)[-1]

    @property
    def has_port(self) -> bool:
        """Check if an explicit port was given."""
        return self.port != PORT_UNSPECIFIED

    def __str__(self) -> str:
        parts = []
        if self.scheme:
            parts.append(f"{self.scheme}://")
        if self.host:
            parts.append(self.host)
        if self.has_port:
            parts.append(f":{self.port}")
        parts.append(self.path)
        return "".join(parts)
