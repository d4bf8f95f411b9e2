"""Header and credential redaction utilities for logging."""

# Headers that must never appear in logs
SENSITIVE_HEADERS = frozenset(
    {
        "authorization",
        "proxy-authorization",
        "cookie",
        "set-cookie",
    }
)

REDACTED_VALUE = "[REDACTED]"


def is_sensitive_header(header_name: str) -> bool:
    """Check if a header name is sensitive.

    Args:
        header_name: The header name to check.

    Returns:
        True if the header should be redacted.
    """
    return header_name.lower() in SENSITIVE_HEADERS


def redact_credentials(credentials: str | None) -> str | None:
    """Redact the password part of `user:password' credentials.

    Args:
        credentials: Credentials, or None.

    Returns:
        `user:[REDACTED]', or None if no credentials were given.
    """
    if credentials is None:
        return None
    user, sep, _ = credentials.partition(":")
    if not sep:
        return REDACTED_VALUE
    return f"{user}:{REDACTED_VALUE}"
