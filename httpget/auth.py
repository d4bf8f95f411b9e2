"""HTTP Basic authentication credentials."""

import base64


BASIC_SCHEME = "Basic"


def encode_credentials(credentials: str) -> str:
    """Encode `user:password' credentials as Base64.

    Args:
        credentials: Credentials in `user:password' form.

    Returns:
        Base64 text with `=' padding.
    """
    return base64.b64encode(credentials.encode("utf-8")).decode("ascii")


def basic_authorization(credentials: str) -> str:
    """Build an Authorization header value for Basic auth.

    Args:
        credentials: Credentials in `user:password' form.

    Returns:
        Header value, e.g. `Basic dXNlcjpwYXNz'.
    """
    return f"{BASIC_SCHEME} {encode_credentials(credentials)}"
