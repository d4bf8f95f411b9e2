"""HTTP protocol constants.

Centralizes status ranges, header names and framing limits.
"""

# HTTP Status Code Ranges
HTTP_STATUS_MIN = 100
HTTP_STATUS_OK_MIN = 200
HTTP_STATUS_OK_MAX = 300
HTTP_STATUS_REDIRECT_MIN = 300
HTTP_STATUS_REDIRECT_MAX = 400

# Protocol versions accepted on the status line, as "major.minor" -> code
PROTOCOL_VERSIONS: dict[str, int] = {
    "0.9": 9,
    "1.0": 10,
    "1.1": 11,
}

# Only scheme that can be followed on redirect
HTTP_SCHEME = "http"

# Method used for downloads
DEFAULT_METHOD = "GET"

# Redirect limit when none is configured; -1 means unlimited
DEFAULT_MAX_REDIRECTIONS = 10
UNLIMITED_REDIRECTIONS = -1

# Chunk-size lines are short hexadecimal numbers
CHUNK_SIZE_LINE_MAX = 32
CHUNK_SIZE_MAX = (1 << 64) - 1

# Line terminator for request framing
CRLF = "\r\n"

# Whitespace as understood in status and header lines (ASCII only)
WHITESPACE = " \t\n\r\x0b\x0c"

# Header names (lowercase for lookup)
HEADER_CONTENT_LENGTH = "content-length"
HEADER_TRANSFER_ENCODING = "transfer-encoding"
HEADER_CONTENT_RANGE = "content-range"
HEADER_LOCATION = "location"

# Transfer coding recognized as chunked framing
CHUNKED_CODING = "chunked"

# Log component name
COMPONENT_PROTOCOL = "protocol"
