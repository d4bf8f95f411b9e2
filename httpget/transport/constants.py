"""Constants for the buffered transport."""

# Default HTTP port, used when a request does not name one
HTTP_PORT = 80

# Size of the per-connection staging / look-ahead buffer
BUFFER_SIZE = 4096

# Longest status or header line accepted, excluding the "\n" terminator
LINE_MAX = 2048

# Log component name
COMPONENT_TRANSPORT = "transport"
