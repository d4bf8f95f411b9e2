"""Constants for URL handling."""

# Port value meaning "not specified"
PORT_UNSPECIFIED = -1

# Highest valid TCP port
PORT_MAX = 65535

# Path assumed when a URL has none
DEFAULT_PATH = "/"

# Separator between scheme and host
SCHEME_SEPARATOR = "://"
