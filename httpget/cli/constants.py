"""Constants for the command-line interface."""

# Program name shown in usage and version output
PROG_NAME = "httpget"

# Output file used when the URL path ends with "/"
DEFAULT_OUTPUT_FILE = "index.html"

# Output file / offset value with special meaning
STDOUT_MARKER = "-"
AUTO_OFFSET_MARKER = "-"

# Log component name
COMPONENT_CLI = "cli"

# Exit code for runtime failures (usage errors exit with 2 via click)
EXIT_FAILURE = 1
