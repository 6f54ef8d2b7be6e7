"""Process exit codes for the docstore CLI."""

SUCCESS = 0
GENERAL_ERROR = 1
USAGE_ERROR = 2
NOT_FOUND = 3
CONFIG_ERROR = 4
