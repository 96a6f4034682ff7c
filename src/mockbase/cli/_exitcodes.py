"""Process exit codes shared by the mockbase CLI commands."""

SUCCESS = 0
GENERAL_ERROR = 1
USAGE_ERROR = 2
EXECUTION_FAILURE = 3
