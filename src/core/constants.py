"""Core application constants."""

# Logging
REDACTED = "[REDACTED]"
SHUTDOWN_NOTE = "Database connection disconnected through app termination"

# Process exit codes
EXIT_INITIALIZATION_FAILED = 1
