"""Exit codes for the probe command.

    0 - The readiness check succeeded (or the service has none)
    1 - The readiness check did not succeed before the timeout
    2 - The readiness check itself failed
    3 - Unknown service or configuration error
"""

EXIT_READY: int = 0
"""Readiness check succeeded."""

EXIT_NOT_READY: int = 1
"""Readiness check timed out."""

EXIT_PROBE_ERROR: int = 2
"""Readiness check could not be performed."""

EXIT_UNKNOWN_SERVICE: int = 3
"""No such service, or the configuration could not be loaded."""
