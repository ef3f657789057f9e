"""Exit codes for config commands.

    0 - Success
    1 - Load/parse error
    2 - Validation errors found
    3 - Output file already exists
"""

EXIT_SUCCESS: int = 0
"""Command completed successfully."""

EXIT_LOAD_ERROR: int = 1
"""Error loading or parsing configuration."""

EXIT_VALIDATION_ERROR: int = 2
"""Configuration validation errors found."""

EXIT_FILE_EXISTS: int = 3
"""Refused to overwrite an existing file without --force."""
