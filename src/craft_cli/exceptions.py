"""Exception hierarchy for craft_cli.

All exceptions inherit from :class:`CraftError`, which carries an
``exit_code`` attribute mapped to a constant from :mod:`craft_cli.exit_codes`.
The per-command boundary in :mod:`craft_cli.commands._common` catches
``CraftError``, prints the message to stderr and exits with that code.

Subclass hierarchy::

    CraftError (exit 1)
    +-- ConfigurationError
    +-- InputError
    +-- ValidationError
    +-- ConfirmationRequiredError
    +-- ConnectionError_
        +-- RequestTimeoutError

A non-2xx HTTP response is *not* an exception; it is reported through
:class:`~craft_cli.models.Outcome`.
"""

from craft_cli.exit_codes import EXIT_FAILURE


class CraftError(Exception):
    """Base exception for all craft_cli errors.

    Args:
        message: Human-readable error description printed to stderr.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class ConfigurationError(CraftError):
    """Raised when no API base URL can be resolved from flags or environment."""


class InputError(CraftError):
    """Raised for missing or conflicting command inputs (e.g. both --date and --id)."""


class ValidationError(CraftError):
    """Raised for malformed JSON in a request body or structured flag value."""


class ConfirmationRequiredError(CraftError):
    """Raised when a destructive command is invoked without ``--confirm``."""

    def __init__(self, command: str):
        super().__init__(
            f"Refusing to run `{command}` without --confirm (destructive action)."
        )
        self.command = command


class ConnectionError_(CraftError):
    """Raised on network-level failures (DNS resolution, connection refused, ...).

    Named with a trailing underscore to avoid shadowing the built-in
    ``ConnectionError``.
    """


class RequestTimeoutError(ConnectionError_):
    """Raised when the request does not complete within the configured timeout."""
