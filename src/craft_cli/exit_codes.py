"""Numeric process exit codes following `clig.dev <https://clig.dev/>`_ conventions.

The client distinguishes only success from failure: validation problems,
non-2xx responses and network errors all exit with :data:`EXIT_FAILURE` so
that shell scripts can test ``$?`` without parsing stderr.

Example::

    $ craft blocks delete --ids abc
    Error: Refusing to run `blocks delete` without --confirm (destructive action).
    $ echo $?
    1
"""

EXIT_SUCCESS = 0
"""The request was sent and the API answered with a 2xx status."""

EXIT_FAILURE = 1
"""A handled error occurred or the API answered with a non-2xx status."""

EXIT_INTERRUPTED = 130
"""The user pressed Ctrl-C."""
