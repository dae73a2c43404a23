"""Numeric process exit codes following `clig.dev <https://clig.dev/>`_ conventions.

Each constant maps to an error category and is referenced by the matching
:class:`~specscope.exceptions.SpecscopeError` subclass, so shell scripts can
tell a bad spec apart from an unreachable server without parsing stderr.

Example::

    $ specscope load https://example.com/broken.json
    $ echo $?
    7   # EXIT_SPEC_ERROR -- the document is not a usable spec
"""

EXIT_SUCCESS = 0
"""The command completed successfully."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred."""

EXIT_INVALID_USAGE = 2
"""The command was invoked with invalid arguments."""

EXIT_NOT_FOUND = 4
"""An endpoint id, saved spec, or history entry does not exist."""

EXIT_CONNECTION_ERROR = 6
"""A network-level error occurred while fetching a spec or sending a request."""

EXIT_SPEC_ERROR = 7
"""The spec document could not be parsed or is structurally invalid."""
