"""Generate a linked static HTML site from a Doxygen XML export.

This package exposes the CLI entry points used by the ``doxysync`` console
script.

Exports
-------
- ``app``: Cyclopts application holding the ``generate`` command.
- ``main``: Convenience function that invokes the Cyclopts app.

Examples
--------
>>> from doxysync import main
>>> main()  # doctest: +SKIP
"""

from __future__ import annotations

from .cli import app, main

__all__ = ["app", "main"]
