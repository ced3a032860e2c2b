"""Compile ink markup into HTML and assemble static sites from it.

This package exposes the CLI entry points used by the ``inkpress`` console
script to build a site from a directory of ink documents, a directory of Jinja
templates, and an optional directory of static assets.

Exports
-------
- ``app``: Cyclopts application entry for the build and convert commands.
- ``main``: Convenience function that invokes the Cyclopts app.

Examples
--------
>>> from inkpress import main
>>> main()  # doctest: +SKIP
>>> from inkpress import app
>>> callable(app)
True
"""

from __future__ import annotations

from .cli import app, main

__all__ = ["app", "main"]
