"""Register raw template sources with Jinja2 and expand them.

Templates are crawled from disk by :mod:`inkpress.crawler` and registered here
under their file names, so they can extend or include one another by name.
Rendering is strict: an undefined variable or an unregistered template name
fails instead of silently producing empty output.

Example
-------
>>> from inkpress.templates import TemplateRegistry
>>> registry = TemplateRegistry()
>>> registry.register("hello.txt", "Hello {{ page.name }}")
>>> registry.render("hello.txt", {"page": {"name": "ink"}})
'Hello ink'
"""

from __future__ import annotations

import logging
import typing as typ

from jinja2 import (
    DictLoader,
    Environment,
    StrictUndefined,
    TemplateError,
    TemplateSyntaxError,
    select_autoescape,
)

if typ.TYPE_CHECKING:
    import collections.abc as cabc

logger = logging.getLogger(__name__)


class TemplateRegistrationError(ValueError):
    """Raised when a template source cannot be compiled."""


class TemplateConflictError(ValueError):
    """Raised when two templates are registered under the same name."""


class RenderError(RuntimeError):
    """Raised when a registered template cannot be expanded."""


class TemplateRegistry:
    """Hold named template sources inside a single Jinja2 environment."""

    def __init__(self, *, on_conflict: str = "warn") -> None:
        """Initialize an empty registry.

        Parameters
        ----------
        on_conflict : str, optional
            ``"warn"`` lets a later registration replace an earlier one under
            the same name; ``"error"`` raises :class:`TemplateConflictError`.
        """
        self.on_conflict = on_conflict
        self._sources: dict[str, str] = {}
        self.env = Environment(
            loader=DictLoader(self._sources),
            autoescape=select_autoescape(["html", "xml"]),
            undefined=StrictUndefined,
            trim_blocks=True,
            lstrip_blocks=True,
        )

    def __contains__(self, name: object) -> bool:
        return name in self._sources

    def register(self, name: str, source: str) -> None:
        """Compile ``source`` and make it available as ``name``.

        Raises
        ------
        TemplateConflictError
            If ``name`` is already registered and the policy is ``"error"``.
        TemplateRegistrationError
            If ``source`` is not valid Jinja2 syntax.
        """
        if name in self._sources:
            if self.on_conflict == "error":
                msg = f"Template '{name}' is registered more than once."
                raise TemplateConflictError(msg)
            logger.warning(
                "Template '%s' registered twice; keeping the later one", name
            )
        try:
            self.env.parse(source, name=name)
        except TemplateSyntaxError as exc:
            msg = f"Template '{name}' is malformed (line {exc.lineno}): {exc.message}"
            raise TemplateRegistrationError(msg) from exc
        self._sources[name] = source

    def render(self, name: str, context: cabc.Mapping[str, typ.Any]) -> str:
        """Expand the template registered as ``name`` with ``context``.

        Raises
        ------
        RenderError
            If the template (or one it references) is not registered, or a
            referenced variable is undefined.
        """
        try:
            template = self.env.get_template(name)
            return template.render(context)
        except TemplateError as exc:
            msg = f"Failed to render template '{name}': {exc}"
            raise RenderError(msg) from exc


__all__ = [
    "RenderError",
    "TemplateConflictError",
    "TemplateRegistrationError",
    "TemplateRegistry",
]
