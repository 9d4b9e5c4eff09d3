import os
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Any, Union

from litestar.exceptions import ImproperlyConfiguredException

if TYPE_CHECKING:
    from litestar.connection import ASGIConnection

    from litestar_inertia.helpers import DeferredProp

__all__ = ("DEFAULT_SESSION_NAMESPACE", "InertiaConfig", "SharedPropsType")

DEFAULT_SESSION_NAMESPACE = "inertia"

SharedPropsType = Union[
    Mapping[str, Any],
    "DeferredProp[Mapping[str, Any]]",
    Callable[["ASGIConnection[Any, Any, Any, Any]"], Mapping[str, Any]],
]


@dataclass
class InertiaConfig:
    """Configuration for InertiaJS support.

    To enable Inertia, pass an instance of this class to
    :class:`InertiaPlugin <litestar_inertia.plugin.InertiaPlugin>`.
    """

    root_template: str = "index.html"
    """Name of the root template to use.

    Components without a template of their own are rendered with this template on a full page load.
    """
    template_dir: "Path | str | None" = None
    """Directory listing the available templates.

    When set, a template whose name matches a component (``Home.html`` for ``Home``) is used for that
    component instead of the root template.
    """
    version: "str | None" = field(default_factory=lambda: os.getenv("INERTIA_VERSION") or None)
    """Asset version added to every page object.  ``None`` leaves the ``version`` key out."""
    shared: "SharedPropsType | None" = None
    """Props merged into every page object.

    Either a mapping, a ``lazy()`` producer of a mapping, or a callable receiving the current
    connection.  Evaluated on every request.
    """
    session_namespace: str = DEFAULT_SESSION_NAMESPACE
    """Prefix used by :class:`InertiaSession <litestar_inertia.session.InertiaSession>` keys."""
    component_opt_keys: "tuple[str, ...]" = ("component", "page")
    """Identifiers to use on routes to get the inertia component to render."""
    redirect_unauthorized_to: "str | None" = None
    """Optionally supply a path where unauthorized requests should redirect."""

    def __post_init__(self) -> None:
        if self.template_dir is not None and isinstance(self.template_dir, str):
            self.template_dir = Path(self.template_dir)
        if not self.session_namespace:
            msg = "session_namespace must be a non-empty string."
            raise ImproperlyConfiguredException(msg)
