from typing import TYPE_CHECKING, Any

from litestar.plugins import InitPluginProtocol

from litestar_inertia.response import InertiaResponseBuilder
from litestar_inertia.templates import assign_templates, discover_components, discover_templates

if TYPE_CHECKING:
    from litestar import Litestar
    from litestar.config.app import AppConfig
    from litestar.handlers import BaseRouteHandler

    from litestar_inertia.config import InertiaConfig


class InertiaPlugin(InitPluginProtocol):
    """Inertia plugin.

    This plugin configures Litestar for Inertia.js support, including:
    - Session middleware requirement validation
    - Exception handler for Inertia responses
    - InertiaRequest and InertiaResponse as default classes
    - Template assignment for components without a template of their own

    Example::

        from litestar_inertia import InertiaPlugin, InertiaConfig

        app = Litestar(
            plugins=[InertiaPlugin(InertiaConfig())],
            middleware=[ServerSideSessionConfig().middleware],
        )
    """

    __slots__ = ("_templates", "builder", "config")

    def __init__(self, config: "InertiaConfig") -> None:
        """Initialize the plugin with Inertia configuration."""
        self.config = config
        self.builder = InertiaResponseBuilder(config)
        self._templates: "dict[str, str] | None" = None

    def get_templates(self, app: "Litestar") -> "dict[str, str]":
        """Return the component to template mapping.

        Components with a template of the same name in ``template_dir`` use it, every other
        component declared on a route handler is assigned the root template.

        Args:
            app: The application.

        Returns:
            A mapping of component name to template name.
        """
        if self._templates is None:
            route_handlers: "list[BaseRouteHandler]" = []
            for route in app.routes:
                route_handlers.extend(getattr(route, "route_handlers", None) or [route.route_handler])  # type: ignore[attr-defined]
            components = discover_components(route_handlers, self.config.component_opt_keys)
            existing = discover_templates(self.config.template_dir)  # type: ignore[arg-type]
            templates = {name: existing[name] for name in components if name in existing}
            templates.update(assign_templates(existing, components, self.config.root_template))
            self._templates = templates
        return self._templates

    def template_for(self, component: str, app: "Litestar") -> str:
        """Return the template used to render ``component`` on a full page load."""
        return self.get_templates(app).get(component, self.config.root_template)

    def on_app_init(self, app_config: "AppConfig") -> "AppConfig":
        """Configure application for use with Inertia.

        Args:
            app_config: The :class:`AppConfig <litestar.config.app.AppConfig>` instance.

        Raises:
            ImproperlyConfiguredException: If no session middleware is configured.

        Returns:
            The :class:`AppConfig <litestar.config.app.AppConfig>` instance.
        """
        from litestar.exceptions import HTTPException, ImproperlyConfiguredException
        from litestar.middleware import DefineMiddleware
        from litestar.middleware.session import SessionMiddleware
        from litestar.security.session_auth.middleware import MiddlewareWrapper
        from litestar.utils.predicates import is_class_and_subclass

        from litestar_inertia.exception_handler import exception_to_http_response
        from litestar_inertia.request import InertiaRequest
        from litestar_inertia.response import InertiaBack, InertiaResponse

        for mw in app_config.middleware:
            if isinstance(mw, DefineMiddleware) and is_class_and_subclass(
                mw.middleware, (MiddlewareWrapper, SessionMiddleware)
            ):
                break
        else:
            msg = "The Inertia plugin require a session middleware."
            raise ImproperlyConfiguredException(msg)

        exception_handlers: "dict[type[Exception] | int, Any]" = {HTTPException: exception_to_http_response}
        app_config.exception_handlers.update(exception_handlers)  # pyright: ignore[reportUnknownMemberType]
        app_config.request_class = InertiaRequest
        app_config.response_class = InertiaResponse
        app_config.signature_types.extend([InertiaRequest, InertiaResponse, InertiaBack])
        return app_config
