"""Litestar-Inertia: server-side adapter for the Inertia.js protocol.

Inertia visits receive a JSON page object, first visits receive the root template with the
page object embedded in it.

Basic usage:
    from litestar import Litestar, get
    from litestar.middleware.session.server_side import ServerSideSessionConfig
    from litestar_inertia import InertiaConfig, InertiaPlugin, lazy

    @get("/", component="Home")
    async def home() -> dict[str, Any]:
        return {"greeting": "Hello", "stats": lazy(load_stats)}

    app = Litestar(
        route_handlers=[home],
        plugins=[InertiaPlugin(InertiaConfig(version="1.0"))],
        middleware=[ServerSideSessionConfig().middleware],
    )
"""

from litestar_inertia._utils import InertiaHeaders
from litestar_inertia.config import InertiaConfig
from litestar_inertia.helpers import DeferredProp, lazy
from litestar_inertia.plugin import InertiaPlugin
from litestar_inertia.request import InertiaDetails, InertiaRequest
from litestar_inertia.response import (
    InertiaBack,
    InertiaExternalRedirect,
    InertiaRedirect,
    InertiaResponse,
    InertiaResponseBuilder,
    render,
)
from litestar_inertia.session import InertiaSession
from litestar_inertia.templates import assign_templates
from litestar_inertia.types import InertiaJson, InertiaView, PageProps

__all__ = (
    "DeferredProp",
    "InertiaBack",
    "InertiaConfig",
    "InertiaDetails",
    "InertiaExternalRedirect",
    "InertiaHeaders",
    "InertiaJson",
    "InertiaPlugin",
    "InertiaRedirect",
    "InertiaRequest",
    "InertiaResponse",
    "InertiaResponseBuilder",
    "InertiaSession",
    "InertiaView",
    "PageProps",
    "assign_templates",
    "lazy",
    "render",
)
