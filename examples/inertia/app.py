"""Inertia example - server-driven pages with shared props, lazy props and flashed errors.

Run with ``litestar --app examples.inertia.app:app run``.
"""

from pathlib import Path
from typing import Any

from litestar import Litestar, Request, get, post
from litestar.connection import ASGIConnection
from litestar.contrib.jinja import JinjaTemplateEngine
from litestar.exceptions import ValidationException
from litestar.middleware.session.server_side import ServerSideSessionConfig
from litestar.stores.memory import MemoryStore
from litestar.template import TemplateConfig

from litestar_inertia import InertiaConfig, InertiaPlugin, InertiaRedirect, InertiaSession, lazy

here = Path(__file__).parent

USERS = ["ada", "grace"]


def shared_props(connection: "ASGIConnection[Any, Any, Any, Any]") -> "dict[str, Any]":
    session = InertiaSession.from_connection(connection)
    return {
        "appName": "Inertia Example",
        "errors": session.pull("errors", {}),
        "flash": session.pull("flash", []),
    }


def count_users() -> int:
    return len(USERS)


@get("/", component="Home")
async def index() -> "dict[str, Any]":
    """Serve the home page."""
    return {"message": "Welcome to Inertia!", "userCount": lazy(count_users)}


@get("/users", component="Users/Index")
async def users() -> "dict[str, Any]":
    return {"users": USERS}


@post("/users")
async def create_user(request: "Request[Any, Any, Any]") -> InertiaRedirect:
    form = await request.form()
    name = str(form.get("name") or "").strip()
    if not name:
        raise ValidationException(detail="Invalid user", extra=[{"key": "name", "message": "Name is required"}])
    USERS.append(name)
    InertiaSession.from_connection(request).append("flash", f"Created {name}")
    return InertiaRedirect(request, redirect_to="/users")


inertia = InertiaPlugin(
    config=InertiaConfig(root_template="index.html", template_dir=here / "templates", shared=shared_props)
)
templates = TemplateConfig(engine=JinjaTemplateEngine(directory=here / "templates"))

app = Litestar(
    route_handlers=[index, users, create_user],
    plugins=[inertia],
    template_config=templates,
    middleware=[ServerSideSessionConfig().middleware],
    stores={"sessions": MemoryStore()},
    debug=True,
)
