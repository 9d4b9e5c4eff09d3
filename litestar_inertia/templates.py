from collections.abc import Iterable
from pathlib import Path
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from litestar.handlers import BaseRouteHandler

__all__ = ("assign_templates", "discover_components", "discover_templates", "template_name")


def template_name(path: "Path | str") -> str:
    """Return the template identifier for a file, i.e. the name up to its first suffix."""
    return Path(path).name.split(".", 1)[0]


def assign_templates(
    templates: "Iterable[str]",
    controllers: "Iterable[str]",
    default_template: str,
) -> "dict[str, str]":
    """Assign the default template to controllers with no matching template.

    With Inertia the template is only the application shell, so most pages only need a
    component.  Every component without a template of its own is mapped to ``default_template``.

    Args:
        templates: Known template identifiers.
        controllers: Known controller (component) identifiers.
        default_template: Template to use for unmatched controllers.

    Returns:
        A mapping of unmatched controller identifiers to ``default_template``.
    """
    known = set(templates)
    return {controller: default_template for controller in controllers if controller not in known}


def discover_templates(directory: "Path | None") -> "dict[str, str]":
    """List the templates in ``directory``.

    Args:
        directory: The template directory.

    Returns:
        A mapping of template identifier to file name.  Empty if the directory does not exist.
    """
    if directory is None or not directory.is_dir():
        return {}
    templates: "dict[str, str]" = {}
    for path in sorted(directory.iterdir()):
        if path.is_file():
            templates.setdefault(template_name(path), path.name)
    return templates


def discover_components(
    route_handlers: "Iterable[BaseRouteHandler]",
    opt_keys: "Iterable[str]",
) -> "list[str]":
    """Collect the component names declared on route handlers.

    Args:
        route_handlers: The route handlers to inspect.
        opt_keys: Handler ``opt`` keys holding the component name.

    Returns:
        The component names, in declaration order and without duplicates.
    """
    keys = tuple(opt_keys)
    components: "dict[str, None]" = {}
    for handler in route_handlers:
        opt: "dict[str, Any]" = getattr(handler, "opt", None) or {}
        for key in keys:
            if (value := opt.get(key)) is not None:
                components.setdefault(str(value), None)
                break
    return list(components)
