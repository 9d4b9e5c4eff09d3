from collections.abc import Callable, Iterable, Mapping
from typing import TYPE_CHECKING, Any, Generic, TypeVar, cast, overload

from litestar.exceptions import ImproperlyConfiguredException
from typing_extensions import TypeGuard

from litestar_inertia.types import NamedTemplate

if TYPE_CHECKING:
    from litestar.connection import ASGIConnection

    from litestar_inertia.config import SharedPropsType
    from litestar_inertia.types import ComponentType

T = TypeVar("T")


class DeferredProp(Generic[T]):
    """A wrapper for deferred property evaluation.

    The callback is invoked with no arguments each time the prop is rendered.  Results are not
    cached, so a deferred prop kept in process-wide configuration is evaluated per request.
    """

    def __init__(self, value: "Callable[[], T] | T") -> None:
        self._value = value

    def render(self) -> "T":
        if callable(self._value):
            return cast("Callable[[], T]", self._value)()
        return self._value


@overload
def lazy(value_or_callable: "Callable[[], T]") -> "DeferredProp[T]": ...


@overload
def lazy(value_or_callable: "T") -> "DeferredProp[T]": ...


def lazy(value_or_callable: "Callable[[], T] | T") -> "DeferredProp[T]":
    """Wrap a callable so it is only evaluated when the prop is sent to the client.

    Props left out by a partial reload are never evaluated, which makes this the place to put
    expensive lookups.

    Args:
        value_or_callable: A zero-argument callable, or a plain value.

    Returns:
        The deferred prop.

    Example::

        InertiaResponse({"users": lazy(lambda: User.all())}, component="Users")
    """
    return DeferredProp[T](value_or_callable)


def is_lazy_prop(value: "Any") -> "TypeGuard[DeferredProp[Any]]":
    """Check if value is a deferred property.

    Args:
        value: Any value to check

    Returns:
        bool: True if value is a deferred property
    """
    return isinstance(value, DeferredProp)


def lazy_render(value: "T") -> "T":
    """Replace every deferred property in ``value`` with its result.

    Mappings, lists and tuples are walked recursively, everything else is returned untouched.

    Args:
        value: The value to resolve

    Returns:
        The resolved value
    """
    if isinstance(value, str):
        return value
    if isinstance(value, Mapping):
        return cast("T", {k: lazy_render(v) for k, v in cast("Mapping[str, Any]", value).items()})
    if isinstance(value, list):
        return cast("T", [lazy_render(v) for v in cast("list[Any]", value)])
    if isinstance(value, tuple):
        items = [lazy_render(v) for v in cast("tuple[Any, ...]", value)]
        if hasattr(value, "_fields"):
            # namedtuple
            return cast("T", type(value)(*items))
        return cast("T", tuple(items))
    if is_lazy_prop(value):
        return cast("T", lazy_render(value.render()))
    return value


def resolve_component(component: "ComponentType") -> str:
    """Return the component name for a string or a named template.

    Args:
        component: A component name, or a template object with a ``name``.

    Raises:
        ImproperlyConfiguredException: If no name can be determined.

    Returns:
        The component name.
    """
    name = component if isinstance(component, str) else component.name if isinstance(component, NamedTemplate) else None
    if not name or not isinstance(name, str):
        msg = f"Unable to determine an Inertia component from {component!r}."
        raise ImproperlyConfiguredException(msg)
    return name


def parse_partial_data(partial_data: "str | None") -> "list[str]":
    """Split the ``X-Inertia-Partial-Data`` header into prop keys.

    Args:
        partial_data: The raw header value.

    Returns:
        The requested keys, blanks removed.
    """
    if not partial_data:
        return []
    return [key.strip() for key in partial_data.split(",") if key.strip()]


def filter_partial_props(props: "Mapping[str, Any]", only: "Iterable[str]") -> "dict[str, Any]":
    """Return a new dict with only the requested keys.

    Keys that are not in ``props`` are ignored.

    Args:
        props: The props to filter.
        only: The keys to keep.

    Returns:
        The filtered props, in their original order.
    """
    keep = set(only)
    return {key: value for key, value in props.items() if key in keep}


def get_shared_props(
    connection: "ASGIConnection[Any, Any, Any, Any]",
    shared: "SharedPropsType | None",
) -> "dict[str, Any]":
    """Evaluate the configured shared props for a request.

    Args:
        connection: The ASGI connection.
        shared: The configured shared props.

    Raises:
        ImproperlyConfiguredException: If the shared props do not evaluate to a mapping.

    Returns:
        The shared props with all deferred values resolved.
    """
    if shared is None:
        return {}
    if is_lazy_prop(shared):
        value: "Any" = shared.render()
    elif callable(shared):
        value = shared(connection)
    else:
        value = shared
    if value is None:
        return {}
    if not isinstance(value, Mapping):
        msg = f"Shared props must evaluate to a mapping, got {type(value).__name__}."
        raise ImproperlyConfiguredException(msg)
    return lazy_render(dict(cast("Mapping[str, Any]", value)))


def merge_shared_props(props: "Mapping[str, Any]", shared: "Mapping[str, Any]") -> "dict[str, Any]":
    """Merge shared props under the explicit props.

    Explicit props always win; shared props only fill in missing keys.

    Args:
        props: The props passed for this response.
        shared: The shared props.

    Returns:
        The merged props.
    """
    merged = dict(props)
    for key, value in shared.items():
        merged.setdefault(key, value)
    return merged
