from dataclasses import dataclass, field
from typing import Any, Protocol, TypedDict, Union, runtime_checkable

__all__ = (
    "ComponentType",
    "InertiaHeaderType",
    "InertiaJson",
    "InertiaResult",
    "InertiaView",
    "NamedTemplate",
    "PageProps",
)


@runtime_checkable
class NamedTemplate(Protocol):
    """Anything that carries a template name, e.g. a ``jinja2.Template``."""

    name: "str | None"


ComponentType = Union[str, NamedTemplate]


@dataclass
class PageProps:
    """Inertia page object.

    This is the envelope sent to the client, either as the JSON body of an
    Inertia visit or embedded in the root template for the first page load.
    """

    component: str
    props: "dict[str, Any]"
    url: str
    version: "str | None" = None

    def to_dict(self) -> "dict[str, Any]":
        """Return the wire representation.

        ``version`` is left out entirely when no version is configured.

        Returns:
            The page object as a dictionary.
        """
        page: "dict[str, Any]" = {"component": self.component, "props": self.props, "url": self.url}
        if self.version is not None:
            page["version"] = self.version
        return page


@dataclass(frozen=True)
class InertiaJson:
    """Render result telling the caller to end the request with a JSON page object."""

    page: PageProps
    headers: "dict[str, str]" = field(default_factory=dict)

    @property
    def body(self) -> "dict[str, Any]":
        return self.page.to_dict()


@dataclass(frozen=True)
class InertiaView:
    """Render result carrying the template context for a full page load."""

    page: PageProps
    context: "dict[str, Any]" = field(default_factory=dict)


InertiaResult = Union[InertiaJson, InertiaView]


class InertiaHeaderType(TypedDict, total=False):
    """Type for inertia_headers parameter in get_headers()."""

    vary: "str | None"
    enabled: "bool | None"
    location: "str | None"
