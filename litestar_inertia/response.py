import itertools
from collections.abc import Iterable, Mapping
from typing import TYPE_CHECKING, Any, TypeVar, cast
from urllib.parse import quote, urlparse

from litestar import MediaType, Request, Response
from litestar.exceptions import ImproperlyConfiguredException
from litestar.response import Redirect
from litestar.response.base import ASGIResponse
from litestar.serialization import get_serializer
from litestar.status_codes import HTTP_200_OK, HTTP_303_SEE_OTHER, HTTP_307_TEMPORARY_REDIRECT, HTTP_409_CONFLICT
from litestar.utils.helpers import get_enum_string_value

from litestar_inertia._utils import get_headers
from litestar_inertia.helpers import (
    filter_partial_props,
    get_shared_props,
    lazy_render,
    merge_shared_props,
    resolve_component,
)
from litestar_inertia.request import InertiaDetails, InertiaRequest
from litestar_inertia.types import InertiaHeaderType, InertiaJson, InertiaView, PageProps

if TYPE_CHECKING:
    from litestar import Litestar
    from litestar.background_tasks import BackgroundTask, BackgroundTasks
    from litestar.connection.base import AuthT, StateT, UserT
    from litestar.datastructures.cookie import Cookie
    from litestar.types import ResponseCookies, ResponseHeaders, TypeEncodersMap

    from litestar_inertia.config import InertiaConfig
    from litestar_inertia.plugin import InertiaPlugin
    from litestar_inertia.types import ComponentType, InertiaResult

__all__ = (
    "InertiaBack",
    "InertiaExternalRedirect",
    "InertiaRedirect",
    "InertiaResponse",
    "InertiaResponseBuilder",
    "render",
)

T = TypeVar("T")


def _get_details(request: "Request[Any, Any, Any]") -> InertiaDetails:
    if isinstance(request, InertiaRequest):
        return request.inertia
    return InertiaDetails(request)


def _get_plugin(request: "Request[Any, Any, Any]") -> "InertiaPlugin":
    try:
        return cast("InertiaPlugin", request.app.plugins.get("InertiaPlugin"))
    except KeyError as e:
        msg = "The InertiaPlugin is not registered on this application."
        raise ImproperlyConfiguredException(msg) from e


class InertiaResponseBuilder:
    """Build Inertia page objects for a request.

    :meth:`render` decides between the two response modes of the protocol: a bare JSON page
    object for Inertia visits, or a template context embedding the page object for full page
    loads.  Sending the response is left to the caller.
    """

    __slots__ = ("config",)

    def __init__(self, config: "InertiaConfig") -> None:
        self.config = config

    def render(
        self,
        request: "Request[Any, Any, Any]",
        component: "ComponentType",
        props: "Mapping[str, Any] | None" = None,
        view_data: "Mapping[str, Any] | None" = None,
    ) -> "InertiaResult":
        """Render ``component`` for ``request``.

        Args:
            request: The current request.
            component: The component name, or a template object carrying a ``name``.
            props: Props for the component.  Wrap expensive values with :func:`lazy`.
            view_data: Extra template context for full page loads.  Keys here take precedence over
                ``inertia``, ``inertia_json`` and ``request``.

        Returns:
            :class:`InertiaJson` for Inertia ``GET`` visits, otherwise :class:`InertiaView`.
        """
        details = _get_details(request)
        page = PageProps(
            component=resolve_component(component),
            props=dict(props or {}),
            url=str(request.url),
        )

        if details.is_partial_render(page.component):
            request.logger.debug(
                "Partial reload of %s, props: %s", page.component, ", ".join(details.partial_keys)
            )
            page.props = filter_partial_props(page.props, details.partial_keys)

        page.props = lazy_render(page.props)

        if self.config.version:
            page.version = self.config.version

        if self.config.shared is not None:
            page.props = merge_shared_props(page.props, get_shared_props(request, self.config.shared))

        if request.method == "GET" and details:
            return InertiaJson(
                page=page,
                headers=get_headers(InertiaHeaderType(vary="Accept", enabled=True)),
            )

        context: "dict[str, Any]" = {"inertia": page.to_dict()}
        if view_data:
            context.update(view_data)
        return InertiaView(page=page, context=context)


def render(
    request: "Request[Any, Any, Any]",
    component: "ComponentType",
    props: "Mapping[str, Any] | None" = None,
    view_data: "Mapping[str, Any] | None" = None,
) -> "InertiaResult":
    """Render ``component`` with the builder of the registered :class:`InertiaPlugin`.

    Args:
        request: The current request.
        component: The component name, or a template object carrying a ``name``.
        props: Props for the component.
        view_data: Extra template context for full page loads.

    Returns:
        The render result.
    """
    return _get_plugin(request).builder.render(request, component, props, view_data)


class InertiaResponse(Response[T]):
    """Inertia Response"""

    def __init__(
        self,
        content: T,
        *,
        component: "ComponentType | None" = None,
        view_data: "Mapping[str, Any] | None" = None,
        template_name: "str | None" = None,
        background: "BackgroundTask | BackgroundTasks | None" = None,
        cookies: "ResponseCookies | None" = None,
        encoding: str = "utf-8",
        headers: "ResponseHeaders | None" = None,
        media_type: "MediaType | str | None" = None,
        status_code: int = HTTP_200_OK,
        type_encoders: "TypeEncodersMap | None" = None,
    ) -> None:
        """Create an Inertia response.

        Args:
            content: The props for the component.  Anything that is not a mapping is sent as the
                ``content`` prop.
            component: The component to render.  Defaults to the ``component`` opt of the route handler.
            view_data: Extra template context for full page loads.  Keys here take precedence over
                ``inertia``, ``inertia_json`` and ``request``.
            template_name: Template to render on full page loads.  Defaults to the template assigned
                to the component by the :class:`InertiaPlugin`.
            background: A :class:`BackgroundTask <.background_tasks.BackgroundTask>` instance or
                :class:`BackgroundTasks <.background_tasks.BackgroundTasks>` to execute after the response is finished.
            cookies: A list of :class:`Cookie <.datastructures.Cookie>` instances to be set under the response
                ``Set-Cookie`` header.
            encoding: Content encoding
            headers: A string keyed dictionary of response headers. Header keys are insensitive.
            media_type: A string or member of the :class:`MediaType <.enums.MediaType>` enum.
            status_code: A value for the response HTTP status code.
            type_encoders: A mapping of types to callables that transform them into types supported for serialization.
        """
        super().__init__(
            content=content,
            background=background,
            cookies=cookies,
            encoding=encoding,
            headers=headers,
            media_type=media_type,
            status_code=status_code,
            type_encoders=type_encoders,
        )
        self.component = component
        self.view_data = dict(view_data or {})
        self.template_name = template_name

    def get_props(self) -> "dict[str, Any]":
        if self.content is None:
            return {}
        if isinstance(self.content, Mapping):
            return dict(cast("Mapping[str, Any]", self.content))
        return {"content": self.content}

    def _render_template(
        self,
        request: "Request[UserT, AuthT, StateT]",
        result: "InertiaView",
        type_encoders: "TypeEncodersMap | None",
        inertia_plugin: "InertiaPlugin",
    ) -> bytes:
        """Render the template to bytes.

        Raises:
            ImproperlyConfiguredException: If the template engine is not configured.
        """
        template_engine = request.app.template_engine  # pyright: ignore[reportUnknownVariableType,reportUnknownMemberType]
        if not template_engine:
            msg = "Template engine is not configured"
            raise ImproperlyConfiguredException(msg)
        context = {
            "inertia_json": self.render(result.page.to_dict(), MediaType.JSON, get_serializer(type_encoders)).decode(),
            "request": request,
            **result.context,
        }
        template_name = self.template_name or inertia_plugin.template_for(result.page.component, request.app)
        template = template_engine.get_template(template_name)  # pyright: ignore[reportUnknownMemberType,reportUnknownVariableType]
        return template.render(**context).encode(self.encoding)  # pyright: ignore[reportUnknownVariableType,reportUnknownMemberType,reportReturnType]

    def to_asgi_response(
        self,
        app: "Litestar | None",
        request: "Request[UserT, AuthT, StateT]",
        *,
        background: "BackgroundTask | BackgroundTasks | None" = None,
        cookies: "Iterable[Cookie] | None" = None,
        encoded_headers: "Iterable[tuple[bytes, bytes]] | None" = None,
        headers: "dict[str, str] | None" = None,
        is_head_response: bool = False,
        media_type: "MediaType | str | None" = None,
        status_code: "int | None" = None,
        type_encoders: "TypeEncodersMap | None" = None,
    ) -> "ASGIResponse":
        headers = {**headers, **self.headers} if headers is not None else dict(self.headers)
        cookies = self.cookies if cookies is None else itertools.chain(self.cookies, cookies)
        type_encoders = (
            {**type_encoders, **(self.response_type_encoders or {})} if type_encoders else self.response_type_encoders
        )
        component = self.component or _get_details(cast("Request[Any, Any, Any]", request)).route_component

        if component is None:
            resolved_media_type = get_enum_string_value(self.media_type or media_type or MediaType.JSON)
            return ASGIResponse(
                background=self.background or background,
                body=self.render(self.content, resolved_media_type, get_serializer(type_encoders)),
                cookies=cookies,
                encoded_headers=encoded_headers,
                encoding=self.encoding,
                headers=headers,
                is_head_response=is_head_response,
                media_type=resolved_media_type,
                status_code=self.status_code or status_code,
            )

        inertia_plugin = _get_plugin(cast("Request[Any, Any, Any]", request))
        result = inertia_plugin.builder.render(
            cast("Request[Any, Any, Any]", request), component, self.get_props(), self.view_data
        )

        if isinstance(result, InertiaJson):
            request.logger.debug("Sending Inertia page object for %s", result.page.component)
            headers.update(result.headers)
            resolved_media_type = get_enum_string_value(self.media_type or media_type or MediaType.JSON)
            body = self.render(result.body, resolved_media_type, get_serializer(type_encoders))
        else:
            resolved_media_type = get_enum_string_value(media_type or MediaType.HTML)
            body = self._render_template(request, result, type_encoders, inertia_plugin)

        return ASGIResponse(
            background=self.background or background,
            body=body,
            cookies=cookies,
            encoded_headers=encoded_headers,
            encoding=self.encoding,
            headers=headers,
            is_head_response=is_head_response,
            media_type=resolved_media_type,
            status_code=self.status_code or status_code,
        )


def _get_redirect_url(request: "Request[Any, Any, Any]", url: "str | None") -> str:
    """Return a safe redirect URL, falling back to base_url when invalid.

    Args:
        request: The request object.
        url: Candidate redirect URL.

    Returns:
        A safe redirect URL (same-origin absolute, or relative), otherwise the request base URL.
    """
    base_url = str(request.base_url)

    if not url:
        return base_url

    parsed = urlparse(url)
    base = urlparse(base_url)

    if not parsed.scheme and not parsed.netloc:
        return url

    if parsed.scheme not in {"http", "https"} or parsed.netloc != base.netloc:
        return base_url

    return url


class InertiaExternalRedirect(Response[Any]):
    """Client side redirect to an external URL (409 + ``X-Inertia-Location``).

    Takes ``request`` like the other redirect responses.  Request cookies are not copied onto
    the response.
    """

    def __init__(self, request: "Request[Any, Any, Any]", redirect_to: str, **kwargs: "Any") -> None:
        super().__init__(
            content=b"",
            status_code=HTTP_409_CONFLICT,
            headers=get_headers(InertiaHeaderType(location=quote(redirect_to, safe="/#%[]=:;$&()+,!?*@'~"))),
            **kwargs,
        )


class InertiaRedirect(Redirect):
    """Redirect to a same-origin URL.

    ``GET`` requests get a 307, anything else a 303 so the browser follows with a ``GET``.
    """

    def __init__(self, request: "Request[Any, Any, Any]", redirect_to: str, **kwargs: "Any") -> None:
        super().__init__(  # pyright: ignore[reportUnknownMemberType]
            path=_get_redirect_url(request, redirect_to),
            status_code=HTTP_307_TEMPORARY_REDIRECT if request.method == "GET" else HTTP_303_SEE_OTHER,
            **kwargs,
        )


class InertiaBack(Redirect):
    """Redirect back to the previous page using the Referer header."""

    def __init__(self, request: "Request[Any, Any, Any]", **kwargs: "Any") -> None:
        super().__init__(  # pyright: ignore[reportUnknownMemberType]
            path=_get_redirect_url(request, _get_details(request).referer),
            status_code=HTTP_307_TEMPORARY_REDIRECT if request.method == "GET" else HTTP_303_SEE_OTHER,
            **kwargs,
        )
