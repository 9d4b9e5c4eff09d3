import re
from typing import TYPE_CHECKING, Any, cast

from litestar.exceptions import HTTPException, ImproperlyConfiguredException, NotAuthorizedException
from litestar.exceptions.responses import create_exception_response  # pyright: ignore[reportUnknownVariableType]
from litestar.status_codes import HTTP_400_BAD_REQUEST, HTTP_401_UNAUTHORIZED, HTTP_422_UNPROCESSABLE_ENTITY

from litestar_inertia._utils import InertiaHeaders, is_truthy_header
from litestar_inertia.response import InertiaBack, InertiaRedirect
from litestar_inertia.session import InertiaSession

if TYPE_CHECKING:
    from litestar.connection import Request
    from litestar.connection.base import AuthT, StateT, UserT
    from litestar.response import Response

    from litestar_inertia.plugin import InertiaPlugin

__all__ = ("ERRORS_KEY", "FLASH_KEY", "exception_to_http_response", "extract_field_errors")

FIELD_ERR_RE = re.compile(r"field `(.+)`$")
ERRORS_KEY = "errors"
"""Session key (inside the Inertia namespace) holding validation errors for the next page."""
FLASH_KEY = "flash"
"""Session key (inside the Inertia namespace) holding flash messages for the next page."""


def extract_field_errors(exc: "HTTPException") -> "dict[str, str]":
    """Map the ``extra`` details of a validation error to ``{field: message}``.

    Args:
        exc: The exception raised by the handler.

    Returns:
        The field errors, empty when the exception carries none.
    """
    extras: "Any" = getattr(exc, "extra", None)
    if not isinstance(extras, (list, tuple)):
        return {}
    errors: "dict[str, str]" = {}
    for extra in cast("list[Any]", extras):
        if not isinstance(extra, dict):
            continue
        message = cast("dict[str, Any]", extra)
        key_value = message.get("key")
        default_field = str(key_value) if key_value is not None else "root"
        error_detail = str(message.get("message") or exc.detail)
        match = FIELD_ERR_RE.search(error_detail)
        errors.setdefault(match.group(1) if match else default_field, error_detail)
    return errors


def exception_to_http_response(request: "Request[UserT, AuthT, StateT]", exc: "HTTPException") -> "Response[Any]":
    """Handler for all exceptions subclassed from HTTPException.

    Requests from an Inertia client that fail validation are redirected back to the previous page
    with the errors stored in the Inertia session, so the next render can share them as props.
    Everything else gets Litestar's default exception response.

    Args:
        request: The request object.
        exc: The exception to handle.

    Returns:
        The response object.
    """
    if not is_truthy_header(request.headers.get(InertiaHeaders.ENABLED.value)):
        return cast("Response[Any]", create_exception_response(request, exc))

    status_code = exc.status_code
    if status_code in {HTTP_400_BAD_REQUEST, HTTP_422_UNPROCESSABLE_ENTITY}:
        try:
            session = InertiaSession.from_connection(request)
            session.merge(ERRORS_KEY, extract_field_errors(exc) or {"root": exc.detail})
            session.append(FLASH_KEY, exc.detail)
        except ImproperlyConfiguredException:
            msg = "Unable to store validation errors.  A valid session was not found for this request."
            request.logger.warning(msg)
        return InertiaBack(request)

    if status_code == HTTP_401_UNAUTHORIZED or isinstance(exc, NotAuthorizedException):
        try:
            inertia_plugin: "InertiaPlugin" = request.app.plugins.get("InertiaPlugin")
            redirect_to = inertia_plugin.config.redirect_unauthorized_to
        except KeyError:
            redirect_to = None
        if redirect_to is not None and request.url.path != redirect_to:
            return InertiaRedirect(request, redirect_to=redirect_to)

    return cast("Response[Any]", create_exception_response(request, exc))
