"""Namespaced session storage for passing data across Inertia redirects.

Form submissions in an Inertia application usually end with a redirect.  Validation errors,
flash messages and other one-off values are written here before the redirect and read back
(usually with :meth:`InertiaSession.pull`) while rendering the next page.
"""

from collections.abc import Mapping, MutableMapping
from typing import TYPE_CHECKING, Any, cast

from litestar.exceptions import ImproperlyConfiguredException

from litestar_inertia.config import DEFAULT_SESSION_NAMESPACE

if TYPE_CHECKING:
    from litestar.connection import ASGIConnection

    from litestar_inertia.plugin import InertiaPlugin

__all__ = ("InertiaSession",)


def _is_sequence(value: "Any") -> bool:
    return isinstance(value, (list, tuple))


class InertiaSession:
    """Thin wrapper around a session mapping that prefixes every key with a namespace."""

    __slots__ = ("_session", "namespace")

    def __init__(self, session: "MutableMapping[str, Any]", namespace: str = DEFAULT_SESSION_NAMESPACE) -> None:
        """Initialize :class:`InertiaSession`

        Args:
            session: The session mapping to read from and write to.
            namespace: Prefix added to every key.

        Raises:
            ImproperlyConfiguredException: If the namespace is empty.
        """
        if not namespace:
            msg = "The Inertia session namespace must be a non-empty string."
            raise ImproperlyConfiguredException(msg)
        self._session = session
        self.namespace = namespace

    @classmethod
    def from_connection(cls, connection: "ASGIConnection[Any, Any, Any, Any]") -> "InertiaSession":
        """Create a session wrapper for the current connection.

        The namespace comes from the registered :class:`InertiaPlugin`, or the default when the
        plugin is not installed.

        Args:
            connection: The ASGI connection.

        Raises:
            ImproperlyConfiguredException: If no session middleware is installed.

        Returns:
            The session wrapper.
        """
        namespace = DEFAULT_SESSION_NAMESPACE
        try:
            inertia_plugin: "InertiaPlugin" = connection.app.plugins.get("InertiaPlugin")
            namespace = inertia_plugin.config.session_namespace
        except KeyError:
            pass
        return cls(connection.session, namespace=namespace)

    def key(self, key: str) -> str:
        """Return the namespaced session key."""
        return f"{self.namespace}.{key}"

    def set(self, key: str, value: "Any") -> None:
        self._session[self.key(key)] = value

    def get(self, key: str, default: "Any" = None) -> "Any":
        return self._session.get(self.key(key), default)

    def pull(self, key: str, default: "Any" = None) -> "Any":
        """Return the value and remove it from the session."""
        return self._session.pop(self.key(key), default)

    def remove(self, key: str) -> None:
        self._session.pop(self.key(key), None)

    def has(self, key: str) -> bool:
        return self.key(key) in self._session

    def append(self, key: str, value: "Any") -> None:
        """Append ``value`` to the list stored under ``key``.

        An existing single value becomes the first item of a new list; a missing or empty value
        starts a new list.

        Args:
            key: The session key.
            value: The value to append.
        """
        current = self.get(key)
        if _is_sequence(current):
            items = [*current, value]
        elif current:
            items = [current, value]
        else:
            items = [value]
        self.set(key, items)

    def merge(self, key: str, value: "Any") -> None:
        """Merge ``value`` into the value stored under ``key``.

        Lists are concatenated and mappings are updated.  A scalar ``value`` is handed to
        :meth:`append`.

        Args:
            key: The session key.
            value: The list, mapping or scalar to merge.
        """
        if _is_sequence(value):
            current = self.get(key)
            if _is_sequence(current):
                merged: "Any" = [*current, *value]
            elif current:
                merged = [current, *value]
            else:
                merged = list(value)
            self.set(key, merged)
        elif isinstance(value, Mapping):
            current = self.get(key)
            if isinstance(current, Mapping):
                merged = {**cast("Mapping[str, Any]", current), **cast("Mapping[str, Any]", value)}
            elif _is_sequence(current):
                merged = [*current, dict(value)]
            elif current:
                merged = [current, dict(value)]
            else:
                merged = dict(cast("Mapping[str, Any]", value))
            self.set(key, merged)
        else:
            self.append(key, value)
