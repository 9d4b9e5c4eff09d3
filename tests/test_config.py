from pathlib import Path

import pytest
from litestar.exceptions import ImproperlyConfiguredException

from litestar_inertia.config import DEFAULT_SESSION_NAMESPACE, InertiaConfig


def test_default_inertia_config() -> None:
    config = InertiaConfig()
    assert config.root_template == "index.html"
    assert config.template_dir is None
    assert config.version is None
    assert config.shared is None
    assert config.session_namespace == DEFAULT_SESSION_NAMESPACE == "inertia"
    assert config.component_opt_keys == ("component", "page")


def test_template_dir_is_path() -> None:
    config = InertiaConfig(template_dir="templates")
    assert isinstance(config.template_dir, Path)


def test_version_from_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("INERTIA_VERSION", "abc123")
    assert InertiaConfig().version == "abc123"
    assert InertiaConfig(version="v2").version == "v2"


def test_empty_session_namespace_rejected() -> None:
    with pytest.raises(ImproperlyConfiguredException):
        InertiaConfig(session_namespace="")
