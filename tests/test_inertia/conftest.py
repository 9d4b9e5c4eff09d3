from collections.abc import Generator
from pathlib import Path

import pytest
from litestar.contrib.jinja import JinjaTemplateEngine
from litestar.template.config import TemplateConfig

from litestar_inertia.config import InertiaConfig
from litestar_inertia.plugin import InertiaPlugin

here = Path(__file__).parent


@pytest.fixture
def template_dir() -> Path:
    return here / "templates"


@pytest.fixture
def inertia_config(template_dir: Path) -> Generator[InertiaConfig, None, None]:
    yield InertiaConfig(root_template="index.html.j2", template_dir=template_dir, version="1.0")


@pytest.fixture
def inertia_plugin(inertia_config: InertiaConfig) -> Generator[InertiaPlugin, None, None]:
    yield InertiaPlugin(config=inertia_config)


@pytest.fixture
def template_config(template_dir: Path) -> TemplateConfig[JinjaTemplateEngine]:
    return TemplateConfig(engine=JinjaTemplateEngine(directory=template_dir))
