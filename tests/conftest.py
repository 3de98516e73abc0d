import pytest
import pytest_mock

import urikit.config.user as uk_cfg
import urikit.query
import urikit.registry

from urikit.query import QueryCodec
from urikit.registry import SchemeRegistry
from urikit.uri import Uri

MARKERS: dict[str, str] = {
    "query": "query string encoding and decoding",
    "parser": "splitting of URI strings into raw components",
    "registry": "scheme, port and host defaults",
    "resolver": "absolute construction and relative resolution",
    "renderer": "rendering of full, partial and relative strings",
    "uri": "the Uri value type",
    "config": "loading of the urikit configuration",
}


def pytest_configure(config) -> None:
    for marker, description in MARKERS.items():
        config.addinivalue_line("markers", f"{marker}: {description}")


def clear_caches() -> None:
    uk_cfg.UriConfiguration.config_file.cache_clear()
    uk_cfg.load_configuration.cache_clear()
    urikit.registry.default_registry.cache_clear()
    urikit.query.default_codec.cache_clear()


@pytest.fixture(autouse=True)
def isolated_config(
    monkeypatch: pytest.MonkeyPatch, mocker: pytest_mock.MockerFixture
):
    """Keep local configuration files and environment out of every test"""
    monkeypatch.delenv("URIKIT_DEBUG", False)
    monkeypatch.delenv("URIKIT_STRICT_QUERY", False)
    mocker.patch(
        "urikit.config.user.uk_util.find_first_instance_of_file",
        lambda *_, **__: None,
    )
    clear_caches()
    yield
    clear_caches()


@pytest.fixture
def registry() -> SchemeRegistry:
    return SchemeRegistry()


@pytest.fixture
def codec() -> QueryCodec:
    return QueryCodec()


@pytest.fixture
def base_uri(registry: SchemeRegistry, codec: QueryCodec) -> Uri:
    return Uri(
        "https://example.com:8080/my/page?pg=3#frag", registry=registry, codec=codec
    )
