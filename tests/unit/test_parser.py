import pytest

from urikit.models import RawParts
from urikit.parser import ComponentParser
from urikit.registry import SchemeRegistry


@pytest.mark.parser
@pytest.mark.parametrize(
    "uri,expected",
    [
        (
            "https://example.com:8080/my/page?pg=3#frag",
            RawParts(
                scheme="https",
                host="example.com",
                port="8080",
                path="/my/page",
                query="pg=3",
                fragment="frag",
            ),
        ),
        ("file:///", RawParts(scheme="file", path="/")),
        ("ftp:", RawParts(scheme="ftp")),
        ("//example.com", RawParts(host="example.com")),
        ("//:8080/path", RawParts(port="8080", path="/path")),
        ("../d", RawParts(path="../d")),
        ("?x=1", RawParts(query="x=1")),
        ("#frag", RawParts(fragment="frag")),
        ("", RawParts()),
        ("  http://example.com  ", RawParts(scheme="http", host="example.com")),
        ("a/b?c#d?e#f", RawParts(path="a/b", query="c", fragment="d?e#f")),
    ],
    ids=(
        "full",
        "file",
        "scheme_only",
        "host_only",
        "port_no_host",
        "relative_path",
        "query_only",
        "fragment_only",
        "empty",
        "whitespace",
        "fragment_keeps_delimiters",
    ),
)
def test_generic_parse(uri: str, expected: RawParts, registry: SchemeRegistry) -> None:
    assert ComponentParser(registry).parse(uri) == expected


@pytest.mark.parser
def test_parts_not_decoded(registry: SchemeRegistry) -> None:
    _parts = ComponentParser(registry).parse("/a%20b?%2Bq=1#x%20y")
    assert _parts.path == "/a%20b"
    assert _parts.query == "%2Bq=1"
    assert _parts.fragment == "x%20y"


@pytest.mark.parser
@pytest.mark.parametrize(
    "uri", ("::::", "[]{}", "\n#?", "http://", "?#"), ids=("colons", "brackets", "newline", "empty_host", "empty_query")
)
def test_parse_never_fails(uri: str, registry: SchemeRegistry) -> None:
    assert isinstance(ComponentParser(registry).parse(uri), RawParts)


@pytest.mark.parser
def test_raw_parts_string() -> None:
    _uri = "https://example.com:8080/my/page?pg=3#frag"
    assert f"{ComponentParser(SchemeRegistry()).parse(_uri)}" == _uri


@pytest.mark.parser
@pytest.mark.parametrize(
    "base_scheme", ("news", None), ids=("base_scheme", "no_base_scheme")
)
def test_override_pattern(base_scheme: str | None, registry: SchemeRegistry) -> None:
    registry.set_pattern(
        "news", r"^(?:(?P<scheme>news):)?(?P<host>[^/?#]*)(?P<path>/[^?#]*)?$"
    )

    _parser = ComponentParser(registry)

    assert _parser.parse("news:comp.lang.python/123") == RawParts(
        scheme="news", host="comp.lang.python", path="/123"
    )

    _parts = _parser.parse("comp.lang.python/456", base_scheme)

    if base_scheme:
        assert _parts == RawParts(host="comp.lang.python", path="/456")
    else:
        assert _parts == RawParts(path="comp.lang.python/456")

    assert _parser.parse("http://example.com").host == "example.com"


@pytest.mark.parser
def test_override_falls_back_when_not_matching(registry: SchemeRegistry) -> None:
    registry.set_pattern("odd", r"^odd:(?P<path>\d+)$")
    _parser = ComponentParser(registry)
    assert _parser.parse("odd:123") == RawParts(path="123")
    assert _parser.parse("odd://host/p") == RawParts(scheme="odd", host="host", path="/p")
