import re
import threading

import pydantic
import pytest

from urikit.registry import BUILTIN_PORTS, SchemeRegistry, default_registry


@pytest.mark.registry
@pytest.mark.parametrize(
    "scheme,port",
    list(BUILTIN_PORTS.items()),
    ids=list(BUILTIN_PORTS),
)
def test_builtin_ports(scheme: str, port: int | bool, registry: SchemeRegistry) -> None:
    _port = registry.get_port_for_scheme(scheme)
    assert _port == port and isinstance(_port, bool) == isinstance(port, bool)
    assert registry.get_port_for_scheme(scheme.upper()) == port


@pytest.mark.registry
def test_file_has_no_port(registry: SchemeRegistry) -> None:
    assert registry.get_port_for_scheme("file") is False
    assert registry.get_default_host("file") == "localhost"


@pytest.mark.registry
@pytest.mark.parametrize(
    "port,scheme",
    [(443, "https"), ("80", "http"), (21, "ftp"), (0, None), (12345, None), ("abc", None), (False, None), ("\u00b2", None), ("\u0668\u0660", None)],
    ids=("https", "string_port", "ftp", "zero", "unknown", "not_a_number", "false", "superscript", "arabic_indic"),
)
def test_scheme_for_port(port: int | str | bool, scheme: str | None, registry: SchemeRegistry) -> None:
    assert registry.get_scheme_for_port(port) == scheme


@pytest.mark.registry
def test_unknown_scheme(registry: SchemeRegistry) -> None:
    assert registry.get_port_for_scheme("gopher") is None
    assert registry.get_default_host("gopher") is None
    assert registry.get_pattern("gopher") is None


@pytest.mark.registry
def test_set_well_known_port(registry: SchemeRegistry) -> None:
    _snapshot = registry.snapshot()
    registry.set_well_known_port("Gopher", 70)
    assert registry.get_port_for_scheme("gopher") == 70
    assert registry.get_scheme_for_port(70) == "gopher"

    # Earlier snapshots are unaffected by later writes
    assert _snapshot.port_for("gopher") is None
    assert registry.snapshot() is not _snapshot

    registry.set_well_known_port("gopher", False)
    assert registry.get_port_for_scheme("gopher") is False
    assert registry.get_scheme_for_port(70) is None


@pytest.mark.registry
@pytest.mark.parametrize(
    "scheme,port",
    [("gopher", -1), ("gopher", 65536), ("1bad", 70), ("", 70), ("gopher", "seventy")],
    ids=("negative", "too_large", "bad_scheme", "empty_scheme", "not_a_number"),
)
def test_set_well_known_port_invalid(scheme: str, port: object, registry: SchemeRegistry) -> None:
    with pytest.raises(pydantic.ValidationError):
        registry.set_well_known_port(scheme, port)
    assert registry.get_port_for_scheme("gopher") is None


@pytest.mark.registry
def test_default_hosts(registry: SchemeRegistry) -> None:
    registry.set_default_host("smb", "fileserver")
    assert registry.get_default_host("SMB") == "fileserver"
    registry.set_default_host("smb", None)
    assert registry.get_default_host("smb") is None
    registry.set_default_host("file", None)
    assert registry.get_default_host("file") is None


@pytest.mark.registry
def test_patterns(registry: SchemeRegistry) -> None:
    registry.set_pattern("urn", r"^urn:(?P<path>.*)$")
    assert isinstance(registry.get_pattern("urn"), re.Pattern)
    _compiled = re.compile(r"^x:(?P<path>.*)$")
    registry.set_pattern("x", _compiled)
    assert registry.get_pattern("x") is _compiled
    registry.set_pattern("urn", None)
    assert registry.get_pattern("urn") is None


@pytest.mark.registry
def test_constructor_tables() -> None:
    _registry = SchemeRegistry(ports={"gopher": 70}, hosts={"gopher": "hole"}, builtins=False)
    assert _registry.get_port_for_scheme("gopher") == 70
    assert _registry.get_default_host("gopher") == "hole"
    assert _registry.get_port_for_scheme("http") is None
    assert _registry.get_default_host("file") is None


@pytest.mark.registry
def test_registries_independent() -> None:
    _first = SchemeRegistry()
    _second = SchemeRegistry()
    _first.set_well_known_port("gopher", 70)
    assert _second.get_port_for_scheme("gopher") is None


@pytest.mark.registry
def test_concurrent_writes(registry: SchemeRegistry) -> None:
    def _register(index: int) -> None:
        for offset in range(20):
            registry.set_well_known_port(f"s{index}x{offset}", 1000 + index * 20 + offset)

    _threads = [threading.Thread(target=_register, args=(i,)) for i in range(8)]
    for thread in _threads:
        thread.start()
    for thread in _threads:
        thread.join()

    for index in range(8):
        for offset in range(20):
            assert registry.get_port_for_scheme(f"s{index}x{offset}") == 1000 + index * 20 + offset


@pytest.mark.registry
def test_default_registry_shared() -> None:
    assert default_registry() is default_registry()
    assert default_registry().get_port_for_scheme("https") == 443
