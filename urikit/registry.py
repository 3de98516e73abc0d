"""
Scheme Registry
===============

Table of well-known ports, implied default hosts and parser override
patterns for URI schemes.

Reads go through immutable snapshots; each write builds a new snapshot
under a lock and swaps it in, so a resolve or render call holding a
snapshot sees one consistent table for its whole duration.

"""

import functools
import logging
import re
import threading
import typing

import pydantic

from urikit.models import Port, SchemeString

logger = logging.getLogger(__name__)

BUILTIN_PORTS: dict[str, int | bool] = {
    "ftp": 21,
    "ssh": 22,
    "telnet": 23,
    "time": 37,
    "dns": 53,
    "http": 80,
    "pop3": 110,
    "ldap": 389,
    "https": 443,
    "dhcp": 547,
    "file": False,
}

BUILTIN_HOSTS: dict[str, str] = {"file": "localhost"}


class RegistrySnapshot(pydantic.BaseModel):
    """Read-only view of the registry at one point in time"""

    model_config = pydantic.ConfigDict(frozen=True, arbitrary_types_allowed=True)
    ports: dict[str, typing.Any] = pydantic.Field(default_factory=dict)
    hosts: dict[str, str] = pydantic.Field(default_factory=dict)
    patterns: dict[str, re.Pattern] = pydantic.Field(default_factory=dict)

    def port_for(self, scheme: str | None) -> int | bool | None:
        """Well-known port for a scheme, False for 'no port', None if unknown"""
        return self.ports.get(scheme) if scheme else None

    def scheme_for(self, port: int | str | None) -> str | None:
        """First scheme registered with the given port"""
        if isinstance(port, str):
            if not (port.isascii() and port.isdigit()):
                return None
            port = int(port)
        if port is None or isinstance(port, bool):
            return None
        for scheme, scheme_port in self.ports.items():
            if not isinstance(scheme_port, bool) and scheme_port == port:
                return scheme
        return None

    def host_for(self, scheme: str | None) -> str | None:
        return self.hosts.get(scheme) if scheme else None

    def pattern_for(self, scheme: str | None) -> re.Pattern | None:
        return self.patterns.get(scheme) if scheme else None


class SchemeRegistry:
    """Mutable registry of scheme defaults.

    Parameters
    ----------
    ports : dict[str, int | bool] | None, optional
        well-known ports to register on top of the built-in set
    hosts : dict[str, str] | None, optional
        default hosts to register on top of the built-in set
    builtins : bool, optional
        start from the built-in tables, default is True
    """

    def __init__(
        self,
        ports: dict[str, int | bool] | None = None,
        hosts: dict[str, str] | None = None,
        builtins: bool = True,
    ) -> None:
        self._lock = threading.Lock()
        self._snapshot = RegistrySnapshot(
            ports=dict(BUILTIN_PORTS) if builtins else {},
            hosts=dict(BUILTIN_HOSTS) if builtins else {},
        )

        for scheme, port in (ports or {}).items():
            self.set_well_known_port(scheme, port)

        for scheme, host in (hosts or {}).items():
            self.set_default_host(scheme, host)

    def __repr__(self) -> str:
        _out_str = f"{self.__class__.__module__}.{self.__class__.__qualname__}"
        return f"{_out_str}(schemes={sorted(self._snapshot.ports)!r})"

    def snapshot(self) -> RegistrySnapshot:
        """Current immutable view of the registry"""
        return self._snapshot

    def _update(self, **tables: dict[str, typing.Any]) -> None:
        with self._lock:
            _current = self._snapshot
            self._snapshot = _current.model_copy(
                update={
                    name: {**getattr(_current, name), **changes}
                    for name, changes in tables.items()
                }
            )

    def _remove(self, table: str, scheme: str) -> None:
        with self._lock:
            _current = self._snapshot
            _entries = dict(getattr(_current, table))
            _entries.pop(scheme, None)
            self._snapshot = _current.model_copy(update={table: _entries})

    def get_port_for_scheme(self, scheme: str) -> int | bool | None:
        """Well-known port of a scheme.

        Returns
        -------
        int | bool | None
            the port, False if the scheme is known to have no port,
            None if the scheme is not registered
        """
        return self._snapshot.port_for(scheme.lower())

    def get_scheme_for_port(self, port: int | str) -> str | None:
        """Scheme whose well-known port is the given port, if any"""
        return self._snapshot.scheme_for(port)

    @pydantic.validate_call
    def set_well_known_port(self, scheme: SchemeString, port: Port) -> None:
        """Register or replace the well-known port of a scheme

        Parameters
        ----------
        scheme : str
            the scheme, stored lowercase
        port : int | False
            the port, or False if URIs of this scheme have no port
        """
        logger.debug(f"Registering well-known port {port!r} for scheme '{scheme}'")
        self._update(ports={scheme: port})

    def get_default_host(self, scheme: str) -> str | None:
        """Host implied when a URI of the given scheme omits one"""
        return self._snapshot.host_for(scheme.lower())

    @pydantic.validate_call
    def set_default_host(self, scheme: SchemeString, host: str | None) -> None:
        """Register the implied host for a scheme, None removes it"""
        if host is None:
            self._remove("hosts", scheme)
            return
        logger.debug(f"Registering default host '{host}' for scheme '{scheme}'")
        self._update(hosts={scheme: host})

    def get_pattern(self, scheme: str) -> re.Pattern | None:
        """Parser override pattern for a scheme"""
        return self._snapshot.pattern_for(scheme.lower())

    @pydantic.validate_call(config={"arbitrary_types_allowed": True})
    def set_pattern(
        self, scheme: SchemeString, pattern: str | re.Pattern | None
    ) -> None:
        """Register a parser override pattern for a scheme.

        The pattern should define the named groups 'scheme', 'host', 'port',
        'path', 'query' and 'fragment'; groups it leaves out are read as
        empty. None removes the override.
        """
        if pattern is None:
            self._remove("patterns", scheme)
            return
        if isinstance(pattern, str):
            pattern = re.compile(pattern)
        self._update(patterns={scheme: pattern})


@functools.lru_cache
def default_registry() -> SchemeRegistry:
    """The application-wide registry.

    Created on first use from the built-in tables plus any ports and hosts
    given in the urikit configuration, then shared by every Uri that is not
    handed a registry of its own for the rest of the process.
    """
    from urikit.config import load_configuration

    _config = load_configuration()
    return SchemeRegistry(ports=_config.schemes.ports, hosts=_config.schemes.hosts)
