"""
URI Resolver
============

Turns raw URI components into a fully populated, decoded URI, either on
their own (absolute construction) or merged against a base URI (relative
resolution).

"""

import copy
import logging
import typing
import urllib.parse

import pydantic

from urikit.exception import (
    InvalidPortError,
    MissingHostError,
    MissingPortError,
    MissingSchemeError,
    PathEscapesRootError,
    UnknownSchemeNoPortError,
)
from urikit.models import MAX_PORT, ExplicitFlags, QueryMapping, RawParts
from urikit.query import QueryCodec
from urikit.registry import RegistrySnapshot, SchemeRegistry
from urikit.utilities import ports_equal

logger = logging.getLogger(__name__)


class ResolvedUri(pydantic.BaseModel):
    """Decoded components of a URI together with their explicit flags"""

    scheme: str | None = None
    host: str | None = None
    port: int | bool | None = None
    path: str = "/"
    query: QueryMapping = pydantic.Field(default_factory=dict)
    fragment: str = ""
    explicit: ExplicitFlags = ExplicitFlags()


class UriBase(typing.Protocol):
    """Anything exposing decoded URI components, such as a Uri"""

    scheme: str | None
    host: str | None
    port: int | bool | None
    path: str
    query: QueryMapping
    fragment: str
    explicit: ExplicitFlags


def parse_port(port: str) -> int:
    """Convert a literal port to an integer

    Raises
    ------
    InvalidPortError
        if the port is not a decimal integer between 0 and 65535
    """
    if not (port.isascii() and port.isdigit()) or int(port) > MAX_PORT:
        raise InvalidPortError(port)
    return int(port)


def resolve_path(path: str, base_path: str = "/") -> str:
    """Remove dot segments from a raw path

    A path not starting with '/' is resolved against the segments of
    base_path, an absolute path against the root. Empty and '.' segments
    are dropped, '..' removes the previous segment. Segments are
    percent-decoded before the comparison, so '%2E%2E' counts as '..'.

    Parameters
    ----------
    path : str
        raw (percent-encoded) path to resolve
    base_path : str, optional
        decoded path of the base URI, default is the root

    Returns
    -------
    str
        the decoded, absolute path

    Raises
    ------
    PathEscapesRootError
        if a '..' segment would rise above the root
    """
    if path.startswith("/"):
        _segments: list[str] = []
    else:
        _segments = [segment for segment in base_path.split("/") if segment]

    for segment in map(urllib.parse.unquote, path.split("/")):
        if segment in ("", "."):
            continue
        if segment == "..":
            if not _segments:
                raise PathEscapesRootError(path, base_path)
            _segments.pop()
            continue
        _segments.append(segment)

    return "/" + "/".join(_segments)


class UriResolver:
    """Build decoded URI components from raw parts.

    Parameters
    ----------
    registry : SchemeRegistry | RegistrySnapshot
        source of well-known ports and default hosts
    codec : QueryCodec
        codec used to decode the query
    """

    def __init__(
        self, registry: SchemeRegistry | RegistrySnapshot, codec: QueryCodec
    ) -> None:
        self._registry = registry
        self._codec = codec

    def _snapshot(self) -> RegistrySnapshot:
        if isinstance(self._registry, SchemeRegistry):
            return self._registry.snapshot()
        return self._registry

    def resolve(self, parts: RawParts, base: UriBase | None = None) -> ResolvedUri:
        """Resolve raw parts, merging against base if one is given

        Parameters
        ----------
        parts : RawParts
            components from the parser
        base : Uri | None, optional
            the URI a relative reference is resolved against

        Returns
        -------
        ResolvedUri
            every component populated and decoded

        Raises
        ------
        InvalidArgumentError
            if a required component can be neither read nor defaulted
        """
        _snapshot = self._snapshot()
        if base is None:
            return self._resolve_absolute(parts, _snapshot)
        return self._resolve_relative(parts, base, _snapshot)

    def _resolve_absolute(
        self, parts: RawParts, snapshot: RegistrySnapshot
    ) -> ResolvedUri:
        if not (_scheme := parts.scheme.lower()):
            if not (_scheme := snapshot.scheme_for(parts.port)):
                raise MissingSchemeError(f"{parts}", parts.port)
            logger.debug(f"Inferred scheme '{_scheme}' from port {parts.port}")

        if parts.port:
            _port = parse_port(parts.port)
        elif (_port := snapshot.port_for(_scheme)) is None:
            raise MissingPortError(_scheme)

        if parts.host:
            _host = urllib.parse.unquote(parts.host)
        elif (_host := snapshot.host_for(_scheme)) is None:
            raise MissingHostError(_scheme)

        return ResolvedUri(
            scheme=_scheme,
            host=_host,
            port=_port,
            path=resolve_path(parts.path or "/"),
            query=self._codec.decode(parts.query),
            fragment=urllib.parse.unquote(parts.fragment),
            explicit=ExplicitFlags(
                scheme=bool(parts.scheme),
                host=bool(parts.host),
                port=bool(parts.port),
            ),
        )

    def _resolve_relative(
        self, parts: RawParts, base: UriBase, snapshot: RegistrySnapshot
    ) -> ResolvedUri:
        _port: int | bool | None = None

        if _scheme := parts.scheme.lower():
            _explicit_scheme = True
            if not parts.port and (_port := snapshot.port_for(_scheme)) is None:
                raise UnknownSchemeNoPortError(_scheme)
        else:
            _explicit_scheme = base.explicit.scheme
            _scheme = base.scheme or snapshot.scheme_for(parts.port)
            if not parts.port:
                _port = base.port

        if not _scheme:
            raise MissingSchemeError(f"{parts}", parts.port)

        if parts.port:
            _port = parse_port(parts.port)
        elif _port is None and (_port := snapshot.port_for(_scheme)) is None:
            raise MissingPortError(_scheme)

        if parts.host:
            # New authority, nothing below the host is inherited
            _host = urllib.parse.unquote(parts.host)
            _path = resolve_path(parts.path or "/")
            _query = self._codec.decode(parts.query)
            _fragment = urllib.parse.unquote(parts.fragment)
        elif parts.path:
            _host = base.host
            _path = resolve_path(parts.path, base.path)
            _query = self._codec.decode(parts.query)
            _fragment = urllib.parse.unquote(parts.fragment)
        else:
            _host = base.host
            _path = base.path
            _query = (
                self._codec.decode(parts.query)
                if parts.query
                else copy.deepcopy(base.query)
            )
            _fragment = (
                urllib.parse.unquote(parts.fragment)
                if parts.fragment
                else base.fragment
            )

        if _host is None and (_host := snapshot.host_for(_scheme)) is None:
            raise MissingHostError(_scheme)

        logger.debug(
            f"Resolved reference against base '{base.scheme}://{base.host}{base.path}'"
            f" to '{_scheme}://{_host}{_path}'"
        )

        return ResolvedUri(
            scheme=_scheme,
            host=_host,
            port=_port,
            path=_path,
            query=_query,
            fragment=_fragment,
            explicit=ExplicitFlags(
                scheme=_explicit_scheme,
                host=_host != snapshot.host_for(_scheme),
                port=not ports_equal(_port, snapshot.port_for(_scheme)),
            ),
        )
