"""URI Library.

Module contains the Uri value type: parsing, relative resolution,
mutation and rendering of URIs.

"""

import copy
import typing
import urllib.parse
from typing import Self

import pydantic

from urikit.models import (
    URI_PARTS,
    ExplicitFlags,
    Port,
    QueryMapping,
    SchemeString,
)
from urikit.parser import ComponentParser
from urikit.query import QueryCodec, default_codec
from urikit.registry import SchemeRegistry, default_registry
from urikit.renderer import UriRenderer
from urikit.resolver import ResolvedUri, UriResolver, resolve_path


class Uri:
    """URI value with scheme, host and port defaulting.

    Parameters
    ----------
    uri : str, optional
        the URI, or relative reference if base is given. An empty
        string with no base gives the blank Uri which renders as '/'.
    base : Uri | None, optional
        URI against which a relative reference is resolved
    registry : SchemeRegistry | None, optional
        registry of scheme defaults, by default that of base or
        else the application-wide registry
    codec : QueryCodec | None, optional
        query codec, by default that of base or else the
        application-wide codec

    Raises
    ------
    InvalidArgumentError
        if the URI cannot be resolved into a complete value

    Examples
    --------

    ```python
    base = Uri("https://example.com:8080/my/page?pg=3#frag")
    Uri("?x=1", base).to_string()
    ```
    """

    def __init__(
        self,
        uri: str = "",
        base: "Uri | None" = None,
        registry: SchemeRegistry | None = None,
        codec: QueryCodec | None = None,
    ) -> None:
        if not isinstance(uri, str):
            raise TypeError(f"Expected URI string, got '{type(uri).__name__}'")

        self._registry: SchemeRegistry = (
            registry or (base._registry if base else None) or default_registry()
        )
        self._codec: QueryCodec = (
            codec or (base._codec if base else None) or default_codec()
        )

        if not uri and base is None:
            self._apply(ResolvedUri())
            return

        _parts = ComponentParser(self._registry).parse(
            uri, base.scheme if base else None
        )
        self._apply(UriResolver(self._registry, self._codec).resolve(_parts, base))

    def _apply(self, resolved: ResolvedUri) -> None:
        self._scheme: str | None = resolved.scheme
        self._host: str | None = resolved.host
        self._port: int | bool | None = resolved.port
        self._path: str = resolved.path
        self._query: QueryMapping = resolved.query
        self._fragment: str = resolved.fragment
        self._explicit: ExplicitFlags = resolved.explicit

    def _renderer(self) -> UriRenderer:
        return UriRenderer(self._registry, self._codec)

    def __repr__(self) -> str:
        """Representation of Uri"""
        _out_str = f"{self.__class__.__module__}.{self.__class__.__qualname__}"
        return f"{_out_str}(uri={self.to_string()!r})"

    def __str__(self) -> str:
        """Construct string form of the Uri"""
        return self.to_string()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Uri):
            return NotImplemented
        return (
            self._scheme == other._scheme
            and self._host == other._host
            and isinstance(self._port, bool) == isinstance(other._port, bool)
            and self._port == other._port
            and self._path == other._path
            and self._query == other._query
            and self._fragment == other._fragment
        )

    def __truediv__(self, other: str) -> Self:
        """Define path extension through use of '/'."""
        _new = self.copy()
        _new /= other
        return _new

    @pydantic.validate_call
    def __itruediv__(self, other: str) -> Self:
        """Define path extension through use of '/'"""
        if other := other.strip("/"):
            self._path = resolve_path(urllib.parse.quote(other, safe="/"), self._path)
        return self

    def copy(self) -> Self:
        """Independent copy sharing the same registry and codec"""
        _new = copy.copy(self)
        _new._query = copy.deepcopy(self._query)
        return _new

    @property
    def scheme(self) -> str | None:
        return self._scheme

    @property
    def host(self) -> str | None:
        return self._host

    @property
    def port(self) -> int | bool | None:
        return self._port

    @property
    def path(self) -> str:
        return self._path

    @property
    def query(self) -> QueryMapping:
        """Copy of the decoded query mapping"""
        return copy.deepcopy(self._query)

    @property
    def query_string(self) -> str:
        """The query, encoded, without the leading '?'"""
        return self._codec.encode(self._query)

    @property
    def fragment(self) -> str:
        return self._fragment

    @property
    def explicit(self) -> ExplicitFlags:
        """Which of scheme, host and port were given rather than defaulted"""
        return self._explicit

    @pydantic.validate_call
    def set_scheme(self, scheme: SchemeString | None) -> Self:
        self._scheme = scheme
        self._explicit = self._explicit.model_copy(
            update={"scheme": scheme is not None}
        )
        return self

    @pydantic.validate_call
    def set_host(self, host: str | None) -> Self:
        self._host = host
        self._explicit = self._explicit.model_copy(update={"host": host is not None})
        return self

    @pydantic.validate_call
    def set_port(self, port: Port | None) -> Self:
        """Set the port

        Parameters
        ----------
        port : int | False | None
            a port between 0 and 65535, False for "no port" or
            None to clear it
        """
        self._port = port
        self._explicit = self._explicit.model_copy(update={"port": port is not None})
        return self

    @pydantic.validate_call
    def set_path(self, path: str) -> Self:
        """Set the path, a relative path is resolved against the current one

        Raises
        ------
        PathEscapesRootError
            if the path rises above the root
        """
        self._path = resolve_path(urllib.parse.quote(path, safe="/"), self._path)
        return self

    @pydantic.validate_call
    def set_query(self, query: QueryMapping | str) -> Self:
        """Replace the query with a mapping or an encoded query string"""
        if isinstance(query, str):
            self._query = self._codec.decode(query.removeprefix("?"))
        else:
            self._query = self._codec.normalize(query)
        return self

    @pydantic.validate_call
    def set_fragment(self, fragment: str) -> Self:
        self._fragment = fragment.removeprefix("#")
        return self

    @pydantic.validate_call
    def update_query_values(self, values: QueryMapping) -> Self:
        """Merge values into the query

        Nested mappings are merged recursively, a None value removes the
        key and any branch left empty is removed with it.

        Parameters
        ----------
        values : dict
            the values to merge

        Examples
        --------

        ```python
        uri.update_query_values({"two": {"c": {"ii": None}}, "one": "2"})
        ```
        """
        self._query = self._codec.merge(self._query, values)
        return self

    @pydantic.validate_call
    def remove_from_query(self, values: QueryMapping) -> Self:
        """Remove every key present in values, whatever their leaf values"""
        return self.update_query_values(QueryCodec.nullify(values))

    def to_string(self, parts: typing.Iterable[str] = URI_PARTS) -> str:
        """Render the URI, or only the given components of it

        Parameters
        ----------
        parts : Iterable[str], optional
            any of 'scheme', 'host', 'port', 'path', 'query' and
            'fragment', by default all

        Raises
        ------
        PortWithoutHostError
            if a port must be rendered but no host is set
        """
        return self._renderer().render(self, parts)

    def to_relative_string(self, base: "Uri") -> str:
        """Shortest reference which resolves to this URI against base"""
        return self._renderer().render_relative(self, base)
