"""
URI Renderer
============

Serializes URI components back into strings, either in full, for a
chosen subset of components, or as the shortest reference which resolves
to the URI against a given base.

"""

import logging
import typing
import urllib.parse

from urikit.exception import PortWithoutHostError
from urikit.models import FRAGMENT_SAFE_CHARS, PATH_SAFE_CHARS, URI_PARTS
from urikit.query import QueryCodec
from urikit.registry import RegistrySnapshot, SchemeRegistry
from urikit.utilities import ports_equal

if typing.TYPE_CHECKING:
    from urikit.resolver import UriBase

logger = logging.getLogger(__name__)


class UriRenderer:
    """Render URIs using the defaults held in a registry.

    Parameters
    ----------
    registry : SchemeRegistry | RegistrySnapshot
        source of well-known ports and default hosts, used to decide
        which values can be left out
    codec : QueryCodec
        codec used to encode the query
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

    @staticmethod
    def _port_visible(uri: "UriBase", snapshot: RegistrySnapshot) -> bool:
        if uri.port is None or isinstance(uri.port, bool):
            return False
        return uri.explicit.port or snapshot.port_for(uri.scheme) is None

    def _render(
        self,
        uri: "UriBase",
        parts: typing.Iterable[str],
        snapshot: RegistrySnapshot,
        force_host: bool = False,
    ) -> str:
        _out_str: str = ""

        if "scheme" in parts and uri.scheme:
            _out_str += f"{uri.scheme}:"

        if "host" in parts and uri.host is not None:
            _out_str += "//"
            if (
                force_host
                or uri.explicit.host
                or uri.host != snapshot.host_for(uri.scheme)
            ):
                _out_str += urllib.parse.quote(uri.host, safe="")

        if "port" in parts and self._port_visible(uri, snapshot):
            if uri.host is None:
                raise PortWithoutHostError(uri.port)
            _out_str += f":{uri.port}"

        if "path" in parts:
            _out_str += urllib.parse.quote(uri.path, safe=PATH_SAFE_CHARS)

        if "query" in parts and uri.query:
            _out_str += f"?{self._codec.encode(uri.query)}"

        if "fragment" in parts and uri.fragment:
            _out_str += f"#{urllib.parse.quote(uri.fragment, safe=FRAGMENT_SAFE_CHARS)}"

        return _out_str

    def render(
        self, uri: "UriBase", parts: typing.Iterable[str] = URI_PARTS
    ) -> str:
        """Render the requested components of a URI

        Components are always written in the order scheme, host, port,
        path, query, fragment regardless of the order requested.

        Parameters
        ----------
        uri : Uri
            the URI to render
        parts : Iterable[str], optional
            names of the components to include, by default all

        Returns
        -------
        str
            the rendered string

        Raises
        ------
        ValueError
            if an unknown component name is requested
        PortWithoutHostError
            if a port must be written but the URI has no host
        """
        parts = tuple(parts)
        if _unknown := set(parts) - set(URI_PARTS):
            raise ValueError(f"Unknown URI components {sorted(_unknown)}")
        return self._render(uri, parts, self._snapshot())

    def render_relative(self, uri: "UriBase", base: "UriBase") -> str:
        """Shortest reference which resolves to uri against base

        Parameters
        ----------
        uri : Uri
            the target URI
        base : Uri
            the URI the reference will be resolved against

        Returns
        -------
        str
            the reference, empty if uri and base are equal
        """
        _snapshot = self._snapshot()

        if uri.scheme != base.scheme or not ports_equal(uri.port, base.port):
            return self._render(uri, URI_PARTS, _snapshot)

        if uri.host != base.host:
            return self._render(uri, URI_PARTS[1:], _snapshot, force_host=True)

        if uri.path != base.path:
            return self._render(uri, URI_PARTS[3:], _snapshot)

        # An empty query or fragment cannot be expressed on its own, since
        # the reference would inherit the base's, so restart from the path
        if uri.query != base.query:
            return self._render(
                uri, URI_PARTS[4:] if uri.query else URI_PARTS[3:], _snapshot
            )

        if uri.fragment != base.fragment:
            return self._render(
                uri, URI_PARTS[5:] if uri.fragment else URI_PARTS[3:], _snapshot
            )

        logger.debug("URI is identical to its base, relative form is empty")
        return ""
