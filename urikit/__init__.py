"""urikit: URI parsing, relative resolution and rendering."""

from urikit.exception import (
    InvalidArgumentError,
    InvalidPortError,
    InvalidQuerySyntaxError,
    MissingHostError,
    MissingPortError,
    MissingSchemeError,
    PathEscapesRootError,
    PortWithoutHostError,
    UnknownSchemeNoPortError,
    UriError,
)
from urikit.query import QueryCodec, parse_query_string, to_query_string
from urikit.registry import SchemeRegistry, default_registry
from urikit.uri import Uri

__version__ = "1.0.0"

__all__ = [
    "Uri",
    "SchemeRegistry",
    "QueryCodec",
    "default_registry",
    "parse_query_string",
    "to_query_string",
    "UriError",
    "InvalidArgumentError",
    "MissingSchemeError",
    "MissingPortError",
    "MissingHostError",
    "UnknownSchemeNoPortError",
    "PathEscapesRootError",
    "InvalidQuerySyntaxError",
    "InvalidPortError",
    "PortWithoutHostError",
]
