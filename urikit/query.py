"""
Query String Codec
==================

Conversion between nested query mappings and flat, percent-encoded query
strings using bracket notation for nesting, for example::

    two[a]=ey&two[c][ii]=ayay  <->  {"two": {"a": "ey", "c": {"ii": "ayay"}}}

Whole keys, brackets included, are percent-encoded on output and spaces
are always written as ``%20`` so that decoding an encoded mapping gives
back the same mapping.

"""

import copy
import functools
import logging
import re
import typing
import urllib.parse

from urikit.exception import InvalidQuerySyntaxError
from urikit.models import QUERY_KEY_REGEX, QueryMapping
from urikit.utilities import prune_query, query_merger

logger = logging.getLogger(__name__)

_KEY_PATTERN = re.compile(QUERY_KEY_REGEX)
_SUBKEY_PATTERN = re.compile(r"\[([^\[\]]+)\]")
_KEY_TOKEN_PATTERN = re.compile(r"^[^\[\]]+$")


def _quote(value: str) -> str:
    return urllib.parse.quote(value, safe="")


def _insert(query: QueryMapping, keys: list[str], value: str) -> None:
    """Place a value at the end of a key path, creating branches as needed"""
    *_branch_keys, _leaf_key = keys
    _node = query
    for key in _branch_keys:
        if not isinstance(_node.get(key), dict):
            _node[key] = {}
        _node = _node[key]
    _node[_leaf_key] = value


class QueryCodec:
    """Encode and decode nested query mappings.

    Parameters
    ----------
    strict : bool, optional
        if True (the default) a key which does not match the
        ``name[sub][sub]`` grammar raises an InvalidQuerySyntaxError,
        otherwise the offending pair is dropped with a warning and
        decoding continues.
    """

    def __init__(self, strict: bool = True) -> None:
        self._strict: bool = strict

    def __repr__(self) -> str:
        return f"{self.__class__.__module__}.{self.__class__.__qualname__}(strict={self._strict})"

    @property
    def strict(self) -> bool:
        return self._strict

    @staticmethod
    def split_key(key: str) -> list[str] | None:
        """Split 'name[a][b]' into ['name', 'a', 'b'], None if malformed"""
        if not (_match := _KEY_PATTERN.match(key)):
            return None
        return [_match.group(1), *_SUBKEY_PATTERN.findall(_match.group(2))]

    @staticmethod
    def _check_key(key: typing.Any) -> str:
        _key = f"{key}"
        if not _KEY_TOKEN_PATTERN.match(_key):
            raise InvalidQuerySyntaxError(
                _key, "keys must be non-empty and must not contain brackets"
            )
        return _key

    def decode(self, query_string: str) -> QueryMapping:
        """Parse a query string into a nested mapping

        Parameters
        ----------
        query_string : str
            the raw query, without the leading '?'

        Returns
        -------
        dict
            the decoded mapping, empty if the string is empty

        Raises
        ------
        InvalidQuerySyntaxError
            if in strict mode and a key is malformed
        """
        _query: QueryMapping = {}

        for segment in query_string.split("&"):
            if "=" not in segment:
                if segment:
                    logger.debug(f"Skipping query segment '{segment}' with no value")
                continue

            _raw_key, _raw_value = segment.split("=", 1)
            _key: str = urllib.parse.unquote(_raw_key)

            if not (_keys := self.split_key(_key)):
                if self._strict:
                    raise InvalidQuerySyntaxError(_key)
                logger.warning(f"Dropping query pair with malformed key '{_key}'")
                continue

            _insert(_query, _keys, urllib.parse.unquote(_raw_value))

        return _query

    def encode(self, query: QueryMapping) -> str:
        """Flatten a nested mapping into a percent-encoded query string"""
        return self._encode(query, None)

    def _encode(self, query: QueryMapping, prefix: str | None) -> str:
        _pairs: list[str] = []

        for key, value in query.items():
            _key = self._check_key(key)
            _full_key = f"{prefix}[{_key}]" if prefix else _key

            if isinstance(value, dict):
                if _nested := self._encode(value, _full_key):
                    _pairs.append(_nested)
            elif value is not None:
                _pairs.append(f"{_quote(_full_key)}={_quote(f'{value}')}")

        return "&".join(_pairs)

    def normalize(self, query: QueryMapping) -> QueryMapping:
        """Return a validated copy of a mapping with string leaves only.

        None leaves are removed and branches left empty are pruned.
        """
        _normalized: QueryMapping = {}
        for key, value in query.items():
            _key = self._check_key(key)
            if isinstance(value, dict):
                _normalized[_key] = self.normalize(value)
            elif value is not None:
                _normalized[_key] = f"{value}"
        return prune_query(_normalized)

    def merge(self, query: QueryMapping, updates: QueryMapping) -> QueryMapping:
        """Recursively merge updates into a copy of a query mapping.

        A None leaf in the updates deletes the matching key, a mapping
        replaces a plain value (and the reverse), and branches emptied by
        deletions are removed.
        """
        _merged = query_merger.merge(copy.deepcopy(query), copy.deepcopy(updates))
        return self.normalize(_merged)

    @classmethod
    def nullify(cls, query: QueryMapping) -> QueryMapping:
        """Copy of a mapping with every leaf replaced by None"""
        return {
            key: cls.nullify(value) if isinstance(value, dict) else None
            for key, value in query.items()
        }


def parse_query_string(query_string: str, strict: bool = True) -> QueryMapping:
    """Decode a query string into a nested mapping"""
    return QueryCodec(strict=strict).decode(query_string)


def to_query_string(query: QueryMapping) -> str:
    """Encode a nested mapping as a query string"""
    return QueryCodec().encode(query)


@functools.lru_cache
def default_codec() -> QueryCodec:
    """The application-wide codec, strict unless configured otherwise"""
    from urikit.config import load_configuration

    return QueryCodec(strict=load_configuration().query.strict)
