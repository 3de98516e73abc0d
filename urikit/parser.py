"""
URI Component Parser
====================

Splits a URI string into its raw (still percent-encoded) components.

"""

import logging
import re

from urikit.models import RawParts
from urikit.registry import RegistrySnapshot, SchemeRegistry

logger = logging.getLogger(__name__)

# Every part is optional so the pattern matches any string
GENERIC_PATTERN: re.Pattern = re.compile(
    r"^(?:(?P<scheme>[A-Za-z][A-Za-z0-9+.\-]*):)?"
    r"(?://(?P<host>[^/?#:]*)(?::(?P<port>[^/?#]*))?)?"
    r"(?P<path>[^?#]*)"
    r"(?:\?(?P<query>[^#]*))?"
    r"(?:#(?P<fragment>.*))?$",
    re.DOTALL,
)

_SCHEME_TOKEN: re.Pattern = re.compile(r"^([A-Za-z][A-Za-z0-9+.\-]*):")


class ComponentParser:
    """Parse URI strings using the generic pattern or a per-scheme override.

    Parameters
    ----------
    registry : SchemeRegistry | RegistrySnapshot
        source of the per-scheme override patterns
    """

    def __init__(self, registry: SchemeRegistry | RegistrySnapshot) -> None:
        self._registry = registry

    def _snapshot(self) -> RegistrySnapshot:
        if isinstance(self._registry, SchemeRegistry):
            return self._registry.snapshot()
        return self._registry

    @staticmethod
    def _apply(pattern: re.Pattern, uri: str) -> RawParts | None:
        if not (_match := pattern.match(uri)):
            return None
        _groups = _match.groupdict()
        return RawParts(
            **{
                part: _groups.get(part) or ""
                for part in ("scheme", "host", "port", "path", "query", "fragment")
            }
        )

    def parse(self, uri: str, base_scheme: str | None = None) -> RawParts:
        """Split a URI into raw components

        Parameters
        ----------
        uri : str
            the URI or relative reference to split
        base_scheme : str | None, optional
            scheme of the base the reference will be resolved against,
            used to select an override pattern when the reference
            has no scheme of its own

        Returns
        -------
        RawParts
            the six raw components, each possibly empty
        """
        uri = uri.strip()
        _snapshot = self._snapshot()

        if _scheme_match := _SCHEME_TOKEN.match(uri):
            _override = _snapshot.pattern_for(_scheme_match.group(1).lower())
        else:
            _override = _snapshot.pattern_for(base_scheme.lower() if base_scheme else None)

        if _override and (_parts := self._apply(_override, uri)):
            logger.debug(f"Parsed '{uri}' with override pattern '{_override.pattern}'")
            return _parts

        _parts = self._apply(GENERIC_PATTERN, uri)
        logger.debug(f"Parsed '{uri}' into {_parts!r}")
        return _parts
