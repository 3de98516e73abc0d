"""
urikit Configuration File Models
================================

Pydantic models for the sections of the urikit configuration file

"""

import logging

import pydantic

from urikit.models import Port, SchemeString

logger = logging.getLogger(__name__)


class ClientGeneralOptions(pydantic.BaseModel):
    debug: bool = False


class QuerySpecifications(pydantic.BaseModel):
    strict: bool = True


class SchemeSpecifications(pydantic.BaseModel):
    """Additions to the built-in scheme tables.

    Parameters
    ----------
    ports : dict[str, int | False], optional
        well-known port for each scheme, False for schemes without a port
    hosts : dict[str, str], optional
        host implied when a URI of the scheme omits one
    """

    ports: dict[SchemeString, Port] = pydantic.Field(default_factory=dict)
    hosts: dict[SchemeString, str] = pydantic.Field(default_factory=dict)

    @pydantic.field_validator("hosts")
    @classmethod
    def check_hosts_not_empty(cls, hosts: dict[str, str]) -> dict[str, str]:
        if _empty := [scheme for scheme, host in hosts.items() if not host]:
            raise AssertionError(f"Default host for schemes {_empty} is empty")
        return hosts
