"""
urikit Configuration File Model
===============================

Pydantic model for the urikit TOML configuration file

"""

import functools
import logging
import os
import pathlib

import pydantic
import toml

import urikit.utilities as uk_util
from urikit.config.files import CONFIG_FILE_NAMES, PYPROJECT_FILE_NAME
from urikit.config.parameters import (
    ClientGeneralOptions,
    QuerySpecifications,
    SchemeSpecifications,
)

logger = logging.getLogger(__name__)


class UriConfiguration(pydantic.BaseModel):
    model_config = pydantic.ConfigDict(extra="forbid")
    client: ClientGeneralOptions = ClientGeneralOptions()
    query: QuerySpecifications = QuerySpecifications()
    schemes: SchemeSpecifications = SchemeSpecifications()

    @classmethod
    def _load_pyproject_configs(cls) -> dict | None:
        """Recover any urikit configurations from pyproject.toml"""
        _pyproject_toml = uk_util.find_first_instance_of_file(
            file_names=[PYPROJECT_FILE_NAME], check_user_space=False
        )

        if not _pyproject_toml:
            return None

        _project_data = toml.load(_pyproject_toml)

        return _project_data.get("tool", {}).get("urikit")

    @classmethod
    @uk_util.prettify_pydantic
    def fetch(
        cls,
        debug: bool | None = None,
        strict_query: bool | None = None,
    ) -> "UriConfiguration":
        """Retrieve the urikit configuration

        Settings are ranked:
        Arguments > Environment Variables > Configuration File > pyproject.toml

        Parameters
        ----------
        debug : bool, optional
            override the debug setting for this session
        strict_query : bool, optional
            override the malformed query key policy for this session

        Return
        ------
        UriConfiguration
            object containing configurations

        Raises
        ------
        RuntimeError
            if the configuration values are invalid
        """
        _config_dict: dict[str, dict] = cls._load_pyproject_configs() or {}

        try:
            _config_dict |= toml.load(cls.config_file())
        except FileNotFoundError:
            logger.debug("No config file found, checking environment variables")

        _config_dict["client"] = _config_dict.get("client", {})
        _config_dict["query"] = _config_dict.get("query", {})

        if (_debug := os.environ.get("URIKIT_DEBUG")) is not None:
            _config_dict["client"]["debug"] = _debug

        if (_strict := os.environ.get("URIKIT_STRICT_QUERY")) is not None:
            _config_dict["query"]["strict"] = _strict

        if debug is not None:
            _config_dict["client"]["debug"] = debug

        if strict_query is not None:
            _config_dict["query"]["strict"] = strict_query

        return UriConfiguration(**_config_dict)

    @classmethod
    @functools.lru_cache
    def config_file(cls) -> pathlib.Path:
        """Returns the path of top level configuration file used for the session"""
        _config_file: pathlib.Path | None = uk_util.find_first_instance_of_file(
            CONFIG_FILE_NAMES, check_user_space=True
        )

        if not _config_file:
            raise FileNotFoundError("Failed to find urikit configuration file")

        return _config_file


@functools.lru_cache
def load_configuration() -> UriConfiguration:
    """Configuration shared by the application-wide registry and codec.

    Read once per process; enabling debug in the configuration sets the
    'urikit' logger to DEBUG.
    """
    _config = UriConfiguration.fetch()

    if _config.client.debug:
        logging.getLogger("urikit").setLevel(logging.DEBUG)

    return _config
