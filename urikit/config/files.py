"""
urikit Config File Lists
========================

Contains lists of valid urikit configuration file names.

"""

CONFIG_FILE_NAMES: list[str] = ["urikit.toml", ".urikit.toml"]

PYPROJECT_FILE_NAME: str = "pyproject.toml"
