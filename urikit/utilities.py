import functools
import json
import logging
import pathlib
import typing

import pydantic
import tabulate
from deepmerge import Merger

from urikit.models import QueryMapping

logger = logging.getLogger(__name__)


def find_first_instance_of_file(
    file_names: list[str] | str, check_user_space: bool = True
) -> pathlib.Path | None:
    """Locate the first of the given files in the working or home directory

    Parameters
    ----------
    file_names : list[str] | str
        candidate names of the file to locate, in order of preference
    check_user_space : bool, optional
        also look in the user's home directory if none of the
        files exist in the current working directory. Default is True.

    Returns
    -------
    pathlib.Path | None
        first matching file if found
    """
    if isinstance(file_names, str):
        file_names = [file_names]

    _search_dirs: list[pathlib.Path] = [pathlib.Path.cwd()]

    if check_user_space:
        _search_dirs.append(pathlib.Path.home())

    for directory in _search_dirs:
        for file_name in file_names:
            if (_candidate := directory.joinpath(file_name)).exists():
                return _candidate

    return None


def parse_pydantic_error(error: pydantic.ValidationError) -> str:
    """Format a pydantic validation error as a table"""
    out_table: list[list[typing.Any]] = []
    for data in json.loads(error.json()):
        _input_str = f"{data.get('input')}"
        if len(_input_str) > 50:
            _input_str = f"{_input_str[:47]}..."
        out_table.append(
            [
                _input_str,
                ".".join(f"{loc}" for loc in data["loc"]),
                data["type"],
                data["msg"],
            ]
        )
    err_table = tabulate.tabulate(
        out_table,
        headers=["Input", "Location", "Type", "Message"],
        tablefmt="fancy_grid",
    )
    return f"`{error.title}` Validation:\n{err_table}"


def prettify_pydantic(class_func: typing.Callable) -> typing.Callable:
    """Converts pydantic validation errors to a table

    Parameters
    ----------
    class_func : typing.Callable
        function to wrap

    Returns
    -------
    typing.Callable
        wrapped function

    Raises
    ------
    RuntimeError
        the formatted validation error
    """

    @functools.wraps(class_func)
    def wrapper(self, *args, **kwargs) -> typing.Any:
        try:
            return class_func(self, *args, **kwargs)
        except pydantic.ValidationError as e:
            error_str = parse_pydantic_error(e)
            raise RuntimeError(error_str)

    return wrapper


def ports_equal(first: int | bool | None, second: int | bool | None) -> bool:
    """Compare ports without letting the False sentinel equal port 0"""
    return isinstance(first, bool) == isinstance(second, bool) and first == second


def prune_query(query: QueryMapping) -> QueryMapping:
    """Return a copy of a query mapping without None leaves or empty branches"""
    _pruned: QueryMapping = {}
    for key, value in query.items():
        if isinstance(value, dict):
            if _branch := prune_query(value):
                _pruned[key] = _branch
        elif value is not None:
            _pruned[key] = value
    return _pruned


# Merge strategy for query mappings: nested mappings are merged key by key,
# anything else (including None and a type change) replaces the old value
query_merger = Merger(
    [(dict, ["merge"])],
    ["override"],
    ["override"],
)
