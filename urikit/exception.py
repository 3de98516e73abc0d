"""
urikit Exception Types
======================

Custom exceptions raised while constructing, mutating or rendering a URI.

"""


class UriError(Exception):
    """Base class for all urikit errors"""

    pass


class InvalidArgumentError(UriError, ValueError):
    """A URI could not be built from the given input"""

    pass


class MissingSchemeError(InvalidArgumentError):
    """No scheme was given and none could be inferred from the port"""

    def __init__(self, uri: str, port: str | int | None = None) -> None:
        super().__init__(
            f"Cannot determine scheme for '{uri}'"
            f"{f', no scheme is registered for port {port}' if port else ''}"
        )


class MissingPortError(InvalidArgumentError):
    """No port was given and the scheme has no well-known port"""

    def __init__(self, scheme: str) -> None:
        super().__init__(
            f"No port given and scheme '{scheme}' has no well-known port"
        )


class MissingHostError(InvalidArgumentError):
    """No host was given and the scheme has no implied default host"""

    def __init__(self, scheme: str | None) -> None:
        super().__init__(
            f"No host given and scheme '{scheme}' has no default host"
        )


class UnknownSchemeNoPortError(InvalidArgumentError):
    """A relative reference switches to a scheme with no known port"""

    def __init__(self, scheme: str) -> None:
        super().__init__(
            f"Reference changes scheme to '{scheme}' but gives no port "
            "and the scheme has no well-known port"
        )


class PathEscapesRootError(InvalidArgumentError):
    """Dot-segment resolution rose above the root of the path"""

    def __init__(self, path: str, base_path: str) -> None:
        super().__init__(f"Path '{path}' rises above the root of '{base_path}'")


class InvalidQuerySyntaxError(InvalidArgumentError):
    """A query key does not follow the 'name[sub][sub]' grammar"""

    def __init__(self, key: str, extra: str | None = None) -> None:
        super().__init__(
            f"Invalid query key '{key}'{f', {extra}' if extra else ''}"
        )


class InvalidPortError(InvalidArgumentError):
    """A literal port is not an integer between 0 and 65535"""

    def __init__(self, port: str) -> None:
        super().__init__(f"Invalid port '{port}'")


class PortWithoutHostError(UriError, RuntimeError):
    """Rendering requested a port for a URI which has no host"""

    def __init__(self, port: int) -> None:
        super().__init__(
            f"Cannot render port {port} for a URI which has no host"
        )
