import typing
import pydantic


SCHEME_REGEX: str = r"^[A-Za-z][A-Za-z0-9+.\-]*$"
QUERY_KEY_REGEX: str = r"^([^\[\]]+)((?:\[[^\[\]]+\])*)$"
MAX_PORT: int = 65535

# Characters left unescaped when rendering, as allowed by RFC 3986
PATH_SAFE_CHARS: str = "/:@!$&'()*+,;="
FRAGMENT_SAFE_CHARS: str = "/?:@!$&'()*+,;="

URI_PARTS: tuple[str, ...] = ("scheme", "host", "port", "path", "query", "fragment")

UriPart = typing.Literal["scheme", "host", "port", "path", "query", "fragment"]
SchemeString = typing.Annotated[
    str, pydantic.StringConstraints(pattern=SCHEME_REGEX, to_lower=True)
]
PortNumber = typing.Annotated[int, pydantic.Field(ge=0, le=MAX_PORT)]

# 'False' is the registry's "this scheme has no port", kept apart from 0
Port = PortNumber | typing.Literal[False]

QueryMapping = dict[str, typing.Any]


class RawParts(pydantic.BaseModel):
    """The six components of a URI string, still percent-encoded.

    Every slot is a string, empty when the component was not present.
    """

    model_config = pydantic.ConfigDict(frozen=True)
    scheme: str = ""
    host: str = ""
    port: str = ""
    path: str = ""
    query: str = ""
    fragment: str = ""

    def __str__(self) -> str:
        _out_str: str = f"{self.scheme}:" if self.scheme else ""
        if self.host or self.port:
            _out_str += f"//{self.host}"
        if self.port:
            _out_str += f":{self.port}"
        _out_str += self.path
        if self.query:
            _out_str += f"?{self.query}"
        if self.fragment:
            _out_str += f"#{self.fragment}"
        return _out_str


class ExplicitFlags(pydantic.BaseModel):
    """Records which of scheme, host and port came from literal input"""

    model_config = pydantic.ConfigDict(frozen=True)
    scheme: bool = False
    host: bool = False
    port: bool = False
