"""Canonical Pydantic models shared across all specscope modules.

Every other module imports its data shapes from here. The models fall into
three groups:

**Parser output models** -- produced by :mod:`specscope.parser` and treated
as immutable value objects:
    :class:`HTTPMethod`, :class:`ParameterLocation`, :class:`Parameter`,
    :class:`RequestBody`, :class:`Response`, :class:`Endpoint`,
    :class:`SpecInfo`, the dialect variants :class:`OpenAPI3Dialect` and
    :class:`Swagger2Dialect`, and the pipeline result :class:`ParsedSpec`.

**Workspace models** -- JSON blobs persisted through
:mod:`specscope.storage`:
    :class:`EnvVariable`, :class:`AuthConfig`, :class:`BaseUrlConfig`,
    :class:`SavedSpec`, :class:`LastSpec`, :class:`HistoryEntry`.

**Request models** -- :class:`RequestDraft`, :class:`PreparedRequest` and
:class:`ApiResponse`, plus the on-disk :class:`GlobalConfig`.
"""

from __future__ import annotations

import enum
from datetime import datetime
from typing import Annotated, Any, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


# --- Parser Output Models ---


class HTTPMethod(str, enum.Enum):
    """The eight HTTP verbs recognised on an OpenAPI path item.

    Declaration order is the order in which the extractor visits a path
    item's operations.
    """

    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    PATCH = "PATCH"
    DELETE = "DELETE"
    OPTIONS = "OPTIONS"
    HEAD = "HEAD"
    TRACE = "TRACE"


class ParameterLocation(str, enum.Enum):
    """Locations where a request parameter can appear, per the ``in`` field."""

    PATH = "path"
    QUERY = "query"
    HEADER = "header"
    COOKIE = "cookie"


class Parameter(BaseModel):
    """A single normalized request parameter.

    ``required`` is always ``True`` for path parameters, whatever the source
    document says.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str
    location: ParameterLocation = Field(alias="in")
    description: Optional[str] = None
    required: bool = False
    type: str = "string"
    format: Optional[str] = None
    default: Any = None
    example: Any = None
    enum: Optional[list[Any]] = None


class RequestBody(BaseModel):
    """The (at most one) request body of an :class:`Endpoint`."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    description: Optional[str] = None
    required: bool = False
    content_type: Optional[str] = None
    schema_: Optional[dict[str, Any]] = Field(default=None, alias="schema")
    example: Any = None


class Response(BaseModel):
    """Declared response for one status key (``"200"``, ``"2XX"``, ``"default"``)."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    status_code: str
    description: str = ""
    content_type: Optional[str] = None
    schema_: Optional[dict[str, Any]] = Field(default=None, alias="schema")


class Endpoint(BaseModel):
    """One HTTP method + path template combination.

    ``id`` is ``"{METHOD}-{path}"``. Tags are stored exactly as declared; the
    ``"Untagged"`` bucket exists only in
    :func:`~specscope.parser.extractor.group_endpoints_by_tag`.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    method: HTTPMethod
    path: str
    operation_id: Optional[str] = None
    summary: Optional[str] = None
    description: Optional[str] = None
    tags: list[str] = Field(default_factory=list)
    parameters: list[Parameter] = Field(default_factory=list)
    request_body: Optional[RequestBody] = None
    responses: list[Response] = Field(default_factory=list)
    deprecated: bool = False


class ServerVariable(BaseModel):
    """A ``servers[].variables`` entry; only ``default`` is used for URLs."""

    model_config = ConfigDict(frozen=True)

    default: Optional[str] = None
    enum: Optional[list[str]] = None
    description: Optional[str] = None


class ServerInfo(BaseModel):
    """An OpenAPI 3 ``servers[]`` entry."""

    model_config = ConfigDict(frozen=True)

    url: str = ""
    description: Optional[str] = None
    variables: dict[str, ServerVariable] = Field(default_factory=dict)


class OpenAPI3Dialect(BaseModel):
    """Facts extracted from an OpenAPI 3.x document."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["openapi3"] = "openapi3"
    version: str
    servers: list[ServerInfo] = Field(default_factory=list)


class Swagger2Dialect(BaseModel):
    """Facts extracted from a Swagger 2.0 document."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["swagger2"] = "swagger2"
    version: str
    host: Optional[str] = None
    base_path: str = ""
    schemes: list[str] = Field(default_factory=list)
    consumes: list[str] = Field(default_factory=list)
    produces: list[str] = Field(default_factory=list)


Dialect = Annotated[
    Union[OpenAPI3Dialect, Swagger2Dialect], Field(discriminator="kind")
]


class SpecInfo(BaseModel):
    """The display-relevant root facts kept after the document is discarded."""

    title: str = "Untitled API"
    version: str = ""
    description: Optional[str] = None
    base_url: str = ""


class ParsedSpec(BaseModel):
    """Result of one pass of the normalization pipeline.

    See Also:
        :func:`specscope.parser.pipeline.parse_spec`
    """

    document: dict[str, Any]
    endpoints: list[Endpoint] = Field(default_factory=list)
    base_url: str = ""
    info: SpecInfo = Field(default_factory=SpecInfo)
    dialect: Dialect


# --- Workspace Models ---


class EnvVariable(BaseModel):
    """A user-defined template variable; disabled entries are ignored."""

    key: str
    value: str = ""
    enabled: bool = True


class AuthType(str, enum.Enum):
    """Supported auth strategies."""

    NONE = "none"
    BEARER = "bearer"
    API_KEY = "apiKey"
    BASIC = "basic"


class BearerAuth(BaseModel):
    token: str = ""


class ApiKeyAuth(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str = "X-API-Key"
    value: str = ""
    location: Literal["header", "query"] = Field(default="header", alias="in")


class BasicAuth(BaseModel):
    username: str = ""
    password: str = ""


class AuthConfig(BaseModel):
    """Auth settings; only the block matching ``type`` is applied."""

    model_config = ConfigDict(populate_by_name=True)

    type: AuthType = AuthType.NONE
    bearer: BearerAuth = Field(default_factory=BearerAuth)
    api_key: ApiKeyAuth = Field(default_factory=ApiKeyAuth, alias="apiKey")
    basic: BasicAuth = Field(default_factory=BasicAuth)


class BaseUrlConfig(BaseModel):
    """A named target server that overrides the spec's derived base URL."""

    id: str
    label: str
    url: str
    color: str = Field(default="#6b7280", description="Hex colour code")


class SavedSpec(BaseModel):
    """A spec document bookmarked under a label."""

    id: str
    label: str
    spec: dict[str, Any]
    source: str = ""
    base_url: str = ""
    saved_at: int = Field(description="Epoch milliseconds")


class LastSpec(BaseModel):
    """The current spec, restored by every command that needs endpoints."""

    spec: dict[str, Any]
    source: str = ""
    base_url: str = ""


# --- Request Models ---


class RequestDraft(BaseModel):
    """User-editable request state for one endpoint."""

    endpoint: Optional[Endpoint] = None
    path_params: dict[str, str] = Field(default_factory=dict)
    query_params: dict[str, str] = Field(default_factory=dict)
    headers: dict[str, str] = Field(default_factory=dict)
    body: str = ""
    content_type: str = "application/json"


class PreparedRequest(BaseModel):
    """A fully interpolated request ready for :class:`~specscope.client.RequestClient`."""

    method: HTTPMethod
    url: str
    path: str
    headers: dict[str, str] = Field(default_factory=dict)
    params: dict[str, str] = Field(default_factory=dict)
    body: Optional[str] = None


class ApiResponse(BaseModel):
    """Captured response of a sent request."""

    status: int
    status_text: str = ""
    headers: dict[str, str] = Field(default_factory=dict)
    body: Any = None
    raw_body: str = ""
    time: float = Field(default=0.0, description="Elapsed milliseconds")
    size: int = Field(default=0, description="Body size in bytes")
    timestamp: datetime = Field(default_factory=datetime.now)


class HistoryRequest(BaseModel):
    headers: dict[str, str] = Field(default_factory=dict)
    body: Optional[str] = None


class HistoryEntry(BaseModel):
    """One sent request with its response."""

    id: str
    timestamp: datetime
    method: HTTPMethod
    url: str
    path: str
    status: int
    time: float
    request: HistoryRequest = Field(default_factory=HistoryRequest)
    response: ApiResponse


# --- Configuration ---


class OutputConfig(BaseModel):
    """Default output format preferences."""

    format: str = Field(
        default="auto", description="Output format: auto, json, plain, rich"
    )


class RequestConfig(BaseModel):
    """HTTP settings for fetching specs and sending requests."""

    fetch_timeout: Optional[float] = Field(
        default=None, description="Spec fetch timeout in seconds (None = wait forever)"
    )
    timeout: float = Field(default=30.0, description="Request timeout in seconds")
    verify_ssl: bool = Field(default=True, description="Verify SSL certificates")


class HistoryConfig(BaseModel):
    """Retention limits for history and the recent-specs list."""

    max_entries: int = Field(default=50, description="History entries kept")
    max_recent_specs: int = Field(default=10, description="Recent spec URLs kept")


class GlobalConfig(BaseModel):
    """User-wide configuration persisted at ``~/.config/specscope/config.json``.

    See :func:`~specscope.config.resolve_config` for the precedence chain.
    """

    output: OutputConfig = Field(default_factory=OutputConfig)
    request: RequestConfig = Field(default_factory=RequestConfig)
    history: HistoryConfig = Field(default_factory=HistoryConfig)
