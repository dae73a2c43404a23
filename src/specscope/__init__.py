"""specscope -- browse OpenAPI 3.x / Swagger 2.0 specs and build requests against them.

Load a spec from a URL, file or stdin, list its endpoints grouped by tag,
look at generated example bodies, and send requests with environment
variables and auth applied. Sent requests are kept in a local history.

Typical workflow::

    specscope load https://petstore3.swagger.io/api/v3/openapi.json
    specscope endpoints --group
    specscope send GET-/pet/{petId} -P petId=1

Modules:
    app: Typer application and CLI entry point.
    models: Pydantic models shared across the entire package.
    parser: Spec loading, ``$ref`` resolution and endpoint extraction.
    config: XDG-aware directories and global configuration.
    storage: Persistent key-value workspace store.
    exceptions: Exception hierarchy with exit-code mapping.
    output: stdout/stderr formatting system with Rich support.
"""

__version__ = "0.1.0"
