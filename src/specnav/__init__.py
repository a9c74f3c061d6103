"""specnav -- Explore OpenAPI 3.x specifications from the terminal.

This package loads one or more OpenAPI documents, indexes their operations
into a tag tree, resolves ``$ref`` pointers on demand and lets users search,
filter and inspect operations.

Typical workflow::

    specnav tree petstore.json
    specnav search pet petstore.json
    specnav show petstore.json GET /pets/{petId}

Modules:
    app: Typer application and CLI entry point.
    models: Pydantic configuration models.
    config: XDG-aware configuration management.
    workspace: Session context owning documents, resolvers and caches.
    security: Effective security and privacy resolution.
    exceptions: Exception hierarchy with exit-code mapping.
    exit_codes: Numeric exit codes following clig.dev conventions.
    output: stdout/stderr formatting system with Rich support.
"""

__version__ = "0.3.0"
