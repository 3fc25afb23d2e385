"""Convert apidoc annotation output into an OpenAPI 3.0 document."""

__version__ = "0.1.0"
