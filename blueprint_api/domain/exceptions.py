from __future__ import annotations

from enum import StrEnum


class ErrorKind(StrEnum):
    CLIENT_INPUT = "client_input"
    CONFIGURATION = "configuration"
    UPSTREAM_TRANSPORT = "upstream_transport"
    UPSTREAM_AUTH = "upstream_auth"
    UPSTREAM_CONTENT = "upstream_content"


class BlueprintError(Exception):
    """Base for every failure that ends a blueprint request.

    Subclasses fix the error kind and the HTTP status the edge should use; the
    message is safe to show to the caller.
    """

    kind: ErrorKind = ErrorKind.CONFIGURATION
    status_code: int = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ClientInputError(BlueprintError):
    """Raised when the caller sent an unusable prompt."""

    kind = ErrorKind.CLIENT_INPUT
    status_code = 400


class ConfigurationError(BlueprintError):
    """Raised for local problems: missing credentials or an unbuildable request."""

    kind = ErrorKind.CONFIGURATION
    status_code = 500


class UpstreamTransportError(BlueprintError):
    """Raised when the upstream call or its envelope is unusable."""

    kind = ErrorKind.UPSTREAM_TRANSPORT
    status_code = 502


class UpstreamUnreachableError(UpstreamTransportError):
    pass


class UpstreamUnreadableError(UpstreamTransportError):
    pass


class UpstreamUnparsableError(UpstreamTransportError):
    pass


class UpstreamStatusError(UpstreamTransportError):
    """Upstream answered with a non-auth error status."""


class UpstreamAuthError(BlueprintError):
    """Upstream rejected our credentials (401/403)."""

    kind = ErrorKind.UPSTREAM_AUTH
    status_code = 401


class UpstreamContentError(BlueprintError):
    """Upstream answered successfully but the model output is unusable."""

    kind = ErrorKind.UPSTREAM_CONTENT
    status_code = 502


class NoCompletionError(UpstreamContentError):
    pass


class EmptyModelOutputError(UpstreamContentError):
    pass


class InvalidModelJSONError(UpstreamContentError):
    pass


class InvalidBlueprintError(UpstreamContentError):
    pass
