"""
Custom exceptions for Vinylogue.
"""


class VinylogueError(Exception):
    """Base exception for Vinylogue."""
    http_status = 500

    @property
    def is_client_error(self) -> bool:
        """True when the caller, not the service, is at fault."""
        return 400 <= self.http_status < 500


class InvalidInputError(VinylogueError):
    """Exception raised when a query is empty after sanitization."""
    http_status = 400


class NotFoundError(VinylogueError):
    """Exception raised when the catalog search yields no match."""
    http_status = 404


class AuthFailure(VinylogueError):
    """Exception raised when the token exchange exhausted its retries."""
    http_status = 502


class UpstreamError(VinylogueError):
    """Exception raised when the catalog service answers with a failure."""
    http_status = 502

    def __init__(self, message: str, status_code: int = None):
        super().__init__(message)
        self.status_code = status_code


class RenderError(VinylogueError):
    """Exception raised when drawing or encoding a card fails."""
    http_status = 500


class ConfigurationError(VinylogueError):
    """Exception raised when configuration is invalid."""
    pass
