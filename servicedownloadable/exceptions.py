"""
Error taxonomy of the downloadable service.

Every error carries the HTTP status it is rendered with; the handler
registered in ``main`` turns them into ``{"detail": message}`` bodies.
"""


class ServiceDownloadableError(Exception):
    status_code = 400

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class ValidationError(ServiceDownloadableError):
    """Required input is missing."""
    status_code = 400


class NotFoundError(ServiceDownloadableError):
    """Product or order does not exist, or is not visible to the requester."""
    status_code = 404


class ConfigurationError(ServiceDownloadableError):
    """Product or order config lacks the file reference."""
    status_code = 400


class BusinessRuleError(ServiceDownloadableError):
    """Order exists but its state does not grant access."""
    status_code = 403


class ServiceUnavailableError(ServiceDownloadableError):
    """File is referenced in the database but missing from the upload root."""
    status_code = 404
