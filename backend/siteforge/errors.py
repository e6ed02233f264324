"""Exception taxonomy shared by services and the HTTP layer."""


class SiteForgeError(Exception):
    """Base class for errors raised deliberately by siteforge code."""


class InvalidInputError(SiteForgeError):
    """A required field is missing or malformed."""

    def __init__(self, message: str, field: str | None = None):
        super().__init__(message)
        self.message = message
        self.field = field


class ProviderConfigurationError(SiteForgeError):
    """The selected provider has no usable credential."""


class ServiceUnavailableError(SiteForgeError):
    """An external provider could not be reached."""


class RateLimitedError(SiteForgeError):
    """An external provider asked us to slow down."""

    def __init__(self, message: str, retry_after: int = 60):
        super().__init__(message)
        self.retry_after = retry_after


class RequestTimeoutError(SiteForgeError):
    """The request exceeded its deadline."""


class GenerationError(SiteForgeError):
    """A generation step failed and has no degraded output to fall back to."""


class NotFoundError(SiteForgeError):
    """The requested entity does not exist."""
