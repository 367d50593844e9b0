class ServiceError(Exception):
    """Base class for errors raised by the recommendation service."""


class InvalidInputError(ServiceError):
    """A required field is missing or malformed. Raised before any side effect."""


class QuotaExceededError(ServiceError):
    """The caller has used up today's request allowance."""


class MissingCredentialError(ServiceError):
    """The generative backend has no API key configured."""


class BackendRequestError(ServiceError):
    """The generative backend call failed or returned something unusable."""
