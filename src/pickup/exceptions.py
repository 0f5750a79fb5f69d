"""Error taxonomy for the pickup service.

Field-level problems are reported with ``protean.exceptions.ValidationError``
and missing records with ``protean.exceptions.ObjectNotFoundError``, the way
the domain model already does. The classes below cover the remaining
failure kinds; each carries the short ``code`` that the HTTP layer puts in
the ``error`` slot of the response envelope.
"""


class PickupError(Exception):
    """Base class for service-level failures."""

    status_code = 500
    default_code = "INTERNAL_ERROR"

    def __init__(self, code: str | None = None, message: str | None = None) -> None:
        self.code = code or self.default_code
        self.message = message or self.code
        super().__init__(self.message)


class ConfigurationError(PickupError):
    """A required secret or setting is missing."""

    status_code = 500
    default_code = "SERVER_CONFIG_ERROR"


class AuthenticationError(PickupError):
    """No valid principal could be resolved, or a signature did not verify."""

    status_code = 401
    default_code = "UNAUTHORIZED"


class AuthorizationError(PickupError):
    """The principal is known but is not allowed to act on this order."""

    status_code = 403
    default_code = "FORBIDDEN"


class UpstreamError(PickupError):
    """The payment gateway or push channel failed."""

    status_code = 502
    default_code = "UPSTREAM_ERROR"
