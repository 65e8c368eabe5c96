"""Domain errors raised by the station services.

Views translate these into HTTP responses; each carries the status code and
the short machine-readable `error` string returned to clients.
"""


class StationDomainError(Exception):
    """Base class for errors raised by the station services."""

    status_code = 400
    error_code = "bad_request"
    default_message = "Invalid request"

    def __init__(self, message: str = "") -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class NotFound(StationDomainError):
    status_code = 404
    error_code = "not_found"
    default_message = "Resource not found"


class StationNotFound(NotFound):
    default_message = "Station not found"


class ManagerNotFound(NotFound):
    default_message = "Manager not found"


class InvalidRole(StationDomainError):
    """The target user is not a station manager."""

    status_code = 422
    error_code = "invalid_role"
    default_message = "User is not a station manager"


class InactiveManager(StationDomainError):
    status_code = 422
    error_code = "inactive_user"
    default_message = "Cannot assign an inactive manager"


class NoActiveAssignment(StationDomainError):
    status_code = 404
    error_code = "no_active_manager"
    default_message = "Station has no active manager"


class InvalidDomainValue(StationDomainError):
    """A value failed a domain rule (negative price, out-of-range coordinate...)."""

    status_code = 422
    error_code = "invalid_value"
    default_message = "Invalid value"


class ManagerHasActiveAssignment(StationDomainError):
    status_code = 422
    error_code = "has_active_assignment"
    default_message = "Manager still has an active station assignment"
