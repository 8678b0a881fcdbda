class PortalException(Exception):
    """Base exception for the organization portal"""

    pass


class UnauthorizedException(PortalException):
    """Raised when JWT validation fails"""

    pass


class NotFoundException(PortalException):
    """Raised when resource not found"""

    pass


class ForbiddenException(PortalException):
    """Raised when the caller lacks the permission for an operation"""

    pass


class ValidationException(PortalException):
    """Raised for business logic validation errors"""

    pass


class SystemGroupProtectedException(PortalException):
    """Raised when deleting or renaming a system permission group"""

    pass


class DuplicateMembershipException(PortalException):
    """Raised when a member is already assigned to a permission group"""

    pass


class DataServiceException(PortalException):
    """
    Raised when the underlying data store fails.

    Never converted into an empty or absent result: callers must treat it
    as "no decision" and retry.
    """

    pass
