"""Custom exceptions for the Rentflow application."""


class RentflowException(Exception):
    """Base exception for Rentflow application."""

    pass


class ValidationError(RentflowException):
    """Raised when validation fails."""

    pass


class NotFoundError(RentflowException):
    """Raised when a resource is not found."""

    pass


class DatabaseError(RentflowException):
    """Raised when a database operation fails."""

    pass


class StorageUnavailableError(DatabaseError):
    """Raised when the database cannot be reached at all."""

    pass


class ServiceError(RentflowException):
    """Raised when a service operation fails."""

    pass


class ConfigurationError(RentflowException):
    """Raised when configuration is invalid."""

    pass
