"""
core/exceptions.py - Central module for custom exception classes.
"""


class DomainError(Exception):
    """
    Base class for domain-specific exceptions with a unified error message format.
    """

    def __init__(self, message: str):
        super().__init__(f"[DomainError] {message}")


class ConfigurationError(DomainError):
    """Raised when the command handler is constructed with invalid arguments."""

    pass


class RegistrationError(DomainError):
    """Raised for invalid command / sink registration or registration after freeze."""

    pass


class CommandError(Exception):
    """Base class for errors handed to a command's failure handler."""

    pass


class MissingPermissionError(CommandError):
    """Raised when the invoking user may not run the resolved command."""

    def __init__(self, message: str = "Missing permission."):
        super().__init__(message)


class PermissionCheckError(DomainError):
    """Raised when the permission provider itself fails or times out."""

    def __init__(self, command: str, reason: str = "provider failed"):
        super().__init__(f"permission check for '{command}' failed: {reason}")
        self.command = command
        self.reason = reason


class StoreError(DomainError):
    """Raised when the guild configuration store backend fails."""

    def __init__(self, backend: str = "store", reason: str = "operation failed"):
        super().__init__(f"{backend}: {reason}")
        self.backend = backend
        self.reason = reason
