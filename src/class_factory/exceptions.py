"""Exceptions for class-factory."""


class FactoryError(Exception):
    """Base exception for factory-related errors."""
    pass


class KeyDerivationError(FactoryError):
    """Exception raised when no registration key can be derived for a class."""
    pass


class AttachError(FactoryError):
    """Exception raised when attaching would overwrite an existing attribute."""
    pass
