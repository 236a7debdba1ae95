"""
class-factory: Named class registry with pluggable construction and teardown.

This package provides a factory that registers classes under string keys,
builds instances of them by name, and removes them through optional teardown
hooks. Process-wide named factories are available through Factory.instance().
"""

__version__ = "0.1.0"

from .core import Factory, FACTORY_ATTRIBUTE, DEFAULT_INSTANCE
from .exceptions import FactoryError, KeyDerivationError, AttachError

__all__ = [
    # Core
    "Factory",
    "FACTORY_ATTRIBUTE",
    "DEFAULT_INSTANCE",
    # Exceptions
    "FactoryError",
    "KeyDerivationError",
    "AttachError",
]
