"""
Named class factory with pluggable construction and teardown hooks.

This module provides a small registry that maps string keys to classes and
builds instances of them on demand. It is meant for plugin-style code where
the concrete class is chosen at runtime by name (from a config file, a CLI
flag, a message payload) rather than imported directly.

Construction Strategies:
-----------------------
Factory.create() picks one of two strategies based on ``init_method``:

- ``init_method == ''``: the class is called with the configuration as its
  single positional argument, ``cls(config)``.
- ``init_method != ''``: the class is called with no arguments and the
  configuration is then passed to the instance method named ``init_method``,
  if the instance has one. This suits classes whose constructor must stay
  argument-free (declarative models, mixins that set defaults late).

Teardown Hooks:
--------------
Factory.unregister() and Factory.clear() accept the name of a class-level
hook (a staticmethod or classmethod). The hook is called with no arguments
before removal; returning exactly ``False`` keeps the class registered.
Classes without the hook are removed unconditionally.

Named Instances:
---------------
Factory.instance(name) returns a process-wide Factory per name, created on
first use and kept for the life of the process. The default name is ``''``.

Absence is never an error: looking up, creating or removing an unknown key
yields ``None`` or does nothing. Exceptions raised by the registered classes
themselves (constructors and hooks) propagate unchanged.
"""

import inspect
import logging
from typing import Any, Callable, Dict, Iterable, Iterator, Optional, Type, Union

from .exceptions import AttachError, KeyDerivationError

logger = logging.getLogger(__name__)

# Type aliases for clarity
RegistryDict = Dict[str, Type]
ClassDecorator = Callable[[Type], Type]

# Name accepted by Factory.attach() to expose the factory itself
FACTORY_ATTRIBUTE = 'factory'

# Default slot of the process-wide instance cache
DEFAULT_INSTANCE = ''

# Process-wide named factories, only reachable through Factory.instance()
_instances: Dict[str, 'Factory'] = {}


def _find_hook(target: Any, method: str) -> Optional[Callable]:
    """
    Look up an optional hook on a class or instance.

    Args:
        target: Object to probe (a registered class or one of its instances)
        method: Attribute name of the hook; empty means no hook

    Returns:
        The callable attribute, or None if it is missing or not callable
    """
    if not method:
        return None
    hook = getattr(target, method, None)
    return hook if callable(hook) else None


def _find_class_hook(cls: Any, method: str) -> Optional[Callable]:
    """
    Look up an optional hook callable on a class itself.

    Plain functions defined in the class body are instance methods and need
    an instance, so they are not hooks. staticmethods, classmethods and other
    callable class attributes are. Registered callables that are not classes
    (factory functions) are probed with a plain getattr().

    Args:
        cls: Registered class
        method: Attribute name of the hook; empty means no hook

    Returns:
        The callable to invoke with no arguments, or None
    """
    if not method:
        return None
    if not isinstance(cls, type):
        return _find_hook(cls, method)

    raw = inspect.getattr_static(cls, method, None)
    if raw is None or inspect.isfunction(raw):
        return None
    return _find_hook(cls, method)


def _class_name(cls: Any) -> str:
    return getattr(cls, '__qualname__', None) or repr(cls)


class Factory:
    """
    Registry of classes addressable by string key.

    Keys keep registration order. Registering an existing key replaces the
    stored class silently and does not run any teardown hook on the old one.

    Attributes:
        init_method: Name of the instance method that receives the
                     configuration in create(). Empty (the default) passes
                     the configuration to the constructor instead.
        name: Label used in log messages; set to the slot name for factories
              obtained through instance().

    Usage:
        factory = Factory()
        factory.register('disk', DiskStorage)
        storage = factory.create('disk', {'root': '/tmp'})

        # Shared factory for the whole process
        Factory.instance('storage').register('', MemoryStorage)
    """

    def __init__(self, init_method: str = '', name: str = ''):
        self.init_method = init_method
        self.name = name
        self._registry: RegistryDict = {}

    def __contains__(self, key: object) -> bool:
        return key in self._registry

    def __len__(self) -> int:
        return len(self._registry)

    def __iter__(self) -> Iterator[str]:
        return iter(self._registry)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r}, keys={list(self._registry)})"

    @property
    def _label(self) -> str:
        return f"factory '{self.name}'" if self.name else "factory"

    def register(self, key: str, cls: Type) -> None:
        """
        Register a class under a key.

        Args:
            key: Registration key. If empty, the class ``__name__`` is used.
            cls: Class (or any callable) to register

        Raises:
            KeyDerivationError: If key is empty and cls has no ``__name__``
        """
        key = key or getattr(cls, '__name__', None)
        if not key:
            raise KeyDerivationError(
                f"Cannot derive a registration key for {cls!r} - pass an explicit key"
            )

        previous = self._registry.get(key)
        if previous is not None and previous is not cls:
            logger.debug(
                f"Replacing {_class_name(previous)} with {_class_name(cls)} as '{key}' in {self._label}"
            )

        self._registry[key] = cls
        logger.debug(f"Registered {_class_name(cls)} as '{key}' in {self._label}")

    def register_class(self, key: str = '') -> ClassDecorator:
        """
        Decorator form of register().

        Examples:
            @factory.register_class('disk')
            class DiskStorage:
                ...

            @factory.register_class()  # registered as 'MemoryStorage'
            class MemoryStorage:
                ...
        """
        def decorator(cls: Type) -> Type:
            self.register(key, cls)
            return cls

        return decorator

    def get(self, key: str) -> Optional[Type]:
        """Return the class registered under key, or None."""
        return self._registry.get(key)

    def registry(self) -> RegistryDict:
        """Return a shallow copy of the key to class mapping."""
        return dict(self._registry)

    def create(self, key_or_cls: Union[str, Type, None] = None, config: Any = None) -> Any:
        """
        Create an instance of a registered class.

        Args:
            key_or_cls: Registration key, or a class to instantiate directly
            config: Configuration handed to the constructor, or to the
                    ``init_method`` of the new instance when one is set

        Returns:
            The new instance, or None if key_or_cls does not resolve to a
            callable (unknown key, None, or any other non-callable value)
        """
        if isinstance(key_or_cls, str):
            cls = self.get(key_or_cls)
        else:
            cls = key_or_cls

        if not callable(cls):
            logger.debug(f"Nothing to create for {key_or_cls!r} in {self._label}")
            return None

        init_method = self.init_method
        if init_method:
            instance = cls()
            initializer = _find_hook(instance, init_method)
            if initializer is not None:
                initializer(config)
        else:
            instance = cls(config)

        return instance

    def unregister(self, key: str, method: str = '') -> None:
        """
        Remove a class from the registry.

        Unknown keys are ignored. When ``method`` names a staticmethod,
        classmethod or other class-level callable of the registered class it
        is called with no arguments first; a return value of exactly
        ``False`` keeps the class registered. An instance method of that
        name is not a hook and the class is removed without calling it.
        Exceptions from the hook propagate and leave the class registered.

        Args:
            key: Registration key
            method: Optional name of the teardown hook on the class
        """
        registry = self._registry
        if key not in registry:
            return

        cls = registry[key]
        hook = _find_class_hook(cls, method)
        if hook is not None and hook() is False:
            logger.debug(f"{_class_name(cls)}.{method}() kept '{key}' in {self._label}")
            return

        # The hook may already have removed the key
        registry.pop(key, None)
        logger.debug(f"Unregistered '{key}' from {self._label}")

    def clear(self, method: str = '') -> None:
        """
        Unregister every class, optionally running a teardown hook on each.

        Keys are visited in registration order over a snapshot taken before
        the first removal, so each hook runs once per key present at call
        time. Classes whose hook returns ``False`` stay registered.

        Args:
            method: Optional name of the teardown hook, see unregister()
        """
        for key in list(self._registry):
            self.unregister(key, method)

    def attach(self, obj: Any, methods: Iterable[str] = ('create', 'register')) -> None:
        """
        Expose factory methods on another object.

        Each name in ``methods`` that is a public callable of this factory is
        set on ``obj`` as a bound method. The special name ``'factory'`` sets
        a back-reference to the factory itself. Other names are skipped.

        Args:
            obj: Object receiving the attributes; None is ignored
            methods: Names of the methods to expose

        Raises:
            AttachError: If obj already has an attribute with one of the
                         names. Nothing is attached in that case.
        """
        if obj is None:
            return

        attributes = {}
        for method in methods:
            if method == FACTORY_ATTRIBUTE:
                value = self
            elif method.startswith('_'):
                continue
            else:
                value = getattr(self, method, None)
                if not callable(value):
                    continue

            if hasattr(obj, method):
                raise AttachError(
                    f"{type(obj).__name__} already has an attribute named '{method}'"
                )
            attributes[method] = value

        for method, value in attributes.items():
            setattr(obj, method, value)

    @classmethod
    def instance(cls, name: Optional[str] = DEFAULT_INSTANCE) -> 'Factory':
        """
        Return the process-wide factory registered under ``name``.

        The factory is created on first access and reused afterwards. None
        and the empty string both address the default factory. Factory and
        all of its subclasses share one set of names.

        Args:
            name: Name of the factory

        Returns:
            The factory for ``name``. It is built by the class that made the
            first call for that name, so ``CustomFactory.instance(name)``
            returns a plain Factory if ``Factory.instance(name)`` ran first.
        """
        name = name or DEFAULT_INSTANCE
        factory = _instances.get(name)
        if factory is None:
            factory = cls(name=name)
            _instances[name] = factory
            logger.debug(f"Created {factory._label} instance")
        return factory
