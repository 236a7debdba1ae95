"""Pytest configuration and fixtures for class_factory tests."""

import pytest

from class_factory import Factory


@pytest.fixture
def factory():
    """Fresh, empty factory using constructor configuration."""
    return Factory()


@pytest.fixture
def init_factory():
    """Fresh, empty factory that configures instances through ``init``."""
    return Factory(init_method='init')


@pytest.fixture
def teardown_calls():
    """
    Class with counting teardown hooks.

    Returns a ``(cls, calls)`` pair; ``calls`` lists the hook names in call
    order. ``destroy`` allows removal, ``nodestroy`` vetoes it.
    """
    calls = []

    class Disposable:
        @staticmethod
        def destroy():
            calls.append('destroy')

        @classmethod
        def nodestroy(cls):
            calls.append('nodestroy')
            return False

    return Disposable, calls
