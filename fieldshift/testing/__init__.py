"""Testing utilities for fieldshift.

This module provides an in-memory content store, document factories
and test settings so migrations can be exercised without network access.

``DocumentFactory`` and the pytest fixtures need Faker, which is installed
with the ``test`` extra (``pip install fieldshift[test]``). The factory is
loaded on first access, so the store and settings helpers work without it.

Usage in conftest.py:
    pytest_plugins = ["fieldshift.testing.fixtures"]
"""

from fieldshift.testing.mocks import InMemoryContentStore, mock_content_store
from fieldshift.testing.utils import create_test_settings

__all__ = [
    "DocumentFactory",
    "InMemoryContentStore",
    "mock_content_store",
    "create_test_settings",
]


def __getattr__(name):
    if name == "DocumentFactory":
        from fieldshift.testing.factories import DocumentFactory

        return DocumentFactory
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
