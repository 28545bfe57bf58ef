"""Pytest fixtures for fieldshift testing.

To use these fixtures, add to your conftest.py:

    pytest_plugins = ["fieldshift.testing.fixtures"]
"""

import pytest

from fieldshift.core.settings import StoreSettings
from fieldshift.migrations.operations import RenameField
from fieldshift.testing.factories import DocumentFactory
from fieldshift.testing.mocks import InMemoryContentStore
from fieldshift.testing.utils import create_test_settings


@pytest.fixture
def store_settings() -> StoreSettings:
    """Provide test settings for fieldshift."""
    return create_test_settings()


@pytest.fixture
def content_store() -> InMemoryContentStore:
    """Provide an in-memory content store."""
    store = InMemoryContentStore()
    yield store
    store.clear()


@pytest.fixture
def rename_operation() -> RenameField:
    """Provide the default post.body -> post.excerpt rename."""
    return RenameField("post", "body", "excerpt")


@pytest.fixture
def post_factory() -> DocumentFactory:
    """Provide a seeded factory for ``post`` documents."""
    return DocumentFactory("post", seed=1234)


@pytest.fixture
def clean_env(monkeypatch):
    """Remove fieldshift and Sanity variables from the environment."""
    for name in (
        "SANITY_STUDIO_PROJECT_ID",
        "SANITY_STUDIO_PROJECT_DATASET",
        "SANITY_STUDIO_PROJECT_TOKEN",
        "SANITY_API_VERSION",
        "SANITY_API_HOST",
        "FIELDSHIFT_DOCUMENT_TYPE",
        "FIELDSHIFT_SOURCE_FIELD",
        "FIELDSHIFT_TARGET_FIELD",
        "FIELDSHIFT_BATCH_SIZE",
    ):
        monkeypatch.delenv(name, raising=False)
    return monkeypatch
