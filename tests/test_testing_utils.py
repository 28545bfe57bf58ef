"""Tests for testing utilities module."""

import subprocess
import sys

import pytest

from fieldshift.core.exceptions import RevisionConflictError, StoreOperationError
from fieldshift.testing.factories import DocumentFactory
from fieldshift.testing.mocks import InMemoryContentStore, mock_content_store
from fieldshift.testing.utils import create_test_settings


class TestInMemoryContentStore:
    """Tests for InMemoryContentStore mock."""

    @pytest.fixture
    def store(self):
        store = InMemoryContentStore()
        store.create({"_id": "p1", "_type": "post", "body": "one", "title": "a"})
        store.create({"_id": "p2", "_type": "post", "title": "b"})
        store.create({"_id": "p3", "_type": "post", "body": "three"})
        store.create({"_id": "a1", "_type": "author", "body": "bio"})
        return store

    def test_create_assigns_revision(self):
        """Test created documents get an ID and revision."""
        store = InMemoryContentStore()

        doc = store.create({"_type": "post"})

        assert doc["_id"]
        assert doc["_rev"]
        assert store.get(doc["_id"]) == doc

    @pytest.mark.asyncio
    async def test_fetch_filter_slice_projection(self, store):
        """Test the candidate query shape is evaluated."""
        result = await store.fetch(
            "*[_type == $type && defined(body)][0...1] {_id, body}",
            {"type": "post"},
        )

        assert result == [{"_id": "p1", "body": "one"}]

    @pytest.mark.asyncio
    async def test_fetch_inclusive_slice(self, store):
        """Test the two-dot slice includes its end index."""
        result = await store.fetch("*[_type == 'post'][0..1] {_id}")

        assert result == [{"_id": "p1"}, {"_id": "p2"}]

    @pytest.mark.asyncio
    async def test_fetch_not_defined(self, store):
        """Test !defined() selects documents without the field."""
        result = await store.fetch("*[!defined(body)] {_id}")

        assert result == [{"_id": "p2"}]

    @pytest.mark.asyncio
    async def test_fetch_full_documents(self, store):
        """Test a query without projection returns whole documents."""
        result = await store.fetch('*[_type == "author"]')

        assert result[0]["body"] == "bio"
        assert result[0]["_rev"]

    @pytest.mark.asyncio
    async def test_count(self, store):
        """Test count() returns the number of matches."""
        assert await store.fetch("count(*[_type == $type && defined(body)])", {"type": "post"}) == 2

    @pytest.mark.asyncio
    async def test_missing_param(self, store):
        """Test referencing an unknown param is rejected."""
        with pytest.raises(StoreOperationError):
            await store.fetch("*[_type == $type]")

    @pytest.mark.asyncio
    async def test_unsupported_query(self, store):
        """Test queries outside the supported subset are rejected."""
        with pytest.raises(StoreOperationError):
            await store.fetch("*[title match 'a*']")

    @pytest.mark.asyncio
    async def test_transaction_applies_patches(self, store):
        """Test committed patches set, unset and bump the revision."""
        before = store.get("p1")

        await (
            store.transaction()
            .patch("p1", set={"excerpt": "one"}, unset=["body"], if_revision_id=before["_rev"])
            .commit()
        )

        after = store.get("p1")
        assert after["excerpt"] == "one"
        assert "body" not in after
        assert after["title"] == "a"
        assert after["_rev"] != before["_rev"]
        assert store.commit_count == 1

    @pytest.mark.asyncio
    async def test_transaction_is_atomic(self, store):
        """Test one stale revision rejects every patch in the transaction."""
        p1 = store.get("p1")
        p3 = store.get("p3")
        store.touch("p3", title="changed")

        tx = store.transaction()
        tx.patch("p1", set={"excerpt": "x"}, unset=["body"], if_revision_id=p1["_rev"])
        tx.patch("p3", set={"excerpt": "y"}, unset=["body"], if_revision_id=p3["_rev"])

        with pytest.raises(RevisionConflictError) as exc_info:
            await tx.commit()

        assert exc_info.value.document_ids == ["p3"]
        assert store.get("p1") == p1
        assert store.get("p3")["body"] == "three"
        assert store.commit_count == 0

    @pytest.mark.asyncio
    async def test_patch_missing_document(self, store):
        """Test patching an unknown document fails."""
        with pytest.raises(StoreOperationError) as exc_info:
            await store.transaction().patch("missing", set={"x": 1}).commit()

        assert exc_info.value.status_code == 404

    def test_touch_changes_revision(self, store):
        """Test touch simulates an outside edit."""
        before = store.get("p2")

        after = store.touch("p2", title="new")

        assert after["title"] == "new"
        assert after["_rev"] != before["_rev"]

    def test_mock_content_store_context(self):
        """Test the context manager clears the store on exit."""
        with mock_content_store() as store:
            store.create({"_id": "x", "_type": "post"})
            assert store.get("x") is not None

        assert store.all_documents() == []


class TestDocumentFactory:
    """Tests for DocumentFactory."""

    def test_build(self):
        """Test a built document has the type and a body."""
        doc = DocumentFactory("post").build()

        assert doc["_type"] == "post"
        assert doc["_id"].startswith("post-")
        assert isinstance(doc["body"], str) and doc["body"]

    def test_build_overrides(self):
        """Test overrides replace values and None drops fields."""
        factory = DocumentFactory("post", defaults={"status": "draft"})

        doc = factory.build(title="Fixed", body=None)

        assert doc["title"] == "Fixed"
        assert doc["status"] == "draft"
        assert "body" not in doc

    def test_build_batch_unique_ids(self):
        """Test batch documents get distinct IDs."""
        docs = DocumentFactory("post").build_batch(20)

        assert len({d["_id"] for d in docs}) == 20


class TestCreateTestSettings:
    """Tests for create_test_settings."""

    def test_defaults(self):
        """Test default test settings are complete."""
        settings = create_test_settings()

        assert settings.missing_fields() == []
        assert settings.api_version == "2023-03-01"

    def test_overrides(self):
        """Test overrides are applied."""
        settings = create_test_settings(batch_size=10, api_version="v2024-01-01")

        assert settings.batch_size == 10
        assert settings.api_version == "2024-01-01"


class TestTestingPackage:
    """Tests for the fieldshift.testing package exports."""

    def test_document_factory_export(self):
        """Test the factory is reachable from the package."""
        import fieldshift.testing

        assert fieldshift.testing.DocumentFactory is DocumentFactory

    def test_import_does_not_load_faker(self):
        """Test importing the package leaves Faker unloaded until needed."""
        result = subprocess.run(
            [
                sys.executable,
                "-c",
                "import sys, fieldshift.testing; print('faker' in sys.modules)",
            ],
            capture_output=True,
            text=True,
            check=True,
        )

        assert result.stdout.strip() == "False"
