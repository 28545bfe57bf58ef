"""Batch migration runner for fieldshift."""

import logging
from typing import List

from fieldshift.core.client import ContentStoreProtocol
from fieldshift.core.exceptions import MigrationConfigurationError
from fieldshift.core.settings import DEFAULT_BATCH_SIZE
from fieldshift.migrations.base import CandidateDocument, MigrationReport, Patch
from fieldshift.migrations.operations import RenameField

logger = logging.getLogger(__name__)


class MigrationRunner:
    """Runs a field rename against the content store in batches.

    Each iteration fetches up to ``batch_size`` documents that still have
    the source field, turns them into revision-guarded patches and commits
    them in one transaction. The loop ends when the fetch comes back empty.

    If any document changes between fetch and commit, the store rejects the
    whole transaction and ``RevisionConflictError`` propagates out of
    ``run()``. Nothing is retried here: re-running the migration is safe,
    since migrated documents are no longer selected and conflicting ones
    are fetched again with their new revision.

    The loop has no iteration or time limit of its own. It stops only once
    the candidate query returns no documents.
    """

    def __init__(
        self,
        client: ContentStoreProtocol,
        operation: RenameField,
        batch_size: int = DEFAULT_BATCH_SIZE,
        dry_run: bool = False,
    ):
        """Initialize the migration runner.

        Args:
            client: The content store client to use
            operation: The rename to perform
            batch_size: Maximum documents per transaction
            dry_run: Log the first batch without committing it
        """
        if batch_size < 1:
            raise MigrationConfigurationError("Batch size must be at least 1")
        self.client = client
        self.operation = operation
        self.batch_size = batch_size
        self.dry_run = dry_run

    async def fetch_batch(self) -> List[CandidateDocument]:
        """Fetch the next documents still in the pre-migration shape."""
        query, params = self.operation.candidate_query(self.batch_size)
        records = await self.client.fetch(query, params)
        return [self.operation.to_candidate(record) for record in records or []]

    def build_patches(self, candidates: List[CandidateDocument]) -> List[Patch]:
        return [self.operation.build_patch(candidate) for candidate in candidates]

    async def commit_batch(self, patches: List[Patch]) -> dict:
        """Commit patches as a single atomic transaction.

        Raises:
            RevisionConflictError: If any document changed since it was fetched
        """
        transaction = self.client.transaction()
        for patch in patches:
            transaction.patch(
                patch.id,
                set=patch.set,
                unset=patch.unset,
                if_revision_id=patch.if_revision_id,
            )
        return await transaction.commit()

    async def count_remaining(self) -> int:
        """Count documents that still need migrating."""
        query, params = self.operation.count_query()
        return int(await self.client.fetch(query, params) or 0)

    async def migrate_next_batch(self) -> int:
        """Migrate one batch.

        Returns:
            Number of documents migrated, 0 once no candidates remain
        """
        candidates = await self.fetch_batch()
        patches = self.build_patches(candidates)
        if not patches:
            logger.info("No more documents to migrate!")
            return 0

        logger.info(
            "Migrating batch:\n %s",
            "\n".join(patch.describe() for patch in patches),
        )

        if self.dry_run:
            logger.info("Dry run: %d patch(es) not committed", len(patches))
            return len(patches)

        await self.commit_batch(patches)
        return len(patches)

    async def run(self) -> MigrationReport:
        """Migrate batches until no candidate documents remain.

        Returns:
            Summary of what was migrated
        """
        report = MigrationReport(
            document_type=self.operation.document_type,
            source_field=self.operation.source_field,
            target_field=self.operation.target_field,
            dry_run=self.dry_run,
        )
        logger.debug("Starting migration %s", self.operation)

        while True:
            migrated = await self.migrate_next_batch()
            if migrated == 0:
                break
            report.record_batch(migrated)
            if self.dry_run:
                # Nothing was committed, so the next fetch would repeat this batch
                break

        return report.finish()
