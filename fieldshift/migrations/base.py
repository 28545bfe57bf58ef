"""Base types for fieldshift migrations."""

import json
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any


@dataclass(frozen=True)
class DocumentRef:
    """Identity of a document at a specific revision."""

    id: str
    rev: str


@dataclass(frozen=True)
class CandidateDocument:
    """A document still in the pre-migration shape.

    Attributes:
        ref: Document ID and the revision observed when it was fetched
        value: Content of the source field
    """

    ref: DocumentRef
    value: Any

    @property
    def id(self) -> str:
        return self.ref.id

    @property
    def rev(self) -> str:
        return self.ref.rev


@dataclass(frozen=True)
class Patch:
    """A guarded set/unset patch on a single document.

    The patch only applies if the document still has ``if_revision_id``;
    otherwise the store rejects the whole transaction it belongs to.
    """

    id: str
    set: dict[str, Any]
    unset: list[str]
    if_revision_id: str

    def body(self) -> dict[str, Any]:
        """Patch body in the store's mutation format."""
        return {
            "set": self.set,
            "unset": self.unset,
            "ifRevisionID": self.if_revision_id,
        }

    def to_mutation(self) -> dict[str, Any]:
        return {"patch": {"id": self.id, **self.body()}}

    def describe(self) -> str:
        """One-line description for the batch log, e.g. ``abc => {...}``."""
        return f"{self.id} => {json.dumps(self.body(), default=str)}"


@dataclass
class MigrationReport:
    """Summary of a migration run."""

    document_type: str
    source_field: str
    target_field: str
    batches: int = 0
    documents_migrated: int = 0
    dry_run: bool = False
    started_at: datetime = field(
        default_factory=lambda: datetime.now(timezone.utc)
    )
    finished_at: datetime | None = None

    def record_batch(self, size: int) -> None:
        self.batches += 1
        self.documents_migrated += size

    def finish(self) -> "MigrationReport":
        self.finished_at = datetime.now(timezone.utc)
        return self

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "document_type": self.document_type,
            "source_field": self.source_field,
            "target_field": self.target_field,
            "batches": self.batches,
            "documents_migrated": self.documents_migrated,
            "dry_run": self.dry_run,
            "started_at": self.started_at.isoformat(),
            "finished_at": self.finished_at.isoformat() if self.finished_at else None,
        }
