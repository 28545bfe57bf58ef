"""Field rename migrations for fieldshift.

Documents are migrated in batches, each committed as one transaction
guarded by per-document revision checks.
"""

from fieldshift.migrations.base import (
    CandidateDocument,
    DocumentRef,
    MigrationReport,
    Patch,
)
from fieldshift.migrations.operations import RenameField
from fieldshift.migrations.runner import MigrationRunner

__all__ = [
    "CandidateDocument",
    "DocumentRef",
    "MigrationReport",
    "MigrationRunner",
    "Patch",
    "RenameField",
]
