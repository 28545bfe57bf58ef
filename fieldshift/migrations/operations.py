"""The field rename operation."""

import re
from dataclasses import dataclass
from typing import Any

from fieldshift.core.exceptions import MigrationConfigurationError
from fieldshift.migrations.base import CandidateDocument, DocumentRef, Patch

# Plain attribute names only; the field names are interpolated into queries
FIELD_NAME_PATTERN = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")
DOCUMENT_TYPE_PATTERN = re.compile(r"^[A-Za-z_][A-Za-z0-9_.\-]*$")


@dataclass(frozen=True)
class RenameField:
    """Rename a field on every document of one type.

    A document is a candidate while its source field is defined. Once
    patched, the source field is gone, so the document no longer matches
    the candidate query.

    Example:
        RenameField("post", "body", "excerpt")
    """

    document_type: str
    source_field: str
    target_field: str

    def __post_init__(self):
        if not DOCUMENT_TYPE_PATTERN.match(self.document_type):
            raise MigrationConfigurationError(
                f"Invalid document type: {self.document_type!r}"
            )
        for name in (self.source_field, self.target_field):
            if not FIELD_NAME_PATTERN.match(name):
                raise MigrationConfigurationError(f"Invalid field name: {name!r}")
            if name.startswith("_"):
                raise MigrationConfigurationError(
                    f"Cannot rename system field {name!r}"
                )
        if self.source_field == self.target_field:
            raise MigrationConfigurationError(
                "Source and target field must differ"
            )

    @property
    def filter(self) -> str:
        return f"_type == $type && defined({self.source_field})"

    def candidate_query(self, limit: int) -> tuple[str, dict[str, Any]]:
        """Query for up to ``limit`` documents still in the old shape."""
        if limit < 1:
            raise MigrationConfigurationError("Batch size must be at least 1")
        query = (
            f"*[{self.filter}][0...{limit}] "
            f"{{_id, _rev, {self.source_field}}}"
        )
        return query, {"type": self.document_type}

    def count_query(self) -> tuple[str, dict[str, Any]]:
        """Query for the number of documents still in the old shape."""
        return f"count(*[{self.filter}])", {"type": self.document_type}

    def to_candidate(self, record: dict[str, Any]) -> CandidateDocument:
        return CandidateDocument(
            ref=DocumentRef(id=record["_id"], rev=record["_rev"]),
            value=record.get(self.source_field),
        )

    def build_patch(self, candidate: CandidateDocument) -> Patch:
        return Patch(
            id=candidate.id,
            set={self.target_field: candidate.value},
            unset=[self.source_field],
            if_revision_id=candidate.rev,
        )

    def forward(self, data: dict) -> dict:
        """Apply the rename to a local copy of a document."""
        result = data.copy()
        if self.source_field in result:
            result[self.target_field] = result.pop(self.source_field)
        return result

    def __str__(self) -> str:
        return f"{self.document_type}.{self.source_field} -> {self.target_field}"
