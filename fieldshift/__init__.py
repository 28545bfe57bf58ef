"""fieldshift: rename a field across content store documents in safe batches."""

__version__ = "0.1.0"

# Core components
from fieldshift.core.client import (
    ContentStoreClient,
    ContentStoreProtocol,
    StoreClientManager,
    Transaction,
)
from fieldshift.core.exceptions import (
    ConfigurationError,
    FieldshiftError,
    MigrationConfigurationError,
    RevisionConflictError,
    StoreAuthError,
    StoreConnectionError,
    StoreOperationError,
)
from fieldshift.core.settings import StoreSettings

# Migration components
from fieldshift.migrations import (
    CandidateDocument,
    DocumentRef,
    MigrationReport,
    MigrationRunner,
    Patch,
    RenameField,
)

__all__ = [
    # Version
    "__version__",
    # Core
    "ContentStoreClient",
    "ContentStoreProtocol",
    "StoreClientManager",
    "StoreSettings",
    "Transaction",
    "FieldshiftError",
    "ConfigurationError",
    "MigrationConfigurationError",
    "RevisionConflictError",
    "StoreAuthError",
    "StoreConnectionError",
    "StoreOperationError",
    # Migrations
    "CandidateDocument",
    "DocumentRef",
    "MigrationReport",
    "MigrationRunner",
    "Patch",
    "RenameField",
]
