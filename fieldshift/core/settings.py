"""Configuration for fieldshift, loaded from the environment."""

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_API_VERSION = "2023-03-01"
DEFAULT_BATCH_SIZE = 100


class StoreSettings(BaseSettings):
    """Connection and migration settings.

    Connection values use the same variable names as a Sanity Studio
    project, so an existing studio ``.env`` file can be reused as is.

    Attributes:
        project_id: Content store project identifier
        dataset: Dataset name within the project
        token: API token with write access (never logged)
        api_version: Dated API version string
        api_host: Override for the API host (e.g. a local proxy)
        document_type: Type of the documents to migrate
        source_field: Field to rename
        target_field: New name of the field
        batch_size: Documents fetched and committed per transaction
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    project_id: str = Field(
        "", validation_alias=AliasChoices("project_id", "SANITY_STUDIO_PROJECT_ID")
    )
    dataset: str = Field(
        "", validation_alias=AliasChoices("dataset", "SANITY_STUDIO_PROJECT_DATASET")
    )
    token: str = Field(
        "", validation_alias=AliasChoices("token", "SANITY_STUDIO_PROJECT_TOKEN")
    )
    api_version: str = Field(
        DEFAULT_API_VERSION,
        validation_alias=AliasChoices("api_version", "SANITY_API_VERSION"),
    )
    api_host: str | None = Field(
        None, validation_alias=AliasChoices("api_host", "SANITY_API_HOST")
    )

    document_type: str = Field(
        "post",
        validation_alias=AliasChoices("document_type", "FIELDSHIFT_DOCUMENT_TYPE"),
    )
    source_field: str = Field(
        "body",
        validation_alias=AliasChoices("source_field", "FIELDSHIFT_SOURCE_FIELD"),
    )
    target_field: str = Field(
        "excerpt",
        validation_alias=AliasChoices("target_field", "FIELDSHIFT_TARGET_FIELD"),
    )
    batch_size: int = Field(
        DEFAULT_BATCH_SIZE,
        ge=1,
        validation_alias=AliasChoices("batch_size", "FIELDSHIFT_BATCH_SIZE"),
    )

    @field_validator("api_version")
    @classmethod
    def strip_version_prefix(cls, value: str) -> str:
        # Accept both "2023-03-01" and "v2023-03-01"
        return value[1:] if value.startswith("v") else value

    def missing_fields(self) -> list[str]:
        """Return the names of required connection settings that are unset."""
        missing = []
        if not self.project_id:
            missing.append("SANITY_STUDIO_PROJECT_ID")
        if not self.dataset:
            missing.append("SANITY_STUDIO_PROJECT_DATASET")
        if not self.token:
            missing.append("SANITY_STUDIO_PROJECT_TOKEN")
        return missing

    @property
    def base_url(self) -> str:
        """Versioned API root for the configured project."""
        if self.api_host:
            host = self.api_host.rstrip("/")
        else:
            # The CDN host serves stale reads and rejects mutations
            host = f"https://{self.project_id}.api.sanity.io"
        return f"{host}/v{self.api_version}"
