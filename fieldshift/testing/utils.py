"""Testing utilities for fieldshift."""

from fieldshift.core.settings import StoreSettings


def create_test_settings(
    project_id: str = "test-project",
    dataset: str = "test",
    token: str = "test-token-for-testing-only",
    **overrides
) -> StoreSettings:
    """Create fieldshift settings for testing.

    Args:
        project_id: The project ID for tests
        dataset: The dataset name for tests
        token: API token for tests
        **overrides: Additional settings to override

    Returns:
        StoreSettings instance configured for testing
    """
    values = {
        "project_id": project_id,
        "dataset": dataset,
        "token": token,
        "api_version": "2023-03-01",
    }
    values.update(overrides)
    return StoreSettings(_env_file=None, **values)
