"""
Pytest configuration and shared fixtures for the test suite.
"""

import pytest


# =============================================================================
# Synthetic Data Fixtures
# =============================================================================

@pytest.fixture(scope="function")
def synthetic_spheres_small():
    """
    Function-scoped fixture providing a small synthetic point set.

    Returns:
        SyntheticSphereData: 200 cells, 5 markers, 3 clusters, radius 1.0
    """
    from tests.utils.synthetic_sphere_data import get_small_dataset
    return get_small_dataset(random_seed=42)


# =============================================================================
# Temporary Directory Fixtures
# =============================================================================

@pytest.fixture(scope="function")
def temp_output_dir(tmp_path):
    """
    Function-scoped fixture providing a temporary output directory.

    Args:
        tmp_path: pytest built-in fixture for temporary directory

    Returns:
        Path: Temporary directory path that will be cleaned up after test
    """
    output_dir = tmp_path / "output"
    output_dir.mkdir(parents=True, exist_ok=True)
    return output_dir


# =============================================================================
# Pytest Configuration
# =============================================================================

def pytest_configure(config):
    """
    Configure pytest with custom markers.
    """
    config.addinivalue_line(
        "markers", "slow: mark test as slow running"
    )
    config.addinivalue_line(
        "markers", "integration: mark test as integration test"
    )


def pytest_collection_modifyitems(config, items):
    """
    Automatically mark tests based on their names.
    """
    for item in items:
        if "slow" in item.nodeid.lower():
            item.add_marker(pytest.mark.slow)

        if "integration" in item.nodeid.lower():
            item.add_marker(pytest.mark.integration)
