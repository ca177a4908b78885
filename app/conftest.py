"""
Root pytest configuration for the Django project.

pytest-django loads config.settings (see pyproject.toml) and builds the
test database from migrations. App-specific fixtures are defined in each
app's tests/conftest.py.
"""

import pytest


def pytest_collection_modifyitems(items):
    """
    Auto-mark tests based on filename patterns.

    Mapping:
    - test_integration.py → e2e (full request workflows)
    - test_views.py, test_settlement.py, test_deposits.py, etc. → integration
    - test_models.py, test_types.py, test_access.py, etc. → unit
    - Unmatched files → integration (safe default for Django)

    Explicit markers on test functions/classes take precedence.
    """
    e2e_patterns = ["test_integration.py"]

    integration_patterns = [
        "test_views.py",
        "test_settlement.py",
        "test_deposits.py",
        "test_reports.py",
        "test_contracts.py",
        "test_authentication.py",
        "test_exception_handler.py",
    ]

    unit_patterns = [
        "test_models.py",
        "test_types.py",
        "test_access.py",
        "test_exceptions.py",
    ]

    for item in items:
        # Skip if test already has unit/integration/e2e marker
        existing_markers = {m.name for m in item.iter_markers()}
        if existing_markers & {"unit", "integration", "e2e"}:
            continue

        filename = item.path.name

        if any(pattern in filename for pattern in e2e_patterns):
            item.add_marker(pytest.mark.e2e)
        elif any(pattern in filename for pattern in integration_patterns):
            item.add_marker(pytest.mark.integration)
        elif any(pattern in filename for pattern in unit_patterns):
            item.add_marker(pytest.mark.unit)
        else:
            item.add_marker(pytest.mark.integration)
