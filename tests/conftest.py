"""
Shared pytest fixtures.

Catalog tests run against the bundled fixture catalog or against a mocked
PyMySQL driver; nothing here needs a live database.
"""
import pytest
from pathlib import Path
from unittest.mock import MagicMock, patch

from schemalens.catalog import FixtureCatalogProvider, LiveCatalogProvider

# Project root
PROJECT_ROOT = Path(__file__).parent.parent

FIXTURE_CATALOG = PROJECT_ROOT / "configs" / "fixture_catalog.yml"


@pytest.fixture
def fixture_catalog_path():
    return FIXTURE_CATALOG


@pytest.fixture
def fixture_provider(fixture_catalog_path):
    """Provider over the bundled fixture catalog."""
    return FixtureCatalogProvider.from_file(str(fixture_catalog_path))


@pytest.fixture
def mock_mysql():
    """
    Patch ``pymysql.connect`` as seen by the catalog module.

    Yields (connect, conn, cursor). ``conn.cursor()`` works as a context
    manager returning ``cursor``.
    """
    cursor = MagicMock(name="cursor")
    conn = MagicMock(name="conn")
    conn.cursor.return_value.__enter__.return_value = cursor
    conn.cursor.return_value.__exit__.return_value = False

    with patch("schemalens.catalog.pymysql.connect", return_value=conn) as connect:
        yield connect, conn, cursor


@pytest.fixture
def live_provider():
    return LiveCatalogProvider(connect_timeout=5)


@pytest.fixture
def api_settings(tmp_path, fixture_catalog_path, monkeypatch):
    """Point the API at a settings file that selects the fixture provider."""
    settings_file = tmp_path / "settings.yml"
    settings_file.write_text(
        "provider: fixture\n"
        f"fixture_path: {fixture_catalog_path}\n"
        "document_delay_s: 0\n"
    )
    monkeypatch.setenv("SCHEMALENS_CONFIG", str(settings_file))
    return settings_file
