import requests

from conftest import CATALOG_URL
from models.character import Character


def test_import_catalog_command(app, fake_catalog):
    api = fake_catalog()

    result = app.test_cli_runner().invoke(args=["import-catalog"])

    assert result.exit_code == 0
    assert "5" in result.output
    assert len(api.calls) == 2
    with app.app_context():
        assert Character.query.count() == 5


def test_import_catalog_skips_complete_catalog(app, seed_catalog, fake_catalog):
    api = fake_catalog({})

    result = app.test_cli_runner().invoke(args=["import-catalog"])

    assert result.exit_code == 0
    assert api.calls == []


def test_import_catalog_force(app, seed_catalog, fake_catalog):
    api = fake_catalog()

    result = app.test_cli_runner().invoke(args=["import-catalog", "--force"])

    assert result.exit_code == 0
    assert len(api.calls) == 2
    with app.app_context():
        assert Character.query.count() == 5


def test_import_catalog_reports_upstream_failure(app, fake_catalog):
    fake_catalog({CATALOG_URL: requests.ConnectionError("boom")})

    result = app.test_cli_runner().invoke(args=["import-catalog"])

    assert result.exit_code != 0
