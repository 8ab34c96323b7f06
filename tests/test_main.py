"""Tests for the command line entry point."""

import csv
import json

import pytest

from firstcalls import config, main as cli
from firstcalls.storage import save_services

from conftest import make_service


@pytest.fixture
def services_csv(tmp_path, services):
    path = tmp_path / "services.csv"
    save_services(services, path)
    return path


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch, tmp_path):
    monkeypatch.setattr(config, "load_dotenv", lambda: None)
    monkeypatch.setenv("FIRSTCALLS_SERVICES_FILE", str(tmp_path / "missing.csv"))
    config.get_settings.cache_clear()
    yield
    config.get_settings.cache_clear()


def test_ranking_from_csv(services_csv, capsys):
    code = cli.main(["--lat", "23.8103", "--lon", "90.4125", "--services", str(services_csv)])
    out = capsys.readouterr().out.splitlines()

    assert code == 0
    assert out[0].startswith("1,police,police 3,")
    assert out[1].startswith("2,hospital,hospital 1,")
    assert out[1].endswith(",+880 2 1234")
    assert len(out) == 2


def test_output_quotes_commas_and_quotes(tmp_path, capsys):
    path = tmp_path / "services.csv"
    save_services(
        [make_service(7, "hospital", 23.81, 90.41, name='Dr. "Rahman", Clinic', phone="999, 16163")],
        path,
    )

    cli.main(["--services", str(path)])
    rows = list(csv.reader(capsys.readouterr().out.splitlines()))

    assert len(rows) == 1
    assert rows[0][:3] == ["1", "hospital", 'Dr. "Rahman", Clinic']
    assert rows[0][4] == "999, 16163"


def test_category_filter(services_csv, capsys):
    cli.main(["--categories", "police", "--services", str(services_csv)])
    out = capsys.readouterr().out.splitlines()
    assert len(out) == 1
    assert ",police," in out[0]


def test_json_output(services_csv, capsys):
    cli.main(["--json", "--services", str(services_csv)])
    body = json.loads(capsys.readouterr().out)
    assert [r["category"] for r in body] == ["police", "hospital"]
    assert body[0]["service"]["id"] == "3"
    assert "google.com/maps/dir" in body[0]["directions_url"]


def test_no_matching_services(services_csv, capsys):
    cli.main(["--categories", "fire_station", "--services", str(services_csv)])
    assert capsys.readouterr().out.strip() == "NO_SERVICES"


def test_invalid_location(services_csv, capsys):
    code = cli.main(["--lat", "95", "--services", str(services_csv)])
    assert code == 1
    assert "Unable to get your location" in capsys.readouterr().err


def test_falls_back_to_overpass(monkeypatch, tmp_path, capsys):
    fetched = []

    class StubClient:
        def __init__(self, *args):
            pass

        def fetch_services(self, categories):
            fetched.append([c.id for c in categories if c.enabled])
            return []

        def __enter__(self):
            return self

        def __exit__(self, *exc):
            pass

    monkeypatch.setattr(cli, "OverpassClient", StubClient)
    code = cli.main(["--categories", "hospital", "--services", str(tmp_path / "nope.csv")])

    assert code == 0
    assert fetched == [["hospital"]]
    assert capsys.readouterr().out.strip() == "NO_SERVICES"
