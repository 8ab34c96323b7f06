"""Tests for the services CSV cache."""

from pathlib import Path

from firstcalls.storage import load_services, save_services


class TestStorage:
    def test_save_then_load(self, tmp_path: Path, services):
        path = tmp_path / "nested" / "services.csv"
        assert save_services(services, path) == 3

        loaded = load_services(path)

        assert [s.id for s in loaded] == ["1", "2", "3"]
        assert loaded[0].phone == "+880 2 1234"
        assert loaded[1].phone is None
        assert loaded[2].address == "Gulshan Avenue"
        assert loaded[2].tags == {}

    def test_malformed_rows_skipped(self, tmp_path: Path, caplog):
        path = tmp_path / "services.csv"
        path.write_text(
            "id,name,type,lat,lon,phone,address\n"
            "1,Good,hospital,23.8,90.4,,\n"
            "2,Bad,police,not-a-number,90.4,,\n"
            "3,Also good,police,23.81,90.41,999,\n",
            encoding="utf-8",
        )
        with caplog.at_level("WARNING"):
            loaded = load_services(path)
        assert [s.id for s in loaded] == ["1", "3"]
        assert loaded[1].phone == "999"
        assert "Skipped 1 malformed rows" in caplog.text

    def test_optional_columns(self, tmp_path: Path):
        path = tmp_path / "services.csv"
        path.write_text("id,name,type,lat,lon\n7,Station,fire_station,23.7,90.3\n", encoding="utf-8")
        loaded = load_services(path)
        assert loaded[0].phone is None
        assert loaded[0].address is None
