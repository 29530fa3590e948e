from __future__ import annotations

from pathlib import Path

import pytest

from schoolfinder import cli, pipeline
from schoolfinder.errors import NoResults
from schoolfinder.models import CityInfo, Coordinate, SchoolRecord, SchoolType
from schoolfinder.spatial.bbox import bbox_around


class _Finder:
    def __init__(self, fail: bool = False) -> None:
        self.fail = fail

    def search(self, city: str) -> pipeline.SearchSession:
        if self.fail:
            raise NoResults(city)
        coord = Coordinate(lat=59.9, lon=10.7)
        return pipeline.SearchSession(
            city=city,
            city_info=CityInfo(coordinate=coord, bbox=bbox_around(coord), display_name="Oslo"),
            schools=(
                SchoolRecord(name="Majorstuen skole", website="", type=SchoolType.PUBLIC, contact=""),
                SchoolRecord(name="Oslo Montessori", website="", type=SchoolType.PRIVATE, contact="Jane Doe"),
            ),
            source="overpass",
        )


def _config(tmp_path: Path) -> Path:
    path = tmp_path / "config" / "default.yaml"
    path.parent.mkdir(parents=True)
    path.write_text("project:\n  log_level: WARNING\n", encoding="utf-8")
    return path


def test_search_prints_and_writes_csv(tmp_path: Path, monkeypatch, capsys) -> None:
    monkeypatch.setattr(pipeline.SchoolFinder, "from_settings", classmethod(lambda cls, settings: _Finder()))
    out = tmp_path / "oslo.csv"

    cli.main(["search", "--config", str(_config(tmp_path)), "Oslo", "--type", "Private", "--csv", str(out)])

    printed = capsys.readouterr().out
    assert "Oslo: 1 schools" in printed
    assert "[Private] Oslo Montessori | Jane Doe" in printed
    assert out.read_text(encoding="utf-8").split("\n")[1] == '"Oslo Montessori","","Private","Jane Doe"'


def test_search_error_exits_with_message(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.setattr(pipeline.SchoolFinder, "from_settings", classmethod(lambda cls, settings: _Finder(fail=True)))
    with pytest.raises(SystemExit) as excinfo:
        cli.main(["search", "--config", str(_config(tmp_path)), "Oslo"])
    assert "No schools found" in str(excinfo.value)
