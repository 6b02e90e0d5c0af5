"""
Line Report Tests
=================
JSON line description → segments → rich report.
"""

import json

import pytest
from rich.console import Console

from diacv.modules.materials import MaterialCatalog
from diacv.modules.pipe_flow import DarcyWeisbachCalculator, PipeInputError
from diacv.scripts.line_report import main, render_report, segments_from_json


@pytest.fixture
def line_data():
    return {
        "segments": [
            {
                "id": "suction",
                "length_horizontal": 5,
                "length_vertical": -2,
                "id_mm": 100,
                "flow_m3hr": 36,
                "density": 998,
                "viscosity": 0.001,
                "roughness": 4.5e-5,
                "fittings": [{"fitting_type": "ELBOW 90", "size": 100, "count": 2}],
            },
            {
                "id": "discharge",
                "length_horizontal": 40,
                "length_vertical": 12,
                "id_mm": 80,
                "flow_m3hr": 36,
                "material": "steel",
            },
        ]
    }


class TestSegmentsFromJson:

    def test_explicit_and_material_segments(self, line_data):
        segments = segments_from_json(line_data, MaterialCatalog.default())

        assert [s.id for s in segments] == ["suction", "discharge"]
        assert segments[0].fittings[0].size == "100"
        assert segments[0].fittings[0].count == 2
        assert segments[1].roughness_m == pytest.approx(4.5e-5)
        assert segments[1].density == pytest.approx(998.2)

    def test_unknown_material(self, line_data):
        line_data["segments"][1]["material"] = "wood"
        with pytest.raises(PipeInputError, match="Material 'wood' not found"):
            segments_from_json(line_data, MaterialCatalog.default())

    def test_unparsable_material_row(self, line_data):
        catalog = MaterialCatalog([("STEEL", "x", 0.001, 4.5e-5)])
        with pytest.raises(PipeInputError, match="Invalid numeric values in material row"):
            segments_from_json(line_data, catalog)

    def test_missing_field(self, line_data):
        del line_data["segments"][0]["id_mm"]
        with pytest.raises(PipeInputError, match="suction"):
            segments_from_json(line_data, MaterialCatalog.default())


class TestReport:

    def test_render_report(self, line_data):
        result = DarcyWeisbachCalculator().calculate_system(
            segments_from_json(line_data, MaterialCatalog.default())
        )
        console = Console(record=True, width=140)

        render_report(result, console, title="pump-01")

        text = console.export_text()
        assert "PIPE SEGMENTS" in text
        assert "suction" in text
        assert "FITTINGS" in text
        assert f"{result.total_pressure_drop_bar:.4f}" in text

    def test_main_success(self, tmp_path, line_data):
        path = tmp_path / "line.json"
        path.write_text(json.dumps(line_data), encoding="utf-8")

        assert main([str(path)]) == 0

    def test_main_invalid_line(self, tmp_path, line_data):
        line_data["segments"][0]["flow_m3hr"] = 0
        path = tmp_path / "line.json"
        path.write_text(json.dumps(line_data), encoding="utf-8")

        assert main([str(path)]) == 1

    def test_main_unparsable_material_row(self, tmp_path, line_data, capsys):
        path = tmp_path / "line.json"
        path.write_text(json.dumps(line_data), encoding="utf-8")
        materials = tmp_path / "materials.json"
        materials.write_text(json.dumps([["STEEL", "x", 0.001, 4.5e-5]]), encoding="utf-8")

        assert main([str(path), "--materials", str(materials)]) == 1
        assert "#ERROR: Invalid numeric values in material row" in capsys.readouterr().out

    def test_main_missing_file(self, tmp_path):
        assert main([str(tmp_path / "nope.json")]) == 1
