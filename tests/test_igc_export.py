"""
Tests for the IGC exporter.
"""

import pytest
from igc_inspector.data.parser import IGCParser
from igc_inspector.io.igc import IGCExporter, create_igc_exporter


class TestIGCExporter:
    """Test cases for IGCExporter."""

    @pytest.fixture
    def flight(self, sample_igc):
        return IGCParser(max_speed_kmh=400).parse(sample_igc)

    @pytest.fixture
    def exported(self, flight):
        return IGCExporter(flight).to_bytes().decode('utf-8')

    def test_exported_log_parses(self, exported):
        reparsed = IGCParser(max_speed_kmh=400).parse(exported)

        assert len(reparsed.fixes) == 3
        assert reparsed.totals.rejected_fix_count == 0
        assert reparsed.manufacturer.manufacturer_id == "XXX"
        assert reparsed.header['pilot'] == "Jane Doe"
        assert reparsed.header['date'] == "2022-07-15"

    def test_rejected_fix_left_out(self, exported):
        assert "5600539N" not in exported
        assert sum(1 for line in exported.splitlines() if line.startswith('B')) == 3

    def test_events_and_task(self, exported):
        reparsed = IGCParser().parse(exported)
        assert [event.code for event in reparsed.events] == ["STA", "PEV", "FIN"]
        assert [point.name for point in reparsed.task.turnpoints] == ["START", "TP1"]
        assert len(reparsed.task.markers) == 2

    def test_fix_extensions(self, exported):
        reparsed = IGCParser().parse(exported)
        assert [ext.code for ext in reparsed.fix_extensions] == ['FXA', 'SIU', 'ENL']
        assert reparsed.fixes[0].fix_accuracy == 35
        assert reparsed.fixes[-1].satellites == 9
        assert reparsed.fixes[0].engine_noise == 0

    def test_save(self, flight, tmp_path):
        path = tmp_path / "clean.igc"
        assert create_igc_exporter(flight).save(str(path)) == 3
        assert path.read_bytes().startswith(b"AXXX123")
