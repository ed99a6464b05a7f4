"""
Tests for the command-line interface.
"""

import io
import json
import logging
import pytest
from igc_inspector.config.settings import settings
from igc_inspector.ui.cli import CLI


class TestCLI:
    """Test cases for the CLI sub-commands."""

    @pytest.fixture
    def output(self):
        return io.StringIO()

    @pytest.fixture
    def cli(self, output):
        return CLI(stdout=output)

    def test_parse_metadata(self, cli, output, sample_igc_file):
        assert cli.run(['parse', str(sample_igc_file), '--metadata', '--indent', '0']) == 0
        data = json.loads(output.getvalue())
        assert data['header']['pilot'] == "Jane Doe"
        assert 'fixes' not in data

    def test_parse_full(self, cli, output, sample_igc_file):
        assert cli.run(['parse', str(sample_igc_file)]) == 0
        data = json.loads(output.getvalue())
        assert len(data['fixes']) == 3

    def test_max_speed_option(self, cli, output, sample_igc_file):
        assert cli.run(['--max-speed', '5', 'parse', str(sample_igc_file)]) == 0
        data = json.loads(output.getvalue())
        assert len(data['fixes']) == 1

    def test_validate(self, cli, output, sample_igc_file):
        assert cli.run(['validate', str(sample_igc_file)]) == 0
        assert json.loads(output.getvalue())['all_validated'] is True

    def test_validate_small_radius_not_met(self, cli, tmp_path, sample_igc):
        # Move the task point away from the track
        path = tmp_path / "moved.igc"
        path.write_text(sample_igc.replace("C4601000N00600000ETP1", "C4610000N00600000ETP1"))
        assert cli.run(['validate', str(path), '--radius', '100']) == 2

    def test_validate_without_task(self, cli, tmp_path, minimal_igc):
        path = tmp_path / "minimal.igc"
        path.write_text(minimal_igc)
        assert cli.run(['validate', str(path)]) == 1

    def test_points(self, cli, output, sample_igc_file):
        assert cli.run(['points', str(sample_igc_file), '46.0,6.0', '--radius', '50']) == 0
        assert json.loads(output.getvalue())['validated_count'] == 1

    def test_split(self, cli, output, sample_igc_file, tmp_path):
        out = tmp_path / "parts"
        assert cli.run(['split', str(sample_igc_file), '--output', str(out)]) == 0
        assert (out / "sample_B.txt").exists()
        assert "B: " in output.getvalue()

    def test_export(self, cli, output, sample_igc_file, tmp_path):
        target = tmp_path / "clean.igc"
        assert cli.run(['export', str(sample_igc_file), str(target)]) == 0
        assert target.exists()
        assert output.getvalue().startswith("3 fixes")

    def test_missing_file(self, cli, tmp_path):
        assert cli.run(['parse', str(tmp_path / "missing.igc")]) == 1

    def test_invalid_file(self, cli, tmp_path):
        path = tmp_path / "broken.igc"
        path.write_text("AXXX123\nGREC0123\n")
        assert cli.run(['parse', str(path)]) == 1

    def test_command_required(self, cli):
        with pytest.raises(SystemExit):
            cli.run([])


class TestCLISettings:
    """Test cases for the listing command and settings driven behaviour."""

    @pytest.fixture(autouse=True)
    def restore(self):
        """Leave the shared settings and the package log level as they were."""
        package_logger = logging.getLogger("igc_inspector")
        level = package_logger.level
        config_file, config_dir = settings.config_file, settings._config_dir
        yield
        settings.reset_to_defaults()
        package_logger.setLevel(level)
        settings._config_file, settings._config_dir = config_file, config_dir

    def test_list(self, tmp_path, sample_igc, minimal_igc):
        (tmp_path / "sample.igc").write_text(sample_igc)
        (tmp_path / "minimal.IGC").write_text(minimal_igc)
        (tmp_path / "notes.txt").write_text("not a log")
        output = io.StringIO()

        assert CLI(stdout=output).run(['list', str(tmp_path)]) == 0

        entries = {entry['filename']: entry for entry in json.loads(output.getvalue())}
        assert set(entries) == {"sample.igc", "minimal.IGC"}
        assert entries["sample.igc"]['pilot'] == "Jane Doe"
        assert entries["sample.igc"]['fix_count'] == 3
        assert entries["sample.igc"]['duration'] == "00:20:00"
        assert entries["minimal.IGC"]['date'] == "2022-07-15"

    def test_list_reports_broken_logs(self, tmp_path):
        (tmp_path / "broken.igc").write_text("AXXX123\nGREC0123\n")
        output = io.StringIO()
        assert CLI(stdout=output).run(['list', str(tmp_path)]) == 2
        assert "Line 2" in json.loads(output.getvalue())[0]['error']

    def test_list_missing_directory(self, tmp_path):
        assert CLI(stdout=io.StringIO()).run(['list', str(tmp_path / "nowhere")]) == 1

    def test_log_level_from_config(self, tmp_path, sample_igc_file):
        config = tmp_path / "settings.json"
        config.write_text(json.dumps({'log_level': "warning"}))

        CLI(stdout=io.StringIO()).run(['--config', str(config), 'parse', str(sample_igc_file)])

        assert logging.getLogger("igc_inspector").level == logging.WARNING

    def test_debug_overrides_log_level(self, tmp_path, sample_igc_file):
        config = tmp_path / "settings.json"
        config.write_text(json.dumps({'log_level': "ERROR"}))

        CLI(stdout=io.StringIO()).run(['--debug', '--config', str(config),
                                       'parse', str(sample_igc_file)])

        assert logging.getLogger("igc_inspector").level == logging.DEBUG

    def test_unknown_log_level_ignored(self, tmp_path, sample_igc_file):
        config = tmp_path / "settings.json"
        config.write_text(json.dumps({'log_level': "LOUD"}))
        assert CLI(stdout=io.StringIO()).run(['--config', str(config),
                                              'parse', str(sample_igc_file)]) == 0
