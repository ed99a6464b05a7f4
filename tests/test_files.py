"""
Tests for the file helpers.
"""

import io
import os
import pytest
from igc_inspector.io.files import (
    read_igc_file, list_igc_files, get_file_info, group_records, write_record_groups,
    split_to_directory, get_available_filename,
)


class _Sink(io.StringIO):
    """StringIO that keeps its text after close()"""

    def close(self):
        self.text = self.getvalue()
        super().close()


class TestRecordGroups:
    """Test cases for splitting a log by record kind."""

    def test_group_records(self, sample_igc):
        groups = group_records(sample_igc)
        assert list(groups)[:3] == ['A', 'H', 'I']
        assert len(groups['B']) == 4
        assert len(groups['C']) == 5
        assert groups['L'] == ["LXXXComment written by the pilot"]
        assert groups['E'][0].startswith("E100500PEV")

    def test_unsupported_lines_kept(self):
        groups = group_records("AXXX123\nGREC01\n\nB1\n")
        assert groups == {'A': ["AXXX123"], 'G': ["GREC01"], 'B': ["B1"]}

    def test_write_record_groups(self, sample_igc):
        sinks = {}

        def factory(key):
            sinks[key] = _Sink()
            return sinks[key]

        counts = write_record_groups(sample_igc, factory)

        assert counts['B'] == 4
        assert counts['A'] == 1
        assert sinks['A'].text == "AXXX123-ABC\n"
        assert sinks['K'].text == "K101500Extension data\n"

    def test_split_to_directory(self, sample_igc, tmp_path):
        out = tmp_path / "split"
        paths = split_to_directory(sample_igc, str(out), "sample")

        assert set(paths) == {'A', 'H', 'I', 'C', 'L', 'B', 'E', 'K'}
        assert os.path.basename(paths['B']) == "sample_B.txt"
        with open(paths['H'], encoding='utf-8') as f:
            assert f.read().splitlines()[0] == "HFDTE150722"

    def test_split_does_not_overwrite(self, sample_igc, tmp_path):
        first = split_to_directory(sample_igc, str(tmp_path), "sample")
        second = split_to_directory(sample_igc, str(tmp_path), "sample")
        assert first['A'] != second['A']
        assert os.path.basename(second['A']) == "sample_A_1.txt"


class TestFileHelpers:
    """Test cases for reading and listing files."""

    def test_read_igc_file(self, sample_igc_file, sample_igc):
        assert read_igc_file(str(sample_igc_file)) == sample_igc

    def test_read_invalid_bytes(self, tmp_path):
        path = tmp_path / "latin1.igc"
        path.write_bytes(b"AXXX123\nHFPLTPILOTINCHARGE:Jos\xe9\n")
        assert "�" in read_igc_file(str(path))

    def test_read_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            read_igc_file(str(tmp_path / "missing.igc"))

    def test_list_igc_files(self, sample_igc_file, tmp_path):
        (tmp_path / "notes.txt").write_text("x")
        (tmp_path / "OTHER.IGC").write_text("AXXX999\n")
        assert sorted(list_igc_files(str(tmp_path))) == sorted(
            [str(sample_igc_file), str(tmp_path / "OTHER.IGC")])

    def test_list_missing_directory(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            list_igc_files(str(tmp_path / "nowhere"))

    def test_get_file_info(self, sample_igc_file, tmp_path):
        info = get_file_info(str(sample_igc_file))
        assert info['exists'] is True
        assert info['filename'] == "sample.igc"
        assert info['is_igc'] is True
        assert info['logger'] == "AXXX123-ABC"
        assert info['size_bytes'] == len(sample_igc_file.read_bytes())
        assert get_file_info(str(tmp_path / "missing.igc"))['exists'] is False

    def test_get_available_filename(self, tmp_path):
        base = str(tmp_path / "flight")
        assert get_available_filename(base) == base + ".igc"
        open(base + ".igc", 'w').close()
        assert get_available_filename(base) == base + "_1.igc"
