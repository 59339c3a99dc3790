from __future__ import annotations

import json
from pathlib import Path

from result import Err, Ok

from bundlescope.models.enums import StatsErrorCode
from bundlescope.services.ingest import load_stats, parse_stats, read_number, validate_stats
from tests.factories import stats_fs
from tests.fs_mock import MemoryFileSystem


def _code(payload: object) -> StatsErrorCode | None:
    error = validate_stats("/p/stats.json", payload)
    return error.code if error is not None else None


class TestReadNumber:
    def test_int_and_float(self) -> None:
        assert read_number(3) == 3
        assert read_number(2.5) == 2.5

    def test_rejects_bool_and_strings(self) -> None:
        assert read_number(True) is None
        assert read_number("12") is None
        assert read_number(None) is None

    def test_rejects_non_finite(self) -> None:
        assert read_number(float("inf")) is None
        assert read_number(float("nan")) is None


class TestLoadStats:
    def test_missing_file(self) -> None:
        result = load_stats("/p/nonexistent.json", fs=MemoryFileSystem())
        assert isinstance(result, Err)
        error = result.unwrap_err()
        assert error.code is StatsErrorCode.FILE_NOT_FOUND
        assert "Stats file not found" in error.message

    def test_directory_is_not_a_stats_file(self) -> None:
        fs = MemoryFileSystem()
        fs.add_dir("/p/stats.json")
        result = load_stats("/p/stats.json", fs=fs)
        assert result.unwrap_err().code is StatsErrorCode.FILE_NOT_FOUND

    def test_unreadable_file(self) -> None:
        fs = stats_fs({"assets": [{"size": 1}]})
        fs.unreadable.add("/p/stats.json")
        result = load_stats("/p/stats.json", fs=fs)
        assert result.unwrap_err().code is StatsErrorCode.FILE_NOT_FOUND

    def test_invalid_json(self) -> None:
        fs = MemoryFileSystem()
        fs.add_file("/p/stats.json", content="not json {")
        result = load_stats("/p/stats.json", fs=fs)
        error = result.unwrap_err()
        assert error.code is StatsErrorCode.PARSE_ERROR
        assert "Invalid JSON" in error.message

    def test_empty_file_is_parse_error(self) -> None:
        fs = MemoryFileSystem()
        fs.add_file("/p/stats.json", content="")
        assert load_stats("/p/stats.json", fs=fs).unwrap_err().code is StatsErrorCode.PARSE_ERROR

    def test_valid_document(self) -> None:
        fs = stats_fs({"assets": [{"size": 1000, "gzipSize": 500}]})
        result = load_stats("/p/stats.json", fs=fs)
        assert isinstance(result, Ok)
        assert result.unwrap().data["assets"][0]["size"] == 1000

    def test_progress_stages(self) -> None:
        stages: list[str] = []
        load_stats("/p/stats.json", fs=stats_fs({"assets": [{"size": 1}]}), progress_callback=stages.append)
        assert stages == ["Reading stats file", "Validating stats"]

    def test_real_disk(self, tmp_path: Path) -> None:
        path = tmp_path / "stats.json"
        path.write_text(json.dumps({"modules": [{"name": "a.js", "size": 10}]}), encoding="utf-8")
        assert isinstance(load_stats(str(path)), Ok)

    def test_invalid_utf8_is_parse_error(self, tmp_path: Path) -> None:
        path = tmp_path / "stats.json"
        path.write_bytes(b'{"assets": [{"size": 1}], "name": "\xff\xfe"}')
        result = load_stats(str(path))
        assert isinstance(result, Err)
        assert result.unwrap_err().code is StatsErrorCode.PARSE_ERROR


class TestValidateStats:
    def test_non_object(self) -> None:
        assert _code([1, 2, 3]) is StatsErrorCode.SCHEMA_ERROR

    def test_empty_object(self) -> None:
        error = validate_stats("/p/stats.json", {})
        assert error is not None
        assert error.code is StatsErrorCode.SCHEMA_ERROR
        assert "must contain" in error.message

    def test_build_errors_win_over_everything(self) -> None:
        payload = {
            "errors": [{"message": "Module not found: Error: Can't resolve './src'"}],
            "assets": [{"size": 100}],
            "modules": [{"name": "a.js", "size": -1}],
        }
        error = validate_stats("/p/stats.json", payload)
        assert error is not None
        assert error.code is StatsErrorCode.BUILD_FAILED
        assert "Can't resolve" in error.message

    def test_build_error_message_limits_listed_errors(self) -> None:
        errors = [{"message": f"e{i}"} for i in range(5)] + ["plain"]
        error = validate_stats("/p/stats.json", {"errors": errors, "assets": []})
        assert error is not None
        assert "e0; e1; e2" in error.message
        assert "e3" not in error.message
        assert "and 3 more" in error.message

    def test_build_error_uses_details_then_string(self) -> None:
        error = validate_stats("/p/stats.json", {"errors": [{"details": "stack"}, "raw text"]})
        assert error is not None
        assert "stack; raw text" in error.message

    def test_empty_errors_list_is_fine(self) -> None:
        assert _code({"errors": [], "assets": [{"size": 1}]}) is None

    def test_no_content(self) -> None:
        payload = {"assets": [], "modules": [], "chunks": [{"id": 1, "modules": []}]}
        error = validate_stats("/p/stats.json", payload)
        assert error is not None
        assert error.code is StatsErrorCode.SCHEMA_ERROR
        assert "no modules or assets" in error.message

    def test_chunk_with_modules_is_content(self) -> None:
        assert _code({"chunks": [{"id": 0, "modules": ["a.js"]}]}) is None

    def test_chunk_with_size_is_content(self) -> None:
        assert _code({"chunks": [{"id": 0, "size": 10}]}) is None

    def test_negative_module_size(self) -> None:
        error = validate_stats("/p/stats.json", {"modules": [{"name": "test.js", "size": -100}]})
        assert error is not None
        assert error.code is StatsErrorCode.SCHEMA_ERROR
        assert "module sizes must be non-negative" in error.message

    def test_negative_asset_size(self) -> None:
        error = validate_stats("/p/stats.json", {"assets": [{"size": -1}]})
        assert error is not None
        assert "asset sizes must be non-negative" in error.message

    def test_negative_nested_module_size(self) -> None:
        payload = {"chunks": [{"id": 0, "modules": [{"name": "a.js", "size": -5}]}]}
        assert _code(payload) is StatsErrorCode.SCHEMA_ERROR

    def test_malformed_fields_are_tolerated(self) -> None:
        payload = {"modules": [{"name": "a.js", "size": "big"}, "junk"], "assets": "nope"}
        assert _code(payload) is None


class TestParseStats:
    def test_wraps_payload(self) -> None:
        result = parse_stats("/x.json", '{"assets": [{"size": 5}]}')
        document = result.unwrap()
        assert document.path == "/x.json"
        assert document.data == {"assets": [{"size": 5}]}

    def test_non_json_constants_rejected(self) -> None:
        for literal in ("NaN", "Infinity", "-Infinity"):
            result = parse_stats("/x.json", '{"assets": [{"size": %s}]}' % literal)
            assert isinstance(result, Err)
            assert result.unwrap_err().code is StatsErrorCode.PARSE_ERROR

    def test_overflowing_number_is_absent(self) -> None:
        result = parse_stats("/x.json", '{"modules": [{"name": "a.js", "size": 1e400}]}')
        assert isinstance(result, Ok)
