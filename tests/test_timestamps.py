"""
Tests for timestamp resolution and the error-tolerance policy.
"""

import threading
import time
from datetime import datetime

import pytest

from croner.core.errors import FileSystemError, NoMatchError, ResolutionError, StageError
from croner.core.models_fs import FileRecord, TimestampSource
from croner.core.timestamps import (
    apply_error_policy,
    parse_capture_time,
    read_filesystem_time,
    resolve_timestamps,
)

from conftest import FakeDecoder, make_files, set_mtime


def records_for(*names, source=TimestampSource.EXIF):
    return [FileRecord(name=n, timestamp_source=source) for n in names]


class TestParseCaptureTime:

    def test_colon_format(self):
        assert parse_capture_time("2017:05:06 13:21:02") == datetime(2017, 5, 6, 13, 21, 2)

    def test_slash_format_fallback(self):
        assert parse_capture_time("2017/05/06 13:21:02") == datetime(2017, 5, 6, 13, 21, 2)

    def test_padding_is_stripped(self):
        assert parse_capture_time(" 2017:05:06 13:21:02\x00") == datetime(2017, 5, 6, 13, 21, 2)

    @pytest.mark.parametrize("text", ["", "0000:00:00 00:00:00", "yesterday", "2017-05-06T13:21:02"])
    def test_unparsable(self, text):
        with pytest.raises(ValueError):
            parse_capture_time(text)


class TestCaptureMetadataMode:

    def test_all_resolved_in_input_order(self, photo_dir, scenario_decoder):
        records = records_for("a.jpg", "b.jpg", "c.jpg")

        resolved = resolve_timestamps(records, photo_dir,
                                      decoder=scenario_decoder)

        assert [r.name for r in resolved] == ["a.jpg", "b.jpg", "c.jpg"]
        assert resolved[2].timestamp == datetime(2021, 1, 1, 9, 0, 0)
        assert all(r.ok and r.resolution_error is None for r in resolved)
        assert sorted(scenario_decoder.calls) == ["a.jpg", "b.jpg", "c.jpg"]

    def test_failure_aborts_without_ignore(self, photo_dir):
        decoder = FakeDecoder({"a.jpg": "2021:01:01 10:00:00", "b.jpg": None})
        records = records_for("a.jpg", "b.jpg", "c.jpg")

        with pytest.raises(StageError) as exc_info:
            resolve_timestamps(records, photo_dir, decoder=decoder)

        assert exc_info.value.failure_count == 2
        assert "2 file(s)" in str(exc_info.value)
        # Every file was still attempted
        assert sorted(decoder.calls) == ["a.jpg", "b.jpg", "c.jpg"]

    def test_failures_dropped_with_ignore(self, photo_dir):
        decoder = FakeDecoder({
            "a.jpg": "2021:01:01 10:00:00",
            "b.jpg": "not a date",
            "c.jpg": ValueError("corrupt"),
        })
        records = records_for("a.jpg", "b.jpg", "c.jpg")

        resolved = resolve_timestamps(records, photo_dir,
                                      ignore_errors=True, decoder=decoder)

        assert [r.name for r in resolved] == ["a.jpg"]
        # Failed records carry their error and no timestamp
        for record in records[1:]:
            assert record.timestamp is None
            assert isinstance(record.resolution_error, ResolutionError)
            assert record.resolution_error.name == record.name

    def test_all_failing_with_ignore_is_no_match(self, photo_dir):
        decoder = FakeDecoder({})

        with pytest.raises(NoMatchError):
            resolve_timestamps(records_for("a.jpg"), photo_dir,
                               ignore_errors=True, decoder=decoder)

    def test_concurrency_is_bounded(self, tmp_path):
        names = [f"{i:02d}.jpg" for i in range(12)]
        make_files(tmp_path, names)
        lock = threading.Lock()
        state = {"active": 0, "peak": 0}

        def slow_decoder(path):
            with lock:
                state["active"] += 1
                state["peak"] = max(state["peak"], state["active"])
            time.sleep(0.02)
            with lock:
                state["active"] -= 1
            return "2021:01:01 10:00:00"

        resolve_timestamps(records_for(*names), tmp_path,
                           read_limit=3, decoder=slow_decoder)

        assert 1 <= state["peak"] <= 3


class TestFilesystemMode:

    def test_reads_mtime(self, photo_dir):
        set_mtime(photo_dir / "a.jpg", datetime(2020, 6, 1, 12, 30, 15))

        assert read_filesystem_time(photo_dir / "a.jpg", TimestampSource.MTIME) == \
            datetime(2020, 6, 1, 12, 30, 15)

    def test_reads_atime(self, photo_dir):
        set_mtime(photo_dir / "a.jpg", datetime(2019, 2, 3, 4, 5, 6))

        assert read_filesystem_time(photo_dir / "a.jpg", TimestampSource.ATIME) == \
            datetime(2019, 2, 3, 4, 5, 6)

    def test_birthtime_always_resolves(self, photo_dir):
        assert isinstance(read_filesystem_time(photo_dir / "a.jpg", TimestampSource.BIRTHTIME), datetime)

    def test_decoder_not_used(self, photo_dir):
        decoder = FakeDecoder({})
        records = records_for("a.jpg", "b.jpg", source=TimestampSource.MTIME)

        resolved = resolve_timestamps(records, photo_dir, decoder=decoder)

        assert len(resolved) == 2
        assert decoder.calls == []

    def test_missing_file_is_fatal(self, photo_dir):
        records = records_for("a.jpg", "gone.jpg", source=TimestampSource.MTIME)

        with pytest.raises(FileSystemError):
            resolve_timestamps(records, photo_dir, ignore_errors=True)

    def test_each_record_uses_its_own_source(self, photo_dir):
        set_mtime(photo_dir / "b.jpg", datetime(2020, 6, 1, 12, 0, 0))
        decoder = FakeDecoder({"a.jpg": "2021:01:01 10:00:00"})
        records = [
            FileRecord(name="a.jpg", timestamp_source=TimestampSource.EXIF),
            FileRecord(name="b.jpg", timestamp_source=TimestampSource.MTIME),
        ]

        resolved = resolve_timestamps(records, photo_dir, decoder=decoder)

        assert [r.timestamp for r in resolved] == [
            datetime(2021, 1, 1, 10, 0, 0), datetime(2020, 6, 1, 12, 0, 0)]
        assert decoder.calls == ["a.jpg"]


class TestApplyErrorPolicy:

    def test_keeps_order(self):
        records = records_for("b.jpg", "a.jpg")
        for r in records:
            r.timestamp = datetime(2021, 1, 1)

        assert apply_error_policy(records, ignore_errors=False) == records
