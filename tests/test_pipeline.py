"""
End-to-end tests for the chronological rename pipeline.
"""

from datetime import datetime

import pytest

from croner.core import (
    InputError, NoMatchError, RenameOptions, StageError, TimestampSource,
    prepare_plan, run_chronological_rename,
)

from conftest import FakeDecoder, contents, listing, make_files, make_photo, set_mtime


class TestCaptureMetadataScenarios:

    def test_same_second_files_get_one_bare_and_one_suffixed_name(self, photo_dir, scenario_decoder):
        options = RenameOptions(directory=photo_dir, pattern="*.jpg")

        result = run_chronological_rename(options, decoder=scenario_decoder)

        assert result.success_count == 3
        assert listing(photo_dir) == {
            "20210101_090000.jpg", "20210101_100000.jpg", "20210101_100000_1.jpg"}
        # Ties are broken by original name
        assert contents(photo_dir) == {
            "20210101_090000.jpg": "c.jpg",
            "20210101_100000.jpg": "a.jpg",
            "20210101_100000_1.jpg": "b.jpg",
        }

    def test_repeatable_for_the_same_input(self, tmp_path, scenario_decoder):
        first, second = tmp_path / "first", tmp_path / "second"
        for d in (first, second):
            make_files(d, ["a.jpg", "b.jpg", "c.jpg"])
            run_chronological_rename(RenameOptions(directory=d), decoder=scenario_decoder)

        assert contents(first) == contents(second)

    def test_one_failure_leaves_directory_untouched(self, photo_dir):
        decoder = FakeDecoder({"a.jpg": "2021:01:01 10:00:00", "b.jpg": "2021:01:01 11:00:00", "c.jpg": None})

        with pytest.raises(StageError):
            run_chronological_rename(RenameOptions(directory=photo_dir), decoder=decoder)

        assert listing(photo_dir) == {"a.jpg", "b.jpg", "c.jpg"}

    def test_failures_skipped_with_ignore_errors(self, photo_dir):
        decoder = FakeDecoder({"a.jpg": "2021:01:01 10:00:00", "b.jpg": "garbage", "c.jpg": "2021:01:01 09:00:00"})
        options = RenameOptions(directory=photo_dir, ignore_errors=True)

        result = run_chronological_rename(options, decoder=decoder)

        assert result.success_count == 2
        assert result.failed_count == 0
        assert listing(photo_dir) == {"b.jpg", "20210101_090000.jpg", "20210101_100000.jpg"}

    def test_no_match_leaves_directory_untouched(self, photo_dir, scenario_decoder):
        with pytest.raises(NoMatchError):
            run_chronological_rename(RenameOptions(directory=photo_dir, pattern="*.png"),
                                     decoder=scenario_decoder)

        assert listing(photo_dir) == {"a.jpg", "b.jpg", "c.jpg"}
        assert scenario_decoder.calls == []

    def test_final_name_taken_by_file_outside_batch(self, photo_dir, scenario_decoder):
        make_files(photo_dir, ["20210101_090000.jpg"])
        options = RenameOptions(directory=photo_dir, pattern="[abc].jpg", ignore_errors=True)

        result = run_chronological_rename(options, decoder=scenario_decoder)

        assert result.success_count == 2
        assert [op.original for op, _ in result.failed] == ["c.jpg"]
        assert contents(photo_dir)["20210101_090000.jpg"] == "20210101_090000.jpg"

    def test_dry_run(self, photo_dir, scenario_decoder):
        options = RenameOptions(directory=photo_dir, dry_run=True)

        result = run_chronological_rename(options, decoder=scenario_decoder)

        assert result.success_count == 3
        assert listing(photo_dir) == {"a.jpg", "b.jpg", "c.jpg"}

    def test_real_exif_data(self, tmp_path):
        make_photo(tmp_path / "a.jpg", "2021:01:01 10:00:00")
        make_photo(tmp_path / "B.JPG", "2021/01/01 10:00:00")
        make_photo(tmp_path / "c.jpg", "2021:01:01 09:00:00")

        result = run_chronological_rename(RenameOptions(directory=tmp_path))

        assert result.success_count == 3
        assert listing(tmp_path) == {
            "20210101_090000.jpg", "20210101_100000.jpg", "20210101_100000_1.jpg"}


class TestFilesystemScenarios:

    def test_orders_by_modification_time(self, photo_dir):
        set_mtime(photo_dir / "a.jpg", datetime(2022, 3, 1, 8, 0, 0))
        set_mtime(photo_dir / "b.jpg", datetime(2021, 3, 1, 8, 0, 0))
        set_mtime(photo_dir / "c.jpg", datetime(2023, 3, 1, 8, 0, 0))
        options = RenameOptions(directory=photo_dir, timestamp_source=TimestampSource.MTIME)

        run_chronological_rename(options)

        assert sorted(contents(photo_dir).items()) == [
            ("20210301_080000.jpg", "b.jpg"),
            ("20220301_080000.jpg", "a.jpg"),
            ("20230301_080000.jpg", "c.jpg"),
        ]

    def test_recursive_pattern_renames_within_each_directory(self, tmp_path):
        make_files(tmp_path, ["a.jpg", "sub/b.jpg"])
        set_mtime(tmp_path / "a.jpg", datetime(2021, 1, 1))
        set_mtime(tmp_path / "sub" / "b.jpg", datetime(2021, 1, 1))
        options = RenameOptions(directory=tmp_path, pattern="**/*.jpg",
                                timestamp_source=TimestampSource.MTIME)

        result = run_chronological_rename(options)

        assert result.success_count == 2
        assert (tmp_path / "20210101_000000.jpg").is_file()
        assert (tmp_path / "sub" / "20210101_000000.jpg").is_file()


class TestPreparePlan:

    def test_plan_matches_records(self, photo_dir, scenario_decoder):
        plan = prepare_plan(RenameOptions(directory=photo_dir), decoder=scenario_decoder)

        assert plan.directory == photo_dir.resolve()
        assert plan.total_count == 3
        assert plan.conflict_count == 1
        assert "Total operations: 3" in plan.summary()

    def test_invalid_directory(self, tmp_path):
        with pytest.raises(InputError):
            prepare_plan(RenameOptions(directory=tmp_path / "missing"))

    def test_invalid_pattern(self, photo_dir):
        with pytest.raises(InputError):
            prepare_plan(RenameOptions(directory=photo_dir, pattern="../*.jpg"))
