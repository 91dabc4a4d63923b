"""Tests for FailureRecorder."""
import asyncio
from concurrent.futures import ThreadPoolExecutor

import pytest

from bulk_uploader.services.error_log import FailureRecorder


class TestFailureRecorder:
    def test_file_not_created_until_first_failure(self, tmp_path):
        log_path = tmp_path / "errors.log"
        recorder = FailureRecorder(log_path)
        assert not log_path.exists()

        recorder.record("/data/a.json")

        assert log_path.read_text(encoding="utf-8") == "/data/a.json\n"
        assert recorder.count == 1

    def test_appends_without_truncating(self, tmp_path):
        log_path = tmp_path / "errors.log"
        log_path.write_text("/previous/run.json\n", encoding="utf-8")

        FailureRecorder(log_path).record("/data/a.json")
        FailureRecorder(log_path).record("/data/b.json")

        assert log_path.read_text(encoding="utf-8").splitlines() == [
            "/previous/run.json",
            "/data/a.json",
            "/data/b.json",
        ]

    def test_concurrent_threads_write_whole_lines(self, tmp_path):
        log_path = tmp_path / "errors.log"
        recorder = FailureRecorder(log_path)
        paths = [f"/data/{'x' * 200}-{i}.json" for i in range(200)]

        with ThreadPoolExecutor(max_workers=16) as pool:
            list(pool.map(recorder.record, paths))

        lines = log_path.read_text(encoding="utf-8").splitlines()
        assert len(lines) == len(paths)
        assert sorted(lines) == sorted(paths)
        assert recorder.count == len(paths)

    @pytest.mark.asyncio
    async def test_concurrent_coroutines(self, tmp_path):
        log_path = tmp_path / "errors.log"
        recorder = FailureRecorder(log_path)

        async def fail(i):
            await asyncio.sleep(0)
            recorder.record(f"/data/{i}.json")

        await asyncio.gather(*[fail(i) for i in range(50)])

        lines = log_path.read_text(encoding="utf-8").splitlines()
        assert sorted(lines) == sorted(f"/data/{i}.json" for i in range(50))

    def test_utf8_paths(self, tmp_path):
        log_path = tmp_path / "errors.log"
        FailureRecorder(log_path).record("/data/résumé.json")
        assert log_path.read_text(encoding="utf-8") == "/data/résumé.json\n"
