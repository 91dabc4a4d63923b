"""Tests for console rendering."""
import io

from rich.console import Console

from bulk_uploader.cli_progress import BatchUploadDisplay
from bulk_uploader.models import UploadOutcome
from bulk_uploader.orchestrator.models import RunSummary
from bulk_uploader.utils.events import BatchProgress


def make_display():
    buffer = io.StringIO()
    return BatchUploadDisplay(Console(file=buffer, width=200)), buffer


class TestBatchUploadDisplay:
    def test_bar_total_grows_per_batch(self):
        display, _ = make_display()

        display.on_batch_start(1, 2)
        display.on_file_complete(UploadOutcome.ok("/data/a.json", 201))
        display.on_file_complete(UploadOutcome.ok("/data/b.json", 201))
        display.on_batch_complete(BatchProgress(index=1, size=2, uploaded=2))
        display.on_batch_start(2, 1)

        task = display.progress.tasks[0]
        assert task.total == 3
        assert task.completed == 2
        assert task.description == "Batch 2"
        display.close()

    def test_failures_advance_bar_and_print_to_stderr(self, capsys):
        display, _ = make_display()

        display.on_batch_start(1, 1)
        display.on_file_fail(UploadOutcome.fail("/data/a.json", "connection refused"))

        assert display.progress.tasks[0].completed == 1
        assert "Failed /data/a.json: connection refused" in capsys.readouterr().err
        display.close()

    def test_success_lines_go_through_progress_console(self):
        display, buffer = make_display()

        display.on_batch_start(1, 1)
        display.on_file_complete(UploadOutcome.ok("/data/[b].json", 201))
        display.close()

        assert "201 -> /data/[b].json" in buffer.getvalue()

    def test_batch_complete_reports_settled_count(self):
        display, _ = make_display()

        display.on_batch_start(3, 4)
        display.on_batch_complete(BatchProgress(index=3, size=4, uploaded=3, failed=1))

        assert display.progress.tasks[0].description == "Batch 3 done (4/4)"
        display.close()

    def test_finish_stops_bar_and_prints_summary(self, capsys):
        display, _ = make_display()
        display.on_batch_start(1, 1)

        display.on_finish(RunSummary(1, 1, 0, 1, "errors.log"))

        out = capsys.readouterr().out
        assert "Uploaded 1/1 files (0 failed) in 1 batches" in out
        assert "Done!" in out
        assert display.progress.live.is_started is False

    def test_close_without_batches_is_noop(self):
        display, _ = make_display()
        display.close()
        assert display.progress.tasks == []
